"""Pipeline job state - per-page statuses, progress and cancellation."""

import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from hanzi_reader.core import Book, BookPage, JobStateError

ANONYMOUS_OWNER_ID = uuid.UUID(int=0)


class PageStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED})
UNCANCELLABLE_STATES = frozenset({JobState.COMPLETED, JobState.CANCELLED})


@dataclass
class PageTask:
    """One submitted image and what happened to it."""

    index: int
    image_path: Path
    status: PageStatus = PageStatus.PENDING
    error: Optional[str] = None
    page: Optional[BookPage] = None


@dataclass(frozen=True)
class JobSnapshot:
    """Consistent copy of a job's user-visible state."""

    state: JobState
    statuses: List[PageStatus]
    progress: float
    error_message: Optional[str]


class PipelineJob:
    """
    One upload (or add-pages) run over an ordered list of images.

    Page numbers follow submission order starting at ``start_page_number``.
    Status changes go through ``set_status``/``set_state`` so snapshots taken
    from another thread are consistent.
    """

    def __init__(
        self,
        images: Sequence[Union[str, Path]],
        title: str = "",
        author: Optional[str] = None,
        owner_id: Optional[uuid.UUID] = None,
        book: Optional[Book] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if not images:
            raise ValueError("At least one image is required to start a job")
        self.id = uuid.uuid4()
        self.tasks = [PageTask(index=i, image_path=Path(image)) for i, image in enumerate(images)]
        self.title = title
        self.author = author
        self.owner_id = owner_id or ANONYMOUS_OWNER_ID
        self.existing_book = book
        self.start_page_number = book.total_pages + 1 if book is not None else 1
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()

        self.state = JobState.PENDING
        self.error_message: Optional[str] = None
        self.requires_restart = False
        self.book: Optional[Book] = None
        self.reported_progress = 0.0

        self._lock = threading.Lock()
        self._finished = threading.Event()

    @property
    def total_pages(self) -> int:
        return len(self.tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.status is PageStatus.COMPLETED)

    @property
    def progress(self) -> float:
        """Completed pages over total pages."""
        return self.completed_count / self.total_pages

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def can_cancel(self) -> bool:
        return self.state not in UNCANCELLABLE_STATES

    @property
    def can_retry(self) -> bool:
        return self.state is JobState.FAILED and not self.requires_restart

    @property
    def failed_tasks(self) -> List[PageTask]:
        return [task for task in self.tasks if task.status is PageStatus.FAILED]

    def page_number_for(self, task: PageTask) -> int:
        return self.start_page_number + task.index

    def completed_pages(self) -> List[BookPage]:
        """Produced pages in page-number order."""
        pages = [task.page for task in self.tasks if task.status is PageStatus.COMPLETED and task.page]
        return sorted(pages, key=lambda page: page.page_number)

    def set_status(self, task: PageTask, status: PageStatus, error: Optional[str] = None) -> None:
        with self._lock:
            task.status = status
            task.error = error

    def set_state(self, state: JobState, error_message: Optional[str] = None) -> None:
        with self._lock:
            self.state = state
            if error_message is not None or state is not JobState.FAILED:
                self.error_message = error_message
            if state in TERMINAL_STATES:
                self._finished.set()
            else:
                self._finished.clear()

    def request_cancel(self) -> bool:
        """Set the cancel flag unless the job already completed or was cancelled."""
        with self._lock:
            if self.state in UNCANCELLABLE_STATES:
                return False
            self.cancel_event.set()
            return True

    def prepare_retry(self) -> None:
        """Move a failed job back to PENDING so it can be resubmitted.

        Check and transition happen under the job lock; afterwards the job
        is no longer finished for wait(), cancel() or a second retry.

        Raises:
            JobStateError: if the job has not failed, or failed in a way that
                needs a new job (dictionary load failure).
        """
        with self._lock:
            if self.state is not JobState.FAILED:
                raise JobStateError(f"Only failed jobs can be retried (job is {self.state.value})")
            if self.requires_restart:
                raise JobStateError("Dictionary failed to load; start a new job instead of retrying")
            self.state = JobState.PENDING
            self.error_message = None
            self._finished.clear()

    def snapshot(self) -> JobSnapshot:
        with self._lock:
            return JobSnapshot(
                state=self.state,
                statuses=[task.status for task in self.tasks],
                progress=self.progress,
                error_message=self.error_message,
            )

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the job reaches a terminal state; False on timeout."""
        return self._finished.wait(timeout)
