"""Page Ingestion Pipeline - OCR, segmentation and book assembly for uploaded pages."""

import copy
import logging
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from PySide6.QtCore import QThreadPool

from hanzi_reader.core import (
    Book,
    BookNotFoundError,
    BookPage,
    DictionaryLoadError,
    OCRError,
    SegmentationError,
    StorageError,
    validate_page_order,
)
from hanzi_reader.io import BookRepository
from hanzi_reader.services.dictionary_service import DictionaryService, DictionarySource
from hanzi_reader.services.ingestion.ingestion_worker import IngestionWorker, PipelineSignals
from hanzi_reader.services.ingestion.pipeline_job import (
    JobSnapshot,
    JobState,
    PageStatus,
    PageTask,
    PipelineJob,
)
from hanzi_reader.services.ocr_service import OCRService
from hanzi_reader.services.text_processing import SegmentationService, generate_title

logger = logging.getLogger(__name__)


@dataclass
class JobHandle:
    """Caller's reference to a running job: its state plus the signals to subscribe to."""

    job: PipelineJob
    signals: PipelineSignals

    @property
    def id(self) -> uuid.UUID:
        return self.job.id

    def snapshot(self) -> JobSnapshot:
        return self.job.snapshot()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self.job.wait(timeout)


class PageIngestionPipeline:
    """
    Turns uploaded page images into a saved Book.

    Each job processes its images strictly in submission order: page i+1
    does not start OCR until page i has been segmented. Per-page OCR
    failures mark the page failed and the job moves on; the dictionary
    failing to load aborts the job before any OCR call. Cancellation is
    checked before every page and right after OCR.

    With a QThreadPool, jobs run on IngestionWorker threads; without one,
    ``start_job`` and ``retry`` run the job before returning.
    """

    def __init__(
        self,
        ocr_service: OCRService,
        segmentation_service: SegmentationService,
        dictionary_service: DictionaryService,
        book_repository: BookRepository,
        dictionary_source: Optional[DictionarySource] = None,
        thread_pool: Optional[QThreadPool] = None,
    ):
        if ocr_service is None:
            raise ValueError("OCRService must not be None")
        if segmentation_service is None:
            raise ValueError("SegmentationService must not be None")
        if dictionary_service is None:
            raise ValueError("DictionaryService must not be None")
        if book_repository is None:
            raise ValueError("BookRepository must not be None")

        self._ocr = ocr_service
        self._segmentation = segmentation_service
        self._dictionary = dictionary_service
        self._repository = book_repository
        self._dictionary_source = dictionary_source
        self._thread_pool = thread_pool

    def start_job(
        self,
        images: Sequence[Union[str, Path]],
        title: str = "",
        author: Optional[str] = None,
        owner_id: Optional[uuid.UUID] = None,
        book: Optional[Book] = None,
        cancel_event: Optional[threading.Event] = None,
        signals: Optional[PipelineSignals] = None,
    ) -> JobHandle:
        """
        Start processing images into a new book, or into ``book`` when adding pages.

        Args:
            images: Page image paths in reading order.
            title: Book title; empty derives one from the first page's text.
                When adding pages, a non-empty title renames the book.
            author: Optional author (replaces the book's author when given).
            owner_id: Owner passed to the repository on save.
            book: Existing book to append pages to.
            cancel_event: Caller-owned cancellation token.
            signals: Pre-connected signals; required to observe a job that
                runs inline (no thread pool).

        Returns:
            JobHandle for progress signals, cancellation and retry.

        Raises:
            ValueError: if ``images`` is empty.
        """
        job = PipelineJob(
            images=images,
            title=title,
            author=author,
            owner_id=owner_id,
            book=book,
            cancel_event=cancel_event,
        )
        handle = JobHandle(job=job, signals=signals if signals is not None else PipelineSignals())
        logger.info(
            "Starting ingestion job %s: %d images, first page number %d",
            job.id,
            job.total_pages,
            job.start_page_number,
        )
        self._submit(handle)
        return handle

    def cancel(self, handle: JobHandle) -> None:
        """Request cancellation; takes effect at the next stage boundary."""
        if not handle.job.request_cancel():
            logger.debug("Cancel ignored for %s job %s", handle.job.state.value, handle.id)
            return
        logger.info("Cancellation requested for job %s", handle.id)

    def retry(self, handle: JobHandle) -> None:
        """
        Re-run a failed job from its first failed or pending page.

        Completed pages are kept, so progress continues from where it was.

        Raises:
            JobStateError: if the job has not failed, or failed in a way that
                needs a new job (dictionary load failure).
        """
        job = handle.job
        job.prepare_retry()
        logger.info("Retrying job %s (%d failed pages)", job.id, len(job.failed_tasks))
        self._submit(handle)

    def reorder_pages(self, book_id: uuid.UUID, new_order: Sequence[uuid.UUID]) -> Book:
        """
        Renumber a stored book's pages 1..N in ``new_order``.

        The order is validated against the stored page ids before anything
        is written.

        Raises:
            BookNotFoundError: if the book does not exist.
            InvalidPageOrderError: if ids are missing, duplicated or unknown.
            StorageError: if the repository write fails.
        """
        book = self._repository.get_book(book_id)
        if book is None:
            raise BookNotFoundError(f"Book not found: {book_id}")
        validate_page_order([page.id for page in book.pages], new_order)
        return self._repository.reorder_pages(book_id, new_order)

    def process(self, handle: JobHandle) -> None:
        """Run the job's page loop on the calling thread."""
        job = handle.job
        job.set_state(JobState.RUNNING)

        if job.is_cancelled:
            self._finish_cancelled(handle)
            return

        if not self._ensure_dictionary(handle):
            return

        for task in job.tasks:
            if task.status is PageStatus.COMPLETED:
                continue
            if job.is_cancelled:
                break
            self._process_page(handle, task)

        if job.is_cancelled:
            self._finish_cancelled(handle)
            return

        if job.failed_tasks:
            failed = ", ".join(str(job.page_number_for(task)) for task in job.failed_tasks)
            self.fail_job(handle, job.error_message or f"Failed to process pages: {failed}")
            return

        self._assemble_and_save(handle)

    def fail_job(self, handle: JobHandle, message: str, requires_restart: bool = False) -> None:
        job = handle.job
        for task in job.tasks:
            if task.status is PageStatus.PROCESSING:
                self._set_status(handle, task, PageStatus.FAILED, message)
        job.requires_restart = requires_restart
        job.set_state(JobState.FAILED, message)
        logger.error("Ingestion job %s failed: %s", job.id, message)
        handle.signals.job_failed.emit(message)

    def _submit(self, handle: JobHandle) -> None:
        worker = IngestionWorker(self, handle)
        if self._thread_pool is None:
            worker.run()
        else:
            self._thread_pool.start(worker)

    def _ensure_dictionary(self, handle: JobHandle) -> bool:
        """Load the dictionary once per job run if nothing has loaded it yet."""
        if self._dictionary.is_loaded:
            return True
        try:
            self._dictionary.load(self._dictionary_source)
        except DictionaryLoadError as e:
            self.fail_job(handle, f"Failed to load dictionary: {e}", requires_restart=True)
            return False
        return True

    def _process_page(self, handle: JobHandle, task: PageTask) -> None:
        job = handle.job
        page_number = job.page_number_for(task)
        self._set_status(handle, task, PageStatus.PROCESSING)
        logger.debug("Job %s: OCR for page %d (%s)", job.id, page_number, task.image_path.name)

        try:
            extracted = self._ocr.extract_text(task.image_path)
        except OCRError as e:
            self._fail_page(handle, task, f"Failed to process page {page_number}: {e}")
            return

        if job.is_cancelled:
            logger.info("Job %s cancelled during OCR of page %d; discarding result", job.id, page_number)
            self._set_status(handle, task, PageStatus.PENDING)
            return

        try:
            segments = self._segmentation.segment(extracted.text)
        except SegmentationError as e:
            self._fail_page(handle, task, f"Failed to segment page {page_number}: {e}")
            return

        task.page = BookPage(
            page_number=page_number,
            image_path=task.image_path,
            extracted_text=extracted.text,
            words=segments,
        )
        self._set_status(handle, task, PageStatus.COMPLETED)
        logger.info("Job %s: processed page %d/%d", job.id, task.index + 1, job.total_pages)
        self._report_progress(handle)

    def _fail_page(self, handle: JobHandle, task: PageTask, message: str) -> None:
        logger.warning("Job %s: %s", handle.id, message)
        handle.job.error_message = message
        self._set_status(handle, task, PageStatus.FAILED, message)

    def _set_status(self, handle: JobHandle, task: PageTask, status: PageStatus, error: Optional[str] = None) -> None:
        handle.job.set_status(task, status, error)
        handle.signals.page_status_changed.emit(task.index, status.value)

    def _report_progress(self, handle: JobHandle) -> None:
        job = handle.job
        progress = job.progress
        if progress < job.reported_progress:
            return
        job.reported_progress = progress
        handle.signals.progress_changed.emit(progress)

    def _assemble_and_save(self, handle: JobHandle) -> None:
        job = handle.job
        if job.book is None:
            job.book = self._assemble_book(job)

        try:
            if job.existing_book is not None:
                saved = self._repository.update_book(job.book)
            else:
                saved = self._repository.save_book(job.book, job.owner_id)
        except StorageError as e:
            self.fail_job(handle, f"Failed to save book: {e}")
            return

        job.book = saved
        job.set_state(JobState.COMPLETED)
        logger.info("Ingestion job %s completed: '%s' with %d pages", job.id, saved.title, saved.total_pages)
        handle.signals.job_finished.emit(saved)

    @staticmethod
    def _assemble_book(job: PipelineJob) -> Book:
        pages = job.completed_pages()
        if job.existing_book is not None:
            book = copy.deepcopy(job.existing_book)
            book.add_pages(pages)
            if job.title.strip():
                book.title = job.title.strip()
            if job.author is not None:
                book.author = job.author
            return book

        title = job.title.strip() or generate_title(pages[0].extracted_text)
        return Book(title=title, author=job.author, pages=pages)

    def _finish_cancelled(self, handle: JobHandle) -> None:
        handle.job.set_state(JobState.CANCELLED)
        logger.info("Ingestion job %s cancelled", handle.id)
        handle.signals.job_cancelled.emit()
