"""Background worker and signals for page ingestion using Qt threading."""

import logging

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

logger = logging.getLogger(__name__)


class PipelineSignals(QObject):
    """
    Signals for reporting ingestion progress from worker threads.

    QRunnable doesn't inherit from QObject, so the signals live on a separate
    QObject. Receivers in other threads get them queued, in emission order.
    """
    progress_changed = Signal(float)  # overall progress, never decreasing
    page_status_changed = Signal(int, str)  # image index, PageStatus value
    job_finished = Signal(object)  # Book
    job_failed = Signal(str)  # error message
    job_cancelled = Signal()


class IngestionWorker(QRunnable):
    """
    Worker that runs one pipeline job's page loop in a background thread.

    Uses Qt's thread pool for efficient thread management. Expected failures
    are reported by the pipeline itself; anything unexpected fails the job
    here.
    """

    def __init__(self, pipeline, handle):
        super().__init__()
        self.pipeline = pipeline
        self.handle = handle
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the job's page loop."""
        try:
            self.pipeline.process(self.handle)
        except Exception as e:
            logger.exception("Unexpected error in ingestion job %s", self.handle.job.id)
            self.pipeline.fail_job(self.handle, f"Unexpected ingestion error: {e}")
