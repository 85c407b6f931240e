"""Ingestion services - multi-page OCR, segmentation and book assembly."""

from hanzi_reader.services.ingestion.ingestion_pipeline import JobHandle, PageIngestionPipeline
from hanzi_reader.services.ingestion.ingestion_worker import IngestionWorker, PipelineSignals
from hanzi_reader.services.ingestion.pipeline_job import (
    ANONYMOUS_OWNER_ID,
    JobSnapshot,
    JobState,
    PageStatus,
    PageTask,
    PipelineJob,
)

__all__ = [
    "PageIngestionPipeline",
    "JobHandle",
    "PipelineJob",
    "PageTask",
    "JobSnapshot",
    "JobState",
    "PageStatus",
    "ANONYMOUS_OWNER_ID",
    "IngestionWorker",
    "PipelineSignals",
]
