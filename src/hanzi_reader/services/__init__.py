"""Services layer - business logic and external integrations."""

from hanzi_reader.services.dictionary_service import DictionaryIndex, DictionaryService, parse_cedict_line
from hanzi_reader.services.ocr_service import OCRService, TesseractOCRService, sort_blocks_by_reading_order
from hanzi_reader.services.settings_manager import SettingsManager
from hanzi_reader.services.word_marker_service import WordMarkerService

# Text processing services
from hanzi_reader.services.text_processing import (
    SegmentationService,
    extract_context_snippet,
    generate_title,
    normalize_text,
    to_marks,
    verify_cover,
)

# Ingestion services
from hanzi_reader.services.ingestion import (
    JobHandle,
    JobState,
    PageIngestionPipeline,
    PageStatus,
    PipelineJob,
    PipelineSignals,
)

__all__ = [
    "DictionaryIndex",
    "DictionaryService",
    "parse_cedict_line",
    "OCRService",
    "TesseractOCRService",
    "sort_blocks_by_reading_order",
    "SettingsManager",
    "WordMarkerService",
    "SegmentationService",
    "verify_cover",
    "to_marks",
    "normalize_text",
    "generate_title",
    "extract_context_snippet",
    "PageIngestionPipeline",
    "JobHandle",
    "JobState",
    "PageStatus",
    "PipelineJob",
    "PipelineSignals",
]
