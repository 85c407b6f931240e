"""Text processing services - pinyin formatting, segmentation, and normalization."""

from hanzi_reader.services.text_processing.pinyin import to_marks
from hanzi_reader.services.text_processing.segmentation_service import SegmentationService, verify_cover
from hanzi_reader.services.text_processing.text_normalization import (
    extract_context_snippet,
    generate_title,
    normalize_text,
)

__all__ = [
    "SegmentationService",
    "verify_cover",
    "to_marks",
    "normalize_text",
    "generate_title",
    "extract_context_snippet",
]
