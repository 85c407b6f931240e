"""
Hanzi Reader - turns photographed Chinese book pages into learnable text.

This package provides the reading companion's engine:
- CC-CEDICT dictionary loading and lookup
- Greedy longest-match word segmentation with pinyin annotation
- A multi-page ingestion pipeline (OCR, segmentation, book assembly)
  with progress, cancellation and retry
- Book persistence (in-memory and SQLite)
"""

__version__ = "0.1.0"

# Make key components available at package level
from hanzi_reader.core import Book, BookPage, DictionaryEntry, WordSegment
from hanzi_reader.services import DictionaryService, PageIngestionPipeline, SegmentationService, to_marks

__all__ = [
    "Book",
    "BookPage",
    "DictionaryEntry",
    "WordSegment",
    "DictionaryService",
    "SegmentationService",
    "PageIngestionPipeline",
    "to_marks",
]
