"""Domain layer - Pure entities representing books, pages and dictionary data."""

from .book import Book, validate_page_order
from .book_page import BookPage
from .dictionary_entry import DictionaryEntry, HSKLevel
from .errors import (
    BookNotFoundError,
    DictionaryLoadError,
    DictionaryNotLoadedError,
    HanziReaderError,
    InvalidPageOrderError,
    JobStateError,
    OCRError,
    SegmentationError,
    StorageError,
)
from .extracted_text import ExtractedText, TextBlock
from .marked_word import MarkedWord, WordMarkStatistics
from .word_segment import WordSegment

__all__ = [
    "Book",
    "BookPage",
    "WordSegment",
    "DictionaryEntry",
    "HSKLevel",
    "MarkedWord",
    "WordMarkStatistics",
    "ExtractedText",
    "TextBlock",
    "validate_page_order",
    "HanziReaderError",
    "DictionaryLoadError",
    "DictionaryNotLoadedError",
    "OCRError",
    "SegmentationError",
    "StorageError",
    "BookNotFoundError",
    "InvalidPageOrderError",
    "JobStateError",
]
