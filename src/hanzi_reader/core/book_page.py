"""BookPage entity - one photographed page with OCR text and segments."""

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from .word_segment import WordSegment


@dataclass
class BookPage:
    """Represents a single page: source image, extracted text and its word segments."""

    page_number: int
    image_path: Path
    extracted_text: str
    words: List[WordSegment] = field(default_factory=list)
    words_marked: Set[str] = field(default_factory=set)
    book_id: Optional[uuid.UUID] = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def marked_words_count(self) -> int:
        return len(self.words_marked)

    @property
    def total_words_count(self) -> int:
        return len(self.words)

    @property
    def has_marked_words(self) -> bool:
        return bool(self.words_marked)

    def is_word_marked(self, word: str) -> bool:
        return word in self.words_marked

    def mark_word(self, word: str) -> None:
        """Flag every segment of ``word`` on this page as difficult."""
        self.words_marked.add(word)
        self._sync_marks()

    def unmark_word(self, word: str) -> None:
        self.words_marked.discard(word)
        self._sync_marks()

    def marked_segments(self) -> List[WordSegment]:
        return [segment for segment in self.words if segment.word in self.words_marked]

    def unmarked_segments(self) -> List[WordSegment]:
        return [segment for segment in self.words if segment.word not in self.words_marked]

    def replace_segments(self, segments: List[WordSegment]) -> None:
        """Swap in a fresh segmentation, carrying over the page's marks."""
        self.words = list(segments)
        self._sync_marks()

    def _sync_marks(self) -> None:
        for segment in self.words:
            segment.is_marked = segment.word in self.words_marked

    @property
    def is_valid(self) -> bool:
        return self.page_number > 0 and bool(str(self.image_path)) and bool(self.extracted_text)
