"""Difficult-word tracking entities."""

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import List

RECENT_WINDOW_SECONDS = 7 * 24 * 60 * 60
FREQUENT_MARK_THRESHOLD = 3


@dataclass(frozen=True)
class MarkedWord:
    """A word a user flagged as difficult while reading."""

    user_id: uuid.UUID
    word: str
    context_snippet: str
    book_id: uuid.UUID
    page_number: int
    reading_date: float = field(default_factory=time.time)
    marked_count: int = 1
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def is_recently_marked(self) -> bool:
        return self.reading_date > time.time() - RECENT_WINDOW_SECONDS

    @property
    def is_frequently_marked(self) -> bool:
        return self.marked_count >= FREQUENT_MARK_THRESHOLD

    @property
    def is_valid(self) -> bool:
        return bool(self.word) and bool(self.context_snippet) and self.page_number > 0

    def incremented(self, touch: bool = False) -> "MarkedWord":
        """Copy with ``marked_count + 1``; ``touch`` also refreshes reading_date."""
        if touch:
            return replace(self, marked_count=self.marked_count + 1, reading_date=time.time())
        return replace(self, marked_count=self.marked_count + 1)


@dataclass
class WordMarkStatistics:
    total_marked_words: int
    recently_marked_words: int
    frequently_marked_words: int
    most_marked_words: List[str]
