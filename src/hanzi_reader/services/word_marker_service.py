"""Word Marker Service - concurrent in-memory store of difficult words per user."""

import logging
import threading
import uuid
from collections import Counter
from typing import Dict, List

from hanzi_reader.core import MarkedWord, WordMarkStatistics

logger = logging.getLogger(__name__)


class WordMarkerService:
    """
    Tracks words users flag as difficult.

    The ``user_id -> [MarkedWord]`` map is guarded by one lock: writers hold
    it exclusively and readers take it briefly to copy out a consistent
    list, so callers never observe a half-applied update while a background
    save is running. MarkedWord is immutable; updates replace list items.
    """

    def __init__(self) -> None:
        self._marked: Dict[uuid.UUID, List[MarkedWord]] = {}
        self._lock = threading.Lock()

    def mark_word(self, marked_word: MarkedWord) -> MarkedWord:
        """Mark a word; re-marking bumps its count and reading date.

        Returns:
            The stored MarkedWord.
        """
        with self._lock:
            words = self._marked.setdefault(marked_word.user_id, [])
            for idx, existing in enumerate(words):
                if existing.word == marked_word.word:
                    updated = existing.incremented(touch=True)
                    words[idx] = updated
                    logger.debug("Re-marked '%s' (count %d)", updated.word, updated.marked_count)
                    return updated
            words.append(marked_word)
            logger.debug("Marked '%s' for user %s", marked_word.word, marked_word.user_id)
            return marked_word

    def unmark_word(self, word: str, user_id: uuid.UUID) -> None:
        with self._lock:
            words = self._marked.get(user_id)
            if words:
                self._marked[user_id] = [w for w in words if w.word != word]

    def increment_mark_count(self, word: str, user_id: uuid.UUID) -> None:
        with self._lock:
            words = self._marked.get(user_id, [])
            for idx, existing in enumerate(words):
                if existing.word == word:
                    words[idx] = existing.incremented()
                    return

    def get_marked_words(self, user_id: uuid.UUID) -> List[MarkedWord]:
        with self._lock:
            return list(self._marked.get(user_id, []))

    def get_marked_words_for_book(self, book_id: uuid.UUID, user_id: uuid.UUID) -> List[MarkedWord]:
        return [w for w in self.get_marked_words(user_id) if w.book_id == book_id]

    def is_word_marked(self, word: str, user_id: uuid.UUID) -> bool:
        return any(w.word == word for w in self.get_marked_words(user_id))

    def get_recent_marked_words(self, user_id: uuid.UUID, limit: int) -> List[MarkedWord]:
        recent = [w for w in self.get_marked_words(user_id) if w.is_recently_marked]
        recent.sort(key=lambda w: w.reading_date, reverse=True)
        return recent[:limit]

    def get_mark_statistics(self, user_id: uuid.UUID) -> WordMarkStatistics:
        words = self.get_marked_words(user_id)
        counts = Counter({w.word: w.marked_count for w in words})
        return WordMarkStatistics(
            total_marked_words=len(words),
            recently_marked_words=sum(1 for w in words if w.is_recently_marked),
            frequently_marked_words=sum(1 for w in words if w.is_frequently_marked),
            most_marked_words=[word for word, _ in counts.most_common(10)],
        )
