"""WordSegment entity - one token of a page's text."""

from dataclasses import dataclass
from typing import Optional

from .dictionary_entry import DictionaryEntry


@dataclass
class WordSegment:
    """A word (or fallback single character) with its position in the page text.

    ``start`` and ``end`` form a half-open range of character (code point)
    offsets, so ``text[start:end] == word``.
    """

    word: str
    start: int
    end: int
    pinyin: Optional[str] = None
    is_marked: bool = False
    definition: Optional[DictionaryEntry] = None

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def has_definition(self) -> bool:
        return self.definition is not None

    @property
    def is_valid(self) -> bool:
        return bool(self.word) and self.start >= 0 and self.end > self.start
