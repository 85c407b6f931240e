"""DictionaryEntry entity - one CEDICT headword with glosses."""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple


class HSKLevel(IntEnum):
    """HSK proficiency tiers; lower numbers are more common words."""

    HSK1 = 1
    HSK2 = 2
    HSK3 = 3
    HSK4 = 4
    HSK5 = 5
    HSK6 = 6

    @property
    def display_name(self) -> str:
        return f"HSK {self.value}"

    @property
    def description(self) -> str:
        return _HSK_DESCRIPTIONS[self]


_HSK_DESCRIPTIONS = {
    HSKLevel.HSK1: "Beginner (150 words)",
    HSKLevel.HSK2: "Elementary (300 words)",
    HSKLevel.HSK3: "Intermediate (600 words)",
    HSKLevel.HSK4: "Upper Intermediate (1200 words)",
    HSKLevel.HSK5: "Advanced (2500 words)",
    HSKLevel.HSK6: "Proficient (5000+ words)",
}


@dataclass(frozen=True)
class DictionaryEntry:
    """Immutable dictionary entry keyed by its simplified form.

    Attributes:
        simplified: Simplified Chinese headword.
        traditional: Traditional Chinese headword.
        pinyin: Pinyin with numeric tones (e.g. "zhong1 wen2").
        definitions: English glosses in dictionary order.
        frequency: HSK level, when the word appears in the HSK lists.
        examples: Example sentences (empty when none are bundled).
    """

    simplified: str
    traditional: str
    pinyin: str
    definitions: Tuple[str, ...]
    frequency: Optional[HSKLevel] = None
    examples: Tuple[str, ...] = ()

    @property
    def primary_word(self) -> str:
        return self.simplified

    @property
    def english_definition(self) -> str:
        """All glosses joined with "; "."""
        return "; ".join(self.definitions)

    @property
    def formatted_pinyin(self) -> str:
        """Pinyin with tone marks instead of tone numbers."""
        from hanzi_reader.services.text_processing.pinyin import to_marks

        return to_marks(self.pinyin)

    @property
    def split_definitions(self) -> List[str]:
        return [d.strip() for d in self.definitions if d.strip()]

    @property
    def primary_definition(self) -> str:
        defs = self.split_definitions
        return defs[0] if defs else self.english_definition

    @property
    def secondary_definitions(self) -> List[str]:
        return self.split_definitions[1:]

    @property
    def has_multiple_definitions(self) -> bool:
        return len(self.split_definitions) > 1

    @property
    def has_examples(self) -> bool:
        return bool(self.examples)

    @property
    def is_valid(self) -> bool:
        return bool(self.simplified and self.traditional and self.pinyin and self.definitions)
