"""Pinyin formatting - numeric tones to tone marks."""

import unicodedata
from typing import Optional

_TONE_MARKS = {
    "1": "\u0304",  # macron
    "2": "\u0301",  # acute
    "3": "\u030c",  # caron
    "4": "\u0300",  # grave
    "5": "",
}

_VOWELS = "aeiouü"


def to_marks(pinyin: str) -> str:
    """
    Convert space-separated numeric-tone pinyin to tone-marked pinyin.

    "ni3 hao3" -> "nǐ hǎo", "ma5" -> "ma". Syllables without a trailing
    tone digit 1-5 are returned unchanged, so the function is idempotent.
    Never raises for string input.

    Args:
        pinyin: Pinyin string, e.g. a CEDICT reading.

    Returns:
        The same syllables with tone marks applied.
    """
    if not pinyin:
        return pinyin
    return " ".join(_convert_syllable(syllable) for syllable in pinyin.split(" "))


def _convert_syllable(syllable: str) -> str:
    if len(syllable) < 2 or syllable[-1] not in _TONE_MARKS or syllable[-2].isdigit():
        return syllable
    tone = syllable[-1]

    base = syllable[:-1].replace("u:", "ü").replace("U:", "Ü")
    mark = _TONE_MARKS[tone]
    if not mark:
        return base

    index = _tone_vowel_index(base)
    if index is None:
        return base

    marked = base[: index + 1] + mark + base[index + 1 :]
    return unicodedata.normalize("NFC", marked)


def _tone_vowel_index(syllable: str) -> Optional[int]:
    """Index of the vowel that carries the tone mark, or None."""
    lowered = syllable.lower()

    for vowel in ("a", "e"):
        idx = lowered.find(vowel)
        if idx != -1:
            return idx

    idx = lowered.find("ou")
    if idx != -1:
        return idx

    for idx in range(len(lowered) - 1, -1, -1):
        if lowered[idx] in _VOWELS:
            return idx
    return None
