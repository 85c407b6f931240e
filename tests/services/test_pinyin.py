"""Unit tests for numeric-tone to tone-mark pinyin conversion."""

import pytest

from hanzi_reader.services import to_marks


@pytest.mark.parametrize(
    "numeric, marked",
    [
        ("hao3", "hǎo"),
        ("xue2 xi2", "xué xí"),
        ("ni3 hao3", "nǐ hǎo"),
        ("ma5", "ma"),
        ("lu:4", "lǜ"),
        ("nu:3", "nǚ"),
        ("Zhong1 wen2", "Zhōng wén"),
        ("gou3", "gǒu"),
        ("liu2", "liú"),
        ("gui4", "guì"),
        ("mei2", "méi"),
    ],
)
def test_to_marks(numeric, marked):
    assert to_marks(numeric) == marked


@pytest.mark.parametrize("value", ["", "hǎo", "xué xí", "r5", "hm", "ma", "2", "hao35", "A B"])
def test_to_marks_is_idempotent(value):
    once = to_marks(value)
    assert to_marks(once) == once


def test_syllable_without_vowel_drops_tone_digit():
    assert to_marks("m2") == "m"
    assert to_marks("r5") == "r"


def test_non_pinyin_is_left_alone():
    assert to_marks("2") == "2"
    assert to_marks("hao35") == "hao35"
