"""Unit tests for BookPage word marks."""

from pathlib import Path

from hanzi_reader.core import BookPage, WordSegment


def make_page():
    words = [
        WordSegment(word="你好", start=0, end=2),
        WordSegment(word="中文", start=2, end=4),
        WordSegment(word="你好", start=4, end=6),
    ]
    return BookPage(page_number=1, image_path=Path("p1.jpg"), extracted_text="你好中文你好", words=words)


def test_mark_word_flags_every_occurrence():
    page = make_page()

    page.mark_word("你好")

    assert page.is_word_marked("你好")
    assert [s.is_marked for s in page.words] == [True, False, True]
    assert page.marked_words_count == 1
    assert len(page.marked_segments()) == 2
    assert [s.word for s in page.unmarked_segments()] == ["中文"]


def test_unmark_word():
    page = make_page()
    page.mark_word("中文")

    page.unmark_word("中文")

    assert not page.has_marked_words
    assert not any(s.is_marked for s in page.words)


def test_replace_segments_keeps_marks():
    page = make_page()
    page.mark_word("中文")

    page.replace_segments([WordSegment(word="中文", start=0, end=2), WordSegment(word="好", start=2, end=3)])

    assert page.total_words_count == 2
    assert page.words[0].is_marked
    assert not page.words[1].is_marked


def test_is_valid():
    assert make_page().is_valid
    assert not BookPage(page_number=0, image_path=Path("p.jpg"), extracted_text="x").is_valid
    assert not BookPage(page_number=1, image_path=Path("p.jpg"), extracted_text="").is_valid
