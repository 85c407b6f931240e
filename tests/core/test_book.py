"""Unit tests for the Book entity: navigation, page numbering and reordering."""

from pathlib import Path

import pytest

from hanzi_reader.core import Book, BookPage, InvalidPageOrderError, validate_page_order


def make_page(number: int, text: str = "中文") -> BookPage:
    return BookPage(page_number=number, image_path=Path(f"/photos/p{number}.jpg"), extracted_text=text)


@pytest.fixture
def book():
    return Book(title="小王子", author="Saint-Exupéry", pages=[make_page(n) for n in range(1, 5)])


def numbers(book):
    return [page.page_number for page in book.pages]


def test_pages_are_attached_to_book(book):
    assert all(page.book_id == book.id for page in book.pages)


class TestNavigation:
    """Tests for reading position."""

    def test_next_and_previous(self, book):
        assert book.next_page() is True
        assert book.current_page_index == 1
        assert book.previous_page() is True
        assert book.previous_page() is False
        assert book.current_page_index == 0

    def test_next_stops_at_last_page(self, book):
        assert book.go_to_page(3)
        assert book.next_page() is False
        assert book.is_completed

    def test_go_to_page_out_of_range(self, book):
        assert book.go_to_page(4) is False
        assert book.go_to_page(-1) is False
        assert book.current_page_index == 0

    def test_reading_progress(self, book):
        book.go_to_page(1)
        assert book.reading_progress == pytest.approx(0.5)
        assert book.current_page is book.pages[1]

    def test_empty_book_progress(self):
        empty = Book(title="Empty")
        assert empty.reading_progress == 0.0
        assert empty.current_page is None

    def test_get_page_is_one_based(self, book):
        assert book.get_page(1) is book.pages[0]
        with pytest.raises(ValueError):
            book.get_page(0)
        with pytest.raises(ValueError):
            book.get_page(5)


class TestPageNumbering:
    """Page numbers stay exactly 1..N."""

    def test_add_pages_appends_and_renumbers(self, book):
        book.add_pages([make_page(99), make_page(42)])

        assert numbers(book) == [1, 2, 3, 4, 5, 6]
        assert book.pages[-1].book_id == book.id

    def test_remove_page_renumbers(self, book):
        removed_id = book.pages[1].id
        book.go_to_page(3)

        removed = book.remove_page(removed_id)

        assert removed.id == removed_id
        assert numbers(book) == [1, 2, 3]
        assert book.current_page_index == 2

    def test_remove_unknown_page_raises(self, book):
        with pytest.raises(ValueError):
            book.remove_page(make_page(1).id)


class TestReorderPages:
    """Tests for Book.reorder_pages()."""

    def test_reorder_renumbers_in_new_order(self, book):
        ids = [page.id for page in book.pages]
        new_order = [ids[2], ids[0], ids[3], ids[1]]

        book.reorder_pages(new_order)

        assert [page.id for page in book.pages] == new_order
        assert numbers(book) == [1, 2, 3, 4]

    def test_reorder_keeps_reading_position_on_same_page(self, book):
        ids = [page.id for page in book.pages]
        book.go_to_page(1)

        book.reorder_pages([ids[3], ids[2], ids[1], ids[0]])

        assert book.current_page_index == 2
        assert book.current_page.id == ids[1]

    def test_reorder_identity(self, book):
        ids = [page.id for page in book.pages]
        book.reorder_pages(ids)
        assert [page.id for page in book.pages] == ids

    @pytest.mark.parametrize("mutate", ["duplicate", "missing", "unknown"])
    def test_invalid_order_leaves_book_unchanged(self, book, mutate):
        ids = [page.id for page in book.pages]
        if mutate == "duplicate":
            bad = [ids[0], ids[0], ids[2], ids[3]]
        elif mutate == "missing":
            bad = ids[:3]
        else:
            bad = ids[:3] + [make_page(9).id]

        with pytest.raises(InvalidPageOrderError):
            book.reorder_pages(bad)

        assert [page.id for page in book.pages] == ids
        assert numbers(book) == [1, 2, 3, 4]


def test_validate_page_order_error_is_value_error():
    page = make_page(1)
    with pytest.raises(ValueError, match="Duplicate"):
        validate_page_order([page.id], [page.id, page.id])
