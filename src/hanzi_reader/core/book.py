"""Book entity - ordered pages plus reading position."""

import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .book_page import BookPage
from .errors import InvalidPageOrderError


@dataclass
class Book:
    """Acts as the authoritative owner of a book's page order.

    Page numbers are always exactly 1..N in list order; every operation that
    changes the order renumbers the pages.
    """

    title: str
    author: Optional[str] = None
    pages: List[BookPage] = field(default_factory=list)
    current_page_index: int = 0
    is_local: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: int = field(default_factory=lambda: int(time.time()))
    updated_at: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self) -> None:
        for page in self.pages:
            page.book_id = self.id

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> Optional[BookPage]:
        if 0 <= self.current_page_index < self.total_pages:
            return self.pages[self.current_page_index]
        return None

    @property
    def reading_progress(self) -> float:
        if self.total_pages == 0:
            return 0.0
        return (self.current_page_index + 1) / self.total_pages

    @property
    def is_completed(self) -> bool:
        return self.current_page_index >= self.total_pages - 1

    @property
    def is_valid(self) -> bool:
        return bool(self.title) and self.current_page_index >= 0

    def get_page(self, page_number: int) -> BookPage:
        """Retrieve a page by its 1-based page number.

        Raises:
            ValueError: if page_number is out of bounds.
        """
        if 1 <= page_number <= self.total_pages:
            return self.pages[page_number - 1]
        raise ValueError(
            f"Page {page_number} out of bounds for book '{self.title}' with {self.total_pages} pages"
        )

    def next_page(self) -> bool:
        if self.current_page_index >= self.total_pages - 1:
            return False
        self.current_page_index += 1
        self._touch()
        return True

    def previous_page(self) -> bool:
        if self.current_page_index <= 0:
            return False
        self.current_page_index -= 1
        self._touch()
        return True

    def go_to_page(self, index: int) -> bool:
        if not 0 <= index < self.total_pages:
            return False
        self.current_page_index = index
        self._touch()
        return True

    def add_pages(self, pages: Iterable[BookPage]) -> None:
        """Append pages after the current last page and renumber."""
        for page in pages:
            page.book_id = self.id
            self.pages.append(page)
        self.renumber_pages()

    def remove_page(self, page_id: uuid.UUID) -> BookPage:
        for idx, page in enumerate(self.pages):
            if page.id == page_id:
                removed = self.pages.pop(idx)
                self.renumber_pages()
                if self.current_page_index >= self.total_pages:
                    self.current_page_index = max(self.total_pages - 1, 0)
                return removed
        raise ValueError(f"Page {page_id} not found in book '{self.title}'")

    def reorder_pages(self, new_order: Sequence[uuid.UUID]) -> None:
        """Put pages in ``new_order`` and renumber them 1..N.

        The order must name every page exactly once; otherwise nothing is
        changed.
        The reading position follows the page that was current.

        Raises:
            InvalidPageOrderError: if ids are missing, duplicated, or unknown.
        """
        validate_page_order([page.id for page in self.pages], new_order)
        current = self.current_page
        by_id = {page.id: page for page in self.pages}
        self.pages = [by_id[page_id] for page_id in new_order]
        if current is not None:
            self.current_page_index = list(new_order).index(current.id)
        self.renumber_pages()

    def renumber_pages(self) -> None:
        for number, page in enumerate(self.pages, start=1):
            page.page_number = number
        self._touch()

    def _touch(self) -> None:
        self.updated_at = int(time.time())


def validate_page_order(existing_ids: Sequence[uuid.UUID], new_order: Sequence[uuid.UUID]) -> None:
    """Check that ``new_order`` is a permutation of ``existing_ids``.

    Raises:
        InvalidPageOrderError: describing the first problem found.
    """
    seen = set()
    duplicates = []
    for page_id in new_order:
        if page_id in seen:
            duplicates.append(page_id)
        seen.add(page_id)
    if duplicates:
        raise InvalidPageOrderError(f"Duplicate page ids in new order: {duplicates}")

    existing = set(existing_ids)
    unknown = seen - existing
    if unknown:
        raise InvalidPageOrderError(f"Unknown page ids in new order: {sorted(map(str, unknown))}")
    missing = existing - seen
    if missing:
        raise InvalidPageOrderError(f"New order omits page ids: {sorted(map(str, missing))}")
