"""Book Repository abstraction - storage contract for books and pages."""

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from hanzi_reader.core import Book


class BookRepository(ABC):
    """
    Abstract interface for persisting books.

    Implementations (InMemoryBookRepository, SqliteBookRepository) handle
    storage details and raise StorageError (BookNotFoundError for unknown
    ids) on failure.
    """

    @abstractmethod
    def save_book(self, book: Book, owner_id: uuid.UUID) -> Book:
        """
        Store a new book (or overwrite one with the same id) for an owner.

        Returns:
            The stored book.
        """
        pass

    @abstractmethod
    def get_book(self, book_id: uuid.UUID) -> Optional[Book]:
        """Retrieve a book by id, or None."""
        pass

    @abstractmethod
    def get_books(self, owner_id: uuid.UUID) -> List[Book]:
        """All books of an owner, most recently updated first."""
        pass

    @abstractmethod
    def update_book(self, book: Book) -> Book:
        """Overwrite an existing book's metadata and pages."""
        pass

    @abstractmethod
    def delete_book(self, book_id: uuid.UUID) -> None:
        pass

    @abstractmethod
    def search_books(self, query: str, owner_id: uuid.UUID) -> List[Book]:
        """Case-insensitive title/author substring search."""
        pass

    @abstractmethod
    def update_reading_progress(self, book_id: uuid.UUID, page_index: int) -> None:
        """Persist the 0-indexed current page of a book."""
        pass

    @abstractmethod
    def reorder_pages(self, book_id: uuid.UUID, new_order: Sequence[uuid.UUID]) -> Book:
        """
        Put a book's pages in ``new_order`` and renumber them 1..N.

        Raises:
            InvalidPageOrderError: if the order omits, duplicates or invents
                page ids; nothing is written in that case.
        """
        pass

    def get_recent_books(self, owner_id: uuid.UUID, limit: int) -> List[Book]:
        return self.get_books(owner_id)[:limit]
