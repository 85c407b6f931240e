"""In-memory book repository for testing and session-level storage."""

import copy
import threading
import uuid
from typing import Dict, List, Optional, Sequence

from hanzi_reader.core import Book, BookNotFoundError, StorageError
from hanzi_reader.io.book_repository import BookRepository


class InMemoryBookRepository(BookRepository):
    """
    Simple in-memory repository implementation.

    Used for testing and offline sessions. No persistence. Books are deep
    copied on the way in and out so callers cannot mutate stored state.
    """

    def __init__(self):
        # Structure: {book_id: (owner_id, Book)}
        self._store: Dict[uuid.UUID, tuple] = {}
        self._lock = threading.Lock()

    def save_book(self, book: Book, owner_id: uuid.UUID) -> Book:
        with self._lock:
            self._store[book.id] = (owner_id, copy.deepcopy(book))
        return copy.deepcopy(book)

    def get_book(self, book_id: uuid.UUID) -> Optional[Book]:
        with self._lock:
            record = self._store.get(book_id)
            return copy.deepcopy(record[1]) if record else None

    def get_books(self, owner_id: uuid.UUID) -> List[Book]:
        with self._lock:
            books = [copy.deepcopy(book) for owner, book in self._store.values() if owner == owner_id]
        books.sort(key=lambda b: b.updated_at, reverse=True)
        return books

    def update_book(self, book: Book) -> Book:
        with self._lock:
            record = self._store.get(book.id)
            if record is None:
                raise BookNotFoundError(f"Book not found: {book.id}")
            self._store[book.id] = (record[0], copy.deepcopy(book))
        return copy.deepcopy(book)

    def delete_book(self, book_id: uuid.UUID) -> None:
        with self._lock:
            if self._store.pop(book_id, None) is None:
                raise BookNotFoundError(f"Book not found: {book_id}")

    def search_books(self, query: str, owner_id: uuid.UUID) -> List[Book]:
        needle = query.strip().lower()
        return [
            book
            for book in self.get_books(owner_id)
            if needle in book.title.lower() or needle in (book.author or "").lower()
        ]

    def update_reading_progress(self, book_id: uuid.UUID, page_index: int) -> None:
        with self._lock:
            record = self._store.get(book_id)
            if record is None:
                raise BookNotFoundError(f"Book not found: {book_id}")
            if not record[1].go_to_page(page_index):
                raise StorageError(f"Page index {page_index} out of range for book {book_id}")

    def reorder_pages(self, book_id: uuid.UUID, new_order: Sequence[uuid.UUID]) -> Book:
        with self._lock:
            record = self._store.get(book_id)
            if record is None:
                raise BookNotFoundError(f"Book not found: {book_id}")
            record[1].reorder_pages(new_order)
            return copy.deepcopy(record[1])
