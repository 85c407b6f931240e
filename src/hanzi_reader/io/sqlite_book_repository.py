"""SQLite-backed book repository."""

import json
import logging
import sqlite3
import threading
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from hanzi_reader.core import (
    Book,
    BookNotFoundError,
    BookPage,
    DictionaryNotLoadedError,
    StorageError,
    WordSegment,
)
from hanzi_reader.io.book_repository import BookRepository

logger = logging.getLogger(__name__)


class SqliteBookRepository(BookRepository):
    """Persists books, pages and word segments in SQLite.

    This repository follows the failing-fast philosophy: every sqlite3 error
    is raised as StorageError, and unknown ids raise BookNotFoundError.

    Segments store the simplified key of their dictionary entry; when a
    loaded DictionaryService is supplied, entries are re-attached on read.
    """

    def __init__(self, connection: sqlite3.Connection, dictionary=None) -> None:
        """Initialize repository with database connection.

        Args:
            connection: SQLite connection with the schema created
                (see DatabaseManager.ensure_schema).
            dictionary: Optional DictionaryService used to re-attach entries.

        Raises:
            ValueError: If connection is None.
        """
        if connection is None:
            raise ValueError("Database connection must not be None")
        self.connection = connection
        self.connection.row_factory = sqlite3.Row
        self._dictionary = dictionary
        self._lock = threading.RLock()

    def save_book(self, book: Book, owner_id: uuid.UUID) -> Book:
        with self._lock:
            try:
                cur = self.connection.cursor()
                cur.execute(
                    """
                    INSERT INTO books (
                        id, owner_id, title, author, current_page_index, is_local, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        owner_id = excluded.owner_id,
                        title = excluded.title,
                        author = excluded.author,
                        current_page_index = excluded.current_page_index,
                        is_local = excluded.is_local,
                        updated_at = excluded.updated_at
                    """,
                    (
                        str(book.id),
                        str(owner_id),
                        book.title,
                        book.author,
                        book.current_page_index,
                        int(book.is_local),
                        book.created_at,
                        book.updated_at,
                    ),
                )
                self._write_pages(cur, book)
                self.connection.commit()
            except sqlite3.Error as e:
                self._rollback()
                raise StorageError(f"Failed to save book '{book.title}': {e}") from e

        logger.info("Saved book '%s' (%d pages)", book.title, book.total_pages)
        return self._require_book(book.id)

    def get_book(self, book_id: uuid.UUID) -> Optional[Book]:
        with self._lock:
            try:
                cur = self.connection.cursor()
                cur.execute(
                    """
                    SELECT id, title, author, current_page_index, is_local, created_at, updated_at
                    FROM books
                    WHERE id = ?
                    """,
                    (str(book_id),),
                )
                row = cur.fetchone()
                return self._row_to_book(row) if row else None
            except sqlite3.Error as e:
                raise StorageError(f"Failed to retrieve book {book_id}: {e}") from e

    def get_books(self, owner_id: uuid.UUID) -> List[Book]:
        with self._lock:
            try:
                cur = self.connection.cursor()
                cur.execute(
                    """
                    SELECT id, title, author, current_page_index, is_local, created_at, updated_at
                    FROM books
                    WHERE owner_id = ?
                    ORDER BY updated_at DESC, rowid DESC
                    """,
                    (str(owner_id),),
                )
                return [self._row_to_book(row) for row in cur.fetchall()]
            except sqlite3.Error as e:
                raise StorageError(f"Failed to retrieve books: {e}") from e

    def update_book(self, book: Book) -> Book:
        with self._lock:
            try:
                cur = self.connection.cursor()
                cur.execute(
                    """
                    UPDATE books
                    SET title = ?, author = ?, current_page_index = ?, is_local = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        book.title,
                        book.author,
                        book.current_page_index,
                        int(book.is_local),
                        book.updated_at,
                        str(book.id),
                    ),
                )
                if cur.rowcount == 0:
                    raise BookNotFoundError(f"Book not found: {book.id}")
                self._write_pages(cur, book)
                self.connection.commit()
            except sqlite3.Error as e:
                self._rollback()
                raise StorageError(f"Failed to update book '{book.title}': {e}") from e

        return self._require_book(book.id)

    def delete_book(self, book_id: uuid.UUID) -> None:
        """Remove a book with its pages and segments (does NOT delete image files)."""
        with self._lock:
            try:
                cur = self.connection.cursor()
                cur.execute("DELETE FROM books WHERE id = ?", (str(book_id),))
                if cur.rowcount == 0:
                    raise BookNotFoundError(f"Book not found: {book_id}")
                self.connection.commit()
            except sqlite3.Error as e:
                self._rollback()
                raise StorageError(f"Failed to delete book: {e}") from e

    def search_books(self, query: str, owner_id: uuid.UUID) -> List[Book]:
        needle = query.strip().lower()
        return [
            book
            for book in self.get_books(owner_id)
            if needle in book.title.lower() or needle in (book.author or "").lower()
        ]

    def update_reading_progress(self, book_id: uuid.UUID, page_index: int) -> None:
        with self._lock:
            book = self._require_book(book_id)
            if not book.go_to_page(page_index):
                raise StorageError(f"Page index {page_index} out of range for book {book_id}")
            try:
                cur = self.connection.cursor()
                cur.execute(
                    """
                    UPDATE books
                    SET current_page_index = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (book.current_page_index, book.updated_at, str(book_id)),
                )
                self.connection.commit()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to update reading progress: {e}") from e

    def reorder_pages(self, book_id: uuid.UUID, new_order: Sequence[uuid.UUID]) -> Book:
        with self._lock:
            book = self._require_book(book_id)
            book.reorder_pages(new_order)
            try:
                cur = self.connection.cursor()
                cur.executemany(
                    "UPDATE book_pages SET page_number = ? WHERE id = ?",
                    [(page.page_number, str(page.id)) for page in book.pages],
                )
                cur.execute(
                    "UPDATE books SET current_page_index = ?, updated_at = ? WHERE id = ?",
                    (book.current_page_index, book.updated_at, str(book_id)),
                )
                self.connection.commit()
            except sqlite3.Error as e:
                self._rollback()
                raise StorageError(f"Failed to reorder pages: {e}") from e
            return book

    def _rollback(self) -> None:
        try:
            self.connection.rollback()
        except sqlite3.Error as e:
            logger.warning("Rollback failed: %s", e)

    def _require_book(self, book_id: uuid.UUID) -> Book:
        book = self.get_book(book_id)
        if book is None:
            raise BookNotFoundError(f"Book not found: {book_id}")
        return book

    def _write_pages(self, cur: sqlite3.Cursor, book: Book) -> None:
        """Replace all stored pages (and their segments) of ``book``."""
        cur.execute("DELETE FROM book_pages WHERE book_id = ?", (str(book.id),))
        for page in book.pages:
            cur.execute(
                """
                INSERT INTO book_pages (id, book_id, page_number, image_path, extracted_text, words_marked)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(page.id),
                    str(book.id),
                    page.page_number,
                    str(page.image_path),
                    page.extracted_text,
                    json.dumps(sorted(page.words_marked), ensure_ascii=False),
                ),
            )
            cur.executemany(
                """
                INSERT INTO word_segments (
                    page_id, position, word, start_offset, end_offset, pinyin, is_marked, entry_key
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        str(page.id),
                        position,
                        segment.word,
                        segment.start,
                        segment.end,
                        segment.pinyin,
                        int(segment.is_marked),
                        segment.definition.simplified if segment.definition else None,
                    )
                    for position, segment in enumerate(page.words)
                ],
            )

    def _row_to_book(self, row: sqlite3.Row) -> Book:
        book_id = uuid.UUID(row["id"])
        return Book(
            id=book_id,
            title=row["title"],
            author=row["author"],
            pages=self._load_pages(book_id),
            current_page_index=row["current_page_index"],
            is_local=bool(row["is_local"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _load_pages(self, book_id: uuid.UUID) -> List[BookPage]:
        cur = self.connection.cursor()
        cur.execute(
            """
            SELECT id, page_number, image_path, extracted_text, words_marked
            FROM book_pages
            WHERE book_id = ?
            ORDER BY page_number ASC
            """,
            (str(book_id),),
        )
        pages = []
        for row in cur.fetchall():
            page_id = uuid.UUID(row["id"])
            pages.append(
                BookPage(
                    id=page_id,
                    book_id=book_id,
                    page_number=row["page_number"],
                    image_path=Path(row["image_path"]),
                    extracted_text=row["extracted_text"],
                    words=self._load_segments(page_id),
                    words_marked=set(json.loads(row["words_marked"] or "[]")),
                )
            )
        return pages

    def _load_segments(self, page_id: uuid.UUID) -> List[WordSegment]:
        cur = self.connection.cursor()
        cur.execute(
            """
            SELECT word, start_offset, end_offset, pinyin, is_marked, entry_key
            FROM word_segments
            WHERE page_id = ?
            ORDER BY position ASC
            """,
            (str(page_id),),
        )
        return [
            WordSegment(
                word=row["word"],
                start=row["start_offset"],
                end=row["end_offset"],
                pinyin=row["pinyin"],
                is_marked=bool(row["is_marked"]),
                definition=self._resolve_entry(row["entry_key"]),
            )
            for row in cur.fetchall()
        ]

    def _resolve_entry(self, entry_key: Optional[str]):
        if not entry_key or self._dictionary is None:
            return None
        try:
            return self._dictionary.lookup(entry_key)
        except DictionaryNotLoadedError:
            return None
