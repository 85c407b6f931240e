"""SQLite connection and schema for book persistence."""

import sqlite3
from pathlib import Path
from typing import Union

from hanzi_reader.core import StorageError


class DatabaseManager:
    """Owns the SQLite connection and the books/pages/segments schema."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        try:
            # Pipeline workers save from QThreadPool threads; writes are serialised by the repository lock.
            self.connection = sqlite3.connect(str(self.db_path), check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open database {db_path}: {e}") from e
        self.connection.row_factory = sqlite3.Row
        self.connection.execute("PRAGMA foreign_keys = ON;")

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        cur = self.connection.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS books (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                title TEXT NOT NULL,
                author TEXT,
                current_page_index INTEGER NOT NULL DEFAULT 0,
                is_local INTEGER NOT NULL DEFAULT 1,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS book_pages (
                id TEXT PRIMARY KEY,
                book_id TEXT NOT NULL,
                page_number INTEGER NOT NULL,
                image_path TEXT NOT NULL,
                extracted_text TEXT NOT NULL DEFAULT '',
                words_marked TEXT NOT NULL DEFAULT '[]',

                FOREIGN KEY(book_id) REFERENCES books(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS word_segments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                page_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                word TEXT NOT NULL,
                start_offset INTEGER NOT NULL,
                end_offset INTEGER NOT NULL,
                pinyin TEXT,
                is_marked INTEGER NOT NULL DEFAULT 0,
                entry_key TEXT,

                FOREIGN KEY(page_id) REFERENCES book_pages(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_books_owner
            ON books(owner_id);
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_book_pages_book
            ON book_pages(book_id, page_number);
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_word_segments_page
            ON word_segments(page_id, position);
            """
        )
        self.connection.commit()

    def close(self) -> None:
        self.connection.close()
