"""I/O layer - Data access for book persistence."""

from .book_repository import BookRepository
from .database_manager import DatabaseManager
from .in_memory_book_repository import InMemoryBookRepository
from .sqlite_book_repository import SqliteBookRepository

__all__ = ["BookRepository", "DatabaseManager", "InMemoryBookRepository", "SqliteBookRepository"]
