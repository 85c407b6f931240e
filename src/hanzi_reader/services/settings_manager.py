"""Settings Manager - Handles dictionary, storage and pipeline configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MAX_WORD_LENGTH = 8
DEFAULT_OCR_LANG = "chi_sim"
DEFAULT_LOG_LEVEL = "INFO"


class SettingsManager:
    """
    Manages application settings.

    Reads values from the environment, loading a .env file in the project
    root first.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_cedict_path(self) -> Optional[Path]:
        """Path to the CC-CEDICT ``.u8`` file."""
        return self._get_path("HANZI_READER_CEDICT_PATH")

    def get_hsk_path(self) -> Optional[Path]:
        """Path to the HSK level JSON file, if configured."""
        return self._get_path("HANZI_READER_HSK_PATH")

    def get_db_path(self) -> Optional[Path]:
        return self._get_path("HANZI_READER_DB_PATH")

    def get_max_word_length(self) -> int:
        raw = os.getenv("HANZI_READER_MAX_WORD_LENGTH", "").strip()
        if not raw:
            return DEFAULT_MAX_WORD_LENGTH
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"HANZI_READER_MAX_WORD_LENGTH must be an integer, got {raw!r}")
        if value < 1:
            raise ValueError(f"HANZI_READER_MAX_WORD_LENGTH must be >= 1, got {value}")
        return value

    def get_ocr_lang(self) -> str:
        return os.getenv("HANZI_READER_OCR_LANG", "").strip() or DEFAULT_OCR_LANG

    def get_log_level(self) -> str:
        return (os.getenv("HANZI_READER_LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL).upper()

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    def _get_path(self, name: str) -> Optional[Path]:
        value = os.getenv(name)
        if not value or not value.strip():
            return None
        path = Path(value.strip()).expanduser()
        return path if path.is_absolute() else self._project_root / path
