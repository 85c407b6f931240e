"""Unit tests for SettingsManager."""

import os

import pytest

from hanzi_reader.services import SettingsManager

ENV_VARS = [
    "HANZI_READER_CEDICT_PATH",
    "HANZI_READER_HSK_PATH",
    "HANZI_READER_DB_PATH",
    "HANZI_READER_MAX_WORD_LENGTH",
    "HANZI_READER_OCR_LANG",
    "HANZI_READER_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove HANZI_READER_* variables and restore them after the test.

    setenv first so monkeypatch records the original value even when the
    variable is unset; values loaded from .env files are undone as well.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


@pytest.fixture
def make_settings(tmp_path, clean_env):
    def _make(env_text: str = "") -> SettingsManager:
        (tmp_path / ".env").write_text(env_text, encoding="utf-8")
        return SettingsManager(project_root=tmp_path)

    return _make


class TestDefaults:
    """Values when nothing is configured."""

    def test_defaults(self, make_settings):
        settings = make_settings()

        assert settings.get_cedict_path() is None
        assert settings.get_hsk_path() is None
        assert settings.get_db_path() is None
        assert settings.get_max_word_length() == 8
        assert settings.get_ocr_lang() == "chi_sim"
        assert settings.get_log_level() == "INFO"


class TestEnvFile:
    """Values read from the project's .env file."""

    def test_relative_paths_resolve_against_project_root(self, make_settings, tmp_path):
        settings = make_settings("HANZI_READER_CEDICT_PATH=data/cedict_ts.u8\n")
        assert settings.get_cedict_path() == tmp_path / "data" / "cedict_ts.u8"

    def test_absolute_paths_are_kept(self, make_settings, tmp_path):
        db = tmp_path / "books.db"
        settings = make_settings(f"HANZI_READER_DB_PATH={db}\n")
        assert settings.get_db_path() == db

    def test_scalar_values(self, make_settings):
        settings = make_settings(
            "HANZI_READER_MAX_WORD_LENGTH=4\n"
            "HANZI_READER_OCR_LANG=chi_tra\n"
            "HANZI_READER_LOG_LEVEL=debug\n"
        )

        assert settings.get_max_word_length() == 4
        assert settings.get_ocr_lang() == "chi_tra"
        assert settings.get_log_level() == "DEBUG"

    def test_environment_overrides_env_file(self, make_settings, monkeypatch):
        monkeypatch.setenv("HANZI_READER_OCR_LANG", "chi_sim_vert")
        settings = make_settings("HANZI_READER_OCR_LANG=chi_tra\n")
        assert settings.get_ocr_lang() == "chi_sim_vert"

    def test_reload_env_picks_up_changes(self, make_settings, tmp_path):
        settings = make_settings("HANZI_READER_OCR_LANG=chi_tra\n")
        (tmp_path / ".env").write_text("HANZI_READER_OCR_LANG=eng\n", encoding="utf-8")

        settings.reload_env()

        assert os.getenv("HANZI_READER_OCR_LANG") == "eng"
        assert settings.get_ocr_lang() == "eng"


class TestMaxWordLength:
    """Validation of HANZI_READER_MAX_WORD_LENGTH."""

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_values_raise(self, make_settings, value):
        settings = make_settings(f"HANZI_READER_MAX_WORD_LENGTH={value}\n")
        with pytest.raises(ValueError):
            settings.get_max_word_length()
