"""
Integration tests for the upload workflow.

Exercises the real dictionary, segmentation and SQLite storage together:
upload pages -> saved book -> mark a difficult word -> add pages -> reorder,
with only OCR replaced by a fake.
"""

import uuid
from pathlib import Path

import pytest
from PySide6.QtCore import QThreadPool

from hanzi_reader.core import MarkedWord
from hanzi_reader.io import DatabaseManager, SqliteBookRepository
from hanzi_reader.main import build_pipeline
from hanzi_reader.services import (
    DictionaryService,
    JobState,
    PageIngestionPipeline,
    SegmentationService,
    SettingsManager,
    WordMarkerService,
    extract_context_snippet,
)

pytestmark = pytest.mark.integration

TEXTS = {
    "001.jpg": "第一章 你好\n他们在学习中文。",
    "002.jpg": "中华人民共和国很大。",
    "003.jpg": "绿色的树。",
}


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "books.db"


@pytest.fixture
def dictionary():
    return DictionaryService()


@pytest.fixture
def repository(db_path, dictionary):
    db = DatabaseManager(db_path)
    db.ensure_schema()
    yield SqliteBookRepository(db.connection, dictionary=dictionary)
    db.close()


@pytest.fixture
def pipeline(qt_app, fake_ocr, dictionary, repository, cedict_file):
    fake_ocr.texts = dict(TEXTS)
    return PageIngestionPipeline(
        ocr_service=fake_ocr,
        segmentation_service=SegmentationService(dictionary),
        dictionary_service=dictionary,
        book_repository=repository,
        dictionary_source=cedict_file,
    )


def upload(name):
    return Path("/uploads") / name


def test_upload_mark_and_extend_book(pipeline, repository, db_path, dictionary):
    owner = uuid.uuid4()

    # 1. Upload two pages
    handle = pipeline.start_job([upload("001.jpg"), upload("002.jpg")], owner_id=owner)
    assert handle.snapshot().state is JobState.COMPLETED
    book = repository.get_books(owner)[0]
    assert book.title == "第一章 你好"
    assert book.pages[0].words[-2].word == "中文"

    # 2. Mark a difficult word and persist the mark
    page = book.pages[0]
    page.mark_word("学习")
    repository.update_book(book)
    markers = WordMarkerService()
    marked = markers.mark_word(
        MarkedWord(
            user_id=owner,
            word="学习",
            context_snippet=extract_context_snippet(page.extracted_text, "学习", radius=3),
            book_id=book.id,
            page_number=page.page_number,
        )
    )
    assert marked.context_snippet == "他们在学习中文。"
    assert markers.get_marked_words_for_book(book.id, owner)[0].word == "学习"

    # 3. Add a page to the existing book
    pipeline.start_job([upload("003.jpg")], book=repository.get_book(book.id), owner_id=owner)
    extended = repository.get_book(book.id)
    assert [p.page_number for p in extended.pages] == [1, 2, 3]
    assert extended.pages[2].words[0].definition.simplified == "绿"

    # 4. Reorder, then reopen the database with a fresh repository
    ids = [p.id for p in extended.pages]
    pipeline.reorder_pages(book.id, [ids[2], ids[0], ids[1]])

    db = DatabaseManager(db_path)
    reopened = SqliteBookRepository(db.connection, dictionary=dictionary).get_book(book.id)
    db.close()
    assert [p.id for p in reopened.pages] == [ids[2], ids[0], ids[1]]
    assert [p.page_number for p in reopened.pages] == [1, 2, 3]
    assert reopened.pages[1].words_marked == {"学习"}


def test_job_on_thread_pool(pipeline, repository):
    pool = QThreadPool()
    pipeline._thread_pool = pool
    owner = uuid.uuid4()

    handle = pipeline.start_job([upload("001.jpg"), upload("002.jpg"), upload("003.jpg")], owner_id=owner)

    assert handle.wait(10)
    pool.waitForDone(10000)
    snapshot = handle.snapshot()
    assert snapshot.state is JobState.COMPLETED
    assert snapshot.progress == 1.0
    assert repository.get_books(owner)[0].total_pages == 3


class TestBuildPipeline:
    """Composition root wiring from settings."""

    @pytest.fixture
    def settings(self, tmp_path, monkeypatch, cedict_file):
        for name in ("HANZI_READER_HSK_PATH", "HANZI_READER_MAX_WORD_LENGTH", "HANZI_READER_OCR_LANG"):
            monkeypatch.setenv(name, "")
        monkeypatch.setenv("HANZI_READER_CEDICT_PATH", str(cedict_file))
        monkeypatch.setenv("HANZI_READER_DB_PATH", str(tmp_path / "app.db"))
        monkeypatch.setenv("HANZI_READER_LOG_LEVEL", "WARNING")
        return SettingsManager(project_root=tmp_path)

    def test_sqlite_repository_when_db_configured(self, settings, tmp_path):
        pipeline = build_pipeline(settings)

        assert isinstance(pipeline._repository, SqliteBookRepository)
        assert (tmp_path / "app.db").exists()

    def test_in_memory_repository_when_no_db(self, settings, monkeypatch, fake_ocr):
        monkeypatch.setenv("HANZI_READER_DB_PATH", "")
        pipeline = build_pipeline(settings)
        pipeline._ocr = fake_ocr

        handle = pipeline.start_job([upload("001.jpg")])

        assert handle.snapshot().state is JobState.COMPLETED
        assert pipeline._dictionary.is_loaded
