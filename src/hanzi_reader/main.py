"""Composition root: wires the ingestion engine from settings."""

from typing import Optional

from PySide6.QtCore import QThreadPool

from hanzi_reader.io import BookRepository, DatabaseManager, InMemoryBookRepository, SqliteBookRepository
from hanzi_reader.logging_config import configure_logging
from hanzi_reader.services import (
    DictionaryService,
    PageIngestionPipeline,
    SegmentationService,
    SettingsManager,
    TesseractOCRService,
)


def build_pipeline(
    settings: SettingsManager,
    thread_pool: Optional[QThreadPool] = None,
    repository: Optional[BookRepository] = None,
) -> PageIngestionPipeline:
    """
    Instantiate and wire all engine components.

    This is the only place that knows how to construct the concrete services.
    The application shell owns the Qt application and subscribes to each
    job's signals.
    """
    configure_logging(settings.get_log_level())

    # 1. Dictionary (loaded lazily by the first job)
    dictionary = DictionaryService()
    hsk_path = settings.get_hsk_path()
    if hsk_path is not None:
        dictionary.load_hsk_levels(hsk_path)

    # 2. Storage
    if repository is None:
        db_path = settings.get_db_path()
        if db_path is not None:
            db = DatabaseManager(db_path)
            db.ensure_schema()
            repository = SqliteBookRepository(db.connection, dictionary=dictionary)
        else:
            repository = InMemoryBookRepository()

    # 3. Pipeline
    return PageIngestionPipeline(
        ocr_service=TesseractOCRService(lang=settings.get_ocr_lang()),
        segmentation_service=SegmentationService(dictionary, settings.get_max_word_length()),
        dictionary_service=dictionary,
        book_repository=repository,
        dictionary_source=settings.get_cedict_path(),
        thread_pool=thread_pool,
    )
