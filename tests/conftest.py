"""Shared fixtures: a small CEDICT sample and Qt bootstrapping."""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

import pytest
from PySide6.QtCore import QCoreApplication

from hanzi_reader.core import ExtractedText, OCRError
from hanzi_reader.services import DictionaryService, OCRService, SegmentationService

CEDICT_SAMPLE = """\
# CC-CEDICT sample
#! version=1
中文 中文 [Zhong1 wen2] /Chinese language/
中 中 [zhong1] /within/among/in/middle/center/
文 文 [wen2] /language/culture/writing/
好 好 [hao3] /good/well/
你好 你好 [ni3 hao3] /hello/hi/
你 你 [ni3] /you (informal)/
學習 学习 [xue2 xi2] /to learn/to study/
學 学 [xue2] /to learn; to study/
習 习 [xi2] /to practice/
中華人民共和國 中华人民共和国 [Zhong1 hua2 Ren2 min2 Gong4 he2 guo2] /People's Republic of China/
人 人 [ren2] /person/people/
綠 绿 [lu:4] /green/
他 他 [ta1] /he or him/
們 们 [men5] /plural marker for pronouns/
他們 他们 [ta1 men5] /they/
好 好 [hao4] /to be fond of/
this line is not cedict
壞 坏 [huai4] //
"""


def ensure_qt_app():
    if QCoreApplication.instance() is None:
        QCoreApplication([])


@pytest.fixture
def cedict_file(tmp_path) -> Path:
    path = tmp_path / "cedict_ts.u8"
    path.write_text(CEDICT_SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def dictionary(cedict_file) -> DictionaryService:
    """A DictionaryService loaded with the sample CEDICT file."""
    service = DictionaryService()
    service.load(cedict_file)
    return service


@pytest.fixture
def segmentation(dictionary) -> SegmentationService:
    return SegmentationService(dictionary)


class FakeOCRService(OCRService):
    """OCR double keyed by image file name.

    ``on_call`` runs after the call is recorded and before the result is
    returned, so tests can cancel a job while its OCR is "in flight".
    """

    def __init__(self, texts: Optional[Dict[str, str]] = None, default_text: str = "中文好"):
        self.texts = texts or {}
        self.default_text = default_text
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []
        self.on_call: Optional[Callable[[str], None]] = None

    def extract_text(self, image) -> ExtractedText:
        name = Path(image).name
        self.calls.append(name)
        if self.on_call is not None:
            self.on_call(name)
        if name in self.fail_on:
            raise OCRError(f"unreadable image {name}")
        return ExtractedText(text=self.texts.get(name, self.default_text))


@pytest.fixture
def fake_ocr() -> FakeOCRService:
    return FakeOCRService()


@pytest.fixture
def qt_app():
    ensure_qt_app()
    return QCoreApplication.instance()
