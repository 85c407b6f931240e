"""OCR Service - abstraction over the text recognition engine."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Union

import pytesseract
from PIL import Image

from hanzi_reader.core import ExtractedText, OCRError, TextBlock

logger = logging.getLogger(__name__)

ImageRef = Union[str, Path]


class OCRService(ABC):
    """
    Abstract service for extracting text from a page photograph.

    Implementations (e.g., TesseractOCRService) wrap a concrete engine and
    raise OCRError on failure.
    """

    @abstractmethod
    def extract_text(self, image: ImageRef) -> ExtractedText:
        """
        Recognize the text on one page image.

        Args:
            image: Path to the page image.

        Returns:
            ExtractedText with the raw text and text blocks in reading order.

        Raises:
            OCRError: if recognition fails.
        """
        pass


class TesseractOCRService(OCRService):
    """OCR via Tesseract; expects the ``chi_sim`` traineddata to be installed."""

    def __init__(self, lang: str = "chi_sim", min_confidence: float = 0.0):
        self.lang = lang
        self.min_confidence = min_confidence

    def extract_text(self, image: ImageRef) -> ExtractedText:
        path = Path(image)
        if not path.exists():
            raise OCRError(f"Image not found: {path}", recoverable=False)

        try:
            with Image.open(path) as img:
                data = pytesseract.image_to_data(img, lang=self.lang, output_type=pytesseract.Output.DICT)
        except (OSError, pytesseract.TesseractError) as e:
            raise OCRError(f"Tesseract failed on {path.name}: {e}") from e

        blocks = sort_blocks_by_reading_order(self._build_blocks(data))
        text = "\n".join(block.text for block in blocks)
        logger.debug("Recognized %d blocks (%d chars) in %s", len(blocks), len(text), path.name)
        return ExtractedText(text=text, blocks=blocks)

    def _build_blocks(self, data: Dict[str, list]) -> List[TextBlock]:
        """Group word-level Tesseract rows into one TextBlock per text line."""
        lines: Dict[tuple, dict] = {}
        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            conf = float(data["conf"][i])
            if not word or conf < self.min_confidence:
                continue

            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            x, y = data["left"][i], data["top"][i]
            w, h = data["width"][i], data["height"][i]
            line = lines.get(key)
            if line is None:
                lines[key] = {"words": [word], "x0": x, "y0": y, "x1": x + w, "y1": y + h, "conf": [conf]}
                continue
            line["words"].append(word)
            line["conf"].append(conf)
            line["x0"], line["y0"] = min(line["x0"], x), min(line["y0"], y)
            line["x1"], line["y1"] = max(line["x1"], x + w), max(line["y1"], y + h)

        return [
            TextBlock(
                # Chinese has no inter-word spaces
                text="".join(line["words"]),
                x=line["x0"],
                y=line["y0"],
                width=line["x1"] - line["x0"],
                height=line["y1"] - line["y0"],
                confidence=sum(line["conf"]) / len(line["conf"]),
            )
            for line in lines.values()
        ]


def sort_blocks_by_reading_order(blocks: List[TextBlock]) -> List[TextBlock]:
    """Sort blocks top-to-bottom, then left-to-right within a row.

    Blocks whose vertical centres are within half the shorter block's height
    of each other count as the same row.
    """
    rows: List[List[TextBlock]] = []
    for block in sorted(blocks, key=lambda b: b.y):
        centre = block.y + block.height / 2
        for row in rows:
            anchor = row[0]
            tolerance = min(anchor.height, block.height) / 2
            if abs((anchor.y + anchor.height / 2) - centre) <= tolerance:
                row.append(block)
                break
        else:
            rows.append([block])
    return [block for row in rows for block in sorted(row, key=lambda b: b.x)]
