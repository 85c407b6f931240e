"""OCR output entities - page text and its text blocks."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TextBlock:
    """Represents a single recognized text area with its bounding box."""

    text: str
    x: float
    y: float
    width: float
    height: float
    confidence: float = 0.0

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is within this block's bounding box."""
        return (self.x <= x <= self.x + self.width and
                self.y <= y <= self.y + self.height)


@dataclass
class ExtractedText:
    """Raw OCR result for one image; blocks are in reading order."""

    text: str
    blocks: List[TextBlock] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()
