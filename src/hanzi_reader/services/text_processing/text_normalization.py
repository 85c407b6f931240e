"""Text normalization utilities for titles and context snippets."""

import re

UNTITLED_BOOK = "Untitled Book"


def normalize_text(text: str) -> str:
    """
    Normalize OCR text for display snippets and keys.

    Rules:
    - Trim leading and trailing whitespace
    - Collapse runs of whitespace (spaces, tabs, newlines) to single spaces
    - Preserve Chinese characters, punctuation, and emoji as-is

    Args:
        text: Original text to normalize.

    Returns:
        Normalized text string.
    """
    text = text.strip()
    text = re.sub(r'\s+', ' ', text)
    return text


def generate_title(text: str) -> str:
    """Derive a book title from the first page's text.

    Uses the first non-empty line when it is 4-49 characters long, else the
    first sentence (ending in "。") when 6-49 characters long.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if lines and 3 < len(lines[0]) < 50:
        return lines[0]

    sentences = [s.strip() for s in text.split("。") if s.strip()]
    if sentences and 5 < len(sentences[0]) < 50:
        return sentences[0] + "。"

    return UNTITLED_BOOK


def extract_context_snippet(text: str, word: str, radius: int = 10) -> str:
    """Return ``word`` with up to ``radius`` characters either side, normalized."""
    idx = text.find(word)
    if idx == -1:
        return normalize_text(word)
    start = max(idx - radius, 0)
    end = min(idx + len(word) + radius, len(text))
    return normalize_text(text[start:end])
