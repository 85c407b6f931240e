"""Segmentation Service - greedy longest-match word breaking for Chinese text."""

import logging
from typing import List, Optional, Sequence, Union

from hanzi_reader.core import DictionaryEntry, SegmentationError, WordSegment
from hanzi_reader.services.dictionary_service import DictionaryService
from hanzi_reader.services.text_processing.pinyin import to_marks

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORD_LENGTH = 8


class SegmentationService:
    """
    Splits page text into dictionary words.

    At each position the longest dictionary word starting there wins; when no
    word matches, the single character becomes its own segment. The result
    always covers the whole text with contiguous, non-overlapping ranges.
    """

    def __init__(self, dictionary: DictionaryService, max_word_length: int = DEFAULT_MAX_WORD_LENGTH):
        if dictionary is None:
            raise ValueError("DictionaryService must not be None")
        if max_word_length < 1:
            raise ValueError(f"max_word_length must be >= 1, got {max_word_length}")
        self._dictionary = dictionary
        self._max_word_length = max_word_length

    @property
    def max_word_length(self) -> int:
        return self._max_word_length

    def segment(self, text: Union[str, bytes]) -> List[WordSegment]:
        """
        Segment text into word segments.

        Args:
            text: Page text. Bytes are decoded as UTF-8, replacing invalid sequences.

        Returns:
            Ordered WordSegments; empty list for empty text.

        Raises:
            DictionaryNotLoadedError: if the dictionary has not been loaded.
            SegmentationError: if the produced segments do not cover the text.
        """
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        if not text:
            return []

        cap = min(self._max_word_length, max(self._dictionary.max_word_length, 1))
        segments: List[WordSegment] = []
        position = 0
        length = len(text)

        while position < length:
            match = self._dictionary.longest_prefix_match(text, position, cap)
            if match is not None:
                entry, size = match
            else:
                entry, size = None, 1
            segments.append(self._build_segment(text, position, position + size, entry))
            position += size

        verify_cover(segments, text)
        logger.debug("Segmented %d characters into %d segments", length, len(segments))
        return segments

    def segment_words(self, text: Union[str, bytes]) -> List[str]:
        """Segment text and return just the word strings."""
        return [segment.word for segment in self.segment(text)]

    @staticmethod
    def _build_segment(text: str, start: int, end: int, entry: Optional[DictionaryEntry]) -> WordSegment:
        return WordSegment(
            word=text[start:end],
            start=start,
            end=end,
            pinyin=to_marks(entry.pinyin) if entry else None,
            definition=entry,
        )


def verify_cover(segments: Sequence[WordSegment], text: str) -> None:
    """
    Check that segments tile ``text`` exactly.

    Raises:
        SegmentationError: on a gap, overlap, empty segment, or word/text mismatch.
    """
    expected_start = 0
    for segment in segments:
        if segment.start != expected_start or segment.end <= segment.start:
            raise SegmentationError(
                f"Segment '{segment.word}' [{segment.start}, {segment.end}) breaks cover at offset {expected_start}"
            )
        if text[segment.start:segment.end] != segment.word:
            raise SegmentationError(
                f"Segment '{segment.word}' does not match text at [{segment.start}, {segment.end})"
            )
        expected_start = segment.end
    if expected_start != len(text):
        raise SegmentationError(f"Segments end at {expected_start}, text length is {len(text)}")
