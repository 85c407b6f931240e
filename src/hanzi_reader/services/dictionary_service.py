"""Dictionary Service - CC-CEDICT backed word index for lookups and segmentation."""

import json
import logging
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from hanzi_reader.core import DictionaryEntry, DictionaryLoadError, DictionaryNotLoadedError, HSKLevel

logger = logging.getLogger(__name__)

DictionarySource = Union[str, Path, Iterable[str]]

# TRAD SIMP [pin1 yin1] /gloss 1/gloss 2/
CEDICT_LINE_RE = re.compile(r"^(\S+)\s+(\S+)\s+\[([^\]]*)\]\s+/(.+)/\s*$")
HSK_LEVEL_RE = re.compile(r"^(?:new|old)-(\d+)$")


@dataclass(frozen=True)
class DictionaryIndex:
    """Immutable snapshot of a parsed dictionary.

    Attributes:
        entries: Simplified form -> entry.
        traditional_to_simplified: Traditional form -> simplified form, only
            where the two differ.
        max_word_length: Length of the longest headword.
        skipped_lines: Number of malformed lines ignored while parsing.
    """

    entries: Mapping[str, DictionaryEntry]
    traditional_to_simplified: Mapping[str, str] = field(default_factory=dict)
    max_word_length: int = 0
    skipped_lines: int = 0

    def get(self, word: str) -> Optional[DictionaryEntry]:
        entry = self.entries.get(word)
        if entry is not None:
            return entry
        simplified = self.traditional_to_simplified.get(word)
        return self.entries.get(simplified) if simplified is not None else None

    def __len__(self) -> int:
        return len(self.entries)


class DictionaryService:
    """
    Read-only CEDICT dictionary shared by the segmentation engine and lookups.

    Construct once at startup, call ``load`` (directly or through the
    ingestion pipeline), and pass the instance to consumers. ``load`` is
    serialised by a lock and publishes the finished index with a single
    assignment; lookups read that reference without locking.
    """

    def __init__(self) -> None:
        self._index: Optional[DictionaryIndex] = None
        self._hsk_levels: Dict[str, HSKLevel] = {}
        self._load_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def entry_count(self) -> int:
        index = self._index
        return len(index) if index is not None else 0

    @property
    def max_word_length(self) -> int:
        return self._require_index().max_word_length

    def load(self, source: DictionarySource) -> DictionaryIndex:
        """
        Parse a CEDICT source into the in-memory index.

        Calling ``load`` again before ``unload`` returns the cached index
        without reading ``source``.

        Args:
            source: Path to a CEDICT ``.u8`` file, or an iterable of lines.

        Returns:
            The loaded DictionaryIndex.

        Raises:
            DictionaryLoadError: if the source is missing, unreadable, or
                yields no valid entries.
        """
        index = self._index
        if index is not None:
            return index

        with self._load_lock:
            if self._index is not None:
                return self._index

            index = self._parse(source)
            if not index.entries:
                raise DictionaryLoadError(f"Dictionary source contained no valid entries: {_describe(source)}")

            self._index = index
            logger.info(
                "Loaded %d dictionary entries (%d malformed lines skipped, longest word %d)",
                len(index),
                index.skipped_lines,
                index.max_word_length,
            )
            return index

    def load_hsk_levels(self, source: Union[str, Path]) -> int:
        """
        Load HSK levels from a JSON list of ``{"simplified", "level"}`` records.

        Levels are attached to entries parsed by subsequent ``load`` calls;
        a word listed under several levels gets the highest one.

        Returns:
            Number of words with a level.

        Raises:
            DictionaryLoadError: if the file is missing or not valid JSON.
        """
        path = Path(source)
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DictionaryLoadError(f"Failed to read HSK levels from {path}: {e}") from e

        levels: Dict[str, HSKLevel] = {}
        for record in records:
            if not isinstance(record, dict):
                continue
            simplified = record.get("simplified")
            level = _highest_hsk_level(record.get("level") or [])
            if simplified and level is not None:
                levels[simplified] = level

        self._hsk_levels = levels
        logger.info("Loaded HSK levels for %d words", len(levels))
        return len(levels)

    def unload(self) -> None:
        with self._load_lock:
            self._index = None

    def lookup(self, word: str) -> Optional[DictionaryEntry]:
        """
        Exact lookup by simplified form, falling back to traditional form.

        Raises:
            DictionaryNotLoadedError: if no dictionary has been loaded.
        """
        index = self._require_index()
        query = word.strip()
        if not query:
            return None
        return index.get(query)

    def longest_prefix_match(
        self, text: str, start: int = 0, max_length: Optional[int] = None
    ) -> Optional[Tuple[DictionaryEntry, int]]:
        """
        Find the longest dictionary word that starts at ``text[start]``.

        Args:
            text: Text to scan.
            start: Character offset to match from.
            max_length: Upper bound on candidate length (defaults to the
                longest headword).

        Returns:
            (entry, length) of the longest match, or None.

        Raises:
            DictionaryNotLoadedError: if no dictionary has been loaded.
        """
        index = self._require_index()
        limit = index.max_word_length if max_length is None else min(max_length, index.max_word_length)
        limit = min(limit, len(text) - start)

        for size in range(limit, 0, -1):
            entry = index.get(text[start:start + size])
            if entry is not None:
                return entry, size
        return None

    def search_prefix(self, prefix: str, limit: int = 20) -> List[DictionaryEntry]:
        """Entries whose simplified form starts with ``prefix``, shortest first."""
        index = self._require_index()
        if not prefix:
            return []
        matches = [entry for key, entry in index.entries.items() if key.startswith(prefix)]
        matches.sort(key=lambda entry: (len(entry.simplified), entry.simplified))
        return matches[:limit]

    def words_by_hsk_level(self, level: HSKLevel) -> List[DictionaryEntry]:
        index = self._require_index()
        return [entry for entry in index.entries.values() if entry.frequency == level]

    def _require_index(self) -> DictionaryIndex:
        index = self._index
        if index is None:
            raise DictionaryNotLoadedError("Dictionary data not loaded")
        return index

    def _parse(self, source: DictionarySource) -> DictionaryIndex:
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return self._parse_lines(f)
            except (OSError, UnicodeDecodeError) as e:
                raise DictionaryLoadError(f"Failed to read dictionary file {path}: {e}") from e
        if source is None:
            raise DictionaryLoadError("No dictionary source configured")
        return self._parse_lines(source)

    def _parse_lines(self, lines: Iterable[str]) -> DictionaryIndex:
        entries: Dict[str, DictionaryEntry] = {}
        traditional: Dict[str, str] = {}
        skipped = 0

        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            parsed = parse_cedict_line(line)
            if parsed is None:
                skipped += 1
                logger.debug("Skipping malformed dictionary line %d: %r", line_no, line[:80])
                continue

            trad, simp, pinyin, definitions = parsed
            existing = entries.get(simp)
            if existing is None:
                entries[simp] = DictionaryEntry(
                    simplified=simp,
                    traditional=trad,
                    pinyin=pinyin,
                    definitions=definitions,
                    frequency=self._hsk_levels.get(simp),
                )
            else:
                merged = existing.definitions + tuple(d for d in definitions if d not in existing.definitions)
                entries[simp] = DictionaryEntry(
                    simplified=existing.simplified,
                    traditional=existing.traditional,
                    pinyin=existing.pinyin,
                    definitions=merged,
                    frequency=existing.frequency,
                )

            if trad != simp:
                traditional.setdefault(trad, simp)

        max_len = max((len(word) for word in entries), default=0)
        max_len = max(max_len, max((len(word) for word in traditional), default=0))
        return DictionaryIndex(
            entries=entries,
            traditional_to_simplified=traditional,
            max_word_length=max_len,
            skipped_lines=skipped,
        )


def parse_cedict_line(line: str) -> Optional[Tuple[str, str, str, Tuple[str, ...]]]:
    """
    Parse one CEDICT line.

    Glosses are split on "/" and on ";".

    Returns:
        (traditional, simplified, pinyin, definitions), or None when the line
        does not have the expected shape or has no glosses.
    """
    match = CEDICT_LINE_RE.match(line.strip())
    if not match:
        return None

    trad, simp, pinyin, glosses_raw = match.groups()
    pinyin = " ".join(pinyin.split())
    if not pinyin:
        return None

    definitions: List[str] = []
    for gloss in glosses_raw.split("/"):
        for part in gloss.split(";"):
            part = part.strip()
            if part and part not in definitions:
                definitions.append(part)
    if not definitions:
        return None

    return trad, simp, pinyin, tuple(definitions)


def _highest_hsk_level(levels: Iterable[str]) -> Optional[HSKLevel]:
    found: List[HSKLevel] = []
    for level in levels:
        match = HSK_LEVEL_RE.match(str(level))
        if not match:
            continue
        number = int(match.group(1))
        if 1 <= number <= 6:
            found.append(HSKLevel(number))
    return max(found) if found else None


def _describe(source: DictionarySource) -> str:
    return str(source) if isinstance(source, (str, Path)) else type(source).__name__
