"""
Misspelling index: compile-time spelling support
------------------------------------------------

Exports:
  - MisspellingIndex.misspellings(word)   # known misspellings of a correctly spelled word
  - MisspellingIndex.alternation(word)    # regex group matching the word or its misspellings
  - MisspellingIndex.load_yaml(path)      # merge a `word: [misspellings...]` YAML mapping
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import yaml

from common.logging_config import LOGGER_NAME
from constants.common_mistakes import COMMON_MISTAKES

logger = logging.getLogger(LOGGER_NAME)


class SpellingSource(Protocol):
    def alternation(self, word: str) -> Optional[str]: ...


class MisspellingIndex:
    def __init__(self, table: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._table: Dict[str, Tuple[str, ...]] = {}
        self.update(COMMON_MISTAKES if table is None else table)

    def update(self, table: Mapping[str, Iterable[str]]) -> None:
        for word, mistakes in table.items():
            key = word.lower()
            merged: List[str] = list(self._table.get(key, ()))
            for m in mistakes:
                m = m.lower()
                if m != key and m not in merged:
                    merged.append(m)
            self._table[key] = tuple(merged)

    def load_yaml(self, path: str | Path) -> None:
        """Merge a YAML mapping of `word: [misspellings...]` into the index."""
        with Path(path).open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of word -> [misspellings], got {type(data).__name__}")
        self.update({str(k): [str(v) for v in (vs or [])] for k, vs in data.items()})
        logger.debug("Loaded %d misspelling entries from %s", len(data), path)

    def misspellings(self, word: str) -> Tuple[str, ...]:
        return self._table.get(word.lower(), ())

    def alternation(self, word: str) -> Optional[str]:
        mistakes = self.misspellings(word)
        if not mistakes:
            return None
        options = [word] + list(mistakes)
        return "(?:" + "|".join(re.escape(o) for o in options) + ")"

    def __len__(self) -> int:
        return len(self._table)


class NoSpelling:
    """Spelling source that never broadens anything."""

    def alternation(self, word: str) -> Optional[str]:
        return None
