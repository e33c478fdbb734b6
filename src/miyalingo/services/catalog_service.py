"""Service for loading and querying the vocabulary catalog."""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from miyalingo.config import settings
from miyalingo.models.catalog import JLPT_LEVELS, VocabularyWord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("word", "reading", "translation", "pos", "jlpt")


class CatalogError(ValueError):
    """Raised when a vocabulary catalog is malformed."""


class CatalogService:
    """Ordered, validated collection of vocabulary words."""

    def __init__(self, words: Iterable[VocabularyWord] = ()):
        self._words: List[VocabularyWord] = []
        self._by_key: Dict[str, VocabularyWord] = {}
        for word in words:
            self._add(word)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "CatalogService":
        """Load a catalog from a JSON array of word objects."""
        path = Path(path or settings.paths.catalog_file)
        logger.info(f"Loading vocabulary catalog from {path}")
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise CatalogError(f"Catalog {path} must contain a JSON array")

        catalog = cls(cls._parse_entry(entry, index) for index, entry in enumerate(raw))
        logger.info(f"Loaded {len(catalog)} words")
        return catalog

    @staticmethod
    def _parse_entry(entry: dict, index: int) -> VocabularyWord:
        if not isinstance(entry, dict):
            raise CatalogError(f"Entry {index} is not an object")
        missing = [name for name in REQUIRED_FIELDS if not entry.get(name)]
        if missing:
            raise CatalogError(f"Entry {index} is missing fields: {', '.join(missing)}")
        if entry["jlpt"] not in JLPT_LEVELS:
            raise CatalogError(f"Entry {index} has unknown JLPT level {entry['jlpt']!r}")
        return VocabularyWord(**{name: entry[name] for name in REQUIRED_FIELDS})

    def _add(self, word: VocabularyWord) -> None:
        if word.word in self._by_key:
            raise CatalogError(f"Duplicate catalog word: {word.word!r}")
        self._words.append(word)
        self._by_key[word.word] = word

    def keys(self) -> List[str]:
        """Word keys in catalog order."""
        return [w.word for w in self._words]

    def get(self, word: str) -> Optional[VocabularyWord]:
        """Get a catalog entry by its word key."""
        return self._by_key.get(word)

    def by_level(self, level: str) -> "CatalogService":
        """Sub-catalog of words from one JLPT level."""
        if level not in JLPT_LEVELS:
            raise CatalogError(f"Unknown JLPT level: {level!r}")
        return CatalogService(w for w in self._words if w.jlpt == level)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[VocabularyWord]:
        return iter(self._words)

    def __contains__(self, word: str) -> bool:
        return word in self._by_key
