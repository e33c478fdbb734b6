"""Progress repositories: where the progress map survives between runs."""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from sqlalchemy.orm import sessionmaker

from miyalingo.config import settings
from miyalingo.models.base import SessionLocal, init_db
from miyalingo.models.models import WordProgressRecord
from miyalingo.models.progress import ProgressStatus, WordProgress, ensure_utc

logger = logging.getLogger(__name__)

ProgressMap = Dict[str, WordProgress]


class ProgressLoadError(Exception):
    """Raised when a stored progress snapshot cannot be read at all."""


class ProgressRepository(ABC):
    """Loads and saves whole snapshots of the progress map."""

    @abstractmethod
    def load(self) -> ProgressMap:
        """Load the stored progress map."""

    @abstractmethod
    def save(self, progress: ProgressMap) -> None:
        """Replace the stored progress map with ``progress``."""


class InMemoryProgressRepository(ProgressRepository):
    """Keeps snapshots in memory only."""

    def __init__(self, initial: Optional[ProgressMap] = None):
        self._data = {word: p.to_data() for word, p in (initial or {}).items()}

    def load(self) -> ProgressMap:
        return {word: WordProgress.from_data(word, data) for word, data in self._data.items()}

    def save(self, progress: ProgressMap) -> None:
        self._data = {word: p.to_data() for word, p in progress.items()}


class JsonFileProgressRepository(ProgressRepository):
    """Stores the progress map as a JSON object keyed by word."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or settings.paths.progress_file)

    def load(self) -> ProgressMap:
        if not self.path.exists():
            logger.info(f"No progress file at {self.path}, starting fresh")
            return {}

        try:
            with self.path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProgressLoadError(f"Cannot read progress file {self.path}: {e}") from e
        if not isinstance(raw, dict):
            raise ProgressLoadError(
                f"Progress file {self.path} holds {type(raw).__name__}, expected an object"
            )

        progress = {}
        for word, data in raw.items():
            try:
                progress[word] = WordProgress.from_data(word, data)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Skipping unreadable progress record for {word!r}: {e}")
        logger.info(f"Loaded progress for {len(progress)} words from {self.path}")
        return progress

    def save(self, progress: ProgressMap) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {word: p.to_data() for word, p in progress.items()}

        # Write to a temp file first so a crash never leaves half a snapshot
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".progress-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise
        logger.debug(f"Saved progress for {len(payload)} words to {self.path}")


class SqlAlchemyProgressRepository(ProgressRepository):
    """Stores progress records in the ``word_progress`` table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def load(self) -> ProgressMap:
        progress = {}
        with self.session_factory() as db:
            for record in db.query(WordProgressRecord).all():
                try:
                    progress[record.word] = self._to_progress(record)
                except ValueError as e:
                    logger.error(f"Skipping unreadable progress record for {record.word!r}: {e}")
        logger.info(f"Loaded progress for {len(progress)} words from database")
        return progress

    def save(self, progress: ProgressMap) -> None:
        with self.session_factory() as db:
            existing = {r.word: r for r in db.query(WordProgressRecord).all()}

            for word, record in existing.items():
                if word not in progress:
                    db.delete(record)

            for word, p in progress.items():
                record = existing.get(word)
                if record is None:
                    record = WordProgressRecord(word=word)
                    db.add(record)
                record.status = p.status.value
                record.streak = p.streak
                record.last_reviewed = p.last_reviewed
                record.next_review = p.next_review

            db.commit()

    @staticmethod
    def _to_progress(record: WordProgressRecord) -> WordProgress:
        """Convert a database row, restoring UTC on naive timestamps."""
        return WordProgress(
            word=record.word,
            status=ProgressStatus(record.status),
            streak=record.streak,
            last_reviewed=ensure_utc(record.last_reviewed),
            next_review=ensure_utc(record.next_review),
        )


def create_repository(backend: Optional[str] = None) -> ProgressRepository:
    """Create the repository configured by PROGRESS_BACKEND."""
    backend = backend or settings.storage.backend
    if backend == "json":
        return JsonFileProgressRepository()
    if backend == "database":
        init_db()
        return SqlAlchemyProgressRepository()
    if backend == "memory":
        return InMemoryProgressRepository()
    raise ValueError(f"Unknown progress backend: {backend}")
