"""Store owning the progress map and the active training session."""
import logging
import random
import threading
from datetime import UTC, datetime
from typing import Callable, Dict, List, Optional, Sequence

from miyalingo import monitoring
from miyalingo.config import settings
from miyalingo.models.progress import (
    ProgressStatus,
    QueueItem,
    QueueKind,
    Session,
    WordProgress,
    ensure_utc,
)
from miyalingo.services import scheduler, session_service
from miyalingo.services.repositories import InMemoryProgressRepository, ProgressMap, ProgressRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class SchedulerStore:
    """Progress map with persistence, queue building and session state.

    The repository, random source and clock are injected so callers can
    swap storage and tests can freeze time and randomness.
    """

    def __init__(
        self,
        repository: Optional[ProgressRepository] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository or InMemoryProgressRepository()
        self.rng = rng or random.Random()
        self.clock = clock
        self._lock = threading.Lock()
        self._progress: ProgressMap = self._load()
        self._session: Optional[Session] = None
        monitoring.tracked_words.set(len(self._progress))

    def _load(self) -> ProgressMap:
        """Load the stored map, starting empty if it cannot be read."""
        try:
            return self.repository.load()
        except Exception as e:
            monitoring.repository_errors.labels(operation="load").inc()
            logger.error(f"Error loading progress, starting with an empty map: {e}")
            return {}

    def _now(self, now: Optional[datetime]) -> datetime:
        """Current time or ``now``, as an aware UTC datetime."""
        return ensure_utc(now or self.clock()).astimezone(UTC)

    def _snapshot(self, catalog: Optional[Sequence[str]] = None) -> ProgressMap:
        """Copy of the progress map, limited to ``catalog`` words if given."""
        with self._lock:
            if catalog is None:
                return dict(self._progress)
            words = set(catalog)
            return {word: p for word, p in self._progress.items() if word in words}

    def _save(self) -> None:
        """Save a snapshot, logging instead of raising on failure."""
        try:
            self.repository.save(self._progress)
        except Exception as e:
            monitoring.repository_errors.labels(operation="save").inc()
            logger.error(f"Error saving progress for {len(self._progress)} words: {e}")

    @property
    def all_progress(self) -> Dict[str, WordProgress]:
        """Copy of the progress map."""
        return self._snapshot()

    def get_progress(self, word: str) -> Optional[WordProgress]:
        """Get the progress record of a word, if it was ever answered."""
        return self._progress.get(word)

    def get_word_status(self, word: str) -> ProgressStatus:
        """Get the status of a word, NEW if it was never answered."""
        progress = self._progress.get(word)
        return progress.status if progress else ProgressStatus.NEW

    def get_streak(self, word: str) -> int:
        """Get the current streak of a word."""
        progress = self._progress.get(word)
        return progress.streak if progress else 0

    def record_answer(self, word: str, correct: bool, now: Optional[datetime] = None) -> WordProgress:
        """Apply an answer to the word's progress and save the snapshot."""
        now = self._now(now)
        with self._lock:
            previous = self._progress.get(word)
            updated = scheduler.apply_answer(previous, word, correct, now)
            self._progress[word] = updated
            self._save()

        monitoring.answers_recorded.labels(result="correct" if correct else "incorrect").inc()
        monitoring.tracked_words.set(len(self._progress))
        if updated.status == ProgressStatus.MASTERED and (
            previous is None or previous.status != ProgressStatus.MASTERED
        ):
            monitoring.words_mastered.inc()
            logger.info(f"Word {word} mastered")

        logger.debug(
            f"Answer for {word}: correct={correct}, streak={updated.streak}, "
            f"status={updated.status.value}, next review {updated.next_review.isoformat()}"
        )
        return updated

    def build_review_queue(
        self,
        catalog: Sequence[str],
        new_words_per_day: Optional[int] = None,
        now: Optional[datetime] = None,
        catalog_only: bool = False,
    ) -> List[QueueItem]:
        """Build today's queue from the current progress map.

        With ``catalog_only`` due words outside ``catalog`` are left out,
        e.g. when studying a single JLPT level.
        """
        if new_words_per_day is None:
            new_words_per_day = settings.learning.new_words_per_day
        progress = self._snapshot(catalog if catalog_only else None)
        return scheduler.build_review_queue(catalog, new_words_per_day, progress, self._now(now))

    def count_due(
        self, catalog: Sequence[str], now: Optional[datetime] = None, catalog_only: bool = False
    ) -> int:
        """Number of review items in today's queue."""
        queue = self.build_review_queue(catalog, now=now, catalog_only=catalog_only)
        return sum(1 for item in queue if item.kind == QueueKind.REVIEW)

    def status_counts(self, catalog: Sequence[str]) -> Dict[ProgressStatus, int]:
        """Count catalog words per status."""
        progress = self._snapshot(catalog)
        counts = {status: 0 for status in ProgressStatus}
        for word in catalog:
            counts[progress[word].status if word in progress else ProgressStatus.NEW] += 1
        return counts

    @property
    def active_session(self) -> Optional[Session]:
        """The current session, if one was started."""
        return self._session

    def start_session(
        self, catalog: Sequence[str], now: Optional[datetime] = None, catalog_only: bool = False
    ) -> Session:
        """Start a new session, replacing any active one."""
        self._session = session_service.start_session(
            catalog,
            self._snapshot(catalog if catalog_only else None),
            self._now(now),
            self.rng,
            new_words_per_day=settings.learning.new_words_per_day,
        )
        monitoring.sessions_started.inc()
        monitoring.session_queue_size.observe(self._session.total)
        return self._session

    def advance(self) -> Optional[Session]:
        """Resolve the front item of the active session."""
        if self._session is None:
            return None
        self._session = session_service.advance(self._session)
        return self._session

    def requeue_incorrect(self) -> Optional[Session]:
        """Move the front item of the active session further back."""
        if self._session is None:
            return None
        if self._session.queue:
            monitoring.requeued_answers.inc()
        self._session = session_service.requeue_incorrect(self._session, self.rng)
        return self._session

    def reset_progress(self) -> None:
        """Forget all progress and drop the active session."""
        with self._lock:
            self._progress = {}
            self._session = None
            self._save()
        monitoring.progress_resets.inc()
        monitoring.tracked_words.set(0)
        logger.info("Progress reset")
