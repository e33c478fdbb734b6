"""Models for word progress and training sessions."""
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ProgressStatus(Enum):
    """Learning status of a word."""
    NEW = "new"  # Never answered
    LEARNING = "learning"  # Last answer was incorrect
    REVIEWING = "reviewing"  # Some correct answers in a row
    MASTERED = "mastered"  # Streak reached the mastery threshold


class QueueKind(Enum):
    """Why a word was put into a queue."""
    NEW = "new"
    REVIEW = "review"


def ensure_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


@dataclass
class WordProgress:
    """Progress of a single word, created on its first answer."""
    word: str
    status: ProgressStatus
    streak: int
    last_reviewed: datetime
    next_review: datetime

    def is_due(self, now: datetime) -> bool:
        """Check if the word should be shown for review at ``now``."""
        return self.status != ProgressStatus.MASTERED and self.next_review <= now

    def to_data(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "status": self.status.value,
            "lastReviewed": self.last_reviewed.isoformat(),
            "nextReview": self.next_review.isoformat(),
            "streak": self.streak,
        }

    @classmethod
    def from_data(cls, word: str, data: Dict[str, Any]) -> "WordProgress":
        """Create a WordProgress instance from stored data."""
        return cls(
            word=word,
            status=ProgressStatus(data["status"]),
            streak=int(data["streak"]),
            last_reviewed=parse_timestamp(data["lastReviewed"]),
            next_review=parse_timestamp(data["nextReview"]),
        )


@dataclass(frozen=True)
class QueueItem:
    """A scheduling decision: show ``word`` as a new or review item."""
    word: str
    kind: QueueKind


@dataclass(frozen=True)
class Session:
    """One bounded run through a queue. Never persisted."""
    queue: Tuple[QueueItem, ...] = ()
    total: int = 0
    completed: Tuple[QueueItem, ...] = field(default=())

    @property
    def current(self) -> Optional[QueueItem]:
        """Item at the front of the queue, if any."""
        return self.queue[0] if self.queue else None

    @property
    def is_finished(self) -> bool:
        """Check if a non-empty session has been worked through."""
        return self.total > 0 and not self.queue

    @property
    def progress(self) -> float:
        """Fraction of the session already resolved."""
        if self.total == 0:
            return 0.0
        return len(self.completed) / self.total
