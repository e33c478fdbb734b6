"""Spaced-repetition scheduling: intervals, answer transitions and daily queues.

All functions here are pure. They never read the wall clock; the caller
passes ``now`` explicitly.
"""
import logging
from datetime import datetime, timedelta
from typing import List, Mapping, Optional, Sequence

from miyalingo.config import settings
from miyalingo.models.progress import ProgressStatus, QueueItem, QueueKind, WordProgress

logger = logging.getLogger(__name__)


def review_interval_hours(streak: int) -> int:
    """Hours until the next review for a given streak.

    Streaks covered by the interval table use it directly. Beyond the table
    the last interval doubles for every extra correct answer.
    """
    intervals = settings.learning.review_intervals_hours
    streak = max(0, streak)
    last = len(intervals) - 1
    if streak <= last:
        return intervals[streak]
    return intervals[last] * 2 ** (streak - last)


def compute_next_review(streak: int, now: datetime) -> datetime:
    """Calculate the next review time based on the streak."""
    return now + timedelta(hours=review_interval_hours(streak))


def status_for_streak(streak: int) -> ProgressStatus:
    """Derive the progress status from a streak."""
    if streak >= settings.learning.mastered_streak:
        return ProgressStatus.MASTERED
    if streak > 0:
        return ProgressStatus.REVIEWING
    return ProgressStatus.LEARNING


def apply_answer(
    previous: Optional[WordProgress], word: str, correct: bool, now: datetime
) -> WordProgress:
    """Return the progress record of ``word`` after one answer.

    A missing record is treated as a fresh one with a zero streak. Any
    incorrect answer drops the streak back to 0.
    """
    if previous is None:
        previous = WordProgress(
            word=word,
            status=ProgressStatus.NEW,
            streak=0,
            last_reviewed=now,
            next_review=now,
        )

    streak = previous.streak + 1 if correct else 0
    return WordProgress(
        word=word,
        status=status_for_streak(streak),
        streak=streak,
        last_reviewed=now,
        next_review=compute_next_review(streak, now),
    )


def build_review_queue(
    catalog: Sequence[str],
    new_words_per_day: int,
    all_progress: Mapping[str, WordProgress],
    now: datetime,
    cap: Optional[int] = None,
) -> List[QueueItem]:
    """Build a bounded queue of due review words followed by new words.

    Review items always come first. Mastered words are never due. New words
    are catalog words without a progress record, in catalog order.
    """
    if cap is None:
        cap = settings.learning.queue_cap

    due = [
        QueueItem(word, QueueKind.REVIEW)
        for word, progress in all_progress.items()
        if progress.is_due(now)
    ]

    new_limit = min(max(0, new_words_per_day), cap)
    new = []
    for word in catalog:
        if len(new) >= new_limit:
            break
        if word not in all_progress:
            new.append(QueueItem(word, QueueKind.NEW))

    review_budget = max(0, cap - len(new))
    logger.debug(
        f"Queue: {len(due)} due, {len(new)} new, review budget {review_budget}"
    )
    return due[:review_budget] + new
