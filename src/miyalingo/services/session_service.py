"""Training session lifecycle: start, advance and requeue."""
import logging
import math
import random
from dataclasses import replace
from datetime import datetime
from typing import Mapping, Sequence

from miyalingo.config import NEW_WORDS_PER_DAY
from miyalingo.models.progress import Session, WordProgress
from miyalingo.services.scheduler import build_review_queue

logger = logging.getLogger(__name__)


def start_session(
    catalog: Sequence[str],
    all_progress: Mapping[str, WordProgress],
    now: datetime,
    rng: random.Random,
    new_words_per_day: int = NEW_WORDS_PER_DAY,
) -> Session:
    """Create a session from today's queue in random order."""
    queue = build_review_queue(catalog, new_words_per_day, all_progress, now)
    rng.shuffle(queue)
    logger.info(f"Started session with {len(queue)} items")
    return Session(queue=tuple(queue), total=len(queue), completed=())


def advance(session: Session) -> Session:
    """Move the front item to the completed list."""
    if not session.queue:
        return session
    item = session.queue[0]
    return replace(
        session,
        queue=session.queue[1:],
        completed=session.completed + (item,),
    )


def requeue_incorrect(session: Session, rng: random.Random) -> Session:
    """Take the front item and put it back somewhere in the second half.

    With nothing left behind it, the item is simply dropped from the queue.
    """
    if not session.queue:
        return session

    item, remaining = session.queue[0], list(session.queue[1:])
    n = len(remaining)
    if n <= 0:
        return replace(session, queue=())

    position = rng.randint(math.ceil(n / 2), n)
    remaining.insert(position, item)
    logger.debug(f"Requeued {item.word} at position {position} of {n + 1}")
    return replace(session, queue=tuple(remaining))
