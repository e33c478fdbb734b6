"""Database models for the trainer."""
from sqlalchemy import Column, DateTime, Integer, String

from miyalingo.models.base import Base, TimestampMixin


class WordProgressRecord(Base, TimestampMixin):
    """Stored progress of a single word."""

    __tablename__ = "word_progress"

    word = Column(String, primary_key=True)
    status = Column(String, nullable=False)  # new, learning, reviewing, mastered
    streak = Column(Integer, nullable=False, default=0)
    last_reviewed = Column(DateTime(timezone=True), nullable=False)
    next_review = Column(DateTime(timezone=True), nullable=False, index=True)
