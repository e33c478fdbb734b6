"""Models for vocabulary catalog entries."""
from dataclasses import dataclass

JLPT_LEVELS = ("N5", "N4", "N3", "N2", "N1")


@dataclass(frozen=True)
class VocabularyWord:
    """A catalog entry. Only ``word`` matters to the scheduler."""
    word: str
    reading: str
    translation: str
    pos: str  # part of speech, e.g. "noun", "verb"
    jlpt: str
