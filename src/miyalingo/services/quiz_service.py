"""Multiple-choice questions for vocabulary training."""
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from miyalingo.models.catalog import VocabularyWord
from miyalingo.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

OPTION_COUNT = 4  # answer plus three distractors


class QuestionType(Enum):
    """Direction of a question."""
    JP_TO_RU = "jp_to_ru"  # show the word, pick its translation
    RU_TO_JP = "ru_to_jp"  # show the translation, pick the word


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question."""
    word: VocabularyWord
    question_type: QuestionType
    prompt: str
    answer: str
    options: List[str]


class QuizService:
    """Builds questions from a catalog and checks answers."""

    def __init__(self, catalog: CatalogService, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    @staticmethod
    def _side(word: VocabularyWord, question_type: QuestionType) -> str:
        if question_type == QuestionType.JP_TO_RU:
            return word.translation
        return word.word

    def make_question(
        self, word: VocabularyWord, question_type: Optional[QuestionType] = None
    ) -> Question:
        """Create a question for ``word`` with shuffled options."""
        if question_type is None:
            question_type = self.rng.choice(list(QuestionType))

        answer = self._side(word, question_type)
        prompt = word.word if question_type == QuestionType.JP_TO_RU else word.translation

        # Distinct distractors; two words may share a translation
        candidates = sorted({
            self._side(other, question_type)
            for other in self.catalog
            if other.word != word.word
        } - {answer})
        distractors = self.rng.sample(candidates, min(len(candidates), OPTION_COUNT - 1))

        options = distractors + [answer]
        self.rng.shuffle(options)
        logger.debug(f"Question for {word.word} ({question_type.value}): {options}")
        return Question(
            word=word,
            question_type=question_type,
            prompt=prompt,
            answer=answer,
            options=options,
        )

    @staticmethod
    def check_answer(question: Question, selected: str) -> bool:
        """Check if the selected option is the right one."""
        return selected == question.answer
