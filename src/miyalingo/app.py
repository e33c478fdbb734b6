"""Console training application."""
import logging
from typing import Callable, Optional

from miyalingo.models.progress import QueueKind
from miyalingo.services.catalog_service import CatalogService
from miyalingo.services.progress_store import SchedulerStore
from miyalingo.services.quiz_service import QuizService


class Trainer:
    """Runs one training session in a terminal."""

    def __init__(
        self,
        store: SchedulerStore,
        catalog: CatalogService,
        quiz: Optional[QuizService] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.store = store
        self.catalog = catalog
        self.quiz = quiz or QuizService(catalog, store.rng)
        self.input = input_fn
        self.output = output_fn
        self.logger = logging.getLogger(__name__)

    def _ask(self, question) -> Optional[str]:
        """Show a question and read the chosen option, None to quit."""
        self.output("")
        self.output(question.prompt)
        for number, option in enumerate(question.options, start=1):
            self.output(f"  {number}. {option}")

        while True:
            reply = self.input("> ").strip().lower()
            if reply in ("q", "quit"):
                return None
            if reply.isdigit() and 1 <= int(reply) <= len(question.options):
                return question.options[int(reply) - 1]
            self.output(f"Enter a number from 1 to {len(question.options)}, or q to quit")

    def run(self) -> int:
        """Run a session until it is finished or the user quits.

        Returns the number of correct answers.
        """
        keys = self.catalog.keys()
        session = self.store.start_session(keys, catalog_only=True)
        if not session.total:
            self.output("Nothing to study right now. Come back later!")
            return 0

        due = sum(1 for item in session.queue if item.kind == QueueKind.REVIEW)
        self.output(f"Session: {session.total} words ({due} to review)")

        correct_answers = 0
        while session.queue:
            item = session.current
            word = self.catalog.get(item.word)

            question = self.quiz.make_question(word)
            selected = self._ask(question)
            if selected is None:
                self.output("Session stopped, progress is saved.")
                break

            correct = self.quiz.check_answer(question, selected)
            progress = self.store.record_answer(word.word, correct)
            if correct:
                correct_answers += 1
                self.output(f"Correct! Streak: {progress.streak}")
                session = self.store.advance()
            else:
                self.output(f"Wrong. {word.word} ({word.reading}) = {word.translation}")
                session = self.store.requeue_incorrect()

            self.output(f"Progress: {len(session.completed)}/{session.total}")

        if session.is_finished:
            self.output("Session complete!")
        self.logger.info(f"Session ended with {correct_answers} correct answers")
        return correct_answers
