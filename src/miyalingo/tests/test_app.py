"""Tests for the console trainer."""
import logging
import random
from datetime import datetime, timedelta
from typing import List

import pytest

from miyalingo.__main__ import main, parse_args
from miyalingo.app import Trainer
from miyalingo.config import settings
from miyalingo.models.catalog import VocabularyWord
from miyalingo.models.progress import ProgressStatus
from miyalingo.services.catalog_service import CatalogService
from miyalingo.services.progress_store import SchedulerStore
from miyalingo.services.quiz_service import QuestionType, QuizService
from miyalingo.services.repositories import InMemoryProgressRepository


class FixedTypeQuiz(QuizService):
    """Quiz that always asks in one direction."""

    def make_question(self, word, question_type=None):
        return super().make_question(word, QuestionType.JP_TO_RU)


@pytest.fixture
def catalog() -> CatalogService:
    return CatalogService([
        VocabularyWord("猫", "ねこ", "кошка", "noun", "N5"),
        VocabularyWord("犬", "いぬ", "собака", "noun", "N5"),
        VocabularyWord("鳥", "とり", "птица", "noun", "N5"),
    ])


@pytest.fixture
def store(now: datetime) -> SchedulerStore:
    return SchedulerStore(InMemoryProgressRepository(), rng=random.Random(5), clock=lambda: now)


def make_trainer(store: SchedulerStore, catalog: CatalogService, answer_correctly: List[bool]):
    """Create a trainer whose replies follow ``answer_correctly`` per question."""
    output: List[str] = []
    quiz = FixedTypeQuiz(catalog, random.Random(6))
    state = {"question": None}
    replies = iter(answer_correctly)

    original = quiz.make_question

    def make_question(word, question_type=None):
        state["question"] = original(word, question_type)
        return state["question"]

    quiz.make_question = make_question

    def input_fn(prompt: str) -> str:
        question = state["question"]
        try:
            correct = next(replies)
        except StopIteration:
            return "q"
        if correct:
            chosen = question.answer
        else:
            chosen = next(o for o in question.options if o != question.answer)
        return str(question.options.index(chosen) + 1)

    trainer = Trainer(store, catalog, quiz=quiz, input_fn=input_fn, output_fn=output.append)
    return trainer, output


def test_run_full_session(store: SchedulerStore, catalog: CatalogService) -> None:
    """Test a session with one mistake."""
    trainer, output = make_trainer(store, catalog, [True, False, True, True])

    correct = trainer.run()

    assert correct == 3
    assert "Session complete!" in output
    assert store.active_session.is_finished
    statuses = [store.get_word_status(w) for w in catalog.keys()]
    assert statuses.count(ProgressStatus.REVIEWING) == 3


def test_quit_keeps_progress(store: SchedulerStore, catalog: CatalogService) -> None:
    """Test stopping a session early."""
    trainer, output = make_trainer(store, catalog, [True])

    assert trainer.run() == 1

    assert "Session stopped, progress is saved." in output
    assert sum(store.get_streak(w) for w in catalog.keys()) == 1
    assert len(store.active_session.queue) == 2


def test_nothing_to_study(store: SchedulerStore, catalog: CatalogService) -> None:
    """Test a session when every word waits for a later review."""
    for word in catalog.keys():
        store.record_answer(word, True)
    trainer, output = make_trainer(store, catalog, [])

    assert trainer.run() == 0
    assert output == ["Nothing to study right now. Come back later!"]


def test_invalid_reply_is_asked_again(store: SchedulerStore, catalog: CatalogService) -> None:
    """Test that garbage input does not count as an answer."""
    output: List[str] = []
    replies = iter(["7", "abc", "q"])
    trainer = Trainer(store, catalog, input_fn=lambda prompt: next(replies), output_fn=output.append)

    assert trainer.run() == 0
    assert output.count("Enter a number from 1 to 3, or q to quit") == 2
    assert store.all_progress == {}


@pytest.fixture
def cli_environment(monkeypatch):
    """Use in-memory progress and keep the root logger intact."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(settings.storage, "backend", "memory")
    monkeypatch.setattr(settings.logging, "dir", None)
    monkeypatch.setattr(settings.monitoring, "enabled", False)
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_main_stats(cli_environment, capsys) -> None:
    """Test the progress summary command."""
    assert main(["--stats", "--level", "n5"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["new:", str(len(CatalogService.load().by_level("N5")))]
    assert lines[-1].split() == ["due:", "0"]


def test_main_reset(cli_environment, capsys) -> None:
    """Test the reset command."""
    assert main(["--reset"]) == 0
    assert "Progress reset." in capsys.readouterr().out


def test_trainer_studies_only_its_catalog(store: SchedulerStore, catalog: CatalogService, now: datetime) -> None:
    """Test that due words of other levels neither enter nor fill the session."""
    store.record_answer("水", False, now=now - timedelta(days=1))
    trainer, output = make_trainer(store, catalog, [True, True, True])

    assert trainer.run() == 3

    session = store.active_session
    assert session.total == 3
    assert {item.word for item in session.completed} == set(catalog.keys())
    assert store.get_streak("水") == 0


@pytest.mark.parametrize("level", ["N9", "5", "n"])
def test_main_rejects_unknown_level(cli_environment, capsys, level: str) -> None:
    """Test that an unknown JLPT level is a usage error, not a crash."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--stats", "--level", level])

    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_parse_args_normalizes_level() -> None:
    """Test that the level is accepted in any case."""
    assert parse_args(["--level", "n4"]).level == "N4"
    assert parse_args([]).level is None
