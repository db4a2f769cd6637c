from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from korean_work.domain.composition_quiz import QuizWithChoices, generate_quiz_set
from korean_work.domain.enums import LearnMode, QuizLevel
from korean_work.domain.jamo_drill import generate_level1_choices, level1_order
from korean_work.domain.models import JamoQuizData, SessionResult
from korean_work.services.session_store import SessionStore
from korean_work.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizQuestion:
    prompt: str
    answer: str
    choices: tuple[str, ...]
    question_text: str


class JamoQuizSession:
    """Progression state for the three-level jamo game.

    Level 1 walks the static jamo drill in shuffled order; levels 2 and 3 draw a
    fresh composition quiz set whenever the level is (re)selected. Scores reset on
    every level change.
    """

    def __init__(
        self,
        drill: JamoQuizData,
        *,
        settings: SettingsStore | None = None,
        store: SessionStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._drill = drill
        self._settings = settings or SettingsStore()
        self._store = store
        self._rng = rng

        self._level = QuizLevel.LETTER
        self._order: list[int] = []
        self._quizzes: list[QuizWithChoices] = []
        self._current: QuizQuestion | None = None
        self._outcome: bool | None = None
        self.position = 0
        self.correct = 0
        self.wrong = 0

        self.set_level(QuizLevel.LETTER)

    @property
    def level(self) -> QuizLevel:
        return self._level

    @property
    def total(self) -> int:
        if self._level == QuizLevel.LETTER:
            return len(self._order)
        return len(self._quizzes)

    @property
    def finished(self) -> bool:
        return self.position >= self.total

    def set_level(self, level: QuizLevel | int, count: int | None = None) -> None:
        """Switch level (or restart the current one) with a fresh question order.

        `count` overrides the configured set size for this run only.
        """
        self._level = QuizLevel(int(level))
        self.position = 0
        self.correct = 0
        self.wrong = 0

        if count is None or count <= 0:
            count = self._settings.quiz_count(self._level)

        if self._level == QuizLevel.LETTER:
            self._order = level1_order(self._drill, self._rng)[:count]
            self._quizzes = []
        else:
            self._quizzes = generate_quiz_set(
                self._level,
                count,
                rng=self._rng,
                max_attempts=count * self._settings.max_attempts_factor(),
            )
            self._order = []
        self._current = self._build_current()
        self._outcome = None
        logger.debug("Jamo session level=%d total=%d", int(self._level), self.total)

    def _build_current(self) -> QuizQuestion | None:
        if self.finished:
            return None

        if self._level == QuizLevel.LETTER:
            item = self._drill.items[self._order[self.position]]
            return QuizQuestion(
                prompt=item.glyph,
                answer=item.answer,
                choices=tuple(generate_level1_choices(item, self._drill, self._rng)),
                question_text="What is this letter called?",
            )

        quiz = self._quizzes[self.position]
        return QuizQuestion(
            prompt=quiz.prompt,
            answer=quiz.answer,
            choices=quiz.choices,
            question_text="What syllable is this?",
        )

    def current(self) -> QuizQuestion | None:
        return self._current

    @property
    def answered(self) -> bool:
        return self._outcome is not None

    def answer(self, choice: str) -> bool:
        """Score `choice` against the current question.

        Only the first answer to a question counts; later calls return that result.
        """
        if self._current is None:
            raise RuntimeError("No current question; the session is finished")
        if self._outcome is not None:
            return self._outcome
        ok = choice == self._current.answer
        if ok:
            self.correct += 1
        else:
            self.wrong += 1
        self._outcome = ok
        return ok

    def advance(self) -> None:
        self.position += 1
        self._current = self._build_current()
        self._outcome = None

    def finish(self) -> SessionResult:
        result = SessionResult(last_mode=LearnMode.JAMO, correct=self.correct, wrong=self.wrong)
        if self._store is not None:
            self._store.save_result(result)
        return result
