from __future__ import annotations

"""Four-way multiple-choice sessions.

One session type drives the listening quiz, the Korean reading quiz and the
image quiz; the `*_questions` builders turn each bank into `ChoiceQuestion`s.
"""

import logging
import random
from dataclasses import dataclass
from typing import Final, Sequence

from korean_work.domain.answer_key import shuffle_choices
from korean_work.domain.enums import LearnMode
from korean_work.domain.models import ImageQuizItem, KoreanQuizItem, SessionResult, SpeechEntry
from korean_work.domain.shuffle import shuffle
from korean_work.services.session_store import SessionStore

logger = logging.getLogger(__name__)

TABLE_QUIZ_SIZE: Final[int] = 10
SPEECH_QUIZ_SIZE: Final[int] = 15
DEFAULT_CHOICES: Final[int] = 4


@dataclass(frozen=True)
class ChoiceQuestion:
    prompt: str
    choices: tuple[str, ...]
    # 0-based; None when the source row has no usable answer key
    answer_index: int | None
    hint: str = ""
    explanation: str = ""
    media: str | None = None

    @property
    def answer(self) -> str | None:
        if self.answer_index is None or not 0 <= self.answer_index < len(self.choices):
            return None
        return self.choices[self.answer_index]


class ChoiceQuizSession:
    """Walk a fixed list of questions; the first answer to each question counts."""

    def __init__(
        self,
        questions: Sequence[ChoiceQuestion],
        *,
        mode: LearnMode,
        store: SessionStore | None = None,
    ) -> None:
        self.mode = mode
        self._store = store
        self._questions: list[ChoiceQuestion] = []
        self._outcome: bool | None = None
        self.position = 0
        self.correct = 0
        self.wrong = 0
        self.restart(questions)

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def finished(self) -> bool:
        return self.position >= self.total

    @property
    def answered(self) -> bool:
        return self._outcome is not None

    def restart(self, questions: Sequence[ChoiceQuestion]) -> None:
        self._questions = list(questions)
        self._outcome = None
        self.position = 0
        self.correct = 0
        self.wrong = 0

    def current(self) -> ChoiceQuestion | None:
        return None if self.finished else self._questions[self.position]

    def answer(self, selected_index: int) -> bool:
        q = self.current()
        if q is None:
            raise RuntimeError("No current question; the session is finished")
        if self._outcome is not None:
            return self._outcome
        ok = q.answer_index is not None and selected_index == q.answer_index
        if ok:
            self.correct += 1
        else:
            self.wrong += 1
        self._outcome = ok
        return ok

    def advance(self) -> None:
        self.position += 1
        self._outcome = None

    def finish(self) -> SessionResult:
        result = SessionResult(last_mode=self.mode, correct=self.correct, wrong=self.wrong)
        if self._store is not None:
            self._store.save_result(result)
        logger.debug("%s session finished: %d/%d", self.mode.value, self.correct, self.total)
        return result


# -----------------------------------------------------------------------------
# Question builders
# -----------------------------------------------------------------------------

def korean_quiz_questions(
    items: Sequence[KoreanQuizItem],
    count: int = TABLE_QUIZ_SIZE,
    rng: random.Random | None = None,
) -> list[ChoiceQuestion]:
    """Pick `count` random reading-quiz rows, keeping their option order."""
    return [
        ChoiceQuestion(
            prompt=item.question,
            choices=item.options,
            answer_index=item.answer.index if item.answer.is_valid_for(item.options) else None,
            hint=item.hint,
            explanation=item.rationale,
        )
        for item in shuffle(items, rng)[:count]
    ]


def image_quiz_questions(
    items: Sequence[ImageQuizItem],
    count: int = TABLE_QUIZ_SIZE,
    rng: random.Random | None = None,
) -> list[ChoiceQuestion]:
    return [
        ChoiceQuestion(
            prompt=item.question,
            choices=item.options,
            answer_index=item.answer.index if item.answer.is_valid_for(item.options) else None,
            hint=item.hint or "",
            explanation=item.rationale,
            media=item.image_url or None,
        )
        for item in shuffle(items, rng)[:count]
    ]


def speech_quiz_questions(
    entries: Sequence[SpeechEntry],
    count: int = SPEECH_QUIZ_SIZE,
    choices_count: int = DEFAULT_CHOICES,
    rng: random.Random | None = None,
) -> list[ChoiceQuestion]:
    """Listening questions: hear a word, pick it among words from other entries.

    Raises ValueError when the list cannot fill a full set of choices.
    """
    if len(entries) < choices_count:
        raise ValueError(
            "Need at least {} speech entries, got {}".format(choices_count, len(entries))
        )

    questions: list[ChoiceQuestion] = []
    for idx in shuffle(range(len(entries)), rng)[:count]:
        entry = entries[idx]
        others = [e.word for i, e in enumerate(entries) if i != idx]
        wrong = shuffle(others, rng)[: choices_count - 1]
        choices, answer_index = shuffle_choices([entry.word] + wrong, 0, rng)
        questions.append(
            ChoiceQuestion(
                prompt=entry.word,
                choices=tuple(choices),
                answer_index=answer_index,
                media=entry.audio_file,
            )
        )
    return questions
