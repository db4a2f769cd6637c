from __future__ import annotations

"""Composition quiz generation (levels 2 and 3).

Level 2 asks for the syllable built from an initial and a medial ("ㄱ + ㅏ" -> 가),
level 3 adds a final ("ㄱ + ㅏ + ㄴ" -> 간). Every item carries four choices: the
answer plus three distractors that keep the medial (and final) fixed and vary only
the initial consonant.

This module is pure domain logic; callers own progression state.
"""

import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Callable, Final, Sequence

from korean_work.domain.enums import QuizLevel
from korean_work.domain.hangul_compose import compose
from korean_work.domain.jamo_tables import BASIC_INITIALS, BASIC_MEDIALS, COMMON_FINALS
from korean_work.domain.shuffle import shuffle

logger = logging.getLogger(__name__)

DISTRACTOR_COUNT: Final[int] = 3
DEFAULT_SET_SIZE: Final[int] = 10
DEFAULT_ATTEMPTS_FACTOR: Final[int] = 50

# Distinct answers reachable from the restricted pools
LEVEL2_DOMAIN_SIZE: Final[int] = len(BASIC_INITIALS) * len(BASIC_MEDIALS)
LEVEL3_DOMAIN_SIZE: Final[int] = LEVEL2_DOMAIN_SIZE * len(COMMON_FINALS)

_ID_ALPHABET: Final[str] = string.digits + string.ascii_lowercase


class QuizGenerationError(RuntimeError):
    """Raised when a quiz set of the requested size cannot be produced."""


@dataclass(frozen=True)
class CompositionQuizItem:
    id: str
    level: int
    initial: str
    medial: str
    answer: str
    prompt: str
    final: str | None = None


@dataclass(frozen=True)
class QuizWithChoices(CompositionQuizItem):
    choices: tuple[str, ...] = field(default_factory=tuple)

    @property
    def distractors(self) -> list[str]:
        return [c for c in self.choices if c != self.answer]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _pick(pool: Sequence[str], rng: random.Random | None) -> str:
    return rng.choice(pool) if rng is not None else random.choice(pool)


def _pick_n(
    pool: Sequence[str],
    n: int,
    exclude: Sequence[str] = (),
    rng: random.Random | None = None,
) -> list[str]:
    """Pick up to `n` distinct entries of `pool`, skipping `exclude`."""
    filtered = [p for p in pool if p not in exclude]
    return shuffle(filtered, rng)[:n]


def _make_id(level: int, rng: random.Random | None) -> str:
    suffix = "".join(_pick(_ID_ALPHABET, rng) for _ in range(5))
    return "lv{}-{}-{}".format(level, int(time.time() * 1000), suffix)


# -----------------------------------------------------------------------------
# Single items
# -----------------------------------------------------------------------------

def generate_level2_quiz(rng: random.Random | None = None) -> CompositionQuizItem:
    """Build one initial + medial item from the basic pools."""
    initial = _pick(BASIC_INITIALS, rng)
    medial = _pick(BASIC_MEDIALS, rng)
    answer = compose(initial, medial)
    if answer is None:
        raise QuizGenerationError("Failed to compose: {} + {}".format(initial, medial))

    return CompositionQuizItem(
        id=_make_id(2, rng),
        level=2,
        initial=initial,
        medial=medial,
        answer=answer,
        prompt="{} + {}".format(initial, medial),
    )


def generate_level3_quiz(rng: random.Random | None = None) -> CompositionQuizItem:
    """Build one initial + medial + final item from the basic/common pools."""
    initial = _pick(BASIC_INITIALS, rng)
    medial = _pick(BASIC_MEDIALS, rng)
    final = _pick(COMMON_FINALS, rng)
    answer = compose(initial, medial, final)
    if answer is None:
        raise QuizGenerationError("Failed to compose: {} + {} + {}".format(initial, medial, final))

    return CompositionQuizItem(
        id=_make_id(3, rng),
        level=3,
        initial=initial,
        medial=medial,
        final=final,
        answer=answer,
        prompt="{} + {} + {}".format(initial, medial, final),
    )


# -----------------------------------------------------------------------------
# Distractors and choices
# -----------------------------------------------------------------------------

def generate_level2_wrong_answers(
    correct_initial: str,
    medial: str,
    count: int = DISTRACTOR_COUNT,
    rng: random.Random | None = None,
) -> list[str]:
    """Distractors for level 2: same medial, a different basic initial."""
    wrong_initials = _pick_n(BASIC_INITIALS, count, exclude=(correct_initial,), rng=rng)
    out: list[str] = []
    for init in wrong_initials:
        char = compose(init, medial)
        if char is not None:
            out.append(char)
    return out


def generate_level3_wrong_answers(
    correct_initial: str,
    medial: str,
    final: str,
    count: int = DISTRACTOR_COUNT,
    rng: random.Random | None = None,
) -> list[str]:
    """Distractors for level 3: same medial and final, a different basic initial."""
    wrong_initials = _pick_n(BASIC_INITIALS, count, exclude=(correct_initial,), rng=rng)
    out: list[str] = []
    for init in wrong_initials:
        char = compose(init, medial, final)
        if char is not None:
            out.append(char)
    return out


def add_choices_to_quiz(
    quiz: CompositionQuizItem,
    rng: random.Random | None = None,
) -> QuizWithChoices:
    if quiz.level == 2:
        wrong = generate_level2_wrong_answers(quiz.initial, quiz.medial, rng=rng)
    else:
        wrong = generate_level3_wrong_answers(quiz.initial, quiz.medial, quiz.final or "", rng=rng)

    choices = shuffle([quiz.answer] + wrong, rng)

    return QuizWithChoices(
        id=quiz.id,
        level=quiz.level,
        initial=quiz.initial,
        medial=quiz.medial,
        final=quiz.final,
        answer=quiz.answer,
        prompt=quiz.prompt,
        choices=tuple(choices),
    )


# -----------------------------------------------------------------------------
# Sets
# -----------------------------------------------------------------------------

def _generate_set(
    make_item: Callable[[random.Random | None], CompositionQuizItem],
    count: int,
    domain_size: int,
    rng: random.Random | None,
    max_attempts: int | None,
) -> list[QuizWithChoices]:
    if count < 0:
        raise ValueError("count must be >= 0, got {}".format(count))
    if count > domain_size:
        raise QuizGenerationError(
            "Requested {} unique items but only {} distinct answers exist".format(count, domain_size)
        )

    limit = max_attempts if max_attempts is not None else count * DEFAULT_ATTEMPTS_FACTOR
    quizzes: list[QuizWithChoices] = []
    used_answers: set[str] = set()
    attempts = 0

    while len(quizzes) < count:
        if attempts >= limit:
            raise QuizGenerationError(
                "Gave up after {} attempts with {}/{} unique items".format(attempts, len(quizzes), count)
            )
        attempts += 1
        quiz = make_item(rng)
        if quiz.answer in used_answers:
            continue
        used_answers.add(quiz.answer)
        quizzes.append(add_choices_to_quiz(quiz, rng))

    logger.debug("Generated %d quiz items in %d attempts", count, attempts)
    return shuffle(quizzes, rng)


def generate_level2_quiz_set(
    count: int = DEFAULT_SET_SIZE,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> list[QuizWithChoices]:
    """Return `count` level-2 items with distinct answers, in random order."""
    return _generate_set(generate_level2_quiz, count, LEVEL2_DOMAIN_SIZE, rng, max_attempts)


def generate_level3_quiz_set(
    count: int = DEFAULT_SET_SIZE,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> list[QuizWithChoices]:
    """Return `count` level-3 items with distinct answers, in random order."""
    return _generate_set(generate_level3_quiz, count, LEVEL3_DOMAIN_SIZE, rng, max_attempts)


def generate_quiz_set(
    level: QuizLevel | int,
    count: int = DEFAULT_SET_SIZE,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> list[QuizWithChoices]:
    lv = QuizLevel(int(level))
    if lv == QuizLevel.SYLLABLE:
        return generate_level2_quiz_set(count, rng=rng, max_attempts=max_attempts)
    if lv == QuizLevel.SYLLABLE_WITH_FINAL:
        return generate_level3_quiz_set(count, rng=rng, max_attempts=max_attempts)
    raise ValueError("Composition quizzes exist only for levels 2 and 3, got {}".format(int(level)))
