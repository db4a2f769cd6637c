from __future__ import annotations

"""Console quiz drills.

Usage:
    python main.py --level 2
    python main.py --level 3 --count 5 --seed 7
    python main.py --mode emoji
    python main.py --mode image --category food
"""

import argparse
import logging
import random
import sys
from typing import Callable

from korean_work.controllers import ChoiceQuizSession, EmojiVocabSession, JamoQuizSession, QuestionBankRepository
from korean_work.controllers.choice_quiz_session import (
    image_quiz_questions,
    korean_quiz_questions,
    speech_quiz_questions,
)
from korean_work.domain.composition_quiz import QuizGenerationError
from korean_work.domain.enums import ImageQuizCategory, LearnMode, QuizLevel
from korean_work.domain.speech_text import speak_text
from korean_work.services.remote_quiz_store import RemoteQuizStore
from korean_work.services.session_store import SessionStore
from korean_work.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

MODES = [LearnMode.JAMO, LearnMode.EMOJI, LearnMode.SPEECH, LearnMode.KOREAN, LearnMode.IMAGE]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Practice Hangul letters, syllables and words in the terminal.")
    parser.add_argument("--mode", choices=[m.value for m in MODES], default=LearnMode.JAMO.value)
    parser.add_argument("--level", type=int, choices=[1, 2, 3], default=2)
    parser.add_argument("--count", type=int, default=0, help="Questions per set (0 = default size).")
    parser.add_argument("--category", choices=[c.value for c in ImageQuizCategory], default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible question order.")
    parser.add_argument("--settings", default=None, help="Path to settings.yaml.")
    parser.add_argument("--state", default=None, help="Path to the last-session file.")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def _pick_index(raw: str, n: int) -> int:
    try:
        idx = int(raw) - 1
    except ValueError:
        return -1
    return idx if 0 <= idx < n else -1


def run_quiz(
    session: JamoQuizSession,
    read: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
) -> None:
    """Ask every question of the session's current set; answers are choice numbers."""
    read = read or input
    write = write or print
    while not session.finished:
        q = session.current()
        if q is None:
            break
        write("[{}/{}] {}  {}".format(session.position + 1, session.total, q.question_text, q.prompt))
        if session.level == QuizLevel.LETTER:
            write("    (say: {})".format(speak_text(q.prompt)))
        for n, choice in enumerate(q.choices, start=1):
            write("  {}) {}".format(n, choice))

        raw = read("> ").strip()
        idx = _pick_index(raw, len(q.choices))
        picked = q.choices[idx] if idx >= 0 else raw
        if session.answer(picked):
            write("Correct!")
        else:
            write("Wrong. Answer: {}".format(q.answer))
        session.advance()

    result = session.finish()
    write("Done: {} correct, {} wrong".format(result.correct, result.wrong))


def run_choice_quiz(
    session: ChoiceQuizSession,
    read: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
) -> None:
    read = read or input
    write = write or print
    while not session.finished:
        q = session.current()
        if q is None:
            break
        write("[{}/{}] {}".format(session.position + 1, session.total, q.prompt))
        if q.hint:
            write("    hint: {}".format(q.hint))
        for n, choice in enumerate(q.choices, start=1):
            write("  {}) {}".format(n, choice))

        idx = _pick_index(read("> ").strip(), len(q.choices))
        if session.answer(idx):
            write("Correct!")
        else:
            write("Wrong. Answer: {}".format(q.answer or "?"))
        if q.explanation:
            write("    {}".format(q.explanation))
        session.advance()

    result = session.finish()
    write("Done: {} correct, {} wrong".format(result.correct, result.wrong))
    if isinstance(session, EmojiVocabSession):
        write("Unlocked level: {}".format(session.unlocked))


def build_remote(settings: SettingsStore) -> RemoteQuizStore | None:
    cfg = settings.remote_config()
    if not cfg.enabled:
        return None
    return RemoteQuizStore(cfg.url, cfg.api_key)


def build_choice_session(
    mode: LearnMode,
    args: argparse.Namespace,
    bank: QuestionBankRepository,
    settings: SettingsStore,
    store: SessionStore,
    rng: random.Random | None,
) -> ChoiceQuizSession:
    """Build the session for a multiple-choice mode; raises ValueError when it has no questions."""
    count = args.count or None
    choices_count = settings.choices_count()

    if mode == LearnMode.EMOJI:
        session = EmojiVocabSession(bank.emoji_vocab(), store=store, choices_count=choices_count, rng=rng)
        if not session.set_level(args.level):
            logger.warning("Emoji level %d is locked; starting at level %d", args.level, session.level)
        if session.total == 0:
            raise ValueError("No emoji vocabulary for level {}".format(session.level))
        return session

    if mode == LearnMode.SPEECH:
        questions = speech_quiz_questions(
            bank.speech_entries(), count=count or 15, choices_count=choices_count, rng=rng
        )
    elif mode == LearnMode.KOREAN:
        questions = korean_quiz_questions(bank.korean_quiz(), count=count or 10, rng=rng)
    else:
        questions = image_quiz_questions(bank.image_quiz(args.category), count=count or 10, rng=rng)

    if not questions:
        raise ValueError("No {} questions available".format(mode.value))
    return ChoiceQuizSession(questions, mode=mode, store=store)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(name)s: %(message)s")

    settings = SettingsStore(args.settings)
    bank = QuestionBankRepository(data_dir=settings.data_dir(), remote=build_remote(settings))
    store = SessionStore(args.state)
    rng = random.Random(args.seed) if args.seed is not None else None
    mode = LearnMode(args.mode)

    try:
        if mode == LearnMode.JAMO:
            drill = bank.jamo_quiz()
            if args.level == QuizLevel.LETTER and not drill.items:
                print("[ERROR] No jamo drill found in {}".format(bank.data_dir), file=sys.stderr)
                return 1
            session = JamoQuizSession(drill, settings=settings, store=store, rng=rng)
            try:
                session.set_level(args.level, count=args.count or None)
            except (QuizGenerationError, ValueError) as e:
                print("[ERROR] {}".format(e), file=sys.stderr)
                return 2
            run_quiz(session)
        else:
            try:
                choice_session = build_choice_session(mode, args, bank, settings, store, rng)
            except ValueError as e:
                print("[ERROR] {}".format(e), file=sys.stderr)
                return 1
            run_choice_quiz(choice_session)
    except (KeyboardInterrupt, EOFError):
        print()
        logger.info("Quiz interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
