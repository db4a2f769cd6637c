"""
Controller package exports.

Provides a stable import surface for the headless quiz controllers.
"""

from .choice_quiz_session import ChoiceQuestion, ChoiceQuizSession  # noqa: F401
from .emoji_vocab_session import EmojiVocabSession  # noqa: F401
from .jamo_quiz_session import JamoQuizSession, QuizQuestion  # noqa: F401
from .question_bank_repository import QuestionBankRepository  # noqa: F401
from .scene_practice_session import ScenePracticeSession  # noqa: F401

__all__ = [
    "ChoiceQuestion",
    "ChoiceQuizSession",
    "EmojiVocabSession",
    "JamoQuizSession",
    "QuizQuestion",
    "QuestionBankRepository",
    "ScenePracticeSession",
]
