from __future__ import annotations

from enum import Enum, IntEnum


class QuizLevel(IntEnum):
    """Jamo game levels.

    1: name the letter, 2: initial + medial, 3: initial + medial + final.
    """

    LETTER = 1
    SYLLABLE = 2
    SYLLABLE_WITH_FINAL = 3


class LearnMode(str, Enum):
    JAMO = "jamo"
    EMOJI = "emoji"
    INTERVIEW = "interview"
    KOREAN = "korean"
    IMAGE = "image"
    SPEECH = "speech"


class JamoPool(str, Enum):
    CONSONANT = "consonant"
    VOWEL = "vowel"


class ImageQuizCategory(str, Enum):
    STREET = "street"
    FOOD = "food"
    CONVENIENCE = "convenience"
    HISTORY = "history"
    KPOP = "kpop"


class TopicItemKind(str, Enum):
    MCQ = "mcq"
    FILL = "fill"
    BUILD = "build"
    DIALOG = "dialog"

    @classmethod
    def from_raw(cls, value: object) -> "TopicItemKind":
        """Map the loose `type` column of a topic item; unknown types are MCQ."""
        t = str(value or "").strip().lower()
        if t in ("fill", "fill_blank", "blank"):
            return cls.FILL
        if t in ("build", "sentence", "arrange"):
            return cls.BUILD
        if t in ("dialog", "dialogue", "conversation"):
            return cls.DIALOG
        return cls.MCQ

    @property
    def is_choice_based(self) -> bool:
        return self in (TopicItemKind.MCQ, TopicItemKind.DIALOG)
