from __future__ import annotations

"""Question-bank models.

Plain frozen dataclasses; parsing from raw rows lives in
`korean_work/controllers/question_bank_repository.py`.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from korean_work.domain.answer_key import AnswerKey
from korean_work.domain.enums import ImageQuizCategory, JamoPool, LearnMode, TopicItemKind


# -----------------------------------------------------------------------------
# Jamo drill (level 1)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class JamoItem:
    glyph: str
    name: str
    en: str = ""


@dataclass(frozen=True)
class JamoQuizItem:
    id: str
    pool: JamoPool
    glyph: str
    answer: str


@dataclass(frozen=True)
class JamoQuizMeta:
    version: str = ""
    mode: str = ""
    type: str = ""
    choices_count: int = 4


@dataclass(frozen=True)
class JamoQuizData:
    meta: JamoQuizMeta
    pools: dict[JamoPool, tuple[JamoItem, ...]]
    items: tuple[JamoQuizItem, ...]

    def pool_for(self, pool: JamoPool) -> tuple[JamoItem, ...]:
        return self.pools.get(pool, ())


# -----------------------------------------------------------------------------
# Vocabulary / interview cards
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EmojiVocabItem:
    id: str
    emoji: str
    ko: str
    en: str
    category: str
    level: int = 1
    # Anthem lines (level 3): verse 1..4, 0 for the chorus
    verse: int | None = None
    lyric: str | None = None


@dataclass(frozen=True)
class SpeechEntry:
    """One recorded word of the listening quiz; `id` names its audio clip."""

    id: str
    word: str

    @property
    def audio_file(self) -> str:
        return "{}.mp3".format(self.id)


@dataclass(frozen=True)
class InterviewCard:
    id: str
    prompt: str
    tts: str
    level: int = 1
    mode: str = ""
    type: str = ""
    module: str = ""
    sample_answer_ko: str = ""
    key_phrases: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Multiple-choice tables
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class KoreanQuizItem:
    id: int
    number: int
    question: str
    options: tuple[str, ...]
    answer: AnswerKey
    rationale: str = ""
    hint: str = ""
    question_en: str | None = None

    @property
    def correct_option(self) -> str | None:
        return self.options[self.answer.index] if self.answer.is_valid_for(self.options) else None


@dataclass(frozen=True)
class ImageQuizItem:
    id: int
    category: ImageQuizCategory
    image_url: str
    question: str
    options: tuple[str, ...]
    answer: AnswerKey
    rationale: str = ""
    question_en: str | None = None
    rationale_en: str | None = None
    hint: str | None = None
    audio_path: str | None = None

    @property
    def correct_option(self) -> str | None:
        return self.options[self.answer.index] if self.answer.is_valid_for(self.options) else None


@dataclass(frozen=True)
class TopicItem:
    """A scene-practice item (mcq / fill / build / dialog)."""

    id: str
    topic_id: str
    kind: TopicItemKind
    question: str
    choices: tuple[str, ...]
    answer: AnswerKey
    utterance: str | None = None
    explanation: str | None = None
    level: int | None = None


# -----------------------------------------------------------------------------
# Session results
# -----------------------------------------------------------------------------

def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class SessionResult:
    last_mode: LearnMode
    correct: int
    wrong: int
    updated_at: str = field(default_factory=_utc_now_iso)

    @property
    def total(self) -> int:
        return self.correct + self.wrong

    def to_dict(self) -> dict[str, object]:
        return {
            "last_mode": self.last_mode.value,
            "correct": int(self.correct),
            "wrong": int(self.wrong),
            "updated_at": self.updated_at,
        }
