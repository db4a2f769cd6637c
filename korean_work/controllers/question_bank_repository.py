from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from korean_work.domain.answer_key import (
    answer_index_from_row,
    extract_choices,
    resolve_index_answer,
    resolve_text_answer,
)
from korean_work.domain.enums import ImageQuizCategory, JamoPool, TopicItemKind
from korean_work.domain.models import (
    EmojiVocabItem,
    ImageQuizItem,
    InterviewCard,
    JamoItem,
    JamoQuizData,
    JamoQuizItem,
    JamoQuizMeta,
    KoreanQuizItem,
    SpeechEntry,
    TopicItem,
)
from korean_work.services.remote_quiz_store import RemoteQuizStore

logger = logging.getLogger(__name__)

JAMO_QUIZ_FILE = "jamo_quiz.json"
EMOJI_VOCAB_FILE = "emoji_vocab.json"
INTERVIEW_FILE = "work_interview.json"
SPEECH_MAP_FILE = "tts_map.tsv"


def _default_data_dir() -> Path:
    """Return the project-root data directory.

    Assumes this file lives at: <root>/korean_work/controllers/question_bank_repository.py
    """
    return Path(__file__).resolve().parents[2] / "data"


# -----------------------------------------------------------------------------
# Field helpers
# -----------------------------------------------------------------------------

def _as_nonempty_str(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _optional_str(value: Any) -> str | None:
    return _as_nonempty_str(value)


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(s for s in (_as_nonempty_str(v) for v in value) if s is not None)


def _options(row: dict[str, Any]) -> tuple[str, ...]:
    return tuple((_as_nonempty_str(row.get("option{}".format(i))) or "") for i in range(1, 5))


def _rows(rows: Iterable[Any]) -> Iterable[dict[str, Any]]:
    for raw in rows or ():
        if isinstance(raw, dict):
            yield raw
        else:
            logger.debug("Skipping non-mapping row: %r", raw)


# -----------------------------------------------------------------------------
# Row parsers (JSON banks and remote tables)
# -----------------------------------------------------------------------------

def parse_jamo_quiz(data: Any) -> JamoQuizData:
    if not isinstance(data, dict):
        return JamoQuizData(meta=JamoQuizMeta(), pools={}, items=())

    raw_meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
    meta = JamoQuizMeta(
        version=_as_nonempty_str(raw_meta.get("version")) or "",
        mode=_as_nonempty_str(raw_meta.get("mode")) or "",
        type=_as_nonempty_str(raw_meta.get("type")) or "",
        choices_count=max(2, _as_int(raw_meta.get("choicesCount", raw_meta.get("choices_count")), 4)),
    )

    raw_pools = data.get("pools") if isinstance(data.get("pools"), dict) else {}
    pools: dict[JamoPool, tuple[JamoItem, ...]] = {}
    for pool in JamoPool:
        entries: list[JamoItem] = []
        for raw in _rows(raw_pools.get(pool.value) or []):
            glyph = _as_nonempty_str(raw.get("glyph"))
            name = _as_nonempty_str(raw.get("name"))
            if glyph is None or name is None:
                continue
            entries.append(JamoItem(glyph=glyph, name=name, en=_as_nonempty_str(raw.get("en")) or ""))
        pools[pool] = tuple(entries)

    items: list[JamoQuizItem] = []
    for raw in _rows(data.get("items") or []):
        item_id = _as_nonempty_str(raw.get("id"))
        glyph = _as_nonempty_str(raw.get("glyph"))
        answer = _as_nonempty_str(raw.get("answer"))
        try:
            pool = JamoPool(raw.get("pool"))
        except ValueError:
            pool = None
        if item_id is None or glyph is None or answer is None or pool is None:
            logger.debug("Skipping malformed jamo quiz item: %r", raw)
            continue
        items.append(JamoQuizItem(id=item_id, pool=pool, glyph=glyph, answer=answer))

    return JamoQuizData(meta=meta, pools=pools, items=tuple(items))


def emoji_vocab_from_rows(rows: Iterable[Any]) -> list[EmojiVocabItem]:
    out: list[EmojiVocabItem] = []
    for raw in _rows(rows):
        required = {k: _as_nonempty_str(raw.get(k)) for k in ("id", "emoji", "ko", "en")}
        if any(v is None for v in required.values()):
            logger.debug("Skipping malformed emoji vocab item: %r", raw)
            continue
        level = _as_int(raw.get("level"), 1)
        verse = raw.get("verse")
        out.append(
            EmojiVocabItem(
                id=required["id"],
                emoji=required["emoji"],
                ko=required["ko"],
                en=required["en"],
                category=_as_nonempty_str(raw.get("category")) or "",
                level=level if level in (1, 2, 3) else 1,
                verse=_as_int(verse, 0) if verse is not None else None,
                lyric=_optional_str(raw.get("lyric")),
            )
        )
    return out


def interview_cards_from_rows(rows: Iterable[Any]) -> list[InterviewCard]:
    out: list[InterviewCard] = []
    for raw in _rows(rows):
        item_id = _as_nonempty_str(raw.get("id"))
        prompt = _as_nonempty_str(raw.get("prompt"))
        if item_id is None or prompt is None:
            logger.debug("Skipping malformed interview card: %r", raw)
            continue
        extra = raw.get("extra") if isinstance(raw.get("extra"), dict) else {}
        out.append(
            InterviewCard(
                id=item_id,
                prompt=prompt,
                tts=_as_nonempty_str(raw.get("tts")) or prompt,
                level=_as_int(raw.get("level"), 1),
                mode=_as_nonempty_str(raw.get("mode")) or "",
                type=_as_nonempty_str(raw.get("type")) or "",
                module=_as_nonempty_str(raw.get("module")) or "",
                sample_answer_ko=_as_nonempty_str(extra.get("sampleAnswerKo")) or "",
                key_phrases=_str_tuple(extra.get("keyPhrases")),
                tags=_str_tuple(raw.get("tags")),
            )
        )
    return out


def korean_quiz_from_rows(rows: Iterable[Any]) -> list[KoreanQuizItem]:
    out: list[KoreanQuizItem] = []
    for raw in _rows(rows):
        question = _as_nonempty_str(raw.get("question"))
        if question is None:
            logger.debug("Skipping korean quiz row without question: %r", raw)
            continue
        out.append(
            KoreanQuizItem(
                id=_as_int(raw.get("id"), 0),
                number=_as_int(raw.get("number"), 0),
                question=question,
                question_en=_optional_str(raw.get("question_en")),
                options=_options(raw),
                answer=answer_index_from_row(raw.get("answer_index")),
                rationale=_as_nonempty_str(raw.get("rationale")) or "",
                hint=_as_nonempty_str(raw.get("hint")) or "",
            )
        )
    return out


def image_quiz_from_rows(rows: Iterable[Any]) -> list[ImageQuizItem]:
    out: list[ImageQuizItem] = []
    for raw in _rows(rows):
        question = _as_nonempty_str(raw.get("question"))
        try:
            category = ImageQuizCategory(raw.get("category"))
        except ValueError:
            category = None
        if question is None or category is None:
            logger.debug("Skipping malformed image quiz row: %r", raw)
            continue
        out.append(
            ImageQuizItem(
                id=_as_int(raw.get("id"), 0),
                category=category,
                image_url=_as_nonempty_str(raw.get("image_url")) or "",
                question=question,
                question_en=_optional_str(raw.get("question_en")),
                options=_options(raw),
                answer=answer_index_from_row(raw.get("answer_index")),
                rationale=_as_nonempty_str(raw.get("rationale")) or "",
                rationale_en=_optional_str(raw.get("rationale_en")),
                hint=_optional_str(raw.get("hint")),
                audio_path=_optional_str(raw.get("audio_path")),
            )
        )
    return out


def topic_items_from_rows(rows: Iterable[Any]) -> list[TopicItem]:
    out: list[TopicItem] = []
    for raw in _rows(rows):
        item_id = _as_nonempty_str(raw.get("id"))
        if item_id is None:
            logger.debug("Skipping topic item without id: %r", raw)
            continue
        kind = TopicItemKind.from_raw(raw.get("type"))
        choices_payload = raw.get("choices")
        nested = choices_payload if isinstance(choices_payload, dict) else {}

        if kind.is_choice_based:
            answer = resolve_index_answer(raw.get("answer"), choices_payload)
        else:
            answer = resolve_text_answer(raw.get("answer"))

        utterance = _optional_str(nested.get("utterance"))
        level = raw.get("level")
        out.append(
            TopicItem(
                id=item_id,
                topic_id=_as_nonempty_str(raw.get("topic_id")) or "",
                kind=kind,
                question=_as_nonempty_str(raw.get("question")) or _as_nonempty_str(raw.get("prompt")) or "",
                choices=tuple(extract_choices(choices_payload)),
                answer=answer,
                utterance=utterance.replace("\\n", "\n") if utterance else None,
                explanation=_optional_str(nested.get("explanation_ko")),
                level=_as_int(level, 0) if level is not None else None,
            )
        )
    return out


def parse_tts_map(text: str) -> list[SpeechEntry]:
    """Parse the listening-quiz word list: a header line, then `id<TAB>word` rows."""
    out: list[SpeechEntry] = []
    for line in (text or "").strip().splitlines()[1:]:
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        entry_id, word = parts[0].strip(), parts[1].strip()
        if not entry_id or not word:
            logger.debug("Skipping blank speech entry: %r", line)
            continue
        out.append(SpeechEntry(id=entry_id, word=word))
    return out


# -----------------------------------------------------------------------------
# Repository
# -----------------------------------------------------------------------------

class QuestionBankRepository:
    """Load question banks from data/ files and, when configured, the hosted database.

    Static banks:
      - data/jamo_quiz.json      (level-1 jamo drill: meta/pools/items)
      - data/emoji_vocab.json    (list of emoji vocabulary items)
      - data/work_interview.json (list of interview cards)
      - data/tts_map.tsv         (listening-quiz words, `id<TAB>word`)

    The JSON banks may also be provided as .yaml. Missing or malformed files load as empty
    banks; malformed rows are skipped.
    """

    def __init__(self, *, data_dir: Path | None = None, remote: RemoteQuizStore | None = None) -> None:
        self._data_dir = data_dir or _default_data_dir()
        self._remote = remote

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _read_data(self, filename: str) -> Any:
        path = self._data_dir / filename
        if not path.is_file():
            yaml_path = path.with_suffix(".yaml")
            if not yaml_path.is_file():
                logger.debug("Question bank missing: %s", path)
                return None
            path = yaml_path

        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as e:
            logger.debug("Unable to read %s: %s", path, e)
            return None

        try:
            if path.suffix == ".json":
                return json.loads(raw)
            return yaml.safe_load(raw)
        except (ValueError, yaml.YAMLError) as e:
            logger.debug("Unable to parse %s: %s", path, e)
            return None

    @staticmethod
    def _iter_items(container: Any, preferred_keys: Iterable[str]) -> list[Any]:
        """Return a list of items from either a list or a dict wrapper."""
        if isinstance(container, list):
            return container
        if isinstance(container, dict):
            for k in list(preferred_keys) + ["items", "data"]:
                v = container.get(k)
                if isinstance(v, list):
                    return v
        return []

    # --- Static banks ---

    def jamo_quiz(self) -> JamoQuizData:
        return parse_jamo_quiz(self._read_data(JAMO_QUIZ_FILE))

    def emoji_vocab(self) -> list[EmojiVocabItem]:
        data = self._read_data(EMOJI_VOCAB_FILE)
        return emoji_vocab_from_rows(self._iter_items(data, ("emoji", "vocab")))

    def emoji_items_for_level(self, level: int) -> list[EmojiVocabItem]:
        return [item for item in self.emoji_vocab() if item.level == level]

    def interview_cards(self) -> list[InterviewCard]:
        data = self._read_data(INTERVIEW_FILE)
        return interview_cards_from_rows(self._iter_items(data, ("cards", "interview")))

    def speech_entries(self) -> list[SpeechEntry]:
        path = self._data_dir / SPEECH_MAP_FILE
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as e:
            logger.debug("Unable to read %s: %s", path, e)
            return []
        return parse_tts_map(text)

    # --- Remote tables ---

    def korean_quiz(self) -> list[KoreanQuizItem]:
        if self._remote is None:
            return []
        return korean_quiz_from_rows(self._remote.fetch_korean_quiz())

    def image_quiz(self, category: ImageQuizCategory | str | None = None) -> list[ImageQuizItem]:
        if self._remote is None:
            return []
        return image_quiz_from_rows(self._remote.fetch_image_quiz(category))

    def topic_items(self, topic_id: str) -> list[TopicItem]:
        if self._remote is None:
            return []
        return topic_items_from_rows(self._remote.fetch_topic_items(topic_id))
