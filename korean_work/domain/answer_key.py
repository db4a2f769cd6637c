from __future__ import annotations

"""Answer-key normalization.

Question rows coming from JSON banks or database `jsonb` columns store the correct
answer in several loose shapes (a bare number, a numeric string, a list, or a
mapping with `index` / `answer_index` / `value` / `answer` keys, sometimes nested
inside the `choices` payload). These are resolved once, at load time, into an
`AnswerKey`; nothing downstream inspects the raw payload again.
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from korean_work.domain.shuffle import shuffle

# `answer_index` columns are 1-based; values in this range are shifted to 0-based.
_ONE_BASED_RANGE = range(1, 5)


class AnswerKind(str, Enum):
    INDEX = "index"
    TEXT = "text"
    MISSING = "missing"


@dataclass(frozen=True)
class AnswerKey:
    kind: AnswerKind
    index: int | None = None
    text: str | None = None

    @classmethod
    def of_index(cls, index: int) -> "AnswerKey":
        return cls(AnswerKind.INDEX, index=int(index))

    @classmethod
    def of_text(cls, text: str) -> "AnswerKey":
        return cls(AnswerKind.TEXT, text=text)

    @classmethod
    def missing(cls) -> "AnswerKey":
        return cls(AnswerKind.MISSING)

    @property
    def is_missing(self) -> bool:
        return self.kind is AnswerKind.MISSING

    def is_valid_for(self, choices: Sequence[str]) -> bool:
        """True when this is an index key pointing inside `choices`."""
        return self.kind is AnswerKind.INDEX and self.index is not None and 0 <= self.index < len(choices)

    def matches_index(self, selected: int | None) -> bool:
        return self.kind is AnswerKind.INDEX and selected is not None and self.index == selected

    def matches_text(self, response: str | None) -> bool:
        if self.kind is not AnswerKind.TEXT or not self.text:
            return False
        return self.text.strip().lower() == (response or "").strip().lower()


# -----------------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------------

def _from_one_based(idx: int | None) -> int | None:
    if idx is not None and idx in _ONE_BASED_RANGE:
        return idx - 1
    return idx


def _raw_index(answer: Any) -> int | None:
    if isinstance(answer, bool):
        return None
    if isinstance(answer, int):
        return answer
    if isinstance(answer, float):
        # inf / nan
        if not math.isfinite(answer):
            return None
        return int(answer)
    if isinstance(answer, str):
        try:
            return int(answer.strip())
        except ValueError:
            return None
    if isinstance(answer, list):
        return _raw_index(answer[0]) if answer else None
    if isinstance(answer, dict):
        if "index" in answer:
            return _raw_index(answer["index"])
        if "answerIndex" in answer:
            return _raw_index(answer["answerIndex"])
        if "answer_index" in answer:
            return _from_one_based(_raw_index(answer["answer_index"]))
        if "value" in answer:
            return _raw_index(answer["value"])
        if "answer" in answer:
            return _raw_index(answer["answer"])
    return None


def resolve_index_answer(answer: Any, choices: Any = None) -> AnswerKey:
    """Resolve a loosely-typed answer payload into a 0-based index key.

    A `choices` mapping carrying its own `answer_index` (1-based) wins over `answer`.
    """
    if isinstance(choices, dict) and "answer_index" in choices:
        idx = _from_one_based(_raw_index(choices["answer_index"]))
    else:
        idx = _raw_index(answer)
    return AnswerKey.of_index(idx) if idx is not None else AnswerKey.missing()


def answer_index_from_row(value: Any) -> AnswerKey:
    """Resolve a table's 1-based `answer_index` column."""
    idx = _raw_index(value)
    if idx is None or idx < 1:
        return AnswerKey.missing()
    return AnswerKey.of_index(idx - 1)


def _raw_text(answer: Any) -> str:
    if isinstance(answer, str):
        return answer
    if isinstance(answer, (int, float)) and not isinstance(answer, bool):
        return str(answer)
    if isinstance(answer, list):
        return _raw_text(answer[0]) if answer else ""
    if isinstance(answer, dict):
        for key in ("text", "value", "answer"):
            v = answer.get(key)
            if isinstance(v, str):
                return v
    return ""


def resolve_text_answer(answer: Any) -> AnswerKey:
    """Resolve a free-text answer (fill-in / sentence build)."""
    text = _raw_text(answer)
    return AnswerKey.of_text(text) if text else AnswerKey.missing()


def extract_choices(choices: Any) -> list[str]:
    """Normalize a choices payload into a list of display strings."""
    if isinstance(choices, dict):
        inner = choices.get("choices")
        return extract_choices(inner) if isinstance(inner, list) else []
    if not isinstance(choices, list):
        return []

    out: list[str] = []
    for c in choices:
        if isinstance(c, str):
            out.append(c)
        elif isinstance(c, dict):
            label = next((c[k] for k in ("text", "value", "label") if isinstance(c.get(k), str)), None)
            out.append(label if label is not None else str(c))
        else:
            out.append(str(c))
    return out


def shuffle_choices(
    choices: Sequence[str],
    correct_index: int,
    rng: random.Random | None = None,
) -> tuple[list[str], int]:
    """Shuffle `choices` and return them with the correct answer's new position."""
    if not 0 <= correct_index < len(choices):
        raise ValueError("correct_index {} out of range for {} choices".format(correct_index, len(choices)))
    pairs = shuffle(list(enumerate(choices)), rng)
    new_index = next(pos for pos, (orig, _) in enumerate(pairs) if orig == correct_index)
    return [text for _, text in pairs], new_index
