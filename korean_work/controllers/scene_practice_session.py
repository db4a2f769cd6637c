from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Sequence

from korean_work.domain.answer_key import AnswerKey, shuffle_choices
from korean_work.domain.models import TopicItem
from korean_work.domain.shuffle import shuffle
from korean_work.services.remote_quiz_store import RemoteQuizStore, RemoteStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptOutcome:
    correct: bool
    chosen_answer: str


def prepare_items(items: Sequence[TopicItem], rng: random.Random | None = None) -> list[TopicItem]:
    """Shuffle the choices of every answerable mcq/dialog item once.

    The answer key is re-pointed at the correct choice's new position. Items whose
    key does not point inside their choices are left as-is.
    """
    out: list[TopicItem] = []
    for item in items:
        if item.kind.is_choice_based and item.choices and item.answer.is_valid_for(item.choices):
            choices, new_index = shuffle_choices(item.choices, item.answer.index, rng)
            item = replace(item, choices=tuple(choices), answer=AnswerKey.of_index(new_index))
        out.append(item)
    return out


class ScenePracticeSession:
    """Walk a topic's items, score answers and record attempts remotely.

    Recording is best-effort: a failed write is logged and the session carries on.
    """

    def __init__(
        self,
        items: Sequence[TopicItem],
        *,
        topic_id: str,
        user_id: str = "demo",
        remote: RemoteQuizStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._items = prepare_items(items, rng)
        self._topic_id = topic_id
        self._user_id = user_id
        self._remote = remote
        self._rng = rng
        self.index = 0
        self.score = 0
        self._submitted: AttemptOutcome | None = None

    @property
    def items(self) -> list[TopicItem]:
        return list(self._items)

    @property
    def finished(self) -> bool:
        return self.index >= len(self._items)

    def current(self) -> TopicItem | None:
        return None if self.finished else self._items[self.index]

    def build_tiles(self) -> list[str]:
        """Word tiles for a sentence-build item, in random order."""
        item = self.current()
        if item is None:
            return []
        return shuffle(item.choices, self._rng)

    @property
    def submitted(self) -> bool:
        return self._submitted is not None

    def submit_choice(self, selected_index: int) -> AttemptOutcome:
        item = self._require_current()
        if self._submitted is not None:
            return self._submitted
        outcome = AttemptOutcome(correct=item.answer.matches_index(selected_index), chosen_answer=str(selected_index))
        self._record(item, outcome)
        return outcome

    def submit_text(self, response: str) -> AttemptOutcome:
        """Score a fill-in answer or a built sentence (case-insensitive, trimmed)."""
        item = self._require_current()
        if self._submitted is not None:
            return self._submitted
        outcome = AttemptOutcome(correct=item.answer.matches_text(response), chosen_answer=response)
        self._record(item, outcome)
        return outcome

    def submit_tiles(self, tiles: Sequence[str]) -> AttemptOutcome:
        return self.submit_text(" ".join(tiles))

    def advance(self) -> None:
        self.index += 1
        self._submitted = None

    def _require_current(self) -> TopicItem:
        item = self.current()
        if item is None:
            raise RuntimeError("No current item; the session is finished")
        return item

    def _record(self, item: TopicItem, outcome: AttemptOutcome) -> None:
        self._submitted = outcome
        if outcome.correct:
            self.score += 1
        if self._remote is None or not self._remote.is_enabled():
            return
        try:
            self._remote.record_attempt(
                user_id=self._user_id,
                topic_id=self._topic_id,
                item_id=item.id,
                is_correct=outcome.correct,
                chosen_answer=outcome.chosen_answer,
            )
            self._remote.upsert_progress(
                user_id=self._user_id,
                topic_id=self._topic_id,
                correct_count=self.score,
                total_count=self.index + 1,
                last_item_id=item.id,
            )
        except RemoteStoreError as e:
            logger.warning("Failed to record attempt for item %s: %s", item.id, e)
