from __future__ import annotations

import logging
import random
from typing import Sequence

from korean_work.controllers.choice_quiz_session import DEFAULT_CHOICES, ChoiceQuestion, ChoiceQuizSession
from korean_work.domain.answer_key import shuffle_choices
from korean_work.domain.enums import LearnMode
from korean_work.domain.models import EmojiVocabItem
from korean_work.domain.shuffle import shuffle
from korean_work.services.session_store import SessionStore

logger = logging.getLogger(__name__)

ANTHEM_LEVEL = 3
MAX_LEVEL = 3


def anthem_order(items: Sequence[EmojiVocabItem]) -> list[EmojiVocabItem]:
    """Anthem lines as sung: each verse 1..4 followed by the chorus (verse 0)."""
    chorus = [x for x in items if x.verse == 0]
    out: list[EmojiVocabItem] = []
    for verse in (1, 2, 3, 4):
        out.extend(x for x in items if x.verse == verse)
        out.extend(chorus)
    return out


def emoji_question(
    item: EmojiVocabItem,
    level_items: Sequence[EmojiVocabItem],
    choices_count: int = DEFAULT_CHOICES,
    rng: random.Random | None = None,
) -> ChoiceQuestion:
    """Ask for `item`'s Korean word; distractors come from the same level."""
    others = [x.ko for x in level_items if x.id != item.id]
    wrong = shuffle(others, rng)[: max(0, choices_count - 1)]
    choices, answer_index = shuffle_choices([item.ko] + wrong, 0, rng)
    return ChoiceQuestion(
        prompt=item.emoji,
        choices=tuple(choices),
        answer_index=answer_index,
        hint=item.lyric or "",
        explanation=item.en,
    )


class EmojiVocabSession(ChoiceQuizSession):
    """Emoji vocabulary quiz with three levels unlocked in order.

    Finishing a level unlocks the next one; the unlock survives restarts through
    the session store. Level 3 walks the anthem in sung order instead of shuffling.
    """

    def __init__(
        self,
        items: Sequence[EmojiVocabItem],
        *,
        store: SessionStore | None = None,
        choices_count: int = DEFAULT_CHOICES,
        rng: random.Random | None = None,
    ) -> None:
        self._items = list(items)
        self._choices_count = choices_count
        self._rng = rng
        self.level = 1
        self.unlocked = store.get_unlocked_level() if store is not None else 1
        super().__init__([], mode=LearnMode.EMOJI, store=store)
        self.set_level(1)

    def level_items(self, level: int | None = None) -> list[EmojiVocabItem]:
        lv = self.level if level is None else level
        return [x for x in self._items if x.level == lv]

    def set_level(self, level: int) -> bool:
        """Switch to `level` and reset progress; locked levels are refused."""
        if level < 1 or level > self.unlocked:
            logger.debug("Emoji level %d is locked (unlocked=%d)", level, self.unlocked)
            return False
        self.level = level
        pool = self.level_items()
        ordered = anthem_order(pool) if level == ANTHEM_LEVEL else shuffle(pool, self._rng)
        self.restart([emoji_question(x, pool, self._choices_count, self._rng) for x in ordered])
        return True

    def advance(self) -> None:
        super().advance()
        if self.finished and self.total > 0:
            self._unlock_next()

    def _unlock_next(self) -> None:
        nxt = self.level + 1
        if nxt > MAX_LEVEL or self.unlocked >= nxt:
            return
        self.unlocked = nxt
        if self._store is not None:
            self._store.set_unlocked_level(nxt)
        logger.info("Emoji level %d unlocked", nxt)
