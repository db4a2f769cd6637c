from __future__ import annotations

"""Level-1 jamo drill: show a letter, pick its name."""

import random

from korean_work.domain.models import JamoQuizData, JamoQuizItem
from korean_work.domain.shuffle import shuffle


def level1_order(data: JamoQuizData, rng: random.Random | None = None) -> list[int]:
    """Return the drill's item indices in a random order."""
    return shuffle(range(len(data.items)), rng)


def generate_level1_choices(
    item: JamoQuizItem,
    data: JamoQuizData,
    rng: random.Random | None = None,
) -> list[str]:
    """Return the correct name plus `choices_count - 1` names from the same pool."""
    names = [p.name for p in data.pool_for(item.pool) if p.name != item.answer]
    wrong = shuffle(names, rng)[: max(0, data.meta.choices_count - 1)]
    return shuffle([item.answer] + wrong, rng)
