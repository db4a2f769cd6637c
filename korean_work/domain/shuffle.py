from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of `items` (Fisher-Yates).

    The input is never modified. `rng` defaults to the module-level random source.
    """
    randint = rng.randint if rng is not None else random.randint
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
