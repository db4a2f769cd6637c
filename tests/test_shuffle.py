import random
from collections import Counter

from korean_work.domain.shuffle import shuffle


def test_shuffle_is_a_permutation(rng: random.Random) -> None:
    items = ["가", "나", "다", "다", "라", 1, 2]
    out = shuffle(items, rng)
    assert len(out) == len(items)
    assert Counter(out) == Counter(items)


def test_shuffle_does_not_mutate_input(rng: random.Random) -> None:
    items = list(range(20))
    snapshot = list(items)
    out = shuffle(items, rng)
    assert items == snapshot
    assert out is not items


def test_shuffle_empty_and_single() -> None:
    assert shuffle([]) == []
    single = ["ㄱ"]
    out = shuffle(single)
    assert out == ["ㄱ"]
    assert out is not single


def test_shuffle_accepts_any_sequence(rng: random.Random) -> None:
    assert sorted(shuffle(range(5), rng)) == [0, 1, 2, 3, 4]
    assert sorted(shuffle(("b", "a"), rng)) == ["a", "b"]


def test_shuffle_is_reproducible_with_seeded_rng() -> None:
    a = shuffle(list(range(10)), random.Random(7))
    b = shuffle(list(range(10)), random.Random(7))
    assert a == b


def test_shuffle_reaches_every_permutation() -> None:
    r = random.Random(3)
    seen = {tuple(shuffle([1, 2, 3], r)) for _ in range(600)}
    assert len(seen) == 6
