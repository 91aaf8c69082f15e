"""Unbiased random permutation of study sequences."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffle(sequence: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a new list holding ``sequence`` in uniformly random order.

    Durstenfeld's Fisher-Yates: walk the index from the last element down to the
    second, swapping each slot with a uniformly drawn slot in ``[0, i]``.
    The input is never mutated. Pass a seeded ``random.Random`` for reproducible
    orderings.
    """
    source = rng if rng is not None else random
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = source.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items
