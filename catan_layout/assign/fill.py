"""Unconstrained shuffle-and-fill used when adjacency is not enforced or search gave up."""

from __future__ import annotations

import random
from typing import Dict, List, Mapping, Optional, Sequence, TypeVar

from catan_layout.domain.board import Resource

T = TypeVar("T")


def expand_counts(counts: Mapping[Resource, int]) -> List[Resource]:
    pool: List[Resource] = []
    for resource, count in counts.items():
        pool.extend([resource] * count)
    return pool


def shuffled(values: Sequence[T], rng: random.Random) -> List[T]:
    pool = list(values)
    rng.shuffle(pool)
    return pool


def sequential_fill(current: Sequence[Optional[T]], values: Sequence[T]) -> List[T]:
    """Place `values`, in order, into the empty slots of `current`."""
    result: List[Optional[T]] = list(current)
    empty_slots = [index for index, value in enumerate(result) if value is None]
    if len(empty_slots) != len(values):
        raise ValueError(f"Expected {len(empty_slots)} values to fill, received {len(values)}.")
    for index, value in zip(empty_slots, values):
        result[index] = value
    return result  # type: ignore[return-value]


def count_values(values: Sequence[T]) -> Dict[T, int]:
    counts: Dict[T, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts
