from __future__ import annotations

import logging
import random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from catan_layout.domain.board import (
    AssignmentOutcome,
    DiceStrategy,
    HIGH_PROBABILITY_TOKENS,
    Tile,
)

from .fill import count_values, sequential_fill, shuffled
from .runtime import SearchBudget

logger = logging.getLogger(__name__)

Neighbors = Mapping[int, Tuple[int, ...]]

# Chance of taking a worsening swap so local search can leave a plateau.
RANDOM_WALK_PROBABILITY = 0.1


def assign_dice(
    tiles: Sequence[Tile],
    dice_values: Sequence[int],
    neighbors: Neighbors,
    *,
    enforce_adjacency: bool,
    rng: random.Random,
    budget: SearchBudget,
    stress_high_probability: bool = False,
    strategy: DiceStrategy = DiceStrategy.BACKTRACKING,
    local_search_iterations: int = 0,
    shuffle_search_order: bool = False,
) -> AssignmentOutcome:
    """Place every token of `dice_values` on exactly one of `tiles`.

    `tiles` are the non-desert tiles and `neighbors` is indexed by position in
    that sequence. Desert tiles never reach this function.
    """
    if len(dice_values) != len(tiles):
        raise ValueError(f"Expected {len(tiles)} dice tokens, received {len(dice_values)}.")

    if not enforce_adjacency and not stress_high_probability:
        _apply(tiles, shuffled(dice_values, rng))
        return AssignmentOutcome.UNCONSTRAINED

    if strategy is DiceStrategy.LOCAL_SEARCH:
        assignment, conflicts = local_search_dice(
            neighbors,
            dice_values,
            rng,
            max_iterations=local_search_iterations,
            same_value=enforce_adjacency,
            high_pairs=stress_high_probability,
        )
        _apply(tiles, assignment)
        if conflicts == 0:
            return AssignmentOutcome.LOCAL_SEARCH
        logger.warning(
            "Dice local search left %d conflicts after %d iterations. Keeping best assignment.",
            conflicts,
            local_search_iterations,
        )
        return AssignmentOutcome.FALLBACK

    order_rng = rng if shuffle_search_order else None

    if stress_high_probability:
        return _assign_high_probability_first(
            tiles, dice_values, neighbors, enforce_adjacency, rng, budget, order_rng
        )

    if backtrack_dice(tiles, count_values(dice_values), neighbors, 0, budget, order_rng):
        logger.debug("Dice search finished after %d steps.", budget.steps)
        return AssignmentOutcome.SEARCH

    logger.warning(
        "Dice backtracking failed after %d steps. Falling back to random dice assignment.",
        budget.steps,
    )
    _apply(tiles, shuffled(dice_values, rng))
    return AssignmentOutcome.FALLBACK


def _assign_high_probability_first(
    tiles: Sequence[Tile],
    dice_values: Sequence[int],
    neighbors: Neighbors,
    enforce_adjacency: bool,
    rng: random.Random,
    budget: SearchBudget,
    order_rng: Optional[random.Random],
) -> AssignmentOutcome:
    high_values = [value for value in dice_values if value in HIGH_PROBABILITY_TOKENS]
    other_values = [value for value in dice_values if value not in HIGH_PROBABILITY_TOKENS]

    plan = place_high_probability(
        neighbors, len(tiles), high_values, rng, avoid_same_value=enforce_adjacency
    )
    pinned = list(plan)
    _apply(tiles, plan)

    if enforce_adjacency and conflict_count(plan, neighbors, same_value=True) > 0:
        logger.warning(
            "High-probability pass left equal 6/8 tokens on neighboring tiles. "
            "Filling remaining tokens sequentially."
        )
        _apply(tiles, sequential_fill(pinned, shuffled(other_values, rng)))
        return AssignmentOutcome.FALLBACK

    if enforce_adjacency:
        if backtrack_dice(tiles, count_values(other_values), neighbors, 0, budget, order_rng):
            return AssignmentOutcome.HEURISTIC
        logger.warning(
            "Dice backtracking around high-probability tokens failed after %d steps. "
            "Filling remaining tokens sequentially.",
            budget.steps,
        )
        _apply(tiles, pinned)

    _apply(tiles, sequential_fill(pinned, shuffled(other_values, rng)))
    return AssignmentOutcome.FALLBACK if enforce_adjacency else AssignmentOutcome.HEURISTIC


def place_high_probability(
    neighbors: Neighbors,
    tile_count: int,
    high_values: Sequence[int],
    rng: random.Random,
    *,
    avoid_same_value: bool = False,
) -> List[Optional[int]]:
    """Greedy priority pass: spread 6s and 8s so that none touch.

    Candidate tiles are visited in random order. When no tile is clear of every
    placed high token, the token goes on the first free tile in creation order,
    so a 6/8 pair can remain on crowded boards. With `avoid_same_value` that
    tile must not touch an equal token when such a tile exists.
    """
    plan: List[Optional[int]] = [None] * tile_count
    candidates = list(range(tile_count))
    rng.shuffle(candidates)

    for value in high_values:
        target = next(
            (
                index
                for index in candidates
                if plan[index] is None
                and not any(plan[other] in HIGH_PROBABILITY_TOKENS for other in neighbors[index])
            ),
            None,
        )
        if target is None and avoid_same_value:
            target = next(
                (
                    index
                    for index in range(tile_count)
                    if plan[index] is None and not any(plan[other] == value for other in neighbors[index])
                ),
                None,
            )
        if target is None:
            target = next((index for index in range(tile_count) if plan[index] is None), None)
        if target is None:
            raise ValueError("More high-probability tokens than tiles.")
        plan[target] = value
    return plan


def backtrack_dice(
    tiles: Sequence[Tile],
    remaining: Dict[int, int],
    neighbors: Neighbors,
    index: int,
    budget: SearchBudget,
    order_rng: Optional[random.Random] = None,
) -> bool:
    """Fill unassigned tiles from tiles[index:] in place.

    Tiles that already carry a token are treated as fixed. Each distinct
    remaining value is tried once, since equal tokens lead to the same subtree.
    """
    while index < len(tiles) and tiles[index].dice is not None:
        index += 1
    if index >= len(tiles):
        return True

    tile = tiles[index]
    candidates = [value for value, count in remaining.items() if count > 0]
    if order_rng is not None:
        order_rng.shuffle(candidates)

    for value in candidates:
        if not budget.consume():
            return False
        if any(tiles[neighbor].dice == value for neighbor in neighbors[index]):
            continue
        tile.dice = value
        remaining[value] -= 1
        if backtrack_dice(tiles, remaining, neighbors, index + 1, budget, order_rng):
            return True
        remaining[value] += 1
        tile.dice = None
    return False


def local_search_dice(
    neighbors: Neighbors,
    dice_values: Sequence[int],
    rng: random.Random,
    *,
    max_iterations: int,
    same_value: bool = True,
    high_pairs: bool = False,
) -> Tuple[List[int], int]:
    """Min-conflicts repair over token swaps.

    Returns the lowest-conflict permutation seen and its conflict count.
    """
    assignment = shuffled(dice_values, rng)
    cost = conflict_count(assignment, neighbors, same_value=same_value, high_pairs=high_pairs)
    best, best_cost = list(assignment), cost

    for _ in range(max_iterations):
        if cost == 0:
            break
        conflicted = [
            index
            for index in range(len(assignment))
            if _local_conflicts(assignment, neighbors, index, same_value, high_pairs) > 0
        ]
        first = rng.choice(conflicted)

        best_delta: Optional[int] = None
        partners: List[int] = []
        for second in range(len(assignment)):
            if second == first or assignment[second] == assignment[first]:
                continue
            delta = _swap_delta(assignment, neighbors, first, second, same_value, high_pairs)
            if best_delta is None or delta < best_delta:
                best_delta, partners = delta, [second]
            elif delta == best_delta:
                partners.append(second)
        if best_delta is None:
            break

        if best_delta <= 0 or rng.random() < RANDOM_WALK_PROBABILITY:
            second = rng.choice(partners)
            assignment[first], assignment[second] = assignment[second], assignment[first]
            cost += best_delta
            if cost < best_cost:
                best, best_cost = list(assignment), cost

    return best, best_cost


def conflict_count(
    assignment: Sequence[Optional[int]],
    neighbors: Neighbors,
    *,
    same_value: bool = True,
    high_pairs: bool = False,
) -> int:
    total = 0
    for index, adjacent in neighbors.items():
        for other in adjacent:
            if other > index and _clashes(assignment[index], assignment[other], same_value, high_pairs):
                total += 1
    return total


def _clashes(first: Optional[int], second: Optional[int], same_value: bool, high_pairs: bool) -> bool:
    if first is None or second is None:
        return False
    if same_value and first == second:
        return True
    return high_pairs and first in HIGH_PROBABILITY_TOKENS and second in HIGH_PROBABILITY_TOKENS


def _local_conflicts(
    assignment: Sequence[int], neighbors: Neighbors, index: int, same_value: bool, high_pairs: bool
) -> int:
    return sum(
        1
        for other in neighbors[index]
        if _clashes(assignment[index], assignment[other], same_value, high_pairs)
    )


def _swap_delta(
    assignment: List[int], neighbors: Neighbors, first: int, second: int, same_value: bool, high_pairs: bool
) -> int:
    before = _local_conflicts(assignment, neighbors, first, same_value, high_pairs) + _local_conflicts(
        assignment, neighbors, second, same_value, high_pairs
    )
    assignment[first], assignment[second] = assignment[second], assignment[first]
    after = _local_conflicts(assignment, neighbors, first, same_value, high_pairs) + _local_conflicts(
        assignment, neighbors, second, same_value, high_pairs
    )
    assignment[first], assignment[second] = assignment[second], assignment[first]
    return after - before


def _apply(tiles: Sequence[Tile], values: Sequence[Optional[int]]) -> None:
    for tile, value in zip(tiles, values):
        tile.dice = value
