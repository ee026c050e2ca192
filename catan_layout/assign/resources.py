from __future__ import annotations

import logging
import random
from typing import Dict, Mapping, Optional, Sequence, Tuple

from catan_layout.domain.board import AssignmentOutcome, Resource, Tile

from .fill import expand_counts, shuffled
from .runtime import SearchBudget

logger = logging.getLogger(__name__)

Neighbors = Mapping[int, Tuple[int, ...]]


def assign_resources(
    tiles: Sequence[Tile],
    resource_counts: Mapping[Resource, int],
    neighbors: Neighbors,
    *,
    enforce_adjacency: bool,
    rng: random.Random,
    budget: SearchBudget,
    shuffle_search_order: bool = False,
) -> AssignmentOutcome:
    """Give every tile a resource label, consuming `resource_counts` exactly.

    `neighbors` maps a tile's index in `tiles` to the indices of its adjacent
    tiles. With adjacency enforced, a depth-first search keeps equal labels
    apart; if it exhausts its tree or its budget, the labels are shuffled
    instead and the rule is no longer guaranteed.
    """
    if sum(resource_counts.values()) != len(tiles):
        raise ValueError(
            f"Expected resource counts totalling {len(tiles)}, received {sum(resource_counts.values())}."
        )

    if not enforce_adjacency:
        shuffle_resources(tiles, resource_counts, rng)
        return AssignmentOutcome.UNCONSTRAINED

    remaining = dict(resource_counts)
    order_rng = rng if shuffle_search_order else None
    if backtrack_resources(tiles, remaining, neighbors, 0, budget, order_rng):
        logger.debug("Resource search finished after %d steps.", budget.steps)
        return AssignmentOutcome.SEARCH

    logger.warning(
        "Resource backtracking failed after %d steps. Falling back to random assignment.",
        budget.steps,
    )
    for tile in tiles:
        tile.resource = None
    shuffle_resources(tiles, resource_counts, rng)
    return AssignmentOutcome.FALLBACK


def shuffle_resources(
    tiles: Sequence[Tile],
    resource_counts: Mapping[Resource, int],
    rng: random.Random,
) -> None:
    for tile, resource in zip(tiles, shuffled(expand_counts(resource_counts), rng)):
        tile.resource = resource


def backtrack_resources(
    tiles: Sequence[Tile],
    remaining: Dict[Resource, int],
    neighbors: Neighbors,
    index: int,
    budget: SearchBudget,
    order_rng: Optional[random.Random] = None,
) -> bool:
    """Assign tiles[index:] in place; on failure every tile from `index` on is left unset."""
    if index >= len(tiles):
        return True

    tile = tiles[index]
    candidates = [resource for resource, count in remaining.items() if count > 0]
    if order_rng is not None:
        order_rng.shuffle(candidates)

    for resource in candidates:
        if not budget.consume():
            return False
        if _conflicts(tiles, neighbors, index, resource):
            continue
        tile.resource = resource
        remaining[resource] -= 1
        if backtrack_resources(tiles, remaining, neighbors, index + 1, budget, order_rng):
            return True
        remaining[resource] += 1
        tile.resource = None
    return False


def _conflicts(tiles: Sequence[Tile], neighbors: Neighbors, index: int, resource: Resource) -> bool:
    # Only earlier tiles are assigned at this point.
    return any(
        neighbor < index and tiles[neighbor].resource is resource for neighbor in neighbors[index]
    )
