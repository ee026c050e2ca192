from __future__ import annotations

import logging
import random
from typing import List, Optional

from catan_layout.assign.dice import assign_dice
from catan_layout.assign.resources import assign_resources
from catan_layout.assign.runtime import GenerationRuntime
from catan_layout.assign.seeding import derive_seed, generation_seed
from catan_layout.domain.board import Board, BoardSpec, HexTile, Resource, Tile
from catan_layout.domain.geometry import (
    adjacency_map,
    bounding_box,
    restrict_neighbors,
    tile_positions,
)

logger = logging.getLogger(__name__)


def generate(
    spec: Optional[BoardSpec] = None,
    *,
    seed: Optional[int] = None,
    runtime: Optional[GenerationRuntime] = None,
) -> Board:
    """Lay out resources and dice tokens for one board.

    Always returns a fully populated board. When a search gives up, the
    matching outcome on the board is `FALLBACK` and its adjacency rule is not
    guaranteed. Raises `GenerationCancelled` only if `runtime` is cancelled.
    """
    spec = spec if spec is not None else BoardSpec()
    runtime = runtime if runtime is not None else GenerationRuntime()
    base_seed = generation_seed(seed)

    positions = tile_positions(spec.shape, spec.hex_radius)
    neighbors = adjacency_map(positions, spec.hex_radius)
    tiles: List[Tile] = [Tile(id=tile_id, x=x, y=y) for tile_id, (x, y) in enumerate(positions)]

    runtime.raise_if_cancelled()
    resource_outcome = assign_resources(
        tiles,
        spec.effective_resource_counts(),
        neighbors,
        enforce_adjacency=spec.enforce_resource_adjacency,
        rng=random.Random(derive_seed(base_seed, "resources")),
        budget=runtime.budget(spec.max_search_steps),
        shuffle_search_order=spec.shuffle_search_order,
    )

    runtime.raise_if_cancelled()
    producing = [index for index, tile in enumerate(tiles) if tile.resource is not Resource.DESERT]
    dice_outcome = assign_dice(
        [tiles[index] for index in producing],
        spec.effective_dice_values(),
        restrict_neighbors(neighbors, producing),
        enforce_adjacency=spec.enforce_dice_adjacency,
        rng=random.Random(derive_seed(base_seed, "dice")),
        budget=runtime.budget(spec.max_search_steps),
        stress_high_probability=spec.stress_high_probability,
        strategy=spec.dice_strategy,
        local_search_iterations=spec.local_search_iterations,
        shuffle_search_order=spec.shuffle_search_order,
    )
    runtime.raise_if_cancelled()

    logger.debug(
        "Generated %s board (seed=%d, resources=%s, dice=%s).",
        spec.shape.value,
        base_seed,
        resource_outcome.value,
        dice_outcome.value,
    )
    return Board(
        shape=spec.shape,
        hex_radius=spec.hex_radius,
        tiles=tuple(HexTile.from_tile(tile) for tile in tiles),
        bounds=bounding_box(positions, spec.hex_radius),
        neighbors=neighbors,
        resource_outcome=resource_outcome,
        dice_outcome=dice_outcome,
        seed=base_seed,
    )
