"""Board model, geometry and validation."""

from .board import (
    AssignmentOutcome,
    Board,
    BoardShape,
    BoardSpec,
    Bounds,
    DiceStrategy,
    HexTile,
    InvalidBoardSpec,
    Resource,
    Tile,
)
from .geometry import adjacency_map, are_adjacent, bounding_box, tile_positions
from .validation import (
    dice_conflicts,
    high_probability_pairs,
    resource_conflicts,
    validate_counts,
)

__all__ = [
    "AssignmentOutcome",
    "Board",
    "BoardShape",
    "BoardSpec",
    "Bounds",
    "DiceStrategy",
    "HexTile",
    "InvalidBoardSpec",
    "Resource",
    "Tile",
    "adjacency_map",
    "are_adjacent",
    "bounding_box",
    "tile_positions",
    "dice_conflicts",
    "high_probability_pairs",
    "resource_conflicts",
    "validate_counts",
]
