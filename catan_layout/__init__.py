"""Constraint-based layout of Catan-style hex boards."""

from .assign.runtime import GenerationCancelled, GenerationRuntime
from .domain.board import (
    DICE_VALUES,
    RESOURCE_COUNTS,
    TILE_COUNTS,
    AssignmentOutcome,
    Board,
    BoardShape,
    BoardSpec,
    DiceStrategy,
    HexTile,
    InvalidBoardSpec,
    Resource,
)
from .generator import generate

__version__ = "0.1.0"

__all__ = [
    "AssignmentOutcome",
    "Board",
    "BoardShape",
    "BoardSpec",
    "DICE_VALUES",
    "DiceStrategy",
    "GenerationCancelled",
    "GenerationRuntime",
    "HexTile",
    "InvalidBoardSpec",
    "RESOURCE_COUNTS",
    "Resource",
    "TILE_COUNTS",
    "generate",
]
