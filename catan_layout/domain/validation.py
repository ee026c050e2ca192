from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .board import Board, BoardSpec, HexTile, Resource


def adjacent_pairs(board: Board) -> List[Tuple[HexTile, HexTile]]:
    pairs: List[Tuple[HexTile, HexTile]] = []
    for tile in board.tiles:
        for neighbor in board.adjacent_tiles(tile.id):
            if neighbor.id > tile.id:
                pairs.append((tile, neighbor))
    return pairs


def validate_counts(board: Board, spec: Optional[BoardSpec] = None) -> bool:
    """Check that the board consumed its resource and dice multisets exactly."""
    spec = spec if spec is not None else BoardSpec(shape=board.shape, hex_radius=board.hex_radius)
    if len(board.tiles) != spec.tile_count:
        return False

    expected_counts = {resource: count for resource, count in spec.effective_resource_counts().items() if count}
    if board.resource_counts() != expected_counts:
        return False

    numbers = []
    for tile in board.tiles:
        if tile.resource is Resource.DESERT:
            if tile.dice is not None:
                return False
        elif tile.dice is None:
            return False
        else:
            numbers.append(tile.dice)
    return sorted(numbers) == sorted(spec.effective_dice_values())


def resource_conflicts(board: Board) -> int:
    return sum(1 for first, second in adjacent_pairs(board) if first.resource is second.resource)


def dice_conflicts(board: Board) -> int:
    return sum(
        1
        for first, second in adjacent_pairs(board)
        if first.dice is not None and first.dice == second.dice
    )


def high_probability_pairs(board: Board) -> int:
    return sum(
        1
        for first, second in adjacent_pairs(board)
        if first.is_high_probability and second.is_high_probability
    )


def conflict_summary(board: Board) -> Dict[str, int]:
    return {
        "resource_conflicts": resource_conflicts(board),
        "dice_conflicts": dice_conflicts(board),
        "high_probability_pairs": high_probability_pairs(board),
    }
