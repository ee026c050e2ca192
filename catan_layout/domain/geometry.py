"""Tile center layout and the center-distance neighbor test."""

from __future__ import annotations

import math
from typing import Dict, List, Mapping, Sequence, Tuple

from .board import BoardShape, Bounds, Point, VIEWPORT_MARGIN_FACTOR

SQRT3 = math.sqrt(3)
COMPACT_BOARD_RADIUS = 2
EXPANDED_ROW_COUNTS = (3, 4, 5, 6, 5, 4, 3)
EXPANDED_ROW_WIDTH = 6

# Neighbor distance for this layout is sqrt(3) * radius; the extra slack absorbs
# float drift. Changing it changes which boards count as valid.
ADJACENCY_FACTOR = 1.8


def tile_positions(shape: BoardShape, hex_radius: float) -> List[Point]:
    shape = BoardShape(shape)
    if shape is BoardShape.COMPACT:
        return [axial_to_pixel(q, r, hex_radius) for q, r in axial_coords(COMPACT_BOARD_RADIUS)]
    return _row_positions(EXPANDED_ROW_COUNTS, hex_radius)


def axial_coords(radius: int) -> List[Tuple[int, int]]:
    coords: List[Tuple[int, int]] = []
    for q in range(-radius, radius + 1):
        r_min = max(-radius, -q - radius)
        r_max = min(radius, -q + radius)
        for r in range(r_min, r_max + 1):
            coords.append((q, r))
    return coords


def axial_to_pixel(q: int, r: int, hex_radius: float) -> Point:
    x = hex_radius * SQRT3 * (q + r / 2)
    y = hex_radius * 1.5 * r
    return (x, y)


def _row_positions(row_counts: Sequence[int], hex_radius: float) -> List[Point]:
    positions: List[Point] = []
    for row, count in enumerate(row_counts):
        offset = (EXPANDED_ROW_WIDTH - count) / 2
        for column in range(count):
            positions.append(((offset + column) * hex_radius * SQRT3, row * hex_radius * 1.5))
    return positions


def are_adjacent(first: Point, second: Point, hex_radius: float) -> bool:
    distance = math.hypot(first[0] - second[0], first[1] - second[1])
    return distance <= hex_radius * ADJACENCY_FACTOR


def adjacency_map(positions: Sequence[Point], hex_radius: float) -> Dict[int, Tuple[int, ...]]:
    """Index every position's neighbors, in ascending index order."""
    neighbors: Dict[int, List[int]] = {index: [] for index in range(len(positions))}
    for first in range(len(positions)):
        for second in range(first + 1, len(positions)):
            if are_adjacent(positions[first], positions[second], hex_radius):
                neighbors[first].append(second)
                neighbors[second].append(first)
    return {index: tuple(sorted(ids)) for index, ids in neighbors.items()}


def restrict_neighbors(
    neighbors: Mapping[int, Sequence[int]], indices: Sequence[int]
) -> Dict[int, Tuple[int, ...]]:
    """Re-key a neighbor index onto a subset of tiles, numbered by position in `indices`."""
    local = {original: position for position, original in enumerate(indices)}
    return {
        position: tuple(sorted(local[other] for other in neighbors[original] if other in local))
        for position, original in enumerate(indices)
    }


def bounding_box(positions: Sequence[Point], hex_radius: float) -> Bounds:
    if not positions:
        raise ValueError("Cannot bound an empty set of positions.")
    margin = hex_radius * VIEWPORT_MARGIN_FACTOR
    min_x = min(x for x, _ in positions) - hex_radius
    min_y = min(y for _, y in positions) - hex_radius
    max_x = max(x for x, _ in positions) + hex_radius
    max_y = max(y for _, y in positions) + hex_radius
    return Bounds(
        min_x=min_x - margin,
        min_y=min_y - margin,
        max_x=max_x + margin,
        max_y=max_y + margin,
    )
