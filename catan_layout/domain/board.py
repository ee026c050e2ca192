from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Point = Tuple[float, float]

VIEWPORT_MARGIN_FACTOR = 1.2
DEFAULT_HEX_RADIUS = 50.0
DEFAULT_MAX_SEARCH_STEPS = 250_000
DEFAULT_LOCAL_SEARCH_ITERATIONS = 2_000


class InvalidBoardSpec(ValueError):
    """Raised when a BoardSpec cannot describe a playable board."""


class Resource(str, Enum):
    HILLS = "hills"
    FOREST = "forest"
    PASTURE = "pasture"
    FIELDS = "fields"
    MOUNTAINS = "mountains"
    DESERT = "desert"


class BoardShape(str, Enum):
    COMPACT = "compact"
    EXPANDED = "expanded"


class DiceStrategy(str, Enum):
    BACKTRACKING = "backtracking"
    LOCAL_SEARCH = "local_search"


class AssignmentOutcome(str, Enum):
    UNCONSTRAINED = "unconstrained"
    SEARCH = "search"
    LOCAL_SEARCH = "local_search"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


RESOURCE_COUNTS: Dict[BoardShape, Dict[Resource, int]] = {
    BoardShape.COMPACT: {
        Resource.HILLS: 3,
        Resource.FOREST: 4,
        Resource.PASTURE: 4,
        Resource.FIELDS: 4,
        Resource.MOUNTAINS: 3,
        Resource.DESERT: 1,
    },
    BoardShape.EXPANDED: {
        Resource.HILLS: 5,
        Resource.FOREST: 6,
        Resource.PASTURE: 6,
        Resource.FIELDS: 6,
        Resource.MOUNTAINS: 5,
        Resource.DESERT: 2,
    },
}

DICE_VALUES: Dict[BoardShape, Tuple[int, ...]] = {
    BoardShape.COMPACT: (2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12),
    BoardShape.EXPANDED: (
        2, 3, 4, 4, 4, 5, 5, 5, 5, 6, 6, 6, 6, 6,
        8, 8, 8, 8, 8, 9, 9, 9, 9, 10, 10, 10, 11, 12,
    ),
}

TILE_COUNTS: Dict[BoardShape, int] = {
    shape: sum(counts.values()) for shape, counts in RESOURCE_COUNTS.items()
}

DICE_TOKENS = frozenset({2, 3, 4, 5, 6, 8, 9, 10, 11, 12})
HIGH_PROBABILITY_TOKENS = frozenset({6, 8})


@dataclass
class Tile:
    id: int
    x: float
    y: float
    resource: Optional[Resource] = None
    dice: Optional[int] = None

    @property
    def center(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class HexTile:
    id: int
    x: float
    y: float
    resource: Resource
    dice: Optional[int]

    @property
    def center(self) -> Point:
        return (self.x, self.y)

    @property
    def is_desert(self) -> bool:
        return self.resource is Resource.DESERT

    @property
    def is_high_probability(self) -> bool:
        return self.dice in HIGH_PROBABILITY_TOKENS

    @classmethod
    def from_tile(cls, tile: Tile) -> "HexTile":
        if tile.resource is None:
            raise ValueError(f"Tile {tile.id} has no resource assigned.")
        return cls(id=tile.id, x=tile.x, y=tile.y, resource=tile.resource, dice=tile.dice)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def view_box(self) -> str:
        return f"{self.min_x:g} {self.min_y:g} {self.width:g} {self.height:g}"


@dataclass(frozen=True)
class BoardSpec:
    shape: BoardShape = BoardShape.COMPACT
    hex_radius: float = DEFAULT_HEX_RADIUS
    enforce_resource_adjacency: bool = True
    enforce_dice_adjacency: bool = True
    stress_high_probability: bool = False
    dice_strategy: DiceStrategy = DiceStrategy.BACKTRACKING
    shuffle_search_order: bool = False
    max_search_steps: int = DEFAULT_MAX_SEARCH_STEPS
    local_search_iterations: int = DEFAULT_LOCAL_SEARCH_ITERATIONS
    resource_counts: Optional[Mapping[Resource, int]] = None
    dice_values: Optional[Sequence[int]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", BoardShape(self.shape))
        object.__setattr__(self, "dice_strategy", DiceStrategy(self.dice_strategy))
        if not self.hex_radius > 0:
            raise InvalidBoardSpec(f"hex_radius must be positive, received {self.hex_radius!r}.")
        if self.max_search_steps < 1:
            raise InvalidBoardSpec("max_search_steps must be >= 1.")
        if self.local_search_iterations < 0:
            raise InvalidBoardSpec("local_search_iterations must be >= 0.")

        if self.resource_counts is not None:
            counts = {Resource(resource): int(count) for resource, count in self.resource_counts.items()}
            object.__setattr__(self, "resource_counts", counts)
        if self.dice_values is not None:
            object.__setattr__(self, "dice_values", tuple(int(value) for value in self.dice_values))

        counts = self.effective_resource_counts()
        if any(count < 0 for count in counts.values()):
            raise InvalidBoardSpec("Resource counts must be non-negative.")
        if sum(counts.values()) != self.tile_count:
            raise InvalidBoardSpec(
                f"Expected resource counts totalling {self.tile_count} for the {self.shape.value} "
                f"board, received {sum(counts.values())}."
            )

        dice_values = self.effective_dice_values()
        unknown = sorted(set(dice_values) - DICE_TOKENS)
        if unknown:
            raise InvalidBoardSpec(f"Unknown dice tokens: {unknown}.")
        expected_dice = self.tile_count - counts.get(Resource.DESERT, 0)
        if len(dice_values) != expected_dice:
            raise InvalidBoardSpec(
                f"Expected {expected_dice} dice tokens, received {len(dice_values)}."
            )

    @property
    def tile_count(self) -> int:
        return TILE_COUNTS[self.shape]

    def effective_resource_counts(self) -> Dict[Resource, int]:
        if self.resource_counts is not None:
            return dict(self.resource_counts)
        return dict(RESOURCE_COUNTS[self.shape])

    def effective_dice_values(self) -> Tuple[int, ...]:
        if self.dice_values is not None:
            return tuple(self.dice_values)
        return DICE_VALUES[self.shape]


@dataclass(frozen=True)
class Board:
    shape: BoardShape
    hex_radius: float
    tiles: Tuple[HexTile, ...]
    bounds: Bounds
    neighbors: Mapping[int, Tuple[int, ...]] = field(repr=False, compare=False)
    resource_outcome: AssignmentOutcome = AssignmentOutcome.UNCONSTRAINED
    dice_outcome: AssignmentOutcome = AssignmentOutcome.UNCONSTRAINED
    seed: Optional[int] = None
    _tile_lookup: Mapping[int, HexTile] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        neighbors = {tile_id: tuple(ids) for tile_id, ids in self.neighbors.items()}
        object.__setattr__(self, "neighbors", MappingProxyType(neighbors))
        object.__setattr__(self, "_tile_lookup", MappingProxyType({tile.id: tile for tile in self.tiles}))

    @property
    def used_fallback(self) -> bool:
        return AssignmentOutcome.FALLBACK in (self.resource_outcome, self.dice_outcome)

    def get_tile(self, tile_id: int) -> HexTile:
        return self._tile_lookup[tile_id]

    def adjacent_tiles(self, tile_id: int) -> List[HexTile]:
        return [self.get_tile(neighbor_id) for neighbor_id in self.neighbors[tile_id]]

    def non_desert_tiles(self) -> List[HexTile]:
        return [tile for tile in self.tiles if not tile.is_desert]

    def resource_counts(self) -> Dict[Resource, int]:
        counts: Dict[Resource, int] = {}
        for tile in self.tiles:
            counts[tile.resource] = counts.get(tile.resource, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape": self.shape.value,
            "hex_radius": self.hex_radius,
            "seed": self.seed,
            "resource_outcome": self.resource_outcome.value,
            "dice_outcome": self.dice_outcome.value,
            "bounds": {
                "min_x": self.bounds.min_x,
                "min_y": self.bounds.min_y,
                "max_x": self.bounds.max_x,
                "max_y": self.bounds.max_y,
            },
            "tiles": [
                {
                    "id": tile.id,
                    "x": tile.x,
                    "y": tile.y,
                    "resource": tile.resource.value,
                    "dice": tile.dice,
                }
                for tile in self.tiles
            ],
        }
