"""Resource and dice assignment search."""

from .dice import assign_dice, backtrack_dice, local_search_dice, place_high_probability
from .resources import assign_resources, backtrack_resources
from .runtime import GenerationCancelled, GenerationRuntime, SearchBudget
from .seeding import board_signature, derive_seed, generation_seed

__all__ = [
    "assign_dice",
    "backtrack_dice",
    "local_search_dice",
    "place_high_probability",
    "assign_resources",
    "backtrack_resources",
    "GenerationCancelled",
    "GenerationRuntime",
    "SearchBudget",
    "board_signature",
    "derive_seed",
    "generation_seed",
]
