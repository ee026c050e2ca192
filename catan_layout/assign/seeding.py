from __future__ import annotations

import hashlib
import random
from typing import Any

from catan_layout.domain.board import Board

SEED_BITS = 63


def generation_seed(requested_seed: int | None) -> int:
    """Return the base seed for a generation.

    A caller-supplied seed is preserved exactly. Otherwise a fresh one is drawn
    from system entropy, so the board still records how to reproduce itself.
    """
    if requested_seed is not None:
        return int(requested_seed)
    return random.SystemRandom().getrandbits(SEED_BITS)


def derive_seed(base_seed: int, *parts: Any) -> int:
    payload = "|".join([str(base_seed), *(str(part) for part in parts)]).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(payload, digest_size=8).digest(), "big")


def board_signature(board: Board) -> str:
    tile_bits = [
        f"{tile.id}:{tile.resource.value}:{tile.dice if tile.dice is not None else 'D'}"
        for tile in sorted(board.tiles, key=lambda item: item.id)
    ]
    payload = f"{board.shape.value};{';'.join(tile_bits)}".encode("utf-8")
    return hashlib.blake2b(payload, digest_size=8).hexdigest()
