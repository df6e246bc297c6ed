"""
artledger.seed — seed derivation and attribute selection.

seed = H(block_hash ‖ u256(timestamp) ‖ u256(token_id) ‖ ledger_address)

read as a 256-bit big-endian integer, where H is keccak-256 by default and
u256 is a 32-byte big-endian unsigned encoding. Attributes are then sliced out
of the seed:

    color_a = bits [24, 48)
    color_b = bits [48, 72)
    shape   = seed mod 3     (0 circles, 1 rectangles, 2 star polygon)

The block hash changes every block, so the same token renders differently
under different snapshots. Nothing here is cached or stored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .runtime.context import BlockEnv, to_bytes
from .runtime.hash_api import get_hasher

U256_MAX = (1 << 256) - 1
_MASK24 = 0xFFFFFF


class Shape(enum.IntEnum):
    CIRCLES = 0
    RECTANGLES = 1
    STAR_POLYGON = 2

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Shape.CIRCLES: "Concentric Circles",
    Shape.RECTANGLES: "Rounded Rectangles",
    Shape.STAR_POLYGON: "Star Polygon",
}


@dataclass(frozen=True)
class Attributes:
    color_a: int
    color_b: int
    shape: Shape


def _u256(name: str, v: int) -> bytes:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{name} must be int, got {type(v).__name__}")
    if v < 0 or v > U256_MAX:
        raise ValueError(f"{name} out of uint256 range: {v}")
    return v.to_bytes(32, "big")


def seed_preimage(block_hash: bytes, timestamp: int, token_id: int, ledger_address: bytes) -> bytes:
    """Packed hash input (no separators, fixed-width integers)."""
    return to_bytes(block_hash) + _u256("timestamp", timestamp) + _u256("token_id", token_id) + to_bytes(ledger_address)


def derive_seed(
    block_hash: bytes,
    timestamp: int,
    token_id: int,
    ledger_address: bytes,
    *,
    hash_name: str = "keccak256",
) -> int:
    digest = get_hasher(hash_name)(seed_preimage(block_hash, timestamp, token_id, ledger_address))
    return int.from_bytes(digest, "big")


def seed_for(env: BlockEnv, token_id: int, ledger_address: bytes, *, hash_name: str = "keccak256") -> int:
    """Seed for `token_id` under the entropy snapshot `env`."""
    return derive_seed(env.block_hash, env.timestamp, token_id, ledger_address, hash_name=hash_name)


def select_attributes(seed: int) -> Attributes:
    if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
        raise ValueError("seed must be a non-negative int")
    return Attributes(
        color_a=(seed >> 24) & _MASK24,
        color_b=(seed >> 48) & _MASK24,
        shape=Shape(seed % 3),
    )


__all__ = [
    "Shape",
    "Attributes",
    "seed_preimage",
    "derive_seed",
    "seed_for",
    "select_attributes",
]
