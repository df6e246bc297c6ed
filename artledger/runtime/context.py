"""
artledger.runtime.context — BlockEnv and identity helpers (deterministic)

The ledger never reads wall-clock time or OS randomness. Whatever "ambient"
information it needs (the most recent block hash and the block timestamp used
as entropy for metadata seeds) is handed to it by the host as a `BlockEnv`.

Design notes
------------
- Identities are raw bytes (20 bytes by convention). The null identity is
  twenty zero bytes and is never a valid owner or recipient.
- Hex strings (with or without "0x") are accepted by helpers and normalized to
  bytes, so CLI/JSON inputs can be passed straight through.
- All numeric fields are validated to be non-negative.
- `block_hash` is the hash of the most recent *sealed* block; it changes from
  block to block, which is why metadata derived from it is only reproducible
  within one snapshot.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Union

ADDRESS_LEN = 20
ZERO_ADDRESS = b"\x00" * ADDRESS_LEN


# ----------------------------- helpers ----------------------------- #

class ContextError(Exception):
    """Validation or coercion failure for BlockEnv / identity inputs."""


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def to_address(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """Coerce to an identity and check its length."""
    b = to_bytes(value)
    if len(b) != ADDRESS_LEN:
        raise ContextError(f"address must be {ADDRESS_LEN} bytes, got {len(b)}")
    return b


def is_zero_address(addr: Any) -> bool:
    """True for None, empty bytes, or the all-zero identity."""
    if addr is None:
        return True
    if not isinstance(addr, (bytes, bytearray, memoryview)):
        return False
    b = bytes(addr)
    return len(b) == 0 or b == b"\x00" * len(b)


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- models ------------------------------ #

@dataclass(frozen=True)
class BlockEnv:
    """
    Per-block environment the host exposes to the ledger.

    Fields
    ------
    height:      Block height (0-based).
    timestamp:   Consensus timestamp (seconds since epoch).
    block_hash:  Hash of the most recent block (32 bytes).
    """
    height: int
    timestamp: int
    block_hash: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "height", _require_non_negative_int("height", self.height))
        object.__setattr__(self, "timestamp", _require_non_negative_int("timestamp", self.timestamp))
        bh = to_bytes(self.block_hash)
        if len(bh) != 32:
            raise ContextError(f"block_hash must be 32 bytes, got {len(bh)}")
        object.__setattr__(self, "block_hash", bh)

    # ---- constructors ---- #

    @classmethod
    def genesis(cls) -> "BlockEnv":
        return cls(height=0, timestamp=0, block_hash=b"\x00" * 32)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BlockEnv":
        return cls(
            height=_require_non_negative_int("height", d.get("height", 0)),
            timestamp=_require_non_negative_int("timestamp", d.get("timestamp", 0)),
            block_hash=to_bytes(d.get("block_hash", b"\x00" * 32)),
        )

    # ---- views ---- #

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["block_hash"] = to_hex(self.block_hash)
        return d


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "ContextError",
    "to_bytes",
    "to_hex",
    "to_address",
    "is_zero_address",
    "BlockEnv",
]
