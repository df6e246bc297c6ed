"""
artledger.runtime.hash_api — deterministic hashing wrappers.

Goals
-----
- Strictly bytes-in, bytes-out (no implicit text/encoding).
- Keccak-256 (pre-standard SHA3, as used by EVM-style ledgers) from
  PyCryptodome; SHA3-256 from hashlib.
- One name → hasher registry so callers (seed derivation, config) can select
  the algorithm by string.

Provided APIs
-------------
- keccak256(data: bytes) -> bytes
- sha3_256(data: bytes) -> bytes
- hash_concat(*chunks: bytes, name="keccak256") -> bytes
- get_hasher(name) -> Callable[[bytes], bytes]
- HASHERS: names accepted by get_hasher
"""

from __future__ import annotations

import hashlib
from typing import Callable, Dict, Iterable

from Crypto.Hash import keccak as _keccak

HashFn = Callable[[bytes], bytes]


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise TypeError(f"{name} must be bytes-like (got {type(buf).__name__})")


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()


def sha3_256(data: bytes | bytearray | memoryview) -> bytes:
    return hashlib.sha3_256(_ensure_bytes(data, "data")).digest()


HASHERS: Dict[str, HashFn] = {
    "keccak256": keccak256,
    "sha3_256": sha3_256,
}


def get_hasher(name: str) -> HashFn:
    try:
        return HASHERS[name]
    except KeyError:
        raise ValueError(f"unknown hash algorithm {name!r} (expected one of {sorted(HASHERS)})") from None


def _join(chunks: Iterable[bytes | bytearray | memoryview]) -> bytes:
    return b"".join(_ensure_bytes(c, f"chunk[{i}]") for i, c in enumerate(chunks))


def hash_concat(*chunks: bytes | bytearray | memoryview, name: str = "keccak256") -> bytes:
    """Hash the plain concatenation of `chunks` (no separators, no length prefixes)."""
    return get_hasher(name)(_join(chunks))


__all__ = [
    "HashFn",
    "HASHERS",
    "keccak256",
    "sha3_256",
    "get_hasher",
    "hash_concat",
]
