"""
artledger.runtime.storage — atomic key/value store with nested checkpoints.

The ledger keeps every record (owners, balances, approvals, the id counter)
in one bytes→bytes store. Atomicity of ledger calls comes from checkpoints:
writes go to the top overlay, reads consult overlays from top → base,
`commit()` merges the top overlay into its parent (or the base when it is the
last one) and `revert()` discards it.

Key properties
--------------
- Pure Python, no I/O; deterministic semantics.
- Bytes-in / bytes-out; inputs are copied to immutable `bytes`.
- "Empty means absent": storing b"" deletes the key (canonical form).
- Nested checkpoints with O(changes) merge cost.

Intended usage
--------------
    store = Store()
    with store.atomic():
        store.set(b"k", b"v")
        store.set_int(b"n", 7)
    # an exception inside the block discards both writes

Integers are stored as minimal big-endian unsigned bytes (0 -> b"\\x00").
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, MutableMapping, Optional

MAX_KEY_BYTES = 128
U256_MAX = (1 << 256) - 1


class StorageError(Exception):
    """Malformed key/value or checkpoint misuse."""


def _check_key(key: object) -> bytes:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise StorageError("storage key must be bytes")
    k = bytes(key)
    if len(k) == 0:
        raise StorageError("storage key must be non-empty")
    if len(k) > MAX_KEY_BYTES:
        raise StorageError(f"storage key too long (>{MAX_KEY_BYTES} bytes)")
    return k


def _check_value(value: object) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise StorageError("storage value must be bytes")
    return bytes(value)


class Store:
    """
    A copy-on-write bytes store with nested checkpoints.

    Parameters
    ----------
    backend :
        Optional external mapping used as the committed base. If not provided,
        an internal dict is used.
    """

    def __init__(self, backend: Optional[MutableMapping[bytes, bytes]] = None) -> None:
        self._base: MutableMapping[bytes, bytes] = backend if backend is not None else {}
        # Each overlay maps key -> value, or None for a staged deletion.
        self._layers: List[Dict[bytes, Optional[bytes]]] = []
        self._lock = threading.RLock()

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints (0 when nothing is staged)."""
        return len(self._layers)

    def begin(self) -> int:
        """Open a checkpoint. Returns the new depth."""
        with self._lock:
            self._layers.append({})
            return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or into the base if it is the last one."""
        with self._lock:
            if not self._layers:
                raise StorageError("commit without an open checkpoint")
            top = self._layers.pop()
            if self._layers:
                self._layers[-1].update(top)
                return
            for k, v in top.items():
                if v is None:
                    self._base.pop(k, None)
                else:
                    self._base[k] = v

    def revert(self) -> None:
        """Discard the top overlay."""
        with self._lock:
            if not self._layers:
                raise StorageError("revert without an open checkpoint")
            self._layers.pop()

    @contextmanager
    def atomic(self) -> Iterator["Store"]:
        """Run a block inside a checkpoint: commit on success, revert on any exception."""
        self.begin()
        try:
            yield self
        except BaseException:
            self.revert()
            raise
        self.commit()

    # --------------------------------------------------------------------- #
    # Core ops
    # --------------------------------------------------------------------- #

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value for `key`, or None if not set."""
        k = _check_key(key)
        with self._lock:
            for layer in reversed(self._layers):
                if k in layer:
                    return layer[k]
            return self._base.get(k)

    def set(self, key: bytes, value: bytes) -> None:
        """Set `key` to `value`. An empty value deletes the key."""
        k = _check_key(key)
        v = _check_value(value)
        with self._lock:
            staged: Optional[bytes] = v if v else None
            if self._layers:
                self._layers[-1][k] = staged
            elif staged is None:
                self._base.pop(k, None)
            else:
                self._base[k] = staged

    def delete(self, key: bytes) -> None:
        self.set(key, b"")

    # --------------------------------------------------------------------- #
    # Typed helpers
    # --------------------------------------------------------------------- #

    def get_int(self, key: bytes, default: int = 0) -> int:
        """Read a big-endian unsigned integer; `default` when unset."""
        raw = self.get(key)
        if raw is None:
            return default
        return int.from_bytes(raw, "big", signed=False)

    def set_int(self, key: bytes, value: int) -> None:
        """Store `value` as minimal big-endian unsigned bytes (0 <= value <= 2^256-1)."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise StorageError("set_int value must be int")
        if value < 0 or value > U256_MAX:
            raise StorageError("set_int out of range (must fit in 256 bits)")
        width = max(1, (value.bit_length() + 7) // 8)
        self.set(key, value.to_bytes(width, "big"))

    def set_bytes(self, key: bytes, value: Optional[bytes]) -> None:
        """Store `value`; None or b"" deletes the key."""
        self.set(key, b"" if value is None else value)

    # --------------------------------------------------------------------- #
    # Inspection
    # --------------------------------------------------------------------- #

    def snapshot(self) -> Mapping[bytes, bytes]:
        """Flattened view of base + all open overlays (copy)."""
        with self._lock:
            out = dict(self._base)
            for layer in self._layers:
                for k, v in layer.items():
                    if v is None:
                        out.pop(k, None)
                    else:
                        out[k] = v
            return out


__all__ = ["Store", "StorageError", "MAX_KEY_BYTES", "U256_MAX"]
