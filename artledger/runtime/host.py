"""
artledger.runtime.host — capabilities the execution host provides to the ledger.

The ledger needs three things it cannot compute itself:

- the current block environment (most recent block hash + timestamp), used
  as ambient entropy by metadata seeds;
- whether an identity carries code (is a contract) and must therefore
  acknowledge safe transfers;
- a synchronous call into such a contract's receipt callback.

`Host` is the protocol; `LocalHost` is a deterministic in-process
implementation used by tests, the CLI and local simulation. Contracts are
registered as plain callables:

    def receiver(operator: bytes, token_id: int, data: bytes) -> bytes: ...

    host = LocalHost()
    host.register_contract(vault_addr, receiver)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from .context import BlockEnv, to_bytes
from .hash_api import hash_concat

log = logging.getLogger(__name__)

ReceiverFn = Callable[[bytes, int, bytes], bytes]

BLOCK_TIME_SECONDS = 12


@dataclass(frozen=True)
class ReceiverCall:
    """Result of a call into a recipient contract's receipt callback."""

    ok: bool
    ret: bytes = b""
    error: Optional[str] = None


@runtime_checkable
class Host(Protocol):
    def block_env(self) -> BlockEnv: ...
    def is_contract(self, addr: bytes) -> bool: ...
    def call_on_received(self, to: bytes, operator: bytes, token_id: int, data: bytes) -> ReceiverCall: ...


class LocalHost:
    """In-memory host: a settable block environment plus a contract registry."""

    def __init__(self, env: Optional[BlockEnv] = None) -> None:
        self._env = env or BlockEnv.genesis()
        # addr -> receiver callable, or None for code without a receipt callback
        self._contracts: Dict[bytes, Optional[ReceiverFn]] = {}
        self._lock = threading.RLock()

    # ---- block environment ---- #

    def block_env(self) -> BlockEnv:
        with self._lock:
            return self._env

    def set_block_env(self, env: BlockEnv) -> None:
        with self._lock:
            self._env = env

    def advance(self, *, block_hash: Optional[bytes] = None, timestamp: Optional[int] = None) -> BlockEnv:
        """
        Seal the next block. Without overrides the new hash chains from the
        previous one and the timestamp moves forward by BLOCK_TIME_SECONDS.
        """
        with self._lock:
            prev = self._env
            height = prev.height + 1
            if block_hash is None:
                block_hash = hash_concat(prev.block_hash, height.to_bytes(8, "big"))
            if timestamp is None:
                timestamp = prev.timestamp + BLOCK_TIME_SECONDS
            self._env = BlockEnv(height=height, timestamp=timestamp, block_hash=block_hash)
            return self._env

    # ---- contracts ---- #

    def register_contract(self, addr: bytes, receiver: Optional[ReceiverFn] = None) -> None:
        with self._lock:
            self._contracts[to_bytes(addr)] = receiver

    def is_contract(self, addr: bytes) -> bool:
        with self._lock:
            return bytes(addr) in self._contracts

    def call_on_received(self, to: bytes, operator: bytes, token_id: int, data: bytes) -> ReceiverCall:
        with self._lock:
            fn = self._contracts.get(bytes(to))
        if fn is None:
            return ReceiverCall(ok=False, error="recipient has no receipt callback")
        try:
            ret = fn(bytes(operator), int(token_id), bytes(data))
        except Exception as e:
            # A throwing recipient is a failed call, not a host fault.
            log.debug("receiver call raised", extra={"to": bytes(to).hex(), "err": repr(e)})
            return ReceiverCall(ok=False, error=repr(e))
        if not isinstance(ret, (bytes, bytearray)):
            return ReceiverCall(ok=True, ret=b"", error=f"non-bytes return: {type(ret).__name__}")
        return ReceiverCall(ok=True, ret=bytes(ret))


__all__ = ["Host", "LocalHost", "ReceiverCall", "ReceiverFn", "BLOCK_TIME_SECONDS"]
