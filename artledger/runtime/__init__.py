"""
artledger.runtime — host-facing primitives the ledger is built on.

- context  : BlockEnv, identity coercion helpers, ZERO_ADDRESS
- hash_api : keccak-256 / sha3-256 wrappers
- storage  : atomic key/value Store with nested checkpoints
- events   : EventSink and receipt encoding
- host     : Host protocol and the in-process LocalHost
"""

from __future__ import annotations

from .context import ZERO_ADDRESS, BlockEnv, ContextError, is_zero_address, to_address, to_bytes, to_hex
from .events import Event, EventError, EventSink, for_receipt
from .host import Host, LocalHost, ReceiverCall
from .storage import StorageError, Store

__all__ = [
    "ZERO_ADDRESS",
    "BlockEnv",
    "ContextError",
    "is_zero_address",
    "to_address",
    "to_bytes",
    "to_hex",
    "Event",
    "EventError",
    "EventSink",
    "for_receipt",
    "Host",
    "LocalHost",
    "ReceiverCall",
    "StorageError",
    "Store",
]
