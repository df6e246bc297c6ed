"""
artledger.runtime.events — ordered event log and receipt encoding for ledger calls.

Events are `(name: bytes, args: dict)` pairs. Names are non-empty bytes of at
most MAX_EVENT_NAME_BYTES; arg keys are identifier-like strings; values are
bytes, bool or uint256 ints. `for_receipt` turns them into JSON-safe dicts
with typed `{"k", "t", "v"}` args.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

MAX_EVENT_NAME_BYTES = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_INT_BITS = 256

# Keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EventError(Exception):
    """An event name, key or value failed validation."""


@dataclass(frozen=True)
class Event:
    """A notification emitted by a ledger state change."""

    name: bytes
    args: Dict[str, Any]


@dataclass(frozen=True)
class CanonicalEvent:
    """
    Receipt form of an event:

        name: the event name decoded as ASCII
        args: sequence of {"k", "t", "v"} dicts
              t="b" => bytes encoded as 0x-prefixed hex
              t="i" => integer
              t="z" => boolean
    """

    name: str
    args: Sequence[Mapping[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "args": [dict(a) for a in self.args]}


def _check_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)):
        raise EventError("event name must be bytes")
    b = bytes(name)
    if len(b) == 0:
        raise EventError("event name must be non-empty")
    if len(b) > MAX_EVENT_NAME_BYTES:
        raise EventError(f"event name too long ({len(b)} bytes)")
    return b


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise EventError("event key must be str")
    if len(key) == 0 or len(key) > MAX_KEY_LEN:
        raise EventError(f"event key length out of range: {key!r}")
    if not _KEY_RE.match(key):
        raise EventError(f"event key has invalid characters: {key!r}")
    return key


def _check_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise EventError(f"event bytes arg too long ({len(b)} bytes)")
        return b
    # bool is a subclass of int, so check it before int.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value < 0 or value.bit_length() > MAX_INT_BITS:
            raise EventError("event int arg out of uint256 range")
        return value
    raise EventError(f"unsupported event arg type: {type(value).__name__}")


class EventSink:
    """
    Ordered, in-memory record of emitted events.

    `mark()` returns the current length; `truncate(marker)` drops everything
    emitted after it. The ledger pairs these with store checkpoints so a
    reverted call leaves no events behind.
    """

    def __init__(self) -> None:
        self._events: List[Event] = []
        self._lock = threading.RLock()

    def emit(self, name: bytes, args: Mapping[str, Any]) -> Event:
        bname = _check_name(name)
        if not isinstance(args, Mapping):
            raise EventError("event args must be a mapping")
        checked = {_check_key(k): _check_value(v) for k, v in args.items()}
        ev = Event(bname, checked)
        with self._lock:
            self._events.append(ev)
        return ev

    def mark(self) -> int:
        with self._lock:
            return len(self._events)

    def truncate(self, marker: int) -> None:
        with self._lock:
            if marker < 0 or marker > len(self._events):
                raise EventError(f"bad event marker {marker}")
            del self._events[marker:]

    def since(self, marker: int) -> Tuple[Event, ...]:
        with self._lock:
            return tuple(self._events[marker:])

    def events(self) -> Tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        return self.mark()


def to_canonical(ev: Event) -> CanonicalEvent:
    enc: List[Dict[str, Any]] = []
    for k, v in ev.args.items():
        if isinstance(v, bytes):
            enc.append({"k": k, "t": "b", "v": "0x" + v.hex()})
        elif isinstance(v, bool):
            enc.append({"k": k, "t": "z", "v": v})
        else:
            enc.append({"k": k, "t": "i", "v": int(v)})
    return CanonicalEvent(name=ev.name.decode("ascii", errors="replace"), args=tuple(enc))


def for_receipt(events: Sequence[Event]) -> List[Dict[str, Any]]:
    """Convert events into JSON-safe receipt dicts."""
    return [to_canonical(ev).to_dict() for ev in events]


__all__ = [
    "Event",
    "CanonicalEvent",
    "EventError",
    "EventSink",
    "to_canonical",
    "for_receipt",
    "MAX_EVENT_NAME_BYTES",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
