"""
artledger.receiver — acknowledgement check for safe transfers.

A recipient that carries code must confirm it understands token receipt by
returning ON_RECEIVED_MAGIC from its callback (called with operator, token id
and an opaque payload). Recipients without code are accepted unconditionally.
"""

from __future__ import annotations

import enum
import logging

from .runtime.host import Host

log = logging.getLogger(__name__)

# bytes4(keccak256("onERC721Received(address,address,uint256,bytes)"))
ON_RECEIVED_MAGIC = bytes.fromhex("150b7a02")


class HookOutcome(str, enum.Enum):
    ACCEPTED = "ACCEPTED"
    SKIPPED = "SKIPPED"
    CALL_FAILED = "CALL_FAILED"
    WRONG_VALUE = "WRONG_VALUE"

    @property
    def accepted(self) -> bool:
        return self in (HookOutcome.ACCEPTED, HookOutcome.SKIPPED)


def check_on_received(host: Host, operator: bytes, to: bytes, token_id: int, data: bytes = b"") -> HookOutcome:
    if not host.is_contract(to):
        return HookOutcome.SKIPPED
    res = host.call_on_received(to, operator, token_id, data)
    if not res.ok:
        log.warning(
            "receiver call failed",
            extra={"to": to.hex(), "token_id": token_id, "err": res.error},
        )
        return HookOutcome.CALL_FAILED
    if res.ret != ON_RECEIVED_MAGIC:
        log.warning(
            "receiver returned wrong acknowledgement",
            extra={"to": to.hex(), "token_id": token_id, "ret": res.ret.hex()},
        )
        return HookOutcome.WRONG_VALUE
    return HookOutcome.ACCEPTED


__all__ = ["ON_RECEIVED_MAGIC", "HookOutcome", "check_on_received"]
