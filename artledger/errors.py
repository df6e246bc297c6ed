"""
artledger.errors — ledger call failures.

Every failed ledger call surfaces as one of these typed exceptions and leaves
state exactly as it was before the call. Higher layers (the call envelope,
the CLI) turn them into receipt-style dicts via `to_dict()`.

Hierarchy
---------
LedgerError (base)
 ├─ InvalidAddress    : null identity where a real owner/recipient is required
 ├─ NotFound          : reference to an unminted token id
 ├─ InvalidApproval   : self-approval, or approving the current owner
 ├─ Unauthorized      : caller lacks owner/delegate/operator rights
 ├─ OwnershipMismatch : stated `from` is not the recorded owner
 └─ ReceiverRejected  : safe-transfer acknowledgement missing or wrong

ConfigError is separate: it signals a bad configuration value, not a failed call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g. 'NOT_FOUND').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _details(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = dict(data or {})
    for k, v in fields.items():
        if v is None:
            continue
        d.setdefault(k, "0x" + v.hex() if isinstance(v, (bytes, bytearray)) else v)
    return d or None


class InvalidAddress(LedgerError):
    def __init__(self, message: str = "null address", *, field_name: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_ADDRESS", data=_details(data, field=field_name))


class NotFound(LedgerError):
    def __init__(self, message: str = "token does not exist", *, token_id: Optional[int] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_FOUND", data=_details(data, token_id=token_id))


class InvalidApproval(LedgerError):
    def __init__(self, message: str = "invalid approval", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_APPROVAL", data=_details(data))


class Unauthorized(LedgerError):
    def __init__(self, message: str = "caller is not owner nor approved", *, caller: Optional[bytes] = None,
                 token_id: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="UNAUTHORIZED",
                         data=_details(data, caller=caller, token_id=token_id))


class OwnershipMismatch(LedgerError):
    def __init__(self, message: str = "from is not the owner", *, token_id: Optional[int] = None,
                 owner: Optional[bytes] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="OWNERSHIP_MISMATCH",
                         data=_details(data, token_id=token_id, owner=owner))


class ReceiverRejected(LedgerError):
    """
    The recipient carries code and did not acknowledge the transfer.

    `outcome` names what went wrong (CALL_FAILED or WRONG_VALUE).
    """
    def __init__(self, message: str = "recipient rejected transfer", *, to: Optional[bytes] = None,
                 outcome: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="RECEIVER_REJECTED",
                         data=_details(data, to=to, outcome=outcome))


class ConfigError(ValueError):
    """Raised when an ARTLEDGER_* setting is malformed."""


def error_to_receipt_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to receipt fields:

        {"status": "REVERT", "error": {code, message, data?}}
    """
    return {"status": "REVERT", "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "InvalidAddress",
    "NotFound",
    "InvalidApproval",
    "Unauthorized",
    "OwnershipMismatch",
    "ReceiverRejected",
    "ConfigError",
    "error_to_receipt_fields",
]
