"""
artledger.ledger — ownership ledger for AI Artwork tokens.

State (all in one atomic Store)
-------------------------------
    nft/next                   -> next id to assign (absent means 1)
    nft/owner/<u256 id>        -> owner identity
    nft/bal/<owner>            -> number of tokens held
    nft/appr/<u256 id>         -> single delegate for the token
    nft/op/<owner>/<operator>  -> b"\\x01" while the operator is approved

Identities are exactly 20 bytes (InvalidAddress otherwise), so every key
splits back into its parts unambiguously.

Invariants
----------
- every id in [1, next) has a non-null owner; ids are never reused;
- sum of all balances == next - 1;
- a token's delegate is cleared by every transfer;
- a failed call changes nothing: all checks run before any write, and each
  mutating call runs inside one store checkpoint whose events are dropped
  together with its writes on failure (the safe-transfer revert path).

Views:
  - name() / symbol() / total_supply() / next_token_id()
  - balance_of(owner) / owner_of(token_id) / get_approved(token_id)
  - is_approved_for_all(owner, operator)
  - token_uri(token_id) / attributes_of(token_id)
  - supports_interface(interface_id)
State-changing (caller first):
  - mint(caller) -> token_id
  - approve(caller, to, token_id)
  - set_approval_for_all(caller, operator, approved)
  - transfer_from(caller, from_, to, token_id)
  - safe_transfer_from(caller, from_, to, token_id, data=b"")

Event names (bytes):
  b"Transfer", b"Approval", b"ApprovalForAll"
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from . import metadata
from .config import LedgerConfig, load_config
from .errors import (InvalidAddress, InvalidApproval, LedgerError, NotFound,
                     OwnershipMismatch, ReceiverRejected, Unauthorized,
                     error_to_receipt_fields)
from .receiver import check_on_received
from .runtime.context import (ZERO_ADDRESS, ContextError, is_zero_address,
                              to_address, to_bytes, to_hex)
from .runtime.events import EventSink, for_receipt
from .runtime.host import Host, LocalHost
from .runtime.storage import Store
from .seed import Attributes, seed_for, select_attributes

log = logging.getLogger(__name__)

EV_TRANSFER = b"Transfer"
EV_APPROVAL = b"Approval"
EV_APPROVAL_FOR_ALL = b"ApprovalForAll"

INTERFACE_ERC165 = bytes.fromhex("01ffc9a7")
INTERFACE_ERC721 = bytes.fromhex("80ac58cd")
INTERFACE_ERC721_METADATA = bytes.fromhex("5b5e139f")
_SUPPORTED_INTERFACES = frozenset({INTERFACE_ERC165, INTERFACE_ERC721, INTERFACE_ERC721_METADATA})

# ----------------------------
# Storage keys
# ----------------------------

K_NEXT = b"nft/next"
_TRUE = b"\x01"


def _id32(token_id: int) -> bytes:
    return token_id.to_bytes(32, "big")


def _k_owner(token_id: int) -> bytes:
    return b"nft/owner/" + _id32(token_id)


def _k_bal(owner: bytes) -> bytes:
    return b"nft/bal/" + owner


def _k_appr(token_id: int) -> bytes:
    return b"nft/appr/" + _id32(token_id)


def _k_op(owner: bytes, operator: bytes) -> bytes:
    return b"nft/op/" + owner + b"/" + operator


def _ident(value: Any, field_name: str = "address") -> bytes:
    """Coerce to a 20-byte identity; None is the null identity."""
    if value is None:
        return ZERO_ADDRESS
    try:
        return to_address(value)
    except ContextError as e:
        raise InvalidAddress(str(e), field_name=field_name) from e


def _token(token_id: Any) -> int:
    if isinstance(token_id, bool) or not isinstance(token_id, int):
        raise TypeError(f"token_id must be int, got {type(token_id).__name__}")
    return token_id


class ArtLedger:
    """
    Ledger object with explicit state. A fresh instance (empty Store) starts
    with no tokens and next id 1.

    Parameters
    ----------
    address :
        The ledger's own identity; mixed into metadata seeds.
    host :
        Supplies block entropy, code-presence checks and receiver calls.
        Defaults to a LocalHost at genesis.
    store, events :
        State backends; fresh in-memory ones when omitted.
    config :
        Collection metadata and seed hash; defaults to load_config().
    """

    def __init__(
        self,
        address: bytes,
        *,
        host: Optional[Host] = None,
        store: Optional[Store] = None,
        events: Optional[EventSink] = None,
        config: Optional[LedgerConfig] = None,
    ) -> None:
        self.address = _ident(address, "address")
        if is_zero_address(self.address):
            raise InvalidAddress("ledger address must not be null", field_name="address")
        self.host: Host = host if host is not None else LocalHost()
        self.store = store if store is not None else Store()
        self.events = events if events is not None else EventSink()
        self.config = config if config is not None else load_config()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ #
    # Call scoping
    # ------------------------------------------------------------------ #

    @contextmanager
    def _call(self) -> Iterator[None]:
        with self._lock:
            marker = self.events.mark()
            try:
                with self.store.atomic():
                    yield
            except BaseException:
                self.events.truncate(marker)
                raise

    # ------------------------------------------------------------------ #
    # Internal reads
    # ------------------------------------------------------------------ #

    def _next_id(self) -> int:
        return self.store.get_int(K_NEXT, default=1)

    def _owner(self, token_id: int) -> Optional[bytes]:
        return self.store.get(_k_owner(token_id))

    def _require_owner(self, token_id: int) -> bytes:
        owner = self._owner(token_id) if 0 < token_id < self._next_id() else None
        if owner is None:
            raise NotFound(token_id=token_id)
        return owner

    def _balance(self, owner: bytes) -> int:
        return self.store.get_int(_k_bal(owner))

    def _is_operator(self, owner: bytes, operator: bytes) -> bool:
        return self.store.get(_k_op(owner, operator)) == _TRUE

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def name(self) -> str:
        return self.config.name_prefix

    def symbol(self) -> str:
        return self.config.symbol

    def next_token_id(self) -> int:
        with self._lock:
            return self._next_id()

    def total_supply(self) -> int:
        return self.next_token_id() - 1

    def supports_interface(self, interface_id: bytes) -> bool:
        return to_bytes(interface_id) in _SUPPORTED_INTERFACES

    def balance_of(self, owner: bytes) -> int:
        owner = _ident(owner, "owner")
        if is_zero_address(owner):
            raise InvalidAddress("balance query for the null address", field_name="owner")
        with self._lock:
            return self._balance(owner)

    def owner_of(self, token_id: int) -> bytes:
        with self._lock:
            return self._require_owner(_token(token_id))

    def get_approved(self, token_id: int) -> Optional[bytes]:
        token_id = _token(token_id)
        with self._lock:
            self._require_owner(token_id)
            return self.store.get(_k_appr(token_id))

    def is_approved_for_all(self, owner: bytes, operator: bytes) -> bool:
        with self._lock:
            return self._is_operator(_ident(owner, "owner"), _ident(operator, "operator"))

    def attributes_of(self, token_id: int) -> Attributes:
        """Attributes of `token_id` under the host's current entropy snapshot."""
        token_id = _token(token_id)
        with self._lock:
            self._require_owner(token_id)
            env = self.host.block_env()
        seed = seed_for(env, token_id, self.address, hash_name=self.config.seed_hash)
        return select_attributes(seed)

    def token_uri(self, token_id: int) -> str:
        """
        Metadata data URI for `token_id`.

        Recomputed from the host's current block hash and timestamp on every
        call, so two queries in different blocks may return different art.
        """
        attrs = self.attributes_of(token_id)
        return metadata.token_uri(
            token_id,
            attrs,
            name_prefix=self.config.name_prefix,
            description=self.config.description,
        )

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def mint(self, caller: bytes) -> int:
        caller = _ident(caller, "caller")
        if is_zero_address(caller):
            raise InvalidAddress("cannot mint to the null address", field_name="caller")
        with self._call():
            token_id = self._next_id()
            self.store.set(_k_owner(token_id), caller)
            self.store.set_int(_k_bal(caller), self._balance(caller) + 1)
            self.store.set_int(K_NEXT, token_id + 1)
            self.events.emit(EV_TRANSFER, {"from": ZERO_ADDRESS, "to": caller, "token_id": token_id})
        log.debug("minted", extra={"token_id": token_id, "owner": caller.hex()})
        return token_id

    def approve(self, caller: bytes, to: Optional[bytes], token_id: int) -> None:
        caller = _ident(caller, "caller")
        to = _ident(to, "to")
        token_id = _token(token_id)
        with self._call():
            owner = self._require_owner(token_id)
            if to == owner:
                raise InvalidApproval("approval to current owner")
            if caller != owner and not self._is_operator(owner, caller):
                raise Unauthorized("approve caller is not owner nor approved for all",
                                   caller=caller, token_id=token_id)
            self.store.set_bytes(_k_appr(token_id), None if is_zero_address(to) else to)
            self.events.emit(EV_APPROVAL, {"owner": owner, "approved": to, "token_id": token_id})
        log.debug("approved", extra={"token_id": token_id, "delegate": to.hex()})

    def set_approval_for_all(self, caller: bytes, operator: bytes, approved: bool) -> None:
        caller = _ident(caller, "caller")
        operator = _ident(operator, "operator")
        approved = bool(approved)
        if operator == caller:
            raise InvalidApproval("approve to caller")
        with self._call():
            self.store.set(_k_op(caller, operator), _TRUE if approved else b"")
            self.events.emit(EV_APPROVAL_FOR_ALL, {"owner": caller, "operator": operator, "approved": approved})
        log.debug("operator approval", extra={"owner": caller.hex(), "operator": operator.hex(), "approved": approved})

    def _transfer(self, caller: bytes, from_: bytes, to: bytes, token_id: int) -> None:
        # checks
        owner = self._require_owner(token_id)
        delegate = self.store.get(_k_appr(token_id))
        if caller != owner and caller != delegate and not self._is_operator(owner, caller):
            raise Unauthorized(caller=caller, token_id=token_id)
        if owner != from_:
            raise OwnershipMismatch(token_id=token_id, owner=owner)
        if is_zero_address(to):
            raise InvalidAddress("transfer to the null address", field_name="to")
        # effects
        self.store.delete(_k_appr(token_id))
        self.store.set_int(_k_bal(from_), self._balance(from_) - 1)
        self.store.set_int(_k_bal(to), self._balance(to) + 1)
        self.store.set(_k_owner(token_id), to)
        self.events.emit(EV_TRANSFER, {"from": from_, "to": to, "token_id": token_id})

    def transfer_from(self, caller: bytes, from_: bytes, to: bytes, token_id: int) -> None:
        caller, from_, to = _ident(caller, "caller"), _ident(from_, "from"), _ident(to, "to")
        token_id = _token(token_id)
        with self._call():
            self._transfer(caller, from_, to, token_id)
        log.debug("transferred", extra={"token_id": token_id, "sender": from_.hex(), "to": to.hex()})

    def safe_transfer_from(self, caller: bytes, from_: bytes, to: bytes, token_id: int, data: bytes = b"") -> None:
        caller, from_, to = _ident(caller, "caller"), _ident(from_, "from"), _ident(to, "to")
        token_id = _token(token_id)
        data = to_bytes(data)
        with self._call():
            self._transfer(caller, from_, to, token_id)
            outcome = check_on_received(self.host, caller, to, token_id, data)
            if not outcome.accepted:
                raise ReceiverRejected(to=to, outcome=outcome.value)
        log.debug("safe-transferred", extra={"token_id": token_id, "sender": from_.hex(), "to": to.hex()})

    # ------------------------------------------------------------------ #
    # Call envelope
    # ------------------------------------------------------------------ #

    def execute(self, caller: Any, method: str, *args: Any) -> Dict[str, Any]:
        """
        Run one public operation and return a receipt-style dict:

            {"status": "SUCCESS", "return": <json-safe value>, "events": [...]}
            {"status": "REVERT", "error": {...}, "events": []}

        Method names may be given in snake_case or in the camelCase ABI form
        (e.g. "safeTransferFrom").
        """
        entry = _METHODS.get(method)
        if entry is None:
            raise ValueError(f"unknown method {method!r}")
        attr, takes_caller = entry
        fn: Callable[..., Any] = getattr(self, attr)
        # identities are validated by the operation itself, inside the envelope
        call_args: Tuple[Any, ...] = ((caller,) + args) if takes_caller else args
        with self._lock:
            marker = self.events.mark()
            try:
                ret = fn(*call_args)
            except LedgerError as err:
                log.info("call reverted", extra={"method": attr, "code": err.code})
                out = error_to_receipt_fields(err)
                out["events"] = []
                return out
            emitted = self.events.since(marker)
        return {"status": "SUCCESS", "return": _json_safe(ret), "events": for_receipt(emitted)}


def _json_safe(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return to_hex(v)
    return v


_METHODS: Dict[str, Tuple[str, bool]] = {}
for _attr, _camel, _takes_caller in (
    ("name", "name", False),
    ("symbol", "symbol", False),
    ("total_supply", "totalSupply", False),
    ("next_token_id", "nextTokenId", False),
    ("supports_interface", "supportsInterface", False),
    ("balance_of", "balanceOf", False),
    ("owner_of", "ownerOf", False),
    ("get_approved", "getApproved", False),
    ("is_approved_for_all", "isApprovedForAll", False),
    ("token_uri", "tokenURI", False),
    ("mint", "mint", True),
    ("approve", "approve", True),
    ("set_approval_for_all", "setApprovalForAll", True),
    ("transfer_from", "transferFrom", True),
    ("safe_transfer_from", "safeTransferFrom", True),
):
    _METHODS[_attr] = (_attr, _takes_caller)
    _METHODS[_camel] = (_attr, _takes_caller)


__all__ = [
    "ArtLedger",
    "EV_TRANSFER",
    "EV_APPROVAL",
    "EV_APPROVAL_FOR_ALL",
    "INTERFACE_ERC165",
    "INTERFACE_ERC721",
    "INTERFACE_ERC721_METADATA",
]
