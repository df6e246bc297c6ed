"""
artledger — ownership ledger and on-chain generative metadata for AI Artwork tokens.

Public entrypoints:

- ArtLedger(address, *, host=None, store=None, events=None, config=None)
    The ownership/approval ledger (mint, approve, transfers, token_uri).
- preview_token_uri(token_id, env, ledger_address, *, config=None) -> str
    Metadata for a token id under an entropy snapshot, without a ledger.
- LocalHost, BlockEnv
    In-process host capabilities for tests, the CLI and simulations.
"""

from __future__ import annotations

from typing import Optional

from .version import __version__
from .config import LedgerConfig, load_config
from .errors import (ConfigError, InvalidAddress, InvalidApproval, LedgerError,
                     NotFound, OwnershipMismatch, ReceiverRejected, Unauthorized)
from .ledger import ArtLedger
from .metadata import token_uri
from .receiver import ON_RECEIVED_MAGIC
from .runtime.context import ZERO_ADDRESS, BlockEnv
from .runtime.host import LocalHost
from .seed import Attributes, Shape, seed_for, select_attributes


def version() -> str:
    """Return the artledger version string."""
    return __version__


def preview_token_uri(
    token_id: int,
    env: BlockEnv,
    ledger_address: bytes,
    *,
    config: Optional[LedgerConfig] = None,
) -> str:
    """Metadata URI for `token_id` as a ledger at `ledger_address` would render it under `env`."""
    cfg = config or load_config()
    attrs = select_attributes(seed_for(env, token_id, ledger_address, hash_name=cfg.seed_hash))
    return token_uri(token_id, attrs, name_prefix=cfg.name_prefix, description=cfg.description)


__all__ = [
    "__version__",
    "version",
    "preview_token_uri",
    "ArtLedger",
    "LedgerConfig",
    "load_config",
    "LocalHost",
    "BlockEnv",
    "ZERO_ADDRESS",
    "ON_RECEIVED_MAGIC",
    "Attributes",
    "Shape",
    "LedgerError",
    "InvalidAddress",
    "NotFound",
    "InvalidApproval",
    "Unauthorized",
    "OwnershipMismatch",
    "ReceiverRejected",
    "ConfigError",
]
