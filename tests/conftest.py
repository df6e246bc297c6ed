# -*- coding: utf-8 -*-
"""
tests.conftest
==============

Shared fixtures for the ledger and metadata tests.

- Deterministic 20-byte identities derived with SHA3 from a tag, so failures
  print the same addresses on every run.
- A LocalHost pinned to a fixed block environment.
- A fresh ArtLedger per test, wired to that host and to default config.

Usage:
    def test_mint(ledger, accounts):
        alice = accounts["alice"]
        assert ledger.mint(alice) == 1
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Dict

import pytest

from artledger.config import LedgerConfig, load_config
from artledger.ledger import ArtLedger
from artledger.receiver import ON_RECEIVED_MAGIC
from artledger.runtime.context import BlockEnv
from artledger.runtime.host import LocalHost

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

BLOCK_HASH = bytes.fromhex("5f" * 32)
BLOCK_TIMESTAMP = 1_700_000_000


def det_address(tag: str) -> bytes:
    """Stable 20-byte identity from a tag."""
    return hashlib.sha3_256(tag.encode("utf-8")).digest()[:20]


LEDGER_ADDRESS = det_address("ledger")


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Each test sees the environment it sets, not a cached config."""
    for k in list(os.environ):
        if k.startswith("ARTLEDGER_"):
            monkeypatch.delenv(k, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo handlers the CLI installs so caplog sees records again."""
    yield
    logger = logging.getLogger("artledger")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def ledger_address() -> bytes:
    return LEDGER_ADDRESS


@pytest.fixture()
def accounts() -> Dict[str, bytes]:
    return {name: det_address(name) for name in ("alice", "bob", "carol", "dave", "vault")}


@pytest.fixture()
def block_env() -> BlockEnv:
    return BlockEnv(height=100, timestamp=BLOCK_TIMESTAMP, block_hash=BLOCK_HASH)


@pytest.fixture()
def host(block_env) -> LocalHost:
    return LocalHost(block_env)


@pytest.fixture()
def ledger(host) -> ArtLedger:
    return ArtLedger(LEDGER_ADDRESS, host=host, config=LedgerConfig())


@pytest.fixture()
def accepting_receiver():
    """A receiver that records its calls and acknowledges them."""
    calls = []

    def _recv(operator: bytes, token_id: int, data: bytes) -> bytes:
        calls.append((operator, token_id, data))
        return ON_RECEIVED_MAGIC

    _recv.calls = calls  # type: ignore[attr-defined]
    return _recv

