"""
artledger.cli.simulate — replay a scripted call sequence against a fresh ledger.

Script format (JSON):

    {
      "ledger": "0xa1a1…",                       # optional, 20-byte hex
      "block": {"height": 1, "timestamp": 1700000000, "block_hash": "0x…"},
      "contracts": {"0xbeef…": "accept"},        # accept | reject | throw | none
      "steps": [
        {"caller": "0xaa…", "method": "mint", "args": []},
        {"caller": "0xaa…", "method": "transferFrom", "args": ["0xaa…", "0xbb…", 1]},
        {"advance": {}},                          # seal the next block
        {"method": "tokenURI", "args": [1]}
      ]
    }

Each call step prints one JSON receipt line; `advance` steps print the new
block environment.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import typer

from .. import logutil
from ..config import load_config
from ..ledger import ArtLedger
from ..receiver import ON_RECEIVED_MAGIC
from ..runtime.context import ZERO_ADDRESS, BlockEnv, ContextError, to_address, to_bytes
from ..runtime.host import LocalHost, ReceiverFn
from .preview import DEFAULT_LEDGER

log = logutil.get_logger(__name__)


def _accept(operator: bytes, token_id: int, data: bytes) -> bytes:
    return ON_RECEIVED_MAGIC


def _reject(operator: bytes, token_id: int, data: bytes) -> bytes:
    return b"\x00\x00\x00\x00"


def _throw(operator: bytes, token_id: int, data: bytes) -> bytes:
    raise RuntimeError("recipient reverted")


_RECEIVERS: Dict[str, Optional[ReceiverFn]] = {
    "accept": _accept,
    "reject": _reject,
    "throw": _throw,
    "none": None,
}


def build_host(script: Mapping[str, Any]) -> LocalHost:
    block = script.get("block")
    host = LocalHost(BlockEnv.from_dict(block) if block else None)
    for addr, kind in (script.get("contracts") or {}).items():
        if kind not in _RECEIVERS:
            raise ValueError(f"unknown receiver kind {kind!r} for {addr}")
        host.register_contract(to_address(addr), _RECEIVERS[kind])
    return host


def run_script(script: Mapping[str, Any]) -> list:
    """
    Execute `script` and return the list of output records.

    The run gets its own trace id; log records carry the ledger address and
    the current block height.
    """
    with logutil.trace_scope():
        return _run(script)


def _run(script: Mapping[str, Any]) -> list:
    host = build_host(script)
    ledger = ArtLedger(to_address(script.get("ledger", DEFAULT_LEDGER)), host=host, config=load_config())
    logutil.bind(component="simulate", ledger=ledger.address, height=host.block_env().height)
    log.info("simulation started", extra={"steps": len(script.get("steps") or [])})
    out = []
    for i, step in enumerate(script.get("steps") or []):
        if "advance" in step:
            opts = step.get("advance") or {}
            bh = opts.get("block_hash")
            env = host.advance(
                block_hash=to_bytes(bh) if bh is not None else None,
                timestamp=opts.get("timestamp"),
            )
            logutil.bind(height=env.height)
            out.append({"step": i, "block": env.to_dict()})
            continue
        caller = to_bytes(step["caller"]) if step.get("caller") else ZERO_ADDRESS
        method = step["method"]
        receipt = ledger.execute(caller, method, *(step.get("args") or []))
        out.append({"step": i, "method": method, **receipt})
    log.info("simulation finished", extra={"records": len(out)})
    return out


def simulate(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Script JSON file"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent each record"),
) -> None:
    """Run SCRIPT against a fresh in-memory ledger and print one JSON record per step."""
    try:
        data = json.loads(script.read_text(encoding="utf-8"))
        records = run_script(data)
    except (ValueError, KeyError, TypeError, ContextError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    for rec in records:
        typer.echo(json.dumps(rec, indent=2 if pretty else None, sort_keys=True))
