"""
artledger.cli.preview — render a token's metadata without a ledger.

The output is what `token_uri` would return for TOKEN_ID on a ledger at
--ledger, queried in a block with the given hash and timestamp. It does not
check that the token was minted.
"""

from __future__ import annotations

import json

import typer

from ..codec import color_hex
from ..config import load_config
from ..metadata import token_uri
from ..render import render_svg
from ..runtime.context import BlockEnv, ContextError, to_address
from ..seed import seed_for, select_attributes

DEFAULT_LEDGER = "0x" + "a1" * 20
ZERO_HASH = "0x" + "00" * 32


def preview(
    token_id: int = typer.Argument(..., min=1, help="Token id"),
    block_hash: str = typer.Option(ZERO_HASH, "--block-hash", help="Most recent block hash (32-byte hex)"),
    timestamp: int = typer.Option(0, "--timestamp", min=0, help="Block timestamp (seconds)"),
    height: int = typer.Option(0, "--height", min=0, help="Block height"),
    ledger: str = typer.Option(DEFAULT_LEDGER, "--ledger", help="Ledger address (20-byte hex)"),
    svg: bool = typer.Option(False, "--svg", help="Print the raw SVG instead of the data URI"),
    attrs: bool = typer.Option(False, "--attrs", help="Print the derived attributes as JSON"),
) -> None:
    """Render metadata for TOKEN_ID under one entropy snapshot."""
    cfg = load_config()
    try:
        env = BlockEnv(height=height, timestamp=timestamp, block_hash=block_hash)
        ledger_addr = to_address(ledger)
    except ContextError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    seed = seed_for(env, token_id, ledger_addr, hash_name=cfg.seed_hash)
    a = select_attributes(seed)

    if attrs:
        typer.echo(
            json.dumps(
                {
                    "token_id": token_id,
                    "seed": "0x" + seed.to_bytes(32, "big").hex(),
                    "color_a": color_hex(a.color_a),
                    "color_b": color_hex(a.color_b),
                    "shape": a.shape.display_name,
                    "block": env.to_dict(),
                },
                indent=2,
            )
        )
    elif svg:
        typer.echo(render_svg(token_id, a, label_prefix=cfg.name_prefix))
    else:
        typer.echo(token_uri(token_id, a, name_prefix=cfg.name_prefix, description=cfg.description))
