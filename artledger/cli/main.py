"""
artledger - command-line interface.

Commands:
  artledger preview TOKEN_ID   Render metadata for a token under an entropy snapshot
  artledger simulate SCRIPT    Run a scripted call sequence against an in-memory ledger
  artledger config             Show the effective configuration

Global options:
  --log-level TEXT      Log level (default from ARTLEDGER_LOG_LEVEL or INFO)
  --log-format TEXT     json | text (default from ARTLEDGER_LOG_FORMAT / TTY detection)

Examples:
  artledger preview 1 --block-hash 0x11..11 --timestamp 1700000000
  artledger preview 7 --svg > art.svg
  artledger simulate examples/transfer.json
"""

from __future__ import annotations

import json
from typing import Optional

import typer

from .. import logutil
from ..config import load_config
from ..errors import ConfigError
from ..version import __version__
from . import preview, simulate

app = typer.Typer(
    name="artledger",
    help="AI Artwork ledger command-line interface",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (CRITICAL, ERROR, WARNING, INFO, DEBUG)",
        envvar="ARTLEDGER_LOG_LEVEL",
    ),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log format: json or text",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """AI Artwork ledger tools."""
    try:
        cfg = load_config().with_overrides(log_level=log_level, log_format=log_format)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    json_logs = None if cfg.log_format is None else cfg.log_format == "json"
    logutil.configure(json=json_logs, level=cfg.log_level)


@app.command("config")
def show_config() -> None:
    """Print the effective configuration as JSON."""
    typer.echo(json.dumps(load_config().as_dict(), indent=2, sort_keys=True))


app.command("preview")(preview.preview)
app.command("simulate")(simulate.simulate)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
