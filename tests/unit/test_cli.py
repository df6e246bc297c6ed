from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from typer.testing import CliRunner

from artledger import BlockEnv, preview_token_uri
from artledger.cli.main import app
from artledger.cli.simulate import run_script
from artledger.metadata import JSON_URI_PREFIX
from artledger.runtime.context import to_address

runner = CliRunner()

HASH = "0x" + "5f" * 32
LEDGER = "0x" + "a1" * 20
ALICE = "0x" + "aa" * 20
BOB = "0x" + "bb" * 20
VAULT = "0x" + "be" * 20


def test_no_args_shows_help() -> None:
    result = runner.invoke(app, [])
    assert "preview" in result.output
    assert "simulate" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip()


def test_preview_matches_library() -> None:
    result = runner.invoke(app, ["preview", "3", "--block-hash", HASH, "--timestamp", "1700000000"])
    assert result.exit_code == 0
    uri = result.output.strip()
    assert uri.startswith(JSON_URI_PREFIX)
    env = BlockEnv(height=0, timestamp=1_700_000_000, block_hash=HASH)
    assert uri == preview_token_uri(3, env, to_address(LEDGER))
    doc = json.loads(uri[len(JSON_URI_PREFIX):])
    assert doc["name"] == "AI Artwork #3"


def test_preview_svg_and_attrs() -> None:
    svg = runner.invoke(app, ["preview", "1", "--svg"])
    assert svg.exit_code == 0
    assert svg.output.startswith("<svg ")
    assert "AI Artwork #1" in svg.output

    attrs = runner.invoke(app, ["preview", "1", "--attrs"])
    assert attrs.exit_code == 0
    data = json.loads(attrs.output)
    assert data["token_id"] == 1
    assert data["color_a"].startswith("#") and len(data["color_a"]) == 7
    assert data["shape"] in {"Concentric Circles", "Rounded Rectangles", "Star Polygon"}
    assert data["block"]["block_hash"] == "0x" + "00" * 32


def test_preview_respects_env_prefix(monkeypatch: Any) -> None:
    monkeypatch.setenv("ARTLEDGER_NAME_PREFIX", "Gallery")
    result = runner.invoke(app, ["preview", "2", "--svg"])
    assert result.exit_code == 0
    assert "Gallery #2" in result.output


def test_preview_rejects_bad_inputs() -> None:
    assert runner.invoke(app, ["preview", "1", "--block-hash", "0x1234"]).exit_code == 2
    assert runner.invoke(app, ["preview", "1", "--ledger", "0xabcd"]).exit_code == 2
    assert runner.invoke(app, ["preview", "0"]).exit_code != 0


def test_config_command(monkeypatch: Any) -> None:
    monkeypatch.setenv("ARTLEDGER_SYMBOL", "GAL")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["symbol"] == "GAL"
    assert data["seed_hash"] == "keccak256"


def test_bad_log_level_exits() -> None:
    result = runner.invoke(app, ["--log-level", "LOUD", "config"])
    assert result.exit_code == 2


def _script() -> dict:
    return {
        "ledger": LEDGER,
        "block": {"height": 1, "timestamp": 1_700_000_000, "block_hash": HASH},
        "contracts": {VAULT: "reject"},
        "steps": [
            {"caller": ALICE, "method": "mint", "args": []},
            {"caller": ALICE, "method": "transferFrom", "args": [ALICE, BOB, 1]},
            {"caller": BOB, "method": "safeTransferFrom", "args": [BOB, VAULT, 1]},
            {"advance": {}},
            {"method": "ownerOf", "args": [1]},
        ],
    }


def test_run_script_records() -> None:
    records = run_script(_script())
    assert [r["step"] for r in records] == [0, 1, 2, 3, 4]
    assert records[0]["status"] == "SUCCESS" and records[0]["return"] == 1
    assert records[1]["events"][0]["name"] == "Transfer"
    assert records[2]["status"] == "REVERT"
    assert records[2]["error"]["code"] == "RECEIVER_REJECTED"
    assert records[3]["block"]["height"] == 2
    assert records[4]["return"] == BOB


def test_simulate_command(tmp_path: Path) -> None:
    path = tmp_path / "script.json"
    path.write_text(json.dumps(_script()), encoding="utf-8")
    result = runner.invoke(app, ["--log-level", "CRITICAL", "simulate", str(path)])
    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.output.splitlines() if line.strip()]
    assert len(lines) == 5
    assert lines[-1]["return"] == BOB


def test_simulate_rejects_bad_script(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"contracts": {VAULT: "maybe"}}), encoding="utf-8")
    result = runner.invoke(app, ["simulate", str(path)])
    assert result.exit_code == 2

    path.write_text("{not json", encoding="utf-8")
    assert runner.invoke(app, ["simulate", str(path)]).exit_code == 2


def test_bundled_example_script() -> None:
    path = Path(__file__).resolve().parents[2] / "examples" / "transfer.json"
    records = run_script(json.loads(path.read_text(encoding="utf-8")))
    statuses = [r.get("status") for r in records]
    assert statuses == ["SUCCESS", "SUCCESS", "REVERT", "SUCCESS", "SUCCESS", None, "SUCCESS"]
    # same token, different block: the art is re-derived
    assert records[4]["return"] != records[6]["return"]
