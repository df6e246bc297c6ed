from __future__ import annotations

import json

import pytest

from artledger.config import (DEFAULT_NAME_PREFIX, DEFAULT_SEED_HASH,
                              LedgerConfig, config_from_env, load_config)
from artledger.errors import (ConfigError, InvalidAddress, LedgerError,
                              NotFound, OwnershipMismatch, ReceiverRejected,
                              Unauthorized, error_to_receipt_fields)

# ------------------------------ config -----------------------------


def test_defaults():
    cfg = load_config()
    assert cfg.name_prefix == DEFAULT_NAME_PREFIX
    assert cfg.symbol == "AIART"
    assert cfg.seed_hash == DEFAULT_SEED_HASH
    assert cfg.log_level == "INFO"
    assert cfg.log_format is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ARTLEDGER_NAME_PREFIX", "Gallery")
    monkeypatch.setenv("ARTLEDGER_SEED_HASH", " SHA3_256 ")
    monkeypatch.setenv("ARTLEDGER_LOG_LEVEL", "debug")
    monkeypatch.setenv("ARTLEDGER_LOG_FORMAT", "JSON")
    cfg = config_from_env()
    assert cfg.name_prefix == "Gallery"
    assert cfg.seed_hash == "sha3_256"
    assert cfg.log_level == "DEBUG"
    assert cfg.log_format == "json"


def test_empty_env_value_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("ARTLEDGER_SYMBOL", "")
    assert config_from_env().symbol == "AIART"


def test_load_config_is_cached(monkeypatch):
    first = load_config()
    monkeypatch.setenv("ARTLEDGER_SYMBOL", "OTHER")
    assert load_config() is first
    load_config.cache_clear()
    assert load_config().symbol == "OTHER"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name_prefix": ""},
        {"name_prefix": "line\nbreak"},
        {"name_prefix": "<b>bold</b>"},
        {"name_prefix": "A & B"},
        {"description": "tab\there"},
        {"symbol": "\x00"},
        {"seed_hash": "md5"},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ConfigError):
        LedgerConfig(**kwargs)


def test_invalid_env_value_rejected(monkeypatch):
    monkeypatch.setenv("ARTLEDGER_SEED_HASH", "crc32")
    with pytest.raises(ConfigError):
        load_config()


def test_quotes_allowed_in_text_fields():
    cfg = LedgerConfig(name_prefix='The "Art"', description='back\\slash')
    assert cfg.name_prefix == 'The "Art"'


def test_with_overrides_ignores_none():
    cfg = LedgerConfig().with_overrides(log_level="warning", log_format=None)
    assert cfg.log_level == "WARNING"
    assert cfg.log_format is None
    assert json.loads(json.dumps(cfg.as_dict()))["symbol"] == "AIART"


# ------------------------------ errors -----------------------------


def test_error_codes_and_details():
    err = Unauthorized(caller=b"\xab" * 20, token_id=4)
    assert isinstance(err, LedgerError)
    assert err.code == "UNAUTHORIZED"
    assert err.data == {"caller": "0x" + "ab" * 20, "token_id": 4}
    assert "UNAUTHORIZED" in str(err)


def test_error_without_details_omits_data():
    err = InvalidAddress()
    assert err.data is None
    assert err.to_dict() == {"code": "INVALID_ADDRESS", "message": "null address"}


def test_subclass_codes():
    assert NotFound(token_id=1).code == "NOT_FOUND"
    assert OwnershipMismatch(token_id=1, owner=b"\x01").data == {"token_id": 1, "owner": "0x01"}
    assert ReceiverRejected(to=b"\x02", outcome="WRONG_VALUE").data["outcome"] == "WRONG_VALUE"


def test_error_to_receipt_fields():
    out = error_to_receipt_fields(NotFound(token_id=9))
    assert out == {"status": "REVERT", "error": {"code": "NOT_FOUND", "message": "token does not exist", "data": {"token_id": 9}}}


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)
