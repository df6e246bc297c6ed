"""
artledger.config — collection metadata, seed hash choice and logging defaults.

Configuration precedence:
  1) Environment variables (ARTLEDGER_*)
  2) Hardcoded defaults below

Key env vars:
  - ARTLEDGER_NAME_PREFIX   (str)   default: "AI Artwork"
  - ARTLEDGER_SYMBOL        (str)   default: "AIART"
  - ARTLEDGER_DESCRIPTION   (str)   default: DEFAULT_DESCRIPTION
  - ARTLEDGER_SEED_HASH     (str)   default: "keccak256"   (or "sha3_256")
  - ARTLEDGER_LOG_LEVEL     (str)   default: "INFO"
  - ARTLEDGER_LOG_FORMAT    (str)   default: unset (text on a TTY, JSON otherwise)

The text fields end up inside the JSON metadata document, whose escaper only
handles `"` and `\\`. Control characters are therefore rejected here.

Usage:
    from artledger.config import load_config
    cfg = load_config()
    cfg.name_prefix
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from functools import lru_cache
from typing import Any, Dict, Optional

from .errors import ConfigError
from .runtime.hash_api import HASHERS

DEFAULT_NAME_PREFIX = "AI Artwork"
DEFAULT_SYMBOL = "AIART"
DEFAULT_DESCRIPTION = "Generative AI artwork whose palette and shape are derived on-chain from block entropy."
DEFAULT_SEED_HASH = "keccak256"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LOG_FORMATS = ("json", "text")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw


def _check_text(name: str, value: str) -> str:
    for ch in value:
        if ord(ch) < 0x20:
            raise ConfigError(f"{name} must not contain control characters (found {ch!r})")
    return value


@dataclass(frozen=True)
class LedgerConfig:
    name_prefix: str = DEFAULT_NAME_PREFIX
    symbol: str = DEFAULT_SYMBOL
    description: str = DEFAULT_DESCRIPTION
    seed_hash: str = DEFAULT_SEED_HASH
    log_level: str = "INFO"
    log_format: Optional[str] = None

    def __post_init__(self) -> None:
        _check_text("name_prefix", self.name_prefix)
        _check_text("symbol", self.symbol)
        _check_text("description", self.description)
        if not self.name_prefix:
            raise ConfigError("name_prefix must be non-empty")
        # name_prefix is also the SVG label text.
        if any(ch in self.name_prefix for ch in "<>&"):
            raise ConfigError("name_prefix must not contain markup characters (<, >, &)")
        if self.seed_hash not in HASHERS:
            raise ConfigError(f"seed_hash must be one of {sorted(HASHERS)}, got {self.seed_hash!r}")
        level = self.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {_LOG_LEVELS}, got {self.log_level!r}")
        object.__setattr__(self, "log_level", level)
        if self.log_format is not None:
            fmt = self.log_format.strip().lower()
            if fmt not in _LOG_FORMATS:
                raise ConfigError(f"log_format must be one of {_LOG_FORMATS}, got {self.log_format!r}")
            object.__setattr__(self, "log_format", fmt)

    def with_overrides(self, **changes: Any) -> "LedgerConfig":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_from_env() -> LedgerConfig:
    """Build a LedgerConfig from the current environment (uncached)."""
    return LedgerConfig(
        name_prefix=_env_str("ARTLEDGER_NAME_PREFIX", DEFAULT_NAME_PREFIX),
        symbol=_env_str("ARTLEDGER_SYMBOL", DEFAULT_SYMBOL),
        description=_env_str("ARTLEDGER_DESCRIPTION", DEFAULT_DESCRIPTION),
        seed_hash=_env_str("ARTLEDGER_SEED_HASH", DEFAULT_SEED_HASH).strip().lower(),
        log_level=_env_str("ARTLEDGER_LOG_LEVEL", "INFO"),
        log_format=os.getenv("ARTLEDGER_LOG_FORMAT") or None,
    )


@lru_cache(maxsize=1)
def load_config() -> LedgerConfig:
    """Build and cache a LedgerConfig from environment + defaults."""
    return config_from_env()


__all__ = [
    "LedgerConfig",
    "load_config",
    "config_from_env",
    "DEFAULT_NAME_PREFIX",
    "DEFAULT_SYMBOL",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_SEED_HASH",
]
