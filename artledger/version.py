"""artledger.version — package version.

Resolution order:
  1) ARTLEDGER_VERSION (exact value)
  2) Installed distribution metadata for 'artledger'
  3) BASE_VERSION + '+dev'
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump when the metadata document format or seed derivation changes.
BASE_VERSION = "0.1.0"


def _pkg_metadata_version(dist_name: str = "artledger") -> Optional[str]:
    try:
        v = importlib_metadata.version(dist_name)
        return v if v and v != "0.0.0" else None
    except importlib_metadata.PackageNotFoundError:
        return None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("ARTLEDGER_VERSION")
    if val:
        return val
    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v
    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
