# -*- coding: utf-8 -*-
"""
Property-test package bootstrap.

Registers Hypothesis profiles and picks one on import:
- HYPOTHESIS_PROFILE=dev|ci|fast selects explicitly;
- otherwise "ci" when the CI env var is truthy, "dev" locally.

The autouse fixtures in tests/conftest.py (env + logger reset) are function
scoped; they hold no per-example state, so that health check is suppressed.
Per-test overrides go in @settings(...) on the test.
"""
from __future__ import annotations

import os
from typing import Final, Tuple

from hypothesis import HealthCheck, Verbosity, settings


def _hc(*items: HealthCheck) -> Tuple[HealthCheck, ...]:
    return items


settings.register_profile(
    "dev",
    settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=_hc(HealthCheck.too_slow, HealthCheck.function_scoped_fixture),
        verbosity=Verbosity.normal,
    ),
)

settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        suppress_health_check=_hc(HealthCheck.too_slow, HealthCheck.function_scoped_fixture),
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
)

settings.register_profile(
    "fast",
    settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=_hc(HealthCheck.too_slow, HealthCheck.function_scoped_fixture),
    ),
)


def _env_truthy(name: str) -> bool:
    v = os.getenv(name)
    return (v or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)
