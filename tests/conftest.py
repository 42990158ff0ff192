"""
Shared test configuration for the view engine suites.
Every test runs with a minimal, known environment so settings and engine config load the same
way locally and in CI.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pesaflow.common.settings import get_settings  # noqa: E402

ENGINE_ENV_VARS = (
    "VIEW_ENGINE_CONFIG_PATH",
    "VIEW_ENGINE_DEFAULT_PAGE_SIZE",
    "VIEW_ENGINE_MAX_PAGE_SIZE",
    "VIEW_ENGINE_PAGE_SIZE_OPTIONS",
    "VIEW_ENGINE_CURRENCY_CODE",
    "VIEW_ENGINE_EXPORT_MAX_WORKERS",
    "VIEW_ENGINE_INCLUDE_TIME_IN_EXPORTS",
)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Provide required settings and drop engine overrides leaking in from the shell."""

    defaults = {
        "PROJECT_NAME": "pesaflow-test",
        "ENV": "test",
        "LOG_LEVEL": "INFO",
        "EXPORT_DIR": str(tmp_path / "exports"),
    }
    for key, value in defaults.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)
    for key in ENGINE_ENV_VARS:
        monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
