# This file tests loading of view engine configuration from YAML and environment overrides.
# It exists to ensure invalid paging or export settings fail before any page is built.

from __future__ import annotations

from pathlib import Path

import pytest

from pesaflow.view_engine.engine_config import DEFAULT_CONFIG_PATH, load_engine_config
from tests.view_engine.support import build_test_config


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "view_engine.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_default_config_file_loads() -> None:
    config = load_engine_config(DEFAULT_CONFIG_PATH, load_env=False)

    assert config.default_page_size == 10
    assert config.currency_code == "TZS"
    assert config.page_size_options == (5, 6, 8, 10, 20, 50, 100)
    assert config.export_max_workers == 2


def test_environment_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(
        tmp_path,
        "default_page_size: 10\nmax_page_size: 50\npage_size_options: [10, 20]\n"
        "currency_code: TZS\nexport_max_workers: 2\ninclude_time_in_exports: true\n",
    )
    monkeypatch.setenv("VIEW_ENGINE_CURRENCY_CODE", "KES")
    monkeypatch.setenv("VIEW_ENGINE_DEFAULT_PAGE_SIZE", "20")
    monkeypatch.setenv("VIEW_ENGINE_PAGE_SIZE_OPTIONS", "20,5,5")
    monkeypatch.setenv("VIEW_ENGINE_INCLUDE_TIME_IN_EXPORTS", "no")

    config = load_engine_config(path, load_env=False)

    assert config.currency_code == "KES"
    assert config.default_page_size == 20
    assert config.max_page_size == 50
    assert config.page_size_options == (5, 20)
    assert config.include_time_in_exports is False


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path, "default_page_size: 6\nmax_page_size: 60\n")
    monkeypatch.setenv("VIEW_ENGINE_CONFIG_PATH", str(path))

    config = load_engine_config(load_env=False)

    assert config.default_page_size == 6
    assert config.max_page_size == 60


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("default_page_size: 0\n", "default_page_size must be >= 1"),
        (
            "default_page_size: 20\nmax_page_size: 10\n",
            "max_page_size must be >= default_page_size",
        ),
        ("page_size_options: [10, 500]\n", "page_size_options must lie within"),
        ("export_max_workers: 0\n", "export_max_workers must be >= 1"),
        ("- not\n- a mapping\n", "must be a mapping"),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, body: str, message: str) -> None:
    path = _write_config(tmp_path, body)

    with pytest.raises(ValueError, match=message):
        load_engine_config(path, load_env=False)


def test_invalid_boolean_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path, "default_page_size: 10\n")
    monkeypatch.setenv("VIEW_ENGINE_INCLUDE_TIME_IN_EXPORTS", "sometimes")

    with pytest.raises(ValueError, match="must be a boolean value"):
        load_engine_config(path, load_env=False)


def test_clamp_page_size() -> None:
    config = build_test_config(default_page_size=10, max_page_size=50)

    assert config.clamp_page_size(None) == 10
    assert config.clamp_page_size(0) == 1
    assert config.clamp_page_size(75) == 50
    assert config.clamp_page_size(20) == 20
