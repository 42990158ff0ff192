# This file defines runtime configuration for the tabular view engine.
# It exists so every dashboard page shares one set of paging and export defaults.
# The loader merges YAML defaults with environment overrides and validates the result.
# Page-specific defaults (sort key, page size) live on page profiles, not here.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "view_engine.yaml"


@dataclass(frozen=True)
class EngineConfig:
    default_page_size: int
    max_page_size: int
    page_size_options: tuple[int, ...]
    currency_code: str
    export_max_workers: int
    include_time_in_exports: bool

    def clamp_page_size(self, requested_page_size: int | None) -> int:
        if requested_page_size is None:
            return self.default_page_size
        return max(1, min(int(requested_page_size), self.max_page_size))


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value


def _env_int(name: str, default: int | None = None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_bool(name: str, default: bool | None = None) -> bool | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean value (true/false), got: {value!r}")


def _env_int_list(name: str) -> list[int] | None:
    value = _env_str(name)
    if value is None:
        return None
    return [int(part) for part in value.split(",") if part.strip()]


def _validate(config: EngineConfig) -> EngineConfig:
    if config.default_page_size < 1:
        raise ValueError("default_page_size must be >= 1")
    if config.max_page_size < config.default_page_size:
        raise ValueError("max_page_size must be >= default_page_size")
    invalid_options = [
        size for size in config.page_size_options if size < 1 or size > config.max_page_size
    ]
    if invalid_options:
        raise ValueError(
            f"page_size_options must lie within [1, {config.max_page_size}], got: {invalid_options}"
        )
    if config.export_max_workers < 1:
        raise ValueError("export_max_workers must be >= 1")
    if not config.currency_code.strip():
        raise ValueError("currency_code cannot be empty")
    return config


def load_engine_config(path: str | Path | None = None, *, load_env: bool = True) -> EngineConfig:
    if load_env:
        load_dotenv()

    config_path = Path(
        path or _env_str("VIEW_ENGINE_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)) or DEFAULT_CONFIG_PATH
    )
    raw = _load_yaml(config_path)

    page_size_options = _env_int_list("VIEW_ENGINE_PAGE_SIZE_OPTIONS")
    if page_size_options is None:
        page_size_options = [int(size) for size in raw.get("page_size_options", [])]

    config = EngineConfig(
        default_page_size=int(
            _env_int("VIEW_ENGINE_DEFAULT_PAGE_SIZE", raw.get("default_page_size", 10))
        ),
        max_page_size=int(_env_int("VIEW_ENGINE_MAX_PAGE_SIZE", raw.get("max_page_size", 100))),
        page_size_options=tuple(sorted(set(page_size_options))),
        currency_code=str(
            _env_str("VIEW_ENGINE_CURRENCY_CODE", raw.get("currency_code", "TZS")) or "TZS"
        ),
        export_max_workers=int(
            _env_int("VIEW_ENGINE_EXPORT_MAX_WORKERS", raw.get("export_max_workers", 2))
        ),
        include_time_in_exports=bool(
            _env_bool(
                "VIEW_ENGINE_INCLUDE_TIME_IN_EXPORTS",
                bool(raw.get("include_time_in_exports", True)),
            )
        ),
    )
    return _validate(config)
