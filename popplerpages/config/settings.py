"""Centralised environment configuration for popplerpages.

This module ensures `.env` loading happens in one place and exposes a
typed snapshot of the poppler location and tuning knobs. Downstream
modules call `get_settings()` instead of touching `os.environ` directly,
making it easier to validate values and override behaviour in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv


_DEFAULT_ENV_FILENAME = ".env"

POPPLER_PATH_ENV = "POPPLERPAGES_POPPLER_PATH"
MAX_CONCURRENCY_ENV = "POPPLERPAGES_MAX_CONCURRENCY"
TEMP_DIR_ENV = "POPPLERPAGES_TEMP_DIR"


def _coerce_int(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _coerce_path(value: str | None) -> Path | None:
    if value is None or value.strip() == "":
        return None
    return Path(value.strip()).expanduser()


def default_max_concurrency() -> int:
    return max(1, os.cpu_count() or 1)


@dataclass(frozen=True)
class PopplerPagesSettings:
    """Top-level snapshot of configuration values."""

    env_file: Path
    poppler_path: Path | None
    max_concurrency: int
    temp_dir: Path | None


def _resolve_env_path(env_file: os.PathLike[str] | str | None) -> Path:
    if env_file is None:
        return (Path.cwd() / _DEFAULT_ENV_FILENAME).resolve()
    return Path(env_file).resolve()


@lru_cache(maxsize=4)
def _load_settings(env_path: Path) -> PopplerPagesSettings:
    # Existing environment variables take precedence over `.env` defaults.
    load_dotenv(dotenv_path=env_path, override=False)

    max_concurrency = _coerce_int(os.getenv(MAX_CONCURRENCY_ENV))
    if max_concurrency is None or max_concurrency < 1:
        max_concurrency = default_max_concurrency()

    return PopplerPagesSettings(
        env_file=env_path,
        poppler_path=_coerce_path(os.getenv(POPPLER_PATH_ENV)),
        max_concurrency=max_concurrency,
        temp_dir=_coerce_path(os.getenv(TEMP_DIR_ENV)),
    )


def get_settings(
    env_file: os.PathLike[str] | str | None = None,
    *,
    reload: bool = False,
) -> PopplerPagesSettings:
    """Return the cached settings snapshot.

    Args:
        env_file: Optional explicit path to a `.env` file. When omitted the
            `.env` file in the current working directory is used.
        reload: When True the cached snapshot is cleared before loading.
    """
    env_path = _resolve_env_path(env_file)
    if reload:
        _load_settings.cache_clear()
    return _load_settings(env_path)
