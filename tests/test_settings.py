"""Tests for the centralised configuration loader."""

from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path

import pytest

from popplerpages.config.settings import (
    MAX_CONCURRENCY_ENV,
    POPPLER_PATH_ENV,
    TEMP_DIR_ENV,
    get_settings,
)
from popplerpages.renderer import PdfRenderer
from popplerpages.tools import ToolLocator


_KEYS = (POPPLER_PATH_ENV, MAX_CONCURRENCY_ENV, TEMP_DIR_ENV)


def _write_env(path: Path, content: str) -> None:
    lines = [line.strip() for line in content.strip().splitlines()]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # load_dotenv writes straight into os.environ.
    for key in _KEYS:
        os.environ.pop(key, None)


def test_env_file_values_are_loaded(tmp_path: Path) -> None:
    """Ensure values from a dedicated env file are parsed into the snapshot."""
    env_file = tmp_path / "test.env"
    _write_env(
        env_file,
        f"""
        {POPPLER_PATH_ENV}=/opt/poppler/bin
        {MAX_CONCURRENCY_ENV}=3
        {TEMP_DIR_ENV}=/var/tmp/popplerpages
        """,
    )
    settings = get_settings(env_file=env_file, reload=True)

    assert settings.env_file == env_file.resolve()
    assert settings.poppler_path == Path("/opt/poppler/bin")
    assert settings.max_concurrency == 3
    assert settings.temp_dir == Path("/var/tmp/popplerpages")


def test_environment_variables_override_env_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Existing environment variables should take precedence over .env contents."""
    env_file = tmp_path / "override.env"
    _write_env(
        env_file,
        f"""
        {POPPLER_PATH_ENV}=/from/env/file
        {MAX_CONCURRENCY_ENV}=2
        """,
    )
    monkeypatch.setenv(POPPLER_PATH_ENV, "/from/environment")
    monkeypatch.setenv(MAX_CONCURRENCY_ENV, "7")

    settings = get_settings(env_file=env_file, reload=True)

    assert settings.poppler_path == Path("/from/environment")
    assert settings.max_concurrency == 7


def test_missing_values_fall_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("popplerpages.config.settings.os.cpu_count", lambda: 6)
    monkeypatch.setenv(MAX_CONCURRENCY_ENV, "not-a-number")

    settings = get_settings(env_file=tmp_path / "absent.env", reload=True)

    assert settings.poppler_path is None
    assert settings.temp_dir is None
    assert settings.max_concurrency == 6


def test_non_positive_concurrency_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("popplerpages.config.settings.os.cpu_count", lambda: None)
    monkeypatch.setenv(MAX_CONCURRENCY_ENV, "0")

    settings = get_settings(env_file=tmp_path / "absent.env", reload=True)

    assert settings.max_concurrency == 1


def test_reload_picks_up_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Calling get_settings with reload=True should refresh cached values."""
    env_file = tmp_path / "reload.env"
    _write_env(env_file, f"{MAX_CONCURRENCY_ENV}=2")
    assert get_settings(env_file=env_file, reload=True).max_concurrency == 2

    monkeypatch.setenv(MAX_CONCURRENCY_ENV, "9")
    assert get_settings(env_file=env_file).max_concurrency == 2
    assert get_settings(env_file=env_file, reload=True).max_concurrency == 9


def test_renderer_from_settings_uses_poppler_path(tmp_path: Path) -> None:
    env_file = tmp_path / "renderer.env"
    _write_env(
        env_file,
        f"""
        {POPPLER_PATH_ENV}={tmp_path / "bin"}
        {MAX_CONCURRENCY_ENV}=5
        """,
    )
    settings = get_settings(env_file=env_file, reload=True)

    renderer = PdfRenderer.from_settings(settings)
    override = PdfRenderer.from_settings(settings, max_concurrency=1)

    assert renderer.max_concurrency == 5
    assert override.max_concurrency == 1
    assert ToolLocator.from_settings(settings).poppler_path == tmp_path / "bin"
