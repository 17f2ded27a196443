# Shared fixtures for the popplerpages test suite.
from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from popplerpages.config.settings import _load_settings
from popplerpages.info import PdfInfo

from .fakes import PAGE_COUNT, FakePoppler, install_fake_poppler


@pytest.fixture
def fake_poppler(tmp_path: Path) -> FakePoppler:
    """Directory of shell scripts standing in for the poppler executables."""
    return install_fake_poppler(tmp_path / "poppler")


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Parent directory for the renderer's per-call temporary directories."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def sample_info() -> PdfInfo:
    return PdfInfo(page_count=PAGE_COUNT, is_encrypted=False)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Keep cached settings snapshots from leaking between tests."""
    _load_settings.cache_clear()
    yield
    _load_settings.cache_clear()
