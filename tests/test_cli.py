from __future__ import annotations

from pathlib import Path
import sys
from typing import cast

from PIL import Image
import pytest

from popplerpages.cli import render_pages
from popplerpages.cli.main import app, main
from popplerpages.cli.render_pages import RenderPagesOptions
from popplerpages.config.settings import POPPLER_PATH_ENV, get_settings
from popplerpages.options import ImageFormat

from .fakes import PAGE_COLOURS, FakePoppler


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake tools are shell scripts")


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "sample doc.pdf"
    path.write_bytes(b"%PDF-1.5 fake")
    return path


@pytest.fixture
def poppler_env(
    fake_poppler: FakePoppler, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> FakePoppler:
    """Point the settings snapshot at the fake poppler directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(POPPLER_PATH_ENV, str(fake_poppler.root))
    get_settings(reload=True)
    return fake_poppler


def test_render_parses_options(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, sample_pdf: Path
) -> None:
    captured: dict[str, RenderPagesOptions] = {}

    async def fake_run(options: RenderPagesOptions) -> int:
        captured["options"] = options
        return 0

    monkeypatch.setattr("popplerpages.cli.render_pages.run", fake_run)

    exit_code = app(
        [
            "render",
            str(sample_pdf),
            "--output-dir",
            str(tmp_path / "out"),
            "--pages",
            "2-4",
            "--format",
            "jpeg",
            "--pdftocairo",
            "--max-concurrency",
            "2",
        ],
        standalone_mode=False,
    )

    assert exit_code == 0
    options = cast(RenderPagesOptions, captured["options"])
    assert options.pages == "2-4"
    assert options.format is ImageFormat.JPEG
    assert options.pdftocairo is True
    assert options.max_concurrency == 2
    assert options.dpi == 150


def test_output_path_naming(tmp_path: Path) -> None:
    page = render_pages.RenderedPage(page_number=7, image=Image.new("RGB", (1, 1)))

    path = render_pages.output_path(tmp_path, "my report", page, ImageFormat.JPEG)

    assert path == tmp_path / "my_report_page_0007.jpg"


def test_resolve_password_prefers_owner() -> None:
    assert render_pages.resolve_password(None, None) is None
    owner = render_pages.resolve_password("o", "u")
    assert owner is not None and owner.to_cli_args() == ["-opw", "o"]


@posix_only
def test_render_writes_page_images(poppler_env: FakePoppler, tmp_path: Path, sample_pdf: Path) -> None:
    output_dir = tmp_path / "out"

    exit_code = main(["render", str(sample_pdf), "--output-dir", str(output_dir), "-p", "1-3,8"])

    assert exit_code == 0
    created = sorted(path.name for path in output_dir.glob("*.png"))
    assert created == [
        "sample_doc_page_0001.png",
        "sample_doc_page_0002.png",
        "sample_doc_page_0003.png",
        "sample_doc_page_0008.png",
    ]
    with Image.open(output_dir / "sample_doc_page_0008.png") as image:
        assert image.getpixel((0, 0)) == PAGE_COLOURS[7]


@posix_only
def test_render_reports_out_of_range_pages(
    poppler_env: FakePoppler, tmp_path: Path, sample_pdf: Path
) -> None:
    exit_code = main(["render", str(sample_pdf), "--output-dir", str(tmp_path / "out"), "-p", "7-12"])

    assert exit_code == 1
    assert poppler_env.calls("pdftoppm") == []


def test_render_rejects_malformed_pages(tmp_path: Path, sample_pdf: Path) -> None:
    exit_code = main(["render", str(sample_pdf), "--output-dir", str(tmp_path / "out"), "-p", "x"])

    assert exit_code == 2


@posix_only
def test_info_command(
    poppler_env: FakePoppler, sample_pdf: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["info", str(sample_pdf)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Pages: 8" in out
    assert "Encrypted: no" in out


@posix_only
def test_text_command_writes_file(poppler_env: FakePoppler, tmp_path: Path, sample_pdf: Path) -> None:
    output_file = tmp_path / "out.txt"

    exit_code = main(["text", str(sample_pdf), "-p", "1-2", "-o", str(output_file)])

    assert exit_code == 0
    assert output_file.read_text(encoding="utf-8") == "text of page 1\n\ftext of page 2\n"
