"""Argument vectors for poppler rasterization and text tools.

Every page becomes its own invocation (``-f N -l N``) streaming a single
image to stdout, so pages can render concurrently and no output directory
has to be scanned afterwards.

The two rasterizers share most of their flags. They differ in how stdout
output is requested (``pdftocairo`` needs an explicit ``-`` output path)
and in transparency, which only ``pdftocairo`` offers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import os
from pathlib import Path

from popplerpages.errors import InvalidPageRange, InvalidRenderOptions
from popplerpages.options import RenderOptions, TextOptions
from popplerpages.tools import PDFTOCAIRO, PDFTOPPM, PDFTOTEXT, ToolLocator


@dataclass(frozen=True, slots=True)
class PageCommand:
    page_number: int
    argv: tuple[str, ...]


def render_option_args(options: RenderOptions) -> list[str]:
    """Flags derived from ``options`` that both rasterizers understand."""
    args: list[str] = [f"-{options.format.value}", "-singlefile"]

    if options.resolution.is_uniform:
        args += ["-r", str(options.resolution.x)]
    else:
        args += ["-rx", str(options.resolution.x), "-ry", str(options.resolution.y)]

    if options.scale is not None:
        if options.scale.is_uniform:
            args += ["-scale-to", str(options.scale.x)]
        else:
            args += ["-scale-to-x", str(options.scale.x), "-scale-to-y", str(options.scale.y)]

    if options.crop is not None:
        crop = options.crop
        args += ["-x", str(crop.x), "-y", str(crop.y), "-W", str(crop.width), "-H", str(crop.height)]

    if options.use_cropbox:
        args.append("-cropbox")
    if options.greyscale:
        args.append("-gray")
    if options.jpeg_quality is not None:
        args += ["-jpegopt", f"quality={options.jpeg_quality}"]
    if options.password is not None:
        args += options.password.to_cli_args()
    return args


class CommandBuilder:
    """Build per-page argument vectors in the selected tool's dialect."""

    def __init__(self, tools: ToolLocator) -> None:
        self._tools = tools

    def render_tool(self, options: RenderOptions) -> str:
        return PDFTOCAIRO if options.pdftocairo else PDFTOPPM

    def render_page(self, page_number: int, input_path: Path, options: RenderOptions) -> PageCommand:
        tool = self.render_tool(options)
        if options.transparent and not options.pdftocairo:
            raise InvalidRenderOptions(f"{PDFTOPPM} cannot render transparent pages; use pdftocairo")

        argv = [self._tools.executable(tool)]
        argv += render_option_args(options)
        if options.transparent:
            argv.append("-transp")
        argv += _page_bounds(page_number)
        argv.append(os.fspath(input_path))
        if options.pdftocairo:
            # stdout; pdftoppm writes there by default when no output root is given
            argv.append("-")
        return PageCommand(page_number=page_number, argv=tuple(argv))

    def render_pages(
        self, page_numbers: Sequence[int], input_path: Path, options: RenderOptions
    ) -> list[PageCommand]:
        if not page_numbers:
            raise InvalidPageRange("No pages were selected")
        return [self.render_page(page, input_path, options) for page in page_numbers]

    def text_page(self, page_number: int, input_path: Path, options: TextOptions) -> PageCommand:
        argv = [self._tools.executable(PDFTOTEXT), "-enc", "UTF-8", "-eol", "unix"]
        if options.layout:
            argv.append("-layout")
        if options.password is not None:
            argv += options.password.to_cli_args()
        argv += _page_bounds(page_number)
        argv += [os.fspath(input_path), "-"]
        return PageCommand(page_number=page_number, argv=tuple(argv))


def _page_bounds(page_number: int) -> list[str]:
    return ["-f", str(page_number), "-l", str(page_number)]


__all__ = ["CommandBuilder", "PageCommand", "render_option_args"]
