"""Render PDF pages to in-memory images with the poppler command-line tools.

All PDF interpretation happens in the external ``pdfinfo``, ``pdftoppm``,
``pdftocairo`` and ``pdftotext`` executables. This package writes the input
to a scoped temporary file, builds the command lines, runs one process per
page concurrently and decodes the results with Pillow.

Primary public entry points:
    ``query_info`` – page count and encryption status of a PDF.
    ``render_single_page`` / ``render_multi_page`` – page images, ordered by
    page number.
    ``PdfRenderer`` – the same operations with an explicit tool location,
    concurrency bound and temporary directory.

Tool location:
    ``PATH`` by default, or the directory named by
    ``POPPLERPAGES_POPPLER_PATH`` (also read from a ``.env`` file).
"""

from .collector import PageText, RenderedPage
from .errors import (
    ImageDecodeError,
    InfoParseError,
    InvalidPageRange,
    InvalidRenderOptions,
    PageOutOfBounds,
    PasswordRequired,
    PopplerPagesError,
    ToolExecutionError,
    ToolNotFound,
)
from .info import PdfInfo
from .options import Crop, ImageFormat, Pages, Password, RenderOptions, Resolution, Scale, TextOptions
from .renderer import PdfRenderer, query_info, render_multi_page, render_single_page
from .tools import ToolLocator


__all__ = [
    "Crop",
    "ImageDecodeError",
    "ImageFormat",
    "InfoParseError",
    "InvalidPageRange",
    "InvalidRenderOptions",
    "PageOutOfBounds",
    "PageText",
    "Pages",
    "Password",
    "PasswordRequired",
    "PdfInfo",
    "PdfRenderer",
    "PopplerPagesError",
    "RenderOptions",
    "RenderedPage",
    "Resolution",
    "Scale",
    "TextOptions",
    "ToolExecutionError",
    "ToolLocator",
    "ToolNotFound",
    "query_info",
    "render_multi_page",
    "render_single_page",
]
