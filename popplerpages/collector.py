"""Decoding of per-page tool output and reassembly in page order."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from io import BytesIO
from typing import TypeVar

from PIL import Image, UnidentifiedImageError

from popplerpages.errors import ImageDecodeError


@dataclass(slots=True)
class RenderedPage:
    page_number: int
    image: Image.Image


@dataclass(frozen=True, slots=True)
class PageText:
    page_number: int
    text: str


_PageT = TypeVar("_PageT", RenderedPage, PageText)


class PageCollector:
    """Turn raw page bytes into images and order results by page number."""

    def decode(self, page_number: int, data: bytes) -> RenderedPage:
        if not data:
            raise ImageDecodeError(page_number, "tool produced no output")
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as exc:
            raise ImageDecodeError(page_number, str(exc)) from exc
        return RenderedPage(page_number=page_number, image=image)

    def decode_text(self, page_number: int, data: bytes) -> PageText:
        # pdftotext ends every page with a form feed.
        text = data.decode("utf-8", errors="replace").rstrip("\f")
        return PageText(page_number=page_number, text=text)

    def assemble(self, pages: Iterable[RenderedPage]) -> list[RenderedPage]:
        """Sort decoded pages ascending by page number."""
        return _ordered(pages)

    def assemble_text(self, pages: Iterable[PageText]) -> list[PageText]:
        return _ordered(pages)


def _ordered(pages: Iterable[_PageT]) -> list[_PageT]:
    return sorted(pages, key=lambda page: page.page_number)


__all__ = ["PageCollector", "PageText", "RenderedPage"]
