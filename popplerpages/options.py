"""Page selection and render option models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from popplerpages.errors import InvalidPageRange, InvalidRenderOptions, PageOutOfBounds


DEFAULT_DPI = 150


class PageSelection(str, Enum):
    ALL = "all"
    SINGLE = "single"
    RANGE = "range"
    SPECIFIC = "specific"


@dataclass(frozen=True, slots=True)
class Pages:
    """Which pages of a document a request covers.

    Build instances through :meth:`all`, :meth:`single`, :meth:`range`,
    :meth:`specific` or :meth:`parse`. Nothing is validated until
    :meth:`resolve` is called with the document's page count.
    """

    kind: PageSelection
    lower: int = 1
    upper: int = 1
    numbers: tuple[int, ...] = ()

    @classmethod
    def all(cls) -> Pages:
        return cls(kind=PageSelection.ALL)

    @classmethod
    def single(cls, page: int) -> Pages:
        return cls(kind=PageSelection.SINGLE, lower=page, upper=page)

    @classmethod
    def range(cls, lower: int, upper: int) -> Pages:
        """Inclusive, 1-based range ``lower..upper``."""
        return cls(kind=PageSelection.RANGE, lower=lower, upper=upper)

    @classmethod
    def specific(cls, numbers: Iterable[int]) -> Pages:
        return cls(kind=PageSelection.SPECIFIC, numbers=tuple(numbers))

    @classmethod
    def parse(cls, text: str) -> Pages:
        """Parse ``all``, ``3``, ``2-5`` or comma separated mixes like ``1-3,8``."""
        cleaned = text.strip().lower()
        if cleaned in ("", "all"):
            return cls.all()

        parts = [part.strip() for part in cleaned.split(",") if part.strip()]
        if len(parts) == 1 and "-" not in parts[0]:
            return cls.single(_parse_page_number(parts[0], text))
        if len(parts) == 1:
            lower, upper = _parse_span(parts[0], text)
            return cls.range(lower, upper)

        numbers: list[int] = []
        for part in parts:
            if "-" in part:
                lower, upper = _parse_span(part, text)
                if lower > upper:
                    raise InvalidPageRange(f"Inverted page span '{part}' in '{text}'")
                numbers.extend(range(lower, upper + 1))
            else:
                numbers.append(_parse_page_number(part, text))
        return cls.specific(numbers)

    def resolve(self, page_count: int) -> list[int]:
        """Return the ascending, de-duplicated page numbers this selection names.

        Raises:
            InvalidPageRange: The selection is empty or inverted.
            PageOutOfBounds: A page lies outside ``[1, page_count]``.
        """
        if self.kind is PageSelection.ALL:
            return list(range(1, page_count + 1))

        if self.kind is PageSelection.SPECIFIC:
            if not self.numbers:
                raise InvalidPageRange("No pages were selected")
            for page in self.numbers:
                _check_bounds(page, page_count)
            return sorted(set(self.numbers))

        if self.lower > self.upper:
            raise InvalidPageRange(f"Page range {self.lower}-{self.upper} is empty")
        _check_bounds(self.lower, page_count)
        _check_bounds(self.upper, page_count)
        return list(range(self.lower, self.upper + 1))


def _check_bounds(page: int, page_count: int) -> None:
    if page < 1 or page > page_count:
        raise PageOutOfBounds(page, page_count)


def _parse_page_number(token: str, source: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise InvalidPageRange(f"Invalid page number '{token}' in '{source}'") from exc


def _parse_span(token: str, source: str) -> tuple[int, int]:
    lower_text, _, upper_text = token.partition("-")
    return _parse_page_number(lower_text.strip(), source), _parse_page_number(
        upper_text.strip(), source
    )


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    TIFF = "tiff"

    @property
    def extension(self) -> str:
        return {"png": "png", "jpeg": "jpg", "tiff": "tif"}[self.value]


@dataclass(frozen=True, slots=True)
class Resolution:
    """Render resolution in dots per inch."""

    x: int = DEFAULT_DPI
    y: int = DEFAULT_DPI

    @classmethod
    def uniform(cls, dpi: int) -> Resolution:
        return cls(x=dpi, y=dpi)

    def __post_init__(self) -> None:
        if self.x <= 0 or self.y <= 0:
            raise InvalidRenderOptions(f"Resolution must be positive, got {self.x}x{self.y}")

    @property
    def is_uniform(self) -> bool:
        return self.x == self.y


@dataclass(frozen=True, slots=True)
class Scale:
    """Caps on the output bitmap size in pixels.

    ``Scale.uniform(n)`` bounds the longer side. With separate axes, ``-1``
    on one axis keeps the aspect ratio from the other.
    """

    x: int
    y: int

    @classmethod
    def uniform(cls, pixels: int) -> Scale:
        return cls(x=pixels, y=pixels)

    def __post_init__(self) -> None:
        for value in (self.x, self.y):
            if value == 0 or value < -1:
                raise InvalidRenderOptions(f"Scale must be positive or -1, got {self.x}x{self.y}")
        if self.x == -1 and self.y == -1:
            raise InvalidRenderOptions("Scale needs at least one bounded axis")

    @property
    def is_uniform(self) -> bool:
        return self.x == self.y


@dataclass(frozen=True, slots=True)
class Crop:
    """Crop area in output pixels, measured from the top-left corner."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise InvalidRenderOptions("Crop origin must not be negative")
        if self.width <= 0 or self.height <= 0:
            raise InvalidRenderOptions("Crop area must have a positive size")


class PasswordKind(str, Enum):
    OWNER = "owner"
    USER = "user"


@dataclass(frozen=True, slots=True)
class Password:
    kind: PasswordKind
    value: str = field(repr=False)

    @classmethod
    def owner(cls, value: str) -> Password:
        return cls(kind=PasswordKind.OWNER, value=value)

    @classmethod
    def user(cls, value: str) -> Password:
        return cls(kind=PasswordKind.USER, value=value)

    def to_cli_args(self) -> list[str]:
        flag = "-opw" if self.kind is PasswordKind.OWNER else "-upw"
        return [flag, self.value]


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options shared by every page invocation of one render request."""

    resolution: Resolution = field(default_factory=Resolution)
    format: ImageFormat = ImageFormat.PNG
    pdftocairo: bool = False
    transparent: bool = False
    crop: Crop | None = None
    use_cropbox: bool = False
    scale: Scale | None = None
    greyscale: bool = False
    password: Password | None = None
    jpeg_quality: int | None = None

    def __post_init__(self) -> None:
        if self.jpeg_quality is not None:
            if self.format is not ImageFormat.JPEG:
                raise InvalidRenderOptions("jpeg_quality only applies to JPEG output")
            if not 0 <= self.jpeg_quality <= 100:
                raise InvalidRenderOptions("jpeg_quality must be between 0 and 100")
        if self.transparent and self.format is ImageFormat.JPEG:
            raise InvalidRenderOptions("Transparency requires PNG or TIFF output")


@dataclass(frozen=True, slots=True)
class TextOptions:
    """Options for ``pdftotext`` extraction."""

    layout: bool = False
    password: Password | None = None


__all__ = [
    "DEFAULT_DPI",
    "Crop",
    "ImageFormat",
    "PageSelection",
    "Pages",
    "Password",
    "PasswordKind",
    "RenderOptions",
    "Resolution",
    "Scale",
    "TextOptions",
]
