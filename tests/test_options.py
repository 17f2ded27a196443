from __future__ import annotations

import pytest

from popplerpages.errors import InvalidPageRange, InvalidRenderOptions, PageOutOfBounds
from popplerpages.options import (
    Crop,
    ImageFormat,
    PageSelection,
    Pages,
    Password,
    RenderOptions,
    Resolution,
    Scale,
)


def test_all_pages_resolve_to_full_document() -> None:
    assert Pages.all().resolve(3) == [1, 2, 3]


def test_range_resolves_inclusive() -> None:
    assert Pages.range(2, 5).resolve(8) == [2, 3, 4, 5]
    assert Pages.range(4, 4).resolve(8) == [4]


def test_inverted_range_is_rejected() -> None:
    with pytest.raises(InvalidPageRange):
        Pages.range(5, 2).resolve(8)


@pytest.mark.parametrize("pages", [Pages.range(0, 3), Pages.range(7, 9), Pages.single(9)])
def test_out_of_bounds_selection(pages: Pages) -> None:
    with pytest.raises(PageOutOfBounds) as excinfo:
        pages.resolve(8)
    assert excinfo.value.page_count == 8


def test_specific_pages_are_sorted_and_deduplicated() -> None:
    assert Pages.specific([5, 1, 5, 3]).resolve(8) == [1, 3, 5]


def test_empty_specific_selection_is_rejected() -> None:
    with pytest.raises(InvalidPageRange):
        Pages.specific([]).resolve(8)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("all", Pages.all()),
        ("", Pages.all()),
        (" 3 ", Pages.single(3)),
        ("2-5", Pages.range(2, 5)),
        ("1-3, 8", Pages.specific([1, 2, 3, 8])),
        ("4,2", Pages.specific([4, 2])),
    ],
)
def test_parse(text: str, expected: Pages) -> None:
    assert Pages.parse(text) == expected


@pytest.mark.parametrize("text", ["three", "2-", "1,x", "5-2,7"])
def test_parse_rejects_malformed_text(text: str) -> None:
    with pytest.raises(InvalidPageRange):
        Pages.parse(text)


def test_parsed_inverted_range_fails_on_resolve() -> None:
    pages = Pages.parse("5-2")
    assert pages.kind is PageSelection.RANGE
    with pytest.raises(InvalidPageRange):
        pages.resolve(8)


def test_default_render_options() -> None:
    options = RenderOptions()
    assert options.resolution == Resolution(150, 150)
    assert options.format is ImageFormat.PNG
    assert options.pdftocairo is False


def test_jpeg_quality_requires_jpeg() -> None:
    with pytest.raises(InvalidRenderOptions):
        RenderOptions(jpeg_quality=80)
    with pytest.raises(InvalidRenderOptions):
        RenderOptions(format=ImageFormat.JPEG, jpeg_quality=101)
    assert RenderOptions(format=ImageFormat.JPEG, jpeg_quality=80).jpeg_quality == 80


def test_transparent_jpeg_is_rejected() -> None:
    with pytest.raises(InvalidRenderOptions):
        RenderOptions(format=ImageFormat.JPEG, transparent=True, pdftocairo=True)


@pytest.mark.parametrize(
    "factory",
    [
        lambda: Resolution(0, 150),
        lambda: Scale(0, 100),
        lambda: Scale(-1, -1),
        lambda: Crop(-1, 0, 10, 10),
        lambda: Crop(0, 0, 0, 10),
    ],
)
def test_invalid_geometry(factory) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(InvalidRenderOptions):
        factory()


def test_password_flags_and_repr() -> None:
    assert Password.owner("s3cret").to_cli_args() == ["-opw", "s3cret"]
    assert Password.user("s3cret").to_cli_args() == ["-upw", "s3cret"]
    assert "s3cret" not in repr(Password.user("s3cret"))


def test_image_format_extensions() -> None:
    assert ImageFormat.PNG.extension == "png"
    assert ImageFormat.JPEG.extension == "jpg"
    assert ImageFormat.TIFF.extension == "tif"
