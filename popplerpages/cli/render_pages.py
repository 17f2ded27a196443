from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import aiofiles

from popplerpages.collector import RenderedPage
from popplerpages.config import get_settings
from popplerpages.errors import PopplerPagesError
from popplerpages.options import (
    ImageFormat,
    Pages,
    Password,
    RenderOptions,
    Resolution,
    Scale,
)
from popplerpages.renderer import PdfRenderer
from popplerpages.utils.concurrency import TqdmProgressReporter
from popplerpages.utils.log_utils import logger


DEFAULT_FORMAT = ImageFormat.PNG
DEFAULT_PAGES = "all"


@dataclass(slots=True)
class RenderPagesOptions:
    input_file: Path
    output_dir: Path
    pages: str
    dpi: int
    format: ImageFormat
    pdftocairo: bool
    transparent: bool
    greyscale: bool
    scale_to: int | None
    use_cropbox: bool
    owner_password: str | None
    user_password: str | None
    max_concurrency: int | None


def resolve_password(owner_password: str | None, user_password: str | None) -> Password | None:
    if owner_password:
        return Password.owner(owner_password)
    if user_password:
        return Password.user(user_password)
    return None


def output_path(output_dir: Path, stem: str, page: RenderedPage, image_format: ImageFormat) -> Path:
    safe_stem = stem.replace(" ", "_")
    return output_dir / f"{safe_stem}_page_{page.page_number:04d}.{image_format.extension}"


def build_render_options(options: RenderPagesOptions) -> RenderOptions:
    return RenderOptions(
        resolution=Resolution.uniform(options.dpi),
        format=options.format,
        pdftocairo=options.pdftocairo,
        transparent=options.transparent,
        greyscale=options.greyscale,
        scale=Scale.uniform(options.scale_to) if options.scale_to else None,
        use_cropbox=options.use_cropbox,
        password=resolve_password(options.owner_password, options.user_password),
    )


async def run(options: RenderPagesOptions) -> int:
    try:
        render_options = build_render_options(options)
        pages = Pages.parse(options.pages)
    except PopplerPagesError as exc:
        logger.error(str(exc))
        return 2

    settings = get_settings()
    overrides: dict[str, object] = {}
    if options.max_concurrency:
        overrides["max_concurrency"] = options.max_concurrency
    renderer = PdfRenderer.from_settings(settings, **overrides)

    async with aiofiles.open(options.input_file, "rb") as file_obj:
        source = await file_obj.read()

    progress = TqdmProgressReporter("render")
    try:
        info = await renderer.query_info(source, password=render_options.password)
        rendered = await renderer.render_multi_page(
            source, info, pages, render_options, progress=progress
        )
    except PopplerPagesError as exc:
        logger.error(f"Rendering {options.input_file} failed: {exc}")
        return 1
    finally:
        progress.close()

    options.output_dir.mkdir(parents=True, exist_ok=True)
    for page in rendered:
        target = output_path(options.output_dir, options.input_file.stem, page, options.format)
        page.image.save(target)
        logger.debug(f"Saved page {page.page_number} to {target}")

    logger.info(f"Rendered {len(rendered)} page(s) of {options.input_file} into {options.output_dir}")
    return 0
