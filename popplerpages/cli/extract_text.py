from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import aiofiles

from popplerpages.errors import PopplerPagesError
from popplerpages.options import Pages, TextOptions
from popplerpages.renderer import PdfRenderer
from popplerpages.utils.log_utils import logger

from .render_pages import resolve_password


@dataclass(slots=True)
class ExtractTextOptions:
    input_file: Path
    output_file: Path | None
    pages: str
    layout: bool
    owner_password: str | None
    user_password: str | None


async def run(options: ExtractTextOptions) -> tuple[int, str]:
    """Extract text and return ``(exit_code, text)``.

    Pages are separated by form feeds, matching ``pdftotext`` output.
    """
    try:
        pages = Pages.parse(options.pages)
    except PopplerPagesError as exc:
        logger.error(str(exc))
        return 2, ""

    text_options = TextOptions(
        layout=options.layout,
        password=resolve_password(options.owner_password, options.user_password),
    )
    renderer = PdfRenderer.from_settings()

    async with aiofiles.open(options.input_file, "rb") as file_obj:
        source = await file_obj.read()

    try:
        info = await renderer.query_info(source, password=text_options.password)
        texts = await renderer.extract_text_multi_page(source, info, pages, text_options)
    except PopplerPagesError as exc:
        logger.error(f"Extracting text from {options.input_file} failed: {exc}")
        return 1, ""

    combined = "\f".join(page.text for page in texts)
    if options.output_file is not None:
        async with aiofiles.open(options.output_file, "w", encoding="utf-8") as file_obj:
            await file_obj.write(combined)
        logger.info(f"Wrote text of {len(texts)} page(s) to {options.output_file}")
    return 0, combined
