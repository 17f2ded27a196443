from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Sequence
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import aiofiles
import typer  # type: ignore[import]

from popplerpages.errors import PopplerPagesError
from popplerpages.options import ImageFormat
from popplerpages.renderer import PdfRenderer
from popplerpages.utils.log_utils import configure_logging, logger

from . import extract_text, render_pages


app = typer.Typer(
    help="Render PDF pages to images with the poppler command-line tools",
)


_P = ParamSpec("_P")
_T = TypeVar("_T")


def _synchronous(handler: Callable[_P, Coroutine[Any, Any, _T]]) -> Callable[_P, _T]:
    @wraps(handler)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
        try:
            return asyncio.run(handler(*args, **kwargs))
        except KeyboardInterrupt as err:
            logger.info("Interrupted by user")
            raise typer.Exit(code=130) from err

    return wrapper


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log tool command lines and batch progress.",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write debug logs to this file.",
        dir_okay=False,
    ),
) -> None:
    if verbose or log_file:
        configure_logging(
            console_level="DEBUG" if verbose else "INFO",
            file_path=log_file,
            force=True,
        )


_INPUT_FILE_ARGUMENT = typer.Argument(
    ...,
    help="PDF file to read.",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


@app.command("info")
@_synchronous
async def info_command(
    input_file: Path = _INPUT_FILE_ARGUMENT,
    owner_password: str | None = typer.Option(None, "--owner-password", help="Owner password."),
    user_password: str | None = typer.Option(None, "--user-password", help="User password."),
) -> int:
    async with aiofiles.open(input_file, "rb") as file_obj:
        source = await file_obj.read()
    renderer = PdfRenderer.from_settings()
    password = render_pages.resolve_password(owner_password, user_password)
    try:
        info = await renderer.query_info(source, password=password)
    except PopplerPagesError as exc:
        logger.error(f"Reading {input_file} failed: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"Pages: {info.page_count}")
    typer.echo(f"Encrypted: {'yes' if info.is_encrypted else 'no'}")
    return 0


@app.command("render")
@_synchronous
async def render_command(
    input_file: Path = _INPUT_FILE_ARGUMENT,
    output_dir: Path = typer.Option(
        ...,
        "--output-dir",
        help="Destination directory for page images (created if missing).",
        file_okay=False,
        dir_okay=True,
        writable=True,
    ),
    pages: str = typer.Option(
        render_pages.DEFAULT_PAGES,
        "--pages",
        "-p",
        help="Pages to render: 'all', '3', '2-5' or '1-3,8'.",
        show_default=True,
    ),
    dpi: int = typer.Option(150, "--dpi", help="Render resolution.", show_default=True),
    image_format: ImageFormat = typer.Option(
        render_pages.DEFAULT_FORMAT,
        "--format",
        help="Output image format.",
        case_sensitive=False,
        show_default=True,
    ),
    pdftocairo: bool = typer.Option(
        False,
        "--pdftocairo",
        help="Rasterize with pdftocairo instead of pdftoppm.",
    ),
    transparent: bool = typer.Option(
        False,
        "--transparent",
        help="Transparent page background (pdftocairo with PNG/TIFF only).",
    ),
    greyscale: bool = typer.Option(False, "--greyscale", help="Render in greyscale."),
    scale_to: int | None = typer.Option(
        None,
        "--scale-to",
        help="Cap the longer side of every page image to this many pixels.",
    ),
    use_cropbox: bool = typer.Option(
        False,
        "--cropbox",
        help="Render the crop box instead of the media box.",
    ),
    owner_password: str | None = typer.Option(None, "--owner-password", help="Owner password."),
    user_password: str | None = typer.Option(None, "--user-password", help="User password."),
    max_concurrency: int | None = typer.Option(
        None,
        "--max-concurrency",
        help="Maximum number of tool processes at once. Defaults to the configured value.",
    ),
) -> int:
    options = render_pages.RenderPagesOptions(
        input_file=input_file,
        output_dir=output_dir,
        pages=pages,
        dpi=dpi,
        format=image_format,
        pdftocairo=pdftocairo,
        transparent=transparent,
        greyscale=greyscale,
        scale_to=scale_to,
        use_cropbox=use_cropbox,
        owner_password=owner_password,
        user_password=user_password,
        max_concurrency=max_concurrency,
    )
    result = await render_pages.run(options)
    if result != 0:
        raise typer.Exit(code=result)
    return result


@app.command("text")
@_synchronous
async def text_command(
    input_file: Path = _INPUT_FILE_ARGUMENT,
    pages: str = typer.Option(
        "all",
        "--pages",
        "-p",
        help="Pages to extract: 'all', '3', '2-5' or '1-3,8'.",
        show_default=True,
    ),
    layout: bool = typer.Option(False, "--layout", help="Keep the physical page layout."),
    output_file: Path | None = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Write the text here instead of stdout.",
        dir_okay=False,
    ),
    owner_password: str | None = typer.Option(None, "--owner-password", help="Owner password."),
    user_password: str | None = typer.Option(None, "--user-password", help="User password."),
) -> int:
    options = extract_text.ExtractTextOptions(
        input_file=input_file,
        output_file=output_file,
        pages=pages,
        layout=layout,
        owner_password=owner_password,
        user_password=user_password,
    )
    result, text = await extract_text.run(options)
    if result != 0:
        raise typer.Exit(code=result)
    if output_file is None:
        typer.echo(text)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    try:
        result = app(args=list(argv) if argv is not None else None, standalone_mode=False)
        return int(result or 0)
    except SystemExit as exc:
        return int(exc.code or 0)


if __name__ == "__main__":  # pragma: no cover
    app()
