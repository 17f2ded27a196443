"""Asynchronous single- and multi-page rendering through poppler tools.

``PdfRenderer`` ties the pieces together:

    1. Validates the page selection against ``PdfInfo`` before touching disk.
    2. Writes the PDF bytes once into a private temporary directory that every
       page process reads from.
    3. Launches one tool process per page, bounded by ``max_concurrency``.
    4. Decodes each page as soon as its process finishes, then returns the
       pages in ascending page order.

Batches fail fast: the first tool or decode failure cancels the remaining
pages, kills their processes and is re-raised unchanged. No partial result
is returned.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Protocol, TypeVar

from popplerpages.collector import PageCollector, PageText, RenderedPage
from popplerpages.commands import CommandBuilder, PageCommand
from popplerpages.config import PopplerPagesSettings, get_settings
from popplerpages.config.settings import default_max_concurrency
from popplerpages.errors import PasswordRequired
from popplerpages.info import PdfInfo, read_pdf_info
from popplerpages.options import Pages, Password, RenderOptions, TextOptions
from popplerpages.process import ProcessOutput, ProcessRunner
from popplerpages.tempfiles import temp_input
from popplerpages.tools import ToolLocator
from popplerpages.utils.concurrency import FailFastExecutor, ProgressReporter
from popplerpages.utils.log_utils import logger


T = TypeVar("T")


class CommandRunner(Protocol):
    async def run(self, argv: Sequence[str]) -> ProcessOutput: ...


class BatchState(str, Enum):
    VALIDATING = "validating"
    LAUNCHING = "launching"
    AWAITING_ALL = "awaiting_all"
    COLLECTING = "collecting"
    DONE = "done"
    ABORTING = "aborting"
    FAILED = "failed"


class _Batch:
    """Tracks the lifecycle of one multi-page call for logging."""

    def __init__(self, label: str) -> None:
        self._label = label
        self.state = BatchState.VALIDATING

    def advance(self, state: BatchState) -> None:
        logger.debug(f"{self._label}: {self.state.value} -> {state.value}")
        self.state = state


class PdfRenderer:
    """Render PDF pages to Pillow images using poppler command-line tools."""

    def __init__(
        self,
        tools: ToolLocator | None = None,
        *,
        max_concurrency: int | None = None,
        runner: CommandRunner | None = None,
        collector: PageCollector | None = None,
        temp_dir: str | Path | None = None,
    ) -> None:
        if max_concurrency is None:
            max_concurrency = default_max_concurrency()
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._tools = tools or ToolLocator()
        self._max_concurrency = max_concurrency
        self._runner: CommandRunner = runner or ProcessRunner()
        self._collector = collector or PageCollector()
        self._builder = CommandBuilder(self._tools)
        self._temp_dir = temp_dir

    @classmethod
    def from_settings(
        cls,
        settings: PopplerPagesSettings | None = None,
        **overrides: object,
    ) -> PdfRenderer:
        settings = settings or get_settings()
        kwargs: dict[str, object] = {
            "max_concurrency": settings.max_concurrency,
            "temp_dir": settings.temp_dir,
        }
        kwargs.update(overrides)
        return cls(ToolLocator.from_settings(settings), **kwargs)  # type: ignore[arg-type]

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def query_info(self, source: bytes, password: Password | None = None) -> PdfInfo:
        async with temp_input(source, temp_dir=self._temp_dir) as input_path:
            return await read_pdf_info(
                input_path, tools=self._tools, runner=self._runner, password=password
            )

    async def render_single_page(
        self,
        source: bytes,
        info: PdfInfo,
        page_number: int,
        options: RenderOptions | None = None,
    ) -> RenderedPage:
        options = options or RenderOptions()
        _require_password(info, options.password)
        Pages.single(page_number).resolve(info.page_count)

        async with temp_input(source, temp_dir=self._temp_dir) as input_path:
            command = self._builder.render_page(page_number, input_path, options)
            return await self._render(command)

    async def render_multi_page(
        self,
        source: bytes,
        info: PdfInfo,
        pages: Pages,
        options: RenderOptions | None = None,
        *,
        progress: ProgressReporter | None = None,
    ) -> list[RenderedPage]:
        options = options or RenderOptions()
        batch = _Batch("render")
        _require_password(info, options.password)
        page_numbers = pages.resolve(info.page_count)

        async with temp_input(source, temp_dir=self._temp_dir) as input_path:
            commands = self._builder.render_pages(page_numbers, input_path, options)
            rendered = await self._run_batch(batch, commands, self._render, progress)

        batch.advance(BatchState.COLLECTING)
        ordered = self._collector.assemble(rendered)
        batch.advance(BatchState.DONE)
        return ordered

    async def extract_text_single_page(
        self,
        source: bytes,
        info: PdfInfo,
        page_number: int,
        options: TextOptions | None = None,
    ) -> PageText:
        options = options or TextOptions()
        _require_password(info, options.password)
        Pages.single(page_number).resolve(info.page_count)

        async with temp_input(source, temp_dir=self._temp_dir) as input_path:
            return await self._extract_text(self._builder.text_page(page_number, input_path, options))

    async def extract_text_multi_page(
        self,
        source: bytes,
        info: PdfInfo,
        pages: Pages,
        options: TextOptions | None = None,
        *,
        progress: ProgressReporter | None = None,
    ) -> list[PageText]:
        options = options or TextOptions()
        batch = _Batch("text")
        _require_password(info, options.password)
        page_numbers = pages.resolve(info.page_count)

        async with temp_input(source, temp_dir=self._temp_dir) as input_path:
            commands = [self._builder.text_page(page, input_path, options) for page in page_numbers]
            texts = await self._run_batch(batch, commands, self._extract_text, progress)

        batch.advance(BatchState.COLLECTING)
        ordered = self._collector.assemble_text(texts)
        batch.advance(BatchState.DONE)
        return ordered

    async def _render(self, command: PageCommand) -> RenderedPage:
        output = await self._runner.run(command.argv)
        return self._collector.decode(command.page_number, output.stdout)

    async def _extract_text(self, command: PageCommand) -> PageText:
        output = await self._runner.run(command.argv)
        return self._collector.decode_text(command.page_number, output.stdout)

    async def _run_batch(
        self,
        batch: _Batch,
        commands: Sequence[PageCommand],
        job: Callable[[PageCommand], Awaitable[T]],
        progress: ProgressReporter | None,
    ) -> list[T]:
        batch.advance(BatchState.LAUNCHING)
        executor = FailFastExecutor(
            max_concurrency=self._max_concurrency,
            progress_reporter=progress,
        )
        batch.advance(BatchState.AWAITING_ALL)
        try:
            return await executor.map(job, commands)
        except (Exception, asyncio.CancelledError) as exc:
            batch.advance(BatchState.ABORTING)
            if isinstance(exc, asyncio.CancelledError):
                logger.warning(f"Batch of {len(commands)} page(s) cancelled")
            else:
                logger.error(f"Batch of {len(commands)} page(s) failed: {exc}")
            batch.advance(BatchState.FAILED)
            raise


def _require_password(info: PdfInfo, password: Password | None) -> None:
    if info.is_encrypted and password is None:
        raise PasswordRequired("The PDF is encrypted; supply an owner or user password")


def default_renderer() -> PdfRenderer:
    """Renderer configured from the current settings snapshot."""
    return PdfRenderer.from_settings(get_settings())


async def query_info(source: bytes, password: Password | None = None) -> PdfInfo:
    return await default_renderer().query_info(source, password=password)


async def render_single_page(
    source: bytes,
    info: PdfInfo,
    page_number: int,
    options: RenderOptions | None = None,
) -> RenderedPage:
    return await default_renderer().render_single_page(source, info, page_number, options)


async def render_multi_page(
    source: bytes,
    info: PdfInfo,
    pages: Pages,
    options: RenderOptions | None = None,
) -> list[RenderedPage]:
    return await default_renderer().render_multi_page(source, info, pages, options)


__all__ = [
    "BatchState",
    "CommandRunner",
    "PdfRenderer",
    "default_renderer",
    "query_info",
    "render_multi_page",
    "render_single_page",
]
