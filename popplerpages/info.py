"""Document information via ``pdfinfo``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
from types import MappingProxyType

from popplerpages.errors import InfoParseError
from popplerpages.options import Password
from popplerpages.process import ProcessRunner
from popplerpages.tools import PDFINFO, ToolLocator
from popplerpages.utils.log_utils import logger


PAGES_FIELD = "Pages"
ENCRYPTED_FIELD = "Encrypted"


@dataclass(frozen=True, slots=True)
class PdfInfo:
    """Page count and encryption status of one PDF.

    Derived once from the document bytes; it is not refreshed if the caller
    later passes different bytes alongside it.
    """

    page_count: int
    is_encrypted: bool
    metadata: Mapping[str, str] = field(default_factory=dict)


def parse_pdfinfo_output(output: str) -> PdfInfo:
    """Parse ``pdfinfo`` text output into a :class:`PdfInfo`.

    Only ``Pages`` and ``Encrypted`` are required. Other ``Key: value`` lines
    are kept as metadata and lines without a colon are ignored.
    """
    fields: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        fields.setdefault(key.strip(), value.strip())

    raw_pages = fields.get(PAGES_FIELD)
    if raw_pages is None:
        raise InfoParseError("pdfinfo output has no 'Pages:' line", output)
    try:
        page_count = int(raw_pages.split()[0])
    except (IndexError, ValueError) as exc:
        raise InfoParseError(f"Malformed page count '{raw_pages}'", output) from exc
    if page_count < 1:
        raise InfoParseError(f"Page count must be positive, got {page_count}", output)

    raw_encrypted = fields.get(ENCRYPTED_FIELD)
    if raw_encrypted is None:
        raise InfoParseError("pdfinfo output has no 'Encrypted:' line", output)
    # e.g. "yes (print:yes copy:no change:no addNotes:no algorithm:RC4)"
    flag = raw_encrypted.split()[0].lower() if raw_encrypted.split() else ""
    if flag not in ("yes", "no"):
        raise InfoParseError(f"Malformed encryption flag '{raw_encrypted}'", output)

    return PdfInfo(
        page_count=page_count,
        is_encrypted=flag == "yes",
        metadata=MappingProxyType(fields),
    )


async def read_pdf_info(
    input_path: Path,
    *,
    tools: ToolLocator,
    runner: ProcessRunner,
    password: Password | None = None,
) -> PdfInfo:
    """Run ``pdfinfo`` against a PDF file already on disk."""
    argv = [tools.executable(PDFINFO)]
    if password is not None:
        argv += password.to_cli_args()
    argv.append(os.fspath(input_path))

    output = await runner.run(argv)
    text = output.stdout.decode("utf-8", errors="replace")
    info = parse_pdfinfo_output(text)
    logger.debug(f"pdfinfo: {info.page_count} page(s), encrypted={info.is_encrypted}")
    return info


__all__ = ["PdfInfo", "parse_pdfinfo_output", "read_pdf_info"]
