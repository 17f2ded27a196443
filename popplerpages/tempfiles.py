"""Scoped temporary copies of PDF input for external tools."""

from __future__ import annotations

from collections.abc import AsyncIterator
import contextlib
from pathlib import Path
import shutil
import tempfile

import aiofiles

from popplerpages.utils.log_utils import logger


INPUT_FILENAME = "input.pdf"


@contextlib.asynccontextmanager
async def temp_input(data: bytes, *, temp_dir: str | Path | None = None) -> AsyncIterator[Path]:
    """Write ``data`` into a private temporary directory and yield the file path.

    The directory and everything in it is removed when the block exits,
    whether it exits normally, by exception or by cancellation. Callers must
    make sure no process still writes into the directory at that point.
    """
    workdir = Path(tempfile.mkdtemp(prefix="popplerpages-", dir=temp_dir))
    try:
        path = workdir / INPUT_FILENAME
        async with aiofiles.open(path, "wb") as file_obj:
            await file_obj.write(data)
        logger.debug(f"Wrote {len(data)} input bytes to {path}")
        yield path
    finally:
        shutil.rmtree(workdir, ignore_errors=True)


__all__ = ["INPUT_FILENAME", "temp_input"]
