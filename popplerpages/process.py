"""Asynchronous execution of a single poppler tool invocation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
import contextlib
from dataclasses import dataclass
import os

from popplerpages.errors import ToolExecutionError, ToolNotFound
from popplerpages.utils.log_utils import logger


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def _tool_name(argv: Sequence[str]) -> str:
    return os.path.basename(argv[0])


@contextlib.asynccontextmanager
async def spawned(argv: Sequence[str]) -> AsyncIterator[asyncio.subprocess.Process]:
    """Start ``argv`` and guarantee the process is gone when the block exits.

    If the block is left while the process is still running (an exception, a
    cancelled sibling in a batch, an external cancellation) the process is
    killed and its exit awaited before control moves on.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
        raise ToolNotFound(argv[0]) from exc

    try:
        yield proc
    finally:
        if proc.returncode is None:
            logger.warning(f"Terminating {_tool_name(argv)} (pid {proc.pid}) before completion")
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()


class ProcessRunner:
    """Run a poppler tool to completion and capture its output streams."""

    async def run(self, argv: Sequence[str]) -> ProcessOutput:
        """Run ``argv`` and return its captured output.

        Raises:
            ToolNotFound: The executable could not be spawned.
            ToolExecutionError: The tool exited with a non-zero status.
        """
        logger.debug(f"Running: {' '.join(argv)}")
        async with spawned(argv) as proc:
            stdout, stderr = await proc.communicate()
            returncode = await proc.wait()

        output = ProcessOutput(
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )
        if output.returncode != 0:
            raise ToolExecutionError(
                tool=_tool_name(argv),
                exit_code=output.returncode,
                stderr=output.stderr_text,
            )
        return output


__all__ = ["ProcessOutput", "ProcessRunner", "spawned"]
