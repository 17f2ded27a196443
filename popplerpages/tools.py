"""Resolution of poppler executable names to runnable paths."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys

from popplerpages.config import PopplerPagesSettings


PDFINFO = "pdfinfo"
PDFTOPPM = "pdftoppm"
PDFTOCAIRO = "pdftocairo"
PDFTOTEXT = "pdftotext"


@dataclass(frozen=True, slots=True)
class ToolLocator:
    """Maps a poppler tool name to the executable handed to the OS.

    With ``poppler_path`` unset the bare tool name is returned and the OS
    searches ``PATH``. Otherwise the tool is taken from that directory.
    """

    poppler_path: Path | None = None
    windows: bool = sys.platform == "win32"

    @classmethod
    def from_settings(cls, settings: PopplerPagesSettings) -> ToolLocator:
        return cls(poppler_path=settings.poppler_path)

    def executable(self, tool: str) -> str:
        name = f"{tool}.exe" if self.windows else tool
        if self.poppler_path is None:
            return name
        return os.fspath(self.poppler_path / name)


__all__ = [
    "PDFINFO",
    "PDFTOCAIRO",
    "PDFTOPPM",
    "PDFTOTEXT",
    "ToolLocator",
]
