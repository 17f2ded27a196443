"""Custom exception types for poppler tool wrappers."""

from __future__ import annotations


class PopplerPagesError(RuntimeError):
    """Base class for every failure raised by this package."""

    pass


class ToolNotFound(PopplerPagesError):
    """Raised when a poppler executable cannot be spawned.

    Covers a binary missing from ``PATH`` (or from the configured poppler
    directory) as well as a file that exists but is not executable.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Poppler executable not found or not runnable: {path}")
        self.path = path


class ToolExecutionError(PopplerPagesError):
    """Raised when a poppler tool ran but exited with a non-zero status."""

    def __init__(self, tool: str, exit_code: int, stderr: str) -> None:
        message = f"{tool} exited with status {exit_code}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.tool = tool
        self.exit_code = exit_code
        self.stderr = stderr


class InvalidPageRange(PopplerPagesError, ValueError):
    """Raised when a page selection is empty or inverted."""

    pass


class PageOutOfBounds(PopplerPagesError, ValueError):
    """Raised when a requested page lies outside ``[1, page_count]``."""

    def __init__(self, page: int, page_count: int) -> None:
        super().__init__(f"Page {page} is outside the document range 1..{page_count}")
        self.page = page
        self.page_count = page_count


class InfoParseError(PopplerPagesError):
    """Raised when ``pdfinfo`` output lacks the expected fields.

    The raw captured output is kept on ``output`` for diagnosis.
    """

    def __init__(self, message: str, output: str) -> None:
        super().__init__(message)
        self.output = output


class ImageDecodeError(PopplerPagesError):
    """Raised when Pillow rejects the bytes produced for a page."""

    def __init__(self, page_number: int, reason: str = "") -> None:
        message = f"Failed to decode rendered image for page {page_number}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.page_number = page_number


class PasswordRequired(PopplerPagesError):
    """Raised when rendering an encrypted PDF without a password."""

    pass


class InvalidRenderOptions(PopplerPagesError, ValueError):
    """Raised for option combinations the selected backend cannot honour."""

    pass


__all__ = [
    "ImageDecodeError",
    "InfoParseError",
    "InvalidPageRange",
    "InvalidRenderOptions",
    "PageOutOfBounds",
    "PasswordRequired",
    "PopplerPagesError",
    "ToolExecutionError",
    "ToolNotFound",
]
