"""
Error kinds raised by BMP decode, compare and negate operations.

Every error carries the process exit code the command-line tools use for
its category, so callers can report failures without re-classifying them.
"""

from typing import Optional


EXIT_IO_ERROR = -1
EXIT_FORMAT_ERROR = -2
EXIT_LIBRARY_ERROR = -3


class BmpError(Exception):
    """Base class for all BMP toolkit errors."""

    exit_code = EXIT_IO_ERROR

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.message = message
        self.source = source
        if source:
            message = f"{message} File: {source}"
        super().__init__(message)


class BmpIoError(BmpError):
    """Seek/read/write/open failure, including truncated files."""


class BadMagicError(BmpError):
    """The stream does not start with the 'BM' signature."""


class UnsupportedFormatError(BmpError):
    """Valid BMP, but a variant this toolkit does not handle."""

    exit_code = EXIT_FORMAT_ERROR


class InconsistentMetadataError(BmpError):
    """Header fields are parseable but contradict each other or the file."""

    exit_code = EXIT_FORMAT_ERROR


class DimensionMismatchError(BmpError):
    """Two images compared with different linear dimensions."""


class AllocationError(BmpError):
    """A palette or pixel buffer could not be allocated."""


class LibraryError(BmpError):
    """The Pillow-backed conversion path failed."""

    exit_code = EXIT_LIBRARY_ERROR
