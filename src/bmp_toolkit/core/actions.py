"""
Core workflow actions for the BMP toolkit.

Each action works on file paths, never raises for BMP errors, and returns
an OperationResult carrying the exit code the CLI should use.
"""

import logging
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Union

from ..comparator import DifferenceCallback, compare_images
from ..errors import BmpError
from ..negator import negate_image, negate_with_pillow, write_image
from ..pixel_reader import load_image
from .results import OperationResult

logger = logging.getLogger(__name__)

EXIT_EQUAL = 0
EXIT_UNEQUAL = 1

NEGATE_MODES = ("mine", "theirs")

PathLike = Union[str, Path]


class _ListLogHandler(logging.Handler):
    """Capture log records into a list of formatted strings."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        super().__init__(level)
        self.records = []
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(self.format(record))


@contextmanager
def _capture_logs(logger_name: str = "bmp_toolkit"):
    """Capture logs for core operations into a list."""
    target_logger = logging.getLogger(logger_name)
    handler = _ListLogHandler()
    previous_level = target_logger.level
    if previous_level in (logging.NOTSET, logging.WARNING, logging.ERROR, logging.CRITICAL):
        target_logger.setLevel(logging.INFO)
    target_logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        target_logger.removeHandler(handler)
        target_logger.setLevel(previous_level)


def compare_files(
    first_path: PathLike,
    second_path: PathLike,
    on_difference: Optional[DifferenceCallback] = None,
) -> OperationResult:
    """
    Compare two BMP files.

    Both files are fully buffered and closed before the pixel walk starts.

    Returns:
        OperationResult with:
            - exit_code: 0 equal (or bit depths differ), 1 unequal, negative on error
            - metadata["verdict"]: "equal", "unequal" or None on bit depth mismatch
            - metadata["coordinates"]: reported (x, y) pairs
            - metadata["differences"]: total differing pixels
    """
    files = [str(first_path), str(second_path)]
    with _capture_logs() as logs:
        try:
            first = load_image(first_path)
            second = load_image(second_path)

            if first.bits_per_pixel != second.bits_per_pixel:
                result = OperationResult.success(operation="compare", files=files)
                result.add_warning(
                    f"Files have different bits. {first.bits_per_pixel}bit and "
                    f"{second.bits_per_pixel}bit"
                )
                result.metadata["verdict"] = None
                result.logs = logs
                return result

            report = compare_images(first, second, on_difference=on_difference)
        except BmpError as e:
            logger.debug(f"compare failed: {e}")
            result = OperationResult.failure(
                operation="compare",
                error=str(e),
                exit_code=e.exit_code,
                files=files,
            )
            result.logs = logs
            return result

        result = OperationResult.success(
            operation="compare",
            files=files,
            bytes_len=len(first.pixels),
            exit_code=EXIT_EQUAL if report.equal else EXIT_UNEQUAL,
        )
        result.metadata["verdict"] = report.verdict.value
        result.metadata["coordinates"] = [list(c) for c in report.coordinates]
        result.metadata["differences"] = report.differences
        if report.truncated:
            result.add_warning(
                f"Only the first {len(report.coordinates)} of "
                f"{report.differences} differences were reported"
            )
        result.logs = logs
        return result


def negate_file(
    input_path: PathLike,
    output_path: PathLike,
    mode: str = "mine",
) -> OperationResult:
    """
    Write the color negative of ``input_path`` to ``output_path``.

    Args:
        input_path: Source BMP file
        output_path: Destination file, truncated if it exists
        mode: "mine" for the built-in codec, "theirs" for Pillow

    Returns:
        OperationResult with exit_code 0 on success, negative on error
    """
    if mode not in NEGATE_MODES:
        raise ValueError(f"Invalid mode '{mode}'. Use one of: {', '.join(NEGATE_MODES)}")

    files = [str(input_path), str(output_path)]
    with _capture_logs() as logs:
        try:
            if mode == "theirs":
                negate_with_pillow(input_path, output_path)
                written = Path(output_path).stat().st_size
            else:
                image = load_image(input_path)
                written = write_image(negate_image(image), output_path)
        except BmpError as e:
            logger.debug(f"negate failed: {e}")
            result = OperationResult.failure(
                operation="negate",
                error=str(e),
                exit_code=e.exit_code,
                files=files,
            )
            result.logs = logs
            return result

        result = OperationResult.success(operation="negate", files=files, bytes_len=written)
        result.metadata["mode"] = mode
        result.logs = logs
        return result


def inspect_file(path: PathLike) -> OperationResult:
    """Fully validate a BMP file and report its header fields."""
    with _capture_logs() as logs:
        try:
            image = load_image(path)
        except BmpError as e:
            result = OperationResult.failure(
                operation="inspect",
                error=str(e),
                exit_code=e.exit_code,
                files=[str(path)],
            )
            result.logs = logs
            return result

        header = image.header
        result = OperationResult.success(
            operation="inspect",
            files=[str(path)],
            bytes_len=header.file_size,
        )
        result.metadata["header"] = asdict(header)
        result.metadata["top_down"] = header.top_down
        result.metadata["row_stride"] = header.row_stride
        result.metadata["row_padding"] = header.row_padding
        result.metadata["palette_size"] = header.palette_size
        result.metadata["pixel_array_size"] = header.pixel_array_size
        result.logs = logs
        return result
