"""Pixel-by-pixel comparison of two decoded BMP images."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging

from .bmp_utils import PALETTE_ENTRY_SIZE
from .errors import (
    DimensionMismatchError,
    InconsistentMetadataError,
    UnsupportedFormatError,
)
from .pixel_reader import BmpImage, iter_pixel_offsets

logger = logging.getLogger(__name__)

DIFF_REPORT_LIMIT = 101

DifferenceCallback = Callable[[int, int], None]


class Verdict(Enum):
    EQUAL = "equal"
    UNEQUAL = "unequal"


@dataclass
class DiffReport:
    """
    Outcome of a comparison.

    Attributes:
        coordinates: Reported (x, y) positions, at most ``limit`` of them
        differences: Total number of differing pixels found
        limit: Maximum number of coordinates kept
    """
    coordinates: List[Tuple[int, int]] = field(default_factory=list)
    differences: int = 0
    limit: int = DIFF_REPORT_LIMIT

    @property
    def verdict(self) -> Verdict:
        return Verdict.EQUAL if self.differences == 0 else Verdict.UNEQUAL

    @property
    def equal(self) -> bool:
        return self.verdict is Verdict.EQUAL

    @property
    def truncated(self) -> bool:
        return self.differences > len(self.coordinates)


def _palette_color(image: BmpImage, index: int) -> bytes:
    if index >= image.header.colors_in_palette:
        raise InconsistentMetadataError(
            f"Pixel index {index} outside palette of "
            f"{image.header.colors_in_palette} colors.",
            image.name,
        )
    start = index * PALETTE_ENTRY_SIZE
    return bytes(image.palette[start:start + 3])


def compare_images(
    first: BmpImage,
    second: BmpImage,
    on_difference: Optional[DifferenceCallback] = None,
    limit: int = DIFF_REPORT_LIMIT,
) -> DiffReport:
    """
    Compare two images pixel by pixel, in storage order.

    8-bit pixels are resolved through each image's own palette, so two
    files with different palettes but identical colors compare equal.
    Row padding is never compared.

    Args:
        first: First decoded image
        second: Second decoded image
        on_difference: Called with (x, y) as each reported difference is found
        limit: Maximum number of coordinates reported

    Returns:
        DiffReport with the reported coordinates and total difference count

    Raises:
        DimensionMismatchError: Widths or absolute heights differ.
        UnsupportedFormatError: Bit depths differ.
        InconsistentMetadataError: An 8-bit pixel indexes past its palette.
    """
    if first.width != second.width or first.height != second.height:
        raise DimensionMismatchError(
            "The linear dimensions of the images do not coincide "
            f"({first.width}x{first.height} vs {second.width}x{second.height})."
        )
    if first.bits_per_pixel != second.bits_per_pixel:
        raise UnsupportedFormatError(
            f"Files have different bits. {first.bits_per_pixel}bit and "
            f"{second.bits_per_pixel}bit"
        )

    report = DiffReport(limit=limit)
    first_pixels = first.pixels
    second_pixels = second.pixels
    paletted = first.bits_per_pixel == 8

    for x, y, offset in iter_pixel_offsets(first.header):
        if paletted:
            first_color = _palette_color(first, first_pixels[offset])
            second_color = _palette_color(second, second_pixels[offset])
        else:
            first_color = first_pixels[offset:offset + 3]
            second_color = second_pixels[offset:offset + 3]

        if first_color == second_color:
            continue

        report.differences += 1
        if len(report.coordinates) < limit:
            report.coordinates.append((x, y))
            if on_difference is not None:
                on_difference(x, y)

    logger.debug(
        f"Compared {first.width}x{first.height} {first.bits_per_pixel}-bit images: "
        f"{report.differences} differing pixels"
    )
    return report
