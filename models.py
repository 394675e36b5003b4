"""Data model classes and constants for Photo Sheet Maker.

Configuration is in millimeters; every length is converted to pixels with
the job's DPI right before layout.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum


# === Constants ===
MM_PER_INCH = 25.4

DEFAULT_WIDTH_MM = 22.0
DEFAULT_HEIGHT_MM = 32.0
DEFAULT_DIFF_MM = 0.5
DEFAULT_DPI = 350.0
DEFAULT_ROWS = 8
DEFAULT_COLS = 16

# Settings panel ranges as (min, max)
DPI_RANGE = (0.0, 1500.0)
CELL_MM_RANGE = (0.0, 100.0)
DIFF_MM_RANGE = (0.0, 10.0)
GRID_RANGE = (0, 50)

OUTPUT_STEM = "output"
OUTPUT_SUFFIX = ".png"
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp *.tif *.tiff)"


# === Errors ===

class LayoutError(Exception):
    """Base class for errors raised while laying out a sheet."""


class SourceUnreadable(LayoutError):
    """The source image could not be opened or decoded."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Cannot read source image {path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidDimensions(LayoutError, ValueError):
    """A length or count converts to a size the layout cannot use."""

    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid {field_name}: {value!r}")


# === Unit conversion ===

def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    # Compare the exact fraction; adding 0.5 first can round up below a half
    if magnitude - whole >= 0.5:
        whole += 1
    return -whole if value < 0 else whole


def mm_to_px(length_mm: float, dpi: float) -> int:
    """Convert a length in millimeters to whole pixels at *dpi*.

    Halves round away from zero (``round()`` would round them to even).
    Negative lengths give negative counts; callers decide whether that is
    acceptable.
    """
    value = length_mm / MM_PER_INCH * dpi
    if not math.isfinite(value):
        raise InvalidDimensions("pixel length", value)
    return round_half_away(value)


# === Data Model ===

class PaperSize(Enum):
    """Supported paper sizes, valued as portrait (width_mm, height_mm)."""
    A3 = (297.0, 420.0)
    A4 = (210.0, 297.0)
    A5 = (148.0, 210.0)
    A6 = (105.0, 148.0)
    B4 = (257.0, 364.0)  # JIS
    B5 = (182.0, 257.0)  # JIS

    @property
    def label(self) -> str:
        return self.name

    def __str__(self):
        return self.label

    def size(self, rotate: bool = False) -> tuple[float, float]:
        """Return (width_mm, height_mm), swapped when *rotate* is set."""
        width, height = self.value
        if rotate:
            return height, width
        return width, height

    @classmethod
    def choices(cls) -> list["PaperSize"]:
        """Variants in the order the paper combo box lists them."""
        return [cls.A4, cls.A3, cls.A5, cls.A6, cls.B4, cls.B5]

    @classmethod
    def from_label(cls, label: str) -> "PaperSize":
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown paper size: {label!r}") from None


@dataclass(frozen=True)
class ImageConfig:
    """One layout job: cell size, spacing, resolution and grid shape."""
    height_mm: float = DEFAULT_HEIGHT_MM
    width_mm: float = DEFAULT_WIDTH_MM
    diff_mm: float = DEFAULT_DIFF_MM   # Gap between columns only
    dpi: float = DEFAULT_DPI
    is_aspect_ratio: bool = True       # Fit inside the cell instead of stretching
    is_rotate: bool = False            # Landscape page
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS

    def size(self) -> tuple[float, float]:
        return self.width_mm, self.height_mm

    @property
    def width_px(self) -> int:
        return mm_to_px(self.width_mm, self.dpi)

    @property
    def height_px(self) -> int:
        return mm_to_px(self.height_mm, self.dpi)

    @property
    def gap_px(self) -> int:
        return mm_to_px(self.diff_mm, self.dpi)

    def paper_px(self, paper: PaperSize) -> tuple[int, int]:
        """Pixel (width, height) of *paper* with this job's DPI and rotation."""
        width_mm, height_mm = paper.size(rotate=self.is_rotate)
        return mm_to_px(width_mm, self.dpi), mm_to_px(height_mm, self.dpi)

    def replace(self, **changes) -> "ImageConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class Cell:
    """One stamped copy on the page (pixel coords).

    ``width``/``height`` are what survives clipping at the page edge;
    ``full_width``/``full_height`` are the size of the resized copy.
    """
    row: int
    col: int
    x: int
    y: int
    width: int
    height: int
    full_width: int
    full_height: int

    @property
    def clipped(self) -> bool:
        return self.width < self.full_width or self.height < self.full_height


@dataclass(frozen=True)
class LayoutSummary:
    """What a layout call produced, for logging and the status bar."""
    canvas_size: tuple[int, int]
    cell_size: tuple[int, int]
    cells: int
    clipped: int

    def describe(self) -> str:
        w, h = self.canvas_size
        text = f"{self.cells} cell{'s' if self.cells != 1 else ''} on {w}×{h} px"
        if self.clipped:
            text += f" ({self.clipped} clipped)"
        return text
