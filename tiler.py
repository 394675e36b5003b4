"""Tiler: grid layout engine.

Resizes the source image once, then stamps the copy into a rows × cols
grid on a blank page-sized canvas. Copies that run past the page edge
are clipped; nothing is ever drawn outside the canvas.

Axis order is width-first throughout: canvas size is (page width, page
height) in pixels, x runs across the page and y down it.
"""

import logging

from PIL import Image

from models import Cell, ImageConfig, InvalidDimensions, LayoutSummary, PaperSize
from sheet_files import load_source

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS
EMPTY_PIXEL = (0, 0, 0, 0)


class Tiler:
    """Lays out copies of one image for a fixed config and paper size.

    All sizes are resolved and validated up front, so a Tiler that was
    constructed without error always produces a canvas.
    """

    def __init__(self, config: ImageConfig | None = None, paper: PaperSize = PaperSize.A4):
        self.config = config or ImageConfig()
        self.paper = paper
        c = self.config

        if not c.dpi > 0:
            raise InvalidDimensions("dpi", c.dpi)
        self.cell_w = _positive("width", c.width_px)
        self.cell_h = _positive("height", c.height_px)
        self.gap = c.gap_px
        if self.gap < 0:
            raise InvalidDimensions("gap", self.gap)
        page_w, page_h = c.paper_px(paper)
        self.page_w = _positive("paper width", page_w)
        self.page_h = _positive("paper height", page_h)
        if c.rows < 0:
            raise InvalidDimensions("rows", c.rows)
        if c.cols < 0:
            raise InvalidDimensions("cols", c.cols)
        self.last_summary: LayoutSummary | None = None

    # ------------------------------------------------------------------ #
    #  Public API                                                         #
    # ------------------------------------------------------------------ #

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.page_w, self.page_h

    def layout(self, source: Image.Image) -> Image.Image:
        """Return a new page canvas tiled with resized copies of *source*."""
        resized = self.resize(source)
        canvas = Image.new("RGBA", self.canvas_size, EMPTY_PIXEL)
        cells = self.plan(resized.size)
        for cell in cells:
            if cell.clipped:
                tile = resized.crop((0, 0, cell.width, cell.height))
            else:
                tile = resized
            # No mask: pixels are copied as-is, later cells overwrite earlier ones
            canvas.paste(tile, (cell.x, cell.y))

        self.last_summary = self.summarize(cells)
        logger.debug("Tiled %s with %s", self.paper, self.last_summary.describe())
        return canvas

    def resize(self, source: Image.Image) -> Image.Image:
        """Scale *source* to the cell box, keeping or ignoring aspect ratio."""
        if source.mode != "RGBA":
            source = source.convert("RGBA")
        box = (self.cell_w, self.cell_h)
        if self.config.is_aspect_ratio:
            box = fit_size(source.size, box)
        resized = source.resize(box, RESAMPLE)
        logger.debug("Resized %dx%d -> %dx%d (box %dx%d, keep aspect: %s)",
                     source.width, source.height, resized.width, resized.height,
                     self.cell_w, self.cell_h, self.config.is_aspect_ratio)
        return resized

    def origin(self, row: int, col: int) -> tuple[int, int]:
        """Top-left pixel of the cell at (row, col).

        The pitch is the configured cell box, not the resized copy, and the
        gap applies between columns only.
        """
        return col * (self.cell_w + self.gap), row * self.cell_h

    def plan(self, copy_size: tuple[int, int] | None = None) -> list[Cell]:
        """Cells that land at least partly on the page, in stamping order."""
        full_w, full_h = copy_size or (self.cell_w, self.cell_h)
        cells: list[Cell] = []
        for row in range(self.config.rows):
            for col in range(self.config.cols):
                x, y = self.origin(row, col)
                if x >= self.page_w or y >= self.page_h:
                    continue
                w = min(full_w, self.page_w - x)
                h = min(full_h, self.page_h - y)
                if w <= 0 or h <= 0:
                    continue
                cells.append(Cell(row=row, col=col, x=x, y=y, width=w, height=h,
                                  full_width=full_w, full_height=full_h))
        return cells

    def summarize(self, cells: list[Cell]) -> LayoutSummary:
        return LayoutSummary(
            canvas_size=self.canvas_size,
            cell_size=(self.cell_w, self.cell_h),
            cells=len(cells),
            clipped=sum(1 for c in cells if c.clipped),
        )


# ---------------------------------------------------------------------- #
#  Module-level helpers                                                  #
# ---------------------------------------------------------------------- #

def _positive(name: str, value: int) -> int:
    if value <= 0:
        raise InvalidDimensions(name, value)
    return value


def fit_size(size: tuple[int, int], box: tuple[int, int]) -> tuple[int, int]:
    """Largest size with the proportions of *size* that fits inside *box*.

    The limiting axis matches the box exactly. The other axis is rounded
    and never drops below 1 px, so very thin sources still resize.
    """
    w, h = size
    box_w, box_h = box
    if box_w * h <= box_h * w:
        return box_w, min(box_h, max(1, round(h * box_w / w)))
    return min(box_w, max(1, round(w * box_h / h))), box_h


def layout(config: ImageConfig, paper: PaperSize, source: Image.Image) -> Image.Image:
    """Tile *source* onto a *paper*-sized canvas as described by *config*."""
    return Tiler(config, paper).layout(source)


def plan_cells(config: ImageConfig, paper: PaperSize) -> list[Cell]:
    """Cell placements for *config*, assuming the copy fills its whole box."""
    return Tiler(config, paper).plan()


def render_sheet(config: ImageConfig, paper: PaperSize, source_path) -> Image.Image:
    """Decode *source_path* and lay it out. Validation runs before decoding."""
    tiler = Tiler(config, paper)
    return tiler.layout(load_source(source_path))
