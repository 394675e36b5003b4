"""View layer: Qt widgets for display and interaction.

Contains DropArea (image drop target and preview), PagePreview (page
outline with the planned grid) and SettingsPanel.
"""

from PySide6.QtCore import Qt, QRectF, Signal
from PySide6.QtGui import QPixmap, QPainter, QPen, QColor
from PySide6.QtWidgets import (
    QWidget, QFormLayout, QComboBox, QDoubleSpinBox, QSpinBox, QCheckBox,
    QHBoxLayout, QGroupBox, QVBoxLayout,
)

from models import (
    ImageConfig, PaperSize, InvalidDimensions,
    DPI_RANGE, CELL_MM_RANGE, DIFF_MM_RANGE, GRID_RANGE,
)
from tiler import plan_cells


DROP_HINT = "Drag & drop an image here"


def fit_rect(cell: QRectF, src_w: float, src_h: float) -> QRectF:
    """Return the largest rect with src aspect ratio that fits inside cell, centered."""
    if src_w <= 0 or src_h <= 0:
        return cell
    src_aspect = src_w / src_h
    cell_aspect = cell.width() / cell.height() if cell.height() > 0 else 1
    if src_aspect > cell_aspect:
        w = cell.width()
        h = w / src_aspect
    else:
        h = cell.height()
        w = h * src_aspect
    x = cell.x() + (cell.width() - w) / 2
    y = cell.y() + (cell.height() - h) / 2
    return QRectF(x, y, w, h)


# === DropArea: accepts a dropped image file and shows it ===

class DropArea(QWidget):
    """Rounded box that shows the loaded image, or a hint when empty."""

    image_dropped = Signal(str)  # local file path

    def __init__(self, parent=None):
        super().__init__(parent)
        self._path: str | None = None
        self._pixmap: QPixmap | None = None
        self.setMinimumSize(200, 160)
        self.setAcceptDrops(True)

    @property
    def path(self) -> str | None:
        return self._path

    def set_image(self, path: str) -> bool:
        """Show the image at *path*. Returns False if Qt cannot read it."""
        pix = QPixmap(path)
        if pix.isNull():
            return False
        self._path = path
        self._pixmap = pix
        self.update()
        return True

    def clear(self):
        self._path = None
        self._pixmap = None
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        box = QRectF(self.rect()).adjusted(4, 4, -4, -4)
        painter.setPen(QPen(QColor(170, 170, 170), 1, Qt.PenStyle.DashLine))
        painter.setBrush(QColor(235, 235, 235))
        painter.drawRoundedRect(box, 8, 8)

        if self._pixmap is not None:
            dest = fit_rect(box.adjusted(8, 8, -8, -8),
                            self._pixmap.width(), self._pixmap.height())
            painter.drawPixmap(dest.toRect(), self._pixmap)
        else:
            painter.setPen(QColor(110, 110, 110))
            painter.drawText(box, Qt.AlignmentFlag.AlignCenter, DROP_HINT)
        painter.end()

    # --- Drag and drop ---

    @staticmethod
    def _first_local_file(mime) -> str | None:
        if not mime.hasUrls():
            return None
        for url in mime.urls():
            path = url.toLocalFile()
            if path:
                return path
        return None

    def dragEnterEvent(self, event):
        if self._first_local_file(event.mimeData()):
            event.acceptProposedAction()

    def dragMoveEvent(self, event):
        event.acceptProposedAction()

    def dropEvent(self, event):
        path = self._first_local_file(event.mimeData())
        if path:
            self.image_dropped.emit(path)
        event.acceptProposedAction()


# === PagePreview: paper outline with the planned cells ===

class PagePreview(QWidget):
    """Draws the page at the current rotation with one outline per cell."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._config = ImageConfig()
        self._paper = PaperSize.A4
        self.setMinimumSize(120, 160)

    def set_layout(self, config: ImageConfig, paper: PaperSize):
        self._config = config
        self._paper = paper
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(200, 200, 200))

        try:
            page_w, page_h = self._config.paper_px(self._paper)
            cells = plan_cells(self._config, self._paper)
        except InvalidDimensions:
            painter.setPen(QColor(150, 40, 40))
            painter.drawText(QRectF(self.rect()), Qt.AlignmentFlag.AlignCenter,
                             "Invalid settings")
            painter.end()
            return

        padding = 10
        scale = min((self.width() - 2 * padding) / page_w,
                    (self.height() - 2 * padding) / page_h)
        ox = (self.width() - page_w * scale) / 2
        oy = (self.height() - page_h * scale) / 2

        # Page shadow
        painter.fillRect(QRectF(ox + 3, oy + 3, page_w * scale, page_h * scale),
                         QColor(150, 150, 150))
        # White page
        painter.fillRect(QRectF(ox, oy, page_w * scale, page_h * scale),
                         QColor(255, 255, 255))

        painter.setPen(QPen(QColor(0, 120, 215), 1))
        for cell in cells:
            painter.drawRect(QRectF(ox + cell.x * scale, oy + cell.y * scale,
                                    cell.width * scale, cell.height * scale))
        painter.end()


# === SettingsPanel ===

class SettingsPanel(QWidget):
    """Spin boxes and toggles for every ImageConfig field plus paper size."""

    changed = Signal()

    def __init__(self, config: ImageConfig | None = None,
                 paper: PaperSize = PaperSize.A4, parent=None):
        super().__init__(parent)
        config = config or ImageConfig()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # --- Cell group ---
        cell_group = QGroupBox("Cell")
        cell_form = QFormLayout(cell_group)

        self._dpi_spin = self._double_spin(DPI_RANGE, 10.0, 0, " dpi")
        cell_form.addRow("Resolution:", self._dpi_spin)
        self._width_spin = self._double_spin(CELL_MM_RANGE, 0.5, 1, " mm")
        cell_form.addRow("Width:", self._width_spin)
        self._height_spin = self._double_spin(CELL_MM_RANGE, 0.5, 1, " mm")
        cell_form.addRow("Height:", self._height_spin)
        self._diff_spin = self._double_spin(DIFF_MM_RANGE, 0.1, 1, " mm")
        cell_form.addRow("Column gap:", self._diff_spin)

        layout.addWidget(cell_group)

        # --- Grid group ---
        grid_group = QGroupBox("Grid")
        grid_form = QFormLayout(grid_group)

        self._rows_spin = QSpinBox()
        self._rows_spin.setRange(*GRID_RANGE)
        grid_form.addRow("Rows:", self._rows_spin)
        self._cols_spin = QSpinBox()
        self._cols_spin.setRange(*GRID_RANGE)
        grid_form.addRow("Columns:", self._cols_spin)

        layout.addWidget(grid_group)

        # --- Page row ---
        page_row = QHBoxLayout()
        self._aspect_check = QCheckBox("Keep aspect ratio")
        page_row.addWidget(self._aspect_check)
        self._rotate_check = QCheckBox("Landscape")
        page_row.addWidget(self._rotate_check)
        self._paper_combo = QComboBox()
        for p in PaperSize.choices():
            self._paper_combo.addItem(p.label, p)
        page_row.addWidget(self._paper_combo, 1)
        layout.addLayout(page_row)

        self.set_values(config, paper)

        for spin in (self._dpi_spin, self._width_spin, self._height_spin,
                     self._diff_spin, self._rows_spin, self._cols_spin):
            spin.valueChanged.connect(self._emit_changed)
        self._aspect_check.toggled.connect(self._emit_changed)
        self._rotate_check.toggled.connect(self._emit_changed)
        self._paper_combo.currentIndexChanged.connect(self._emit_changed)

    def _emit_changed(self, *_):
        self.changed.emit()

    @staticmethod
    def _double_spin(value_range, step, decimals, suffix) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(*value_range)
        spin.setSingleStep(step)
        spin.setDecimals(decimals)
        spin.setSuffix(suffix)
        return spin

    def set_values(self, config: ImageConfig, paper: PaperSize):
        self._dpi_spin.setValue(config.dpi)
        self._width_spin.setValue(config.width_mm)
        self._height_spin.setValue(config.height_mm)
        self._diff_spin.setValue(config.diff_mm)
        self._rows_spin.setValue(config.rows)
        self._cols_spin.setValue(config.cols)
        self._aspect_check.setChecked(config.is_aspect_ratio)
        self._rotate_check.setChecked(config.is_rotate)
        self._paper_combo.setCurrentIndex(PaperSize.choices().index(paper))

    def result_config(self) -> ImageConfig:
        """Return an ImageConfig reflecting the panel's current values."""
        return ImageConfig(
            height_mm=self._height_spin.value(),
            width_mm=self._width_spin.value(),
            diff_mm=self._diff_spin.value(),
            dpi=self._dpi_spin.value(),
            is_aspect_ratio=self._aspect_check.isChecked(),
            is_rotate=self._rotate_check.isChecked(),
            rows=self._rows_spin.value(),
            cols=self._cols_spin.value(),
        )

    def result_paper(self) -> PaperSize:
        return self._paper_combo.currentData()
