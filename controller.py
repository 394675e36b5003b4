"""Controller layer: MainWindow and SheetApp.

Orchestrates the settings, the tiler and the file writer.
"""

import logging
from pathlib import Path

from PySide6.QtCore import QEvent, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QStatusBar, QFileDialog, QMessageBox, QWidget,
    QVBoxLayout, QHBoxLayout, QPushButton, QCheckBox,
)

from models import ImageConfig, PaperSize, LayoutError, IMAGE_FILTER
from sheet_files import SheetWriteError, load_source, save_sheet
from tiler import Tiler
from views import DropArea, PagePreview, SettingsPanel

logger = logging.getLogger(__name__)

APP_NAME = "Photo Sheet Maker"


# === MainWindow ===

class MainWindow(QMainWindow):
    """Top-level window: drop area, settings panel, status bar."""

    def __init__(self, config: ImageConfig | None = None, paper: PaperSize = PaperSize.A4):
        super().__init__()
        self.config = config or ImageConfig()
        self.paper = paper
        self.last_output: Path | None = None

        self.setWindowTitle(APP_NAME)
        self.resize(420, 520)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setSpacing(10)

        top_row = QHBoxLayout()
        self.make_button = QPushButton("Make Sheet")
        self.make_button.clicked.connect(self.make_sheet)
        top_row.addWidget(self.make_button)
        self.settings_toggle = QCheckBox("Show settings")
        self.settings_toggle.toggled.connect(self._set_settings_visible)
        top_row.addWidget(self.settings_toggle)
        top_row.addStretch(1)
        layout.addLayout(top_row)

        self.drop_area = DropArea()
        self.drop_area.image_dropped.connect(self.set_input)
        layout.addWidget(self.drop_area, 1)

        self.settings_box = QWidget()
        settings_layout = QHBoxLayout(self.settings_box)
        settings_layout.setContentsMargins(0, 0, 0, 0)
        self.settings_panel = SettingsPanel(self.config, self.paper)
        self.settings_panel.changed.connect(self._apply_settings)
        settings_layout.addWidget(self.settings_panel, 2)
        self.preview = PagePreview()
        self.preview.set_layout(self.config, self.paper)
        settings_layout.addWidget(self.preview, 1)
        self.settings_box.setVisible(False)
        layout.addWidget(self.settings_box)

        self.setCentralWidget(central)

        self._build_menus()
        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._update_status()

    def _build_menus(self):
        mb = self.menuBar()

        # --- File menu ---
        file_menu = mb.addMenu("&File")

        act = QAction("&Open Image...", self)
        act.setShortcut(QKeySequence.StandardKey.Open)
        act.triggered.connect(self._open)
        file_menu.addAction(act)

        act = QAction("&Make Sheet", self)
        act.setShortcut(QKeySequence("Ctrl+Return"))
        act.triggered.connect(self.make_sheet)
        file_menu.addAction(act)

        file_menu.addSeparator()

        act = QAction("&Quit", self)
        act.setShortcut(QKeySequence.StandardKey.Quit)
        act.triggered.connect(self.close)
        file_menu.addAction(act)

        # --- View menu ---
        view_menu = mb.addMenu("&View")

        self._settings_action = QAction("Show &Settings", self)
        self._settings_action.setCheckable(True)
        self._settings_action.setShortcut(QKeySequence("Ctrl+,"))
        self._settings_action.toggled.connect(self.settings_toggle.setChecked)
        view_menu.addAction(self._settings_action)

    # --- Input ---

    def _open(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Image", "", IMAGE_FILTER)
        if path:
            self.set_input(path)

    def set_input(self, path: str) -> bool:
        """Load *path* as the source image. Used by drop, File>Open, argv and FileOpen."""
        if not self.drop_area.set_image(path):
            self._status.showMessage(f"Not an image: {Path(path).name}")
            return False
        logger.debug("Input image set to %s", path)
        self._update_status()
        return True

    @property
    def input_path(self) -> str | None:
        return self.drop_area.path

    # --- Settings ---

    def _set_settings_visible(self, visible: bool):
        self.settings_box.setVisible(visible)
        if self._settings_action.isChecked() != visible:
            self._settings_action.setChecked(visible)

    def _apply_settings(self):
        self.config = self.settings_panel.result_config()
        self.paper = self.settings_panel.result_paper()
        self.preview.set_layout(self.config, self.paper)
        self._update_status()

    # --- Make sheet ---

    def make_sheet(self) -> Path | None:
        """Render the loaded image and save it next to the source.

        Returns the written path, or None if nothing was written.
        """
        path = self.input_path
        if path is None:
            self._status.showMessage("No image \u2014 drop one first")
            return None

        try:
            tiler = Tiler(self.config, self.paper)
            canvas = tiler.layout(load_source(path))
            out = save_sheet(canvas, Path(path).parent, dpi=self.config.dpi)
        except LayoutError as e:
            self._show_error("Layout Error", str(e))
            return None
        except SheetWriteError as e:
            self._show_error("Save Error", f"Could not save sheet:\n{e}")
            return None

        self.last_output = out
        self.drop_area.clear()
        self._status.showMessage(f"Saved {out.name} \u2014 {tiler.last_summary.describe()}")
        return out

    def _show_error(self, title: str, text: str):
        logger.warning("%s: %s", title, text)
        QMessageBox.critical(self, title, text)

    # --- Status ---

    def _update_status(self):
        c = self.config
        job = (f"{c.width_mm:g}×{c.height_mm:g} mm, {c.rows}×{c.cols} "
               f"on {self.paper}{' landscape' if c.is_rotate else ''} @ {c.dpi:g} dpi")
        if self.input_path is None:
            self._status.showMessage(f"No image | {job}")
        else:
            self._status.showMessage(f"{Path(self.input_path).name} | {job}")


# === SheetApp: custom QApplication for macOS file open events ===

class SheetApp(QApplication):
    """QApplication subclass that handles macOS QFileOpenEvent."""

    file_open_requested = Signal(str)

    def event(self, event):
        if event.type() == QEvent.Type.FileOpen:
            self.file_open_requested.emit(event.file())
            return True
        return super().event(event)
