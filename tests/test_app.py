"""Integration tests for the window (via pytest-qt) and the batch command line."""
import pytest
from PIL import Image

from controller import MainWindow
from models import ImageConfig, PaperSize
from sheet_app import build_parser, config_from_args, main, run_batch
from views import SettingsPanel


@pytest.fixture
def main_window(qapp, qtbot):
    """Create a MainWindow managed by qtbot with a small, fast job."""
    config = ImageConfig(width_mm=20, height_mm=30, diff_mm=1, dpi=50,
                         is_aspect_ratio=False, rows=2, cols=3)
    win = MainWindow(config, PaperSize.A6)
    win.errors = []
    win._show_error = lambda title, text: win.errors.append((title, text))
    qtbot.addWidget(win)
    win.show()
    return win


class TestInput:

    def test_starts_empty(self, main_window):
        assert main_window.input_path is None
        assert "No image" in main_window._status.currentMessage()

    def test_set_input(self, main_window, circle_png):
        assert main_window.set_input(str(circle_png))
        assert main_window.input_path == str(circle_png)
        assert "circle.png" in main_window._status.currentMessage()

    def test_set_input_rejects_non_image(self, main_window, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert not main_window.set_input(str(path))
        assert main_window.input_path is None

    def test_drop_signal_sets_input(self, main_window, circle_png):
        main_window.drop_area.image_dropped.emit(str(circle_png))
        assert main_window.input_path == str(circle_png)


class TestMakeSheet:

    def test_writes_next_to_source(self, main_window, circle_png):
        main_window.set_input(str(circle_png))
        out = main_window.make_sheet()
        assert out == circle_png.parent / "output.png"
        with Image.open(out) as img:
            assert img.size == (207, 291)   # A6 at 50 dpi
        assert "output.png" in main_window._status.currentMessage()
        assert "6 cells" in main_window._status.currentMessage()

    def test_clears_input_after_success(self, main_window, circle_png):
        main_window.set_input(str(circle_png))
        main_window.make_sheet()
        assert main_window.input_path is None

    def test_second_sheet_gets_new_name(self, main_window, circle_png):
        main_window.set_input(str(circle_png))
        first = main_window.make_sheet()
        main_window.set_input(str(circle_png))
        second = main_window.make_sheet()
        assert first.name == "output.png"
        assert second.name == "output(1).png"

    def test_without_input_does_nothing(self, main_window, tmp_path):
        assert main_window.make_sheet() is None
        assert main_window.errors == []

    def test_invalid_settings_report_error(self, main_window, circle_png):
        main_window.config = main_window.config.replace(width_mm=0)
        main_window.set_input(str(circle_png))
        assert main_window.make_sheet() is None
        assert main_window.errors[0][0] == "Layout Error"
        assert main_window.input_path == str(circle_png)
        assert not (circle_png.parent / "output.png").exists()

    def test_source_removed_before_make(self, main_window, circle_png):
        main_window.set_input(str(circle_png))
        circle_png.unlink()
        assert main_window.make_sheet() is None
        assert main_window.errors[0][0] == "Layout Error"


class TestSettings:

    def test_panel_hidden_by_default(self, main_window):
        assert not main_window.settings_box.isVisible()

    def test_toggle_shows_panel(self, main_window):
        main_window.settings_toggle.setChecked(True)
        assert main_window.settings_box.isVisible()
        assert main_window._settings_action.isChecked()

    def test_panel_round_trip(self, qapp, qtbot):
        config = ImageConfig(width_mm=25.5, height_mm=40, diff_mm=1.5, dpi=300,
                             is_aspect_ratio=False, is_rotate=True, rows=4, cols=6)
        panel = SettingsPanel(config, PaperSize.B5)
        qtbot.addWidget(panel)
        assert panel.result_config() == config
        assert panel.result_paper() is PaperSize.B5

    def test_changes_apply_to_window(self, main_window, qtbot):
        panel = main_window.settings_panel
        with qtbot.waitSignal(panel.changed):
            panel._rows_spin.setValue(7)
        assert main_window.config.rows == 7
        panel._paper_combo.setCurrentIndex(PaperSize.choices().index(PaperSize.A3))
        assert main_window.paper is PaperSize.A3
        panel._rotate_check.setChecked(True)
        assert main_window.config.is_rotate
        assert "A3 landscape" in main_window._status.currentMessage()


class TestBatch:
    """sheet_app.py --batch renders without a window."""

    def _args(self, *argv):
        return build_parser().parse_args(list(argv))

    def test_defaults_match_config(self):
        args = self._args("photo.png")
        assert config_from_args(args) == ImageConfig()
        assert args.paper is PaperSize.A4

    def test_options(self):
        args = self._args("--width-mm", "30", "--height-mm", "40", "--gap-mm", "0",
                          "--dpi", "300", "--rows", "2", "--cols", "3",
                          "--paper", "a5", "--stretch", "--rotate", "photo.png")
        config = config_from_args(args)
        assert config == ImageConfig(width_mm=30, height_mm=40, diff_mm=0, dpi=300,
                                     is_aspect_ratio=False, is_rotate=True,
                                     rows=2, cols=3)
        assert args.paper is PaperSize.A5

    def test_unknown_paper(self):
        with pytest.raises(SystemExit):
            self._args("--paper", "letter", "photo.png")

    def test_run_batch_writes_sheet(self, circle_png, capsys):
        args = self._args("--batch", "--dpi", "50", "--paper", "A6", str(circle_png))
        assert run_batch(args) == 0
        out = circle_png.parent / "output.png"
        assert capsys.readouterr().out.strip() == str(out)
        with Image.open(out) as img:
            assert img.size == (207, 291)

    def test_output_dir(self, circle_png, tmp_path, capsys):
        out_dir = tmp_path / "sheets"
        out_dir.mkdir()
        args = self._args("--batch", "--dpi", "50", "--output-dir", str(out_dir),
                          str(circle_png))
        assert run_batch(args) == 0
        assert (out_dir / "output.png").exists()

    def test_run_batch_bad_source(self, tmp_path, capsys):
        args = self._args("--batch", str(tmp_path / "missing.png"))
        assert run_batch(args) == 1
        assert "error:" in capsys.readouterr().err

    def test_run_batch_bad_dimensions(self, circle_png, capsys):
        args = self._args("--batch", "--width-mm", "0", str(circle_png))
        assert run_batch(args) == 1
        assert "width" in capsys.readouterr().err

    def test_main_exit_code(self, circle_png):
        with pytest.raises(SystemExit) as exc:
            main(["--batch", "--dpi", "50", str(circle_png)])
        assert exc.value.code == 0

    def test_batch_requires_image(self):
        with pytest.raises(SystemExit) as exc:
            main(["--batch"])
        assert exc.value.code == 2
