"""Shared pytest fixtures for Photo Sheet Maker tests."""
import os

os.environ['QT_QPA_PLATFORM'] = 'offscreen'  # must be set before QApplication import

import pytest
from PIL import Image, ImageDraw


@pytest.fixture(scope='session')
def qapp():
    """Create a single QApplication for all tests."""
    from controller import SheetApp
    app = SheetApp.instance() or SheetApp([])
    yield app


@pytest.fixture
def make_image():
    """Factory fixture: make_image(width, height, color) -> RGBA Image."""
    def _make(width, height, color=(255, 0, 0, 255)):
        return Image.new('RGBA', (width, height), color)
    return _make


@pytest.fixture
def gradient_image():
    """A 120x80 image with distinct pixels, so resizes and copies are visible."""
    img = Image.new('RGBA', (120, 80))
    img.putdata([(x * 2, y * 3, (x + y) % 256, 255)
                 for y in range(80) for x in range(120)])
    return img


@pytest.fixture
def circle_png(tmp_path):
    """A circle-on-white PNG file; returns its path."""
    img = Image.new('RGB', (200, 300), 'white')
    draw = ImageDraw.Draw(img)
    draw.ellipse([20, 20, 180, 280], fill='red', outline='black')
    path = tmp_path / 'circle.png'
    img.save(path)
    return path
