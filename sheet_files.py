"""File boundary: decode the source image and write finished sheets.

Output files never overwrite each other: ``output.png`` is used when free,
otherwise ``output(1).png``, ``output(2).png`` and so on.
"""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from models import OUTPUT_STEM, OUTPUT_SUFFIX, SourceUnreadable

logger = logging.getLogger(__name__)


class SheetWriteError(OSError):
    """The finished sheet could not be written to disk."""


def load_source(path) -> Image.Image:
    """Open *path* and return a fully decoded RGBA copy."""
    try:
        with Image.open(path) as img:
            img.load()
            rgba = img.convert("RGBA")
    except FileNotFoundError as e:
        raise SourceUnreadable(path, "file not found") from e
    except UnidentifiedImageError as e:
        raise SourceUnreadable(path, "unrecognised image format") from e
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise SourceUnreadable(path, str(e)) from e
    logger.debug("Loaded %s (%dx%d)", path, rgba.width, rgba.height)
    return rgba


def numbered_name(stem: str, suffix: str, n: int) -> str:
    """``output.png`` for 0, ``output(n).png`` otherwise."""
    if n == 0:
        return f"{stem}{suffix}"
    return f"{stem}({n}){suffix}"


def unique_output_path(directory, stem: str = OUTPUT_STEM,
                       suffix: str = OUTPUT_SUFFIX) -> Path:
    """Return the first free ``stem[(n)]suffix`` path in *directory*.

    A name is taken when anything sits there, including a broken symlink.
    """
    directory = Path(directory)
    n = 0
    while True:
        candidate = directory / numbered_name(stem, suffix, n)
        if not (candidate.exists() or candidate.is_symlink()):
            return candidate
        n += 1


def save_sheet(canvas: Image.Image, directory, dpi: float | None = None,
               stem: str = OUTPUT_STEM) -> Path:
    """Write *canvas* as PNG under a unique name in *directory*.

    The file is created exclusively, so a name taken between probing and
    writing moves on to the next number instead of overwriting it. Only a
    file this call created is removed when writing fails.
    """
    params = {}
    if dpi and dpi > 0:
        params['dpi'] = (dpi, dpi)
    while True:
        path = unique_output_path(directory, stem, OUTPUT_SUFFIX)
        try:
            f = open(path, "xb")
        except FileExistsError:
            continue
        except OSError as e:
            raise SheetWriteError(f"Could not write {path}: {e}") from e
        try:
            with f:
                canvas.save(f, format="PNG", **params)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise SheetWriteError(f"Could not write {path}: {e}") from e
        logger.info("Wrote %s (%dx%d)", path, canvas.width, canvas.height)
        return path
