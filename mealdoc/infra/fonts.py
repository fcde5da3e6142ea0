"""Font resources for the PDF renderer.

reportlab ships the Bitstream Vera TrueType family inside its installed
package. The renderer looks for it under the runtime font directory
(config.FONT_DIR); on first use that directory is linked to (or, when
linking is unsupported, copied from) the installed location. If that fails
the built-in Helvetica faces are used instead.
"""
import logging
import shutil
from pathlib import Path
from typing import Optional

import reportlab
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from mealdoc.utilities import config
from mealdoc.utilities.constants import (
    FALLBACK_FONT, FALLBACK_FONT_BOLD, TTF_FONT_NAME, TTF_FONT_BOLD_NAME, TTF_FONT_FILES,
)
from mealdoc.utilities.errors import ResourceInitializationError

logger = logging.getLogger(__name__)

# Process-wide, set once; a race only repeats idempotent work
_FONT_FACES: Optional[tuple[str, str]] = None


def installed_font_dir() -> Path:
    return Path(reportlab.__file__).resolve().parent / 'fonts'


def _has_font_files(directory: Path) -> bool:
    return all((directory / name).is_file() for name in TTF_FONT_FILES.values())


def ensure_font_resources(target: Optional[Path] = None, source: Optional[Path] = None) -> Path:
    """Make the TTF files reachable under target; return the directory to load from.

    Raises ResourceInitializationError when neither a link nor a copy works.
    """
    target = Path(target or config.FONT_DIR)
    source = Path(source or installed_font_dir())
    if _has_font_files(target):
        return target
    if not _has_font_files(source):
        raise ResourceInitializationError(f"Installed font files not found in {source}")

    linked = False
    if not target.exists() and not target.is_symlink():
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.symlink_to(source, target_is_directory=True)
            linked = True
            logger.info("Linked font resources %s -> %s", target, source)
        except OSError as e:
            logger.info("Could not link font resources (%s); copying instead", e)
    if not linked:
        try:
            shutil.copytree(source, target, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise ResourceInitializationError(f"Could not copy font files to {target}: {e}") from e

    if not _has_font_files(target):
        raise ResourceInitializationError(f"Font directory {target} exists but lacks the font files")
    return target


def register_fonts(font_dir: Path) -> tuple[str, str]:
    """Register the TTF family from font_dir and return (regular, bold) face names."""
    registered = pdfmetrics.getRegisteredFontNames()
    for face, filename in TTF_FONT_FILES.items():
        if face not in registered:
            pdfmetrics.registerFont(TTFont(face, str(font_dir / filename)))
    return TTF_FONT_NAME, TTF_FONT_BOLD_NAME


def get_font_faces() -> tuple[str, str]:
    """Return the (regular, bold) faces to draw with, preparing them on first call."""
    global _FONT_FACES
    if _FONT_FACES is None:
        faces = (FALLBACK_FONT, FALLBACK_FONT_BOLD)
        try:
            faces = register_fonts(ensure_font_resources())
        except ResourceInitializationError as e:
            logger.warning("Font resources unavailable, using built-in fonts: %s", e)
        except TTFError as e:
            logger.warning("Could not load TrueType fonts, using built-in fonts: %s", e)
        _FONT_FACES = faces
    return _FONT_FACES


def reset_font_faces() -> None:
    """Forget the cached faces (tests)."""
    global _FONT_FACES
    _FONT_FACES = None


__all__ = ['ensure_font_resources', 'register_fonts', 'get_font_faces', 'reset_font_faces', 'installed_font_dir']
