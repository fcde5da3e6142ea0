from pathlib import Path
import tempfile
import unittest
from unittest.mock import patch

from mealdoc.infra import fonts
from mealdoc.infra.fonts import ensure_font_resources, get_font_faces, installed_font_dir, reset_font_faces
from mealdoc.infra.pdf_utils import render_meal_plan
from mealdoc.utilities.constants import TTF_FONT_FILES
from mealdoc.utilities.errors import ResourceInitializationError

HAS_INSTALLED_FONTS = all((installed_font_dir() / name).is_file() for name in TTF_FONT_FILES.values())


@unittest.skipUnless(HAS_INSTALLED_FONTS, "reportlab installation ships no TrueType fonts")
class TestEnsureFontResources(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _assert_fonts_in(self, directory):
        for name in TTF_FONT_FILES.values():
            self.assertTrue((directory / name).is_file(), name)

    def test_links_installed_fonts(self):
        target = self.root / "runtime" / "fonts"
        self.assertEqual(ensure_font_resources(target=target), target)
        self._assert_fonts_in(target)

    def test_copies_when_linking_is_unsupported(self):
        target = self.root / "fonts"
        with patch.object(Path, "symlink_to", side_effect=OSError("symlinks not permitted")):
            result = ensure_font_resources(target=target)
        self.assertEqual(result, target)
        self.assertFalse(target.is_symlink())
        self._assert_fonts_in(target)

    def test_existing_directory_is_filled_by_copy(self):
        target = self.root / "fonts"
        target.mkdir()
        ensure_font_resources(target=target)
        self._assert_fonts_in(target)

    def test_already_prepared_directory_is_reused(self):
        target = self.root / "fonts"
        ensure_font_resources(target=target)
        with patch("mealdoc.infra.fonts.shutil.copytree") as copytree:
            self.assertEqual(ensure_font_resources(target=target), target)
        copytree.assert_not_called()

    def test_missing_source(self):
        with self.assertRaises(ResourceInitializationError):
            ensure_font_resources(target=self.root / "fonts", source=self.root / "nowhere")

    def test_link_and_copy_both_fail(self):
        with patch.object(Path, "symlink_to", side_effect=OSError("read-only file system")), \
                patch("mealdoc.infra.fonts.shutil.copytree", side_effect=OSError("read-only file system")):
            with self.assertRaises(ResourceInitializationError):
                ensure_font_resources(target=self.root / "fonts")


class TestFontFaces(unittest.TestCase):

    def setUp(self):
        reset_font_faces()

    def tearDown(self):
        reset_font_faces()

    def test_falls_back_to_builtin_fonts(self):
        with patch("mealdoc.infra.fonts.ensure_font_resources",
                   side_effect=ResourceInitializationError("no fonts")):
            with self.assertLogs("mealdoc.infra.fonts", level="WARNING"):
                faces = get_font_faces()
        self.assertEqual(faces, ("Helvetica", "Helvetica-Bold"))

    def test_faces_are_cached(self):
        with patch("mealdoc.infra.fonts.ensure_font_resources",
                   side_effect=ResourceInitializationError("no fonts")) as ensure:
            get_font_faces()
            get_font_faces()
        self.assertEqual(ensure.call_count, 1)

    @unittest.skipUnless(HAS_INSTALLED_FONTS, "reportlab installation ships no TrueType fonts")
    def test_registers_truetype_family(self):
        with tempfile.TemporaryDirectory() as tmp:
            with patch.object(fonts.config, "FONT_DIR", Path(tmp) / "fonts"):
                faces = get_font_faces()
        self.assertEqual(faces, ("MealDoc", "MealDoc-Bold"))

    def test_document_renders_with_fallback_fonts(self):
        plan = {"days": [{"day": 1, "meals": {"breakfast": {"name": "Crème brûlée oats",
                                                            "ingredients": ["oats"]}}}]}
        with patch("mealdoc.infra.fonts.ensure_font_resources",
                   side_effect=ResourceInitializationError("no fonts")):
            result = render_meal_plan(plan, {"planType": "daily"})
        self.assertTrue(result.pdf.startswith(b"%PDF"))
        self.assertEqual(result.page_count, 2)


if __name__ == '__main__':
    unittest.main()
