import re
import unittest
from unittest.mock import patch

from reportlab.pdfbase.ttfonts import TTFError

from mealdoc.infra.pdf_canvas import ThemedCanvas
from mealdoc.infra.pdf_pages import draw_day_page
from mealdoc.infra.pdf_utils import generate_meal_plan_pdf, render_meal_plan
from mealdoc.utilities import config
from mealdoc.utilities.errors import DocumentGenerationError, DocumentConstructionError, RenderStreamError

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?!s)")

OPTIONS = {"planType": "weekly", "createdAt": "2024-01-01T00:00:00Z", "isFreeTier": False}


def _meal(name, calories=500):
    return {
        "name": name,
        "nutrition": {"calories": calories, "protein": 30, "carbs": 60, "fat": 15},
        "ingredients": ["200g chicken breast", "1 cup brown rice", "handful of spinach"],
        "instructions": ["Season the chicken.", "Grill for 6 minutes per side.", "Serve over rice."],
    }


def _day(number, snacks=0, snack_name="Greek yogurt with honey"):
    return {
        "day": number,
        "meals": {
            "breakfast": _meal("Overnight oats with berries", 420),
            "lunch": _meal("Grilled chicken bowl", 650),
            "dinner": _meal("Salmon with roasted vegetables", 700),
            "snacks": [{"name": snack_name, "nutrition": {"calories": 150}} for _ in range(snacks)],
        },
    }


def _plan(days=1, **day_kwargs):
    return {
        "overview": {"dailyCalories": 2100, "macros": {"protein": 150, "carbs": 220, "fat": 70}, "duration": days},
        "days": [_day(i, **day_kwargs) for i in range(1, days + 1)],
        "groceryList": {
            "protein": ["chicken breast", "salmon fillet"],
            "produce": ["spinach", "berries", "sweet potato"],
            "pantry": ["brown rice", "rolled oats"],
        },
    }


def _record_text():
    """Patch ThemedCanvas.text to record (text, y, height, bottom_limit) for every call."""
    drawn = []
    original = ThemedCanvas.text

    def recording_text(canvas, text, x, y, size, color, **kwargs):
        height = original(canvas, text, x, y, size, color, **kwargs)
        drawn.append((text, y, height, canvas.bottom_limit))
        return height

    return drawn, patch.object(ThemedCanvas, "text", recording_text)


class TestDocumentStructure(unittest.TestCase):

    def test_empty_plan_renders_cover_only(self):
        for data in ({}, None, {"days": [], "groceryList": {}}):
            result = render_meal_plan(data, OPTIONS)
            self.assertTrue(result.pdf.startswith(b"%PDF"))
            self.assertEqual(result.page_count, 1)
            self.assertEqual(len(PAGE_OBJECT.findall(result.pdf)), 1)

    def test_generate_returns_bytes(self):
        pdf = generate_meal_plan_pdf(_plan(), OPTIONS)
        self.assertIsInstance(pdf, bytes)
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_single_day_plan_end_to_end(self):
        data = {
            "overview": {"dailyCalories": 2000, "macros": {"protein": 150, "carbs": 200, "fat": 70}, "duration": 1},
            "days": [{"day": 1, "meals": {"breakfast": {
                "name": "Oats",
                "nutrition": {"calories": 300, "protein": 10, "carbs": 50, "fat": 5},
                "ingredients": ["oats", "milk"],
                "instructions": "Boil then serve.",
            }}}],
            "groceryList": {"produce": ["apple", "spinach"]},
        }
        drawn, recorder = _record_text()
        with recorder:
            result = render_meal_plan(data, {"planType": "daily", "createdAt": "2024-01-01T00:00:00Z",
                                             "isFreeTier": False})
        self.assertGreater(len(result.pdf), 0)
        self.assertGreaterEqual(result.page_count, 3)
        texts = [t for t, _, _, _ in drawn]
        self.assertIn("DAILY PLAN", texts)
        self.assertIn("Generated on January 1, 2024", texts)
        self.assertIn("300 kcal • P: 10g • C: 50g • F: 5g", texts)
        self.assertIn("PRODUCE", texts)

    def test_full_plan_page_order(self):
        drawn, recorder = _record_text()
        with recorder:
            result = render_meal_plan(_plan(), OPTIONS)
        self.assertGreaterEqual(result.page_count, 4)
        self.assertEqual(len(PAGE_OBJECT.findall(result.pdf)), result.page_count)
        texts = [t for t, _, _, _ in drawn]
        order = [texts.index(label) for label in ("WEEKLY PLAN", "MACRO BREAKDOWN", "DAY 1", "GROCERY LIST")]
        self.assertEqual(order, sorted(order))
        self.assertIn("PROTEIN", texts)

    def test_malformed_days_are_skipped(self):
        data = {"days": [None, {"day": 2, "meals": {"breakfast": {"name": "Toast"}}}, "not-a-day"]}
        with patch("mealdoc.infra.pdf_utils.draw_day_page", wraps=draw_day_page) as day_page:
            result = render_meal_plan(data, OPTIONS)
        self.assertEqual(day_page.call_count, 1)
        self.assertEqual(day_page.call_args[0][1].day, 2)
        self.assertEqual(result.page_count, 2)

    def test_empty_grocery_categories_are_omitted(self):
        data = {"groceryList": {"produce": [], "dairy": ["  ", None], "notes": "buy milk"}}
        self.assertEqual(render_meal_plan(data, OPTIONS).page_count, 1)

        drawn, recorder = _record_text()
        with recorder:
            result = render_meal_plan({"groceryList": {"": ["rice"], "dairy": []}}, OPTIONS)
        self.assertEqual(result.page_count, 2)
        texts = [t for t, _, _, _ in drawn]
        self.assertIn("OTHER", texts)
        self.assertNotIn("DAIRY", texts)

    def test_overview_without_macros_or_days_has_no_overview_page(self):
        result = render_meal_plan({"overview": {"dailyCalories": 2000}}, OPTIONS)
        self.assertEqual(result.page_count, 1)

    def test_monthly_plan_has_more_pages_than_daily(self):
        daily = render_meal_plan(_plan(days=1), dict(OPTIONS, planType="daily"))
        monthly = render_meal_plan(_plan(days=30), dict(OPTIONS, planType="monthly"))
        self.assertGreater(monthly.page_count, daily.page_count)
        self.assertGreaterEqual(monthly.page_count, 30 + 3)


class TestPagination(unittest.TestCase):

    def test_many_long_snacks_add_pages(self):
        long_name = "Apple slices with almond butter, cinnamon and a sprinkle of granola " * 4
        without = render_meal_plan({"days": [_day(1, snacks=0)]}, OPTIONS)
        with_snacks = render_meal_plan({"days": [_day(1, snacks=20, snack_name=long_name)]}, OPTIONS)
        self.assertGreater(with_snacks.page_count, without.page_count)

    def test_long_content_stays_above_bottom_margin(self):
        data = _plan(days=2, snacks=12, snack_name="Cottage cheese with pineapple " * 6)
        data["days"][0]["meals"]["dinner"]["instructions"] = "Stir and simmer gently. " * 150
        data["days"][1]["meals"]["lunch"]["ingredients"] = [f"ingredient number {i}" for i in range(60)]
        data["groceryList"]["spices"] = [f"spice {i}" for i in range(80)]

        drawn, recorder = _record_text()
        with recorder:
            result = render_meal_plan(data, OPTIONS)
        self.assertGreater(result.page_count, 6)
        footer = {config.BRAND_NAME, config.BRAND_TAGLINE}
        for text, y, height, bottom_limit in drawn:
            if text in footer:
                continue
            self.assertLessEqual(y + height, bottom_limit + 0.01, text[:40])

    def test_drawn_text_is_sanitized(self):
        data = {
            "overview": {"macros": {"protein": 100}},
            "days": [{"day": 1, "meals": {"lunch": {
                "name": "Soup\x00 of\x07 the   day",
                "ingredients": ["  tomato\r\n\r\n\r\n\r\nbasil  ", "\x1b"],
                "instructions": "Heat\x0b and\tserve",
            }}}],
            "groceryList": {"veg\x00": ["tomato\x7f"]},
        }
        drawn, recorder = _record_text()
        with recorder:
            render_meal_plan(data, OPTIONS)
        texts = [t for t, _, _, _ in drawn]
        for text in texts:
            self.assertIsNone(CONTROL_CHARS.search(text), repr(text))
        self.assertIn("Soup of the day", texts)
        self.assertIn("VEG", texts)


class TestFreeTier(unittest.TestCase):

    def test_watermark_on_every_page(self):
        with patch.object(ThemedCanvas, "draw_watermark", autospec=True) as watermark:
            result = render_meal_plan(_plan(days=2), dict(OPTIONS, isFreeTier=True))
        self.assertGreater(result.page_count, 1)
        self.assertEqual(watermark.call_count, result.page_count)

    def test_paid_plan_has_no_watermark(self):
        with patch.object(ThemedCanvas, "draw_watermark", autospec=True) as watermark:
            render_meal_plan(_plan(days=2), OPTIONS)
        watermark.assert_not_called()

    def test_free_tier_output_is_larger(self):
        paid = generate_meal_plan_pdf(_plan(days=2), OPTIONS)
        free = generate_meal_plan_pdf(_plan(days=2), dict(OPTIONS, isFreeTier=True))
        self.assertGreater(len(free), len(paid))


class TestErrors(unittest.TestCase):

    def test_unexpected_error_is_wrapped(self):
        with patch("mealdoc.infra.pdf_utils.draw_cover_page", side_effect=RuntimeError("boom")):
            with self.assertRaises(DocumentGenerationError) as ctx:
                render_meal_plan(_plan(), OPTIONS)
        self.assertEqual(str(ctx.exception), "Failed to generate PDF: boom")
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_font_error_message(self):
        error = OSError("ENOENT: no such file or directory, open 'Helvetica.afm'")
        with patch("mealdoc.infra.pdf_utils.draw_day_page", side_effect=error):
            with self.assertRaises(DocumentGenerationError) as ctx:
                render_meal_plan(_plan(), OPTIONS)
        self.assertTrue(str(ctx.exception).startswith("PDF font error"))

    def test_construction_failure(self):
        with patch("mealdoc.infra.pdf_utils.ThemedCanvas", side_effect=TTFError("Can't open file Vera.ttf")):
            with self.assertRaises(DocumentConstructionError) as ctx:
                render_meal_plan(_plan(), OPTIONS)
        self.assertIn("cannot load required font files", str(ctx.exception))

        with patch("mealdoc.infra.pdf_utils.ThemedCanvas", side_effect=ValueError("bad page size")):
            with self.assertRaises(DocumentConstructionError) as ctx:
                render_meal_plan(_plan(), OPTIONS)
        self.assertIn("could not create document", str(ctx.exception))

    def test_stream_failure(self):
        with patch("reportlab.pdfgen.canvas.Canvas.save", side_effect=OSError("disk full")):
            with self.assertRaises(RenderStreamError):
                render_meal_plan(_plan(), OPTIONS)

    def test_garbage_options_do_not_fail(self):
        result = render_meal_plan(_plan(), {"planType": 7, "createdAt": ["x"], "isFreeTier": {"on": 1}})
        self.assertTrue(result.pdf.startswith(b"%PDF"))

    def test_string_false_flag_has_no_watermark(self):
        with patch.object(ThemedCanvas, "draw_watermark", autospec=True) as watermark:
            render_meal_plan(_plan(), dict(OPTIONS, isFreeTier="false"))
        watermark.assert_not_called()

    def test_out_of_range_numbers_do_not_fail(self):
        data = {
            "overview": {"dailyCalories": 10 ** 400, "macros": {"protein": 10 ** 400, "fat": 60}},
            "days": [{"day": 1, "meals": {"breakfast": {"name": "Oats", "nutrition": {"calories": 10 ** 400}}}}],
        }
        result = render_meal_plan(data, OPTIONS)
        self.assertTrue(result.pdf.startswith(b"%PDF"))
        self.assertEqual(result.page_count, 3)


if __name__ == '__main__':
    unittest.main()
