import unittest
from unittest.mock import patch

from reportlab.lib import colors

from mealdoc.infra.pdf_canvas import ThemedCanvas
from mealdoc.utilities.errors import RenderStreamError, DocumentGenerationError

WHITE = colors.white


class TestPageHooks(unittest.TestCase):

    def test_hook_runs_on_current_and_every_new_page(self):
        c = ThemedCanvas()
        seen = []
        c.add_page_hook(lambda canvas: seen.append(canvas.page_count))
        c.new_page()
        c.new_page()
        self.assertEqual(seen, [1, 2, 3])
        self.assertEqual(c.page_count, 3)

    def test_watermark_only_for_free_tier(self):
        with patch.object(ThemedCanvas, "draw_watermark", autospec=True) as watermark:
            paid = ThemedCanvas(is_free_tier=False)
            paid.new_page()
            self.assertEqual(watermark.call_count, 0)

            free = ThemedCanvas(is_free_tier=True)
            free.new_page()
            free.new_page()
            self.assertEqual(watermark.call_count, free.page_count)

    def test_background_on_every_page(self):
        with patch.object(ThemedCanvas, "paint_background", autospec=True) as background:
            c = ThemedCanvas()
            for _ in range(4):
                c.new_page()
        self.assertEqual(background.call_count, 5)


class TestPageBreaks(unittest.TestCase):

    def setUp(self):
        self.c = ThemedCanvas()

    def test_fits_without_break(self):
        self.assertEqual(self.c.check_page_break(100, 200), 200)
        self.assertEqual(self.c.page_count, 1)

    def test_breaks_when_block_and_buffer_do_not_fit(self):
        # 842 - 650 - 60 = 132 available; 100 + 60 needed
        y = self.c.check_page_break(100, 650)
        self.assertEqual(y, self.c.top_margin + 10)
        self.assertEqual(self.c.page_count, 2)

    def test_buffer_boundary(self):
        available = self.c.height - 500 - 60
        self.assertEqual(self.c.check_page_break(available - 61, 500), 500)
        self.assertEqual(self.c.page_count, 1)
        self.c.check_page_break(available - 59, 500)
        self.assertEqual(self.c.page_count, 2)

    def test_no_break_on_untouched_page(self):
        y = self.c.top_margin + 10
        self.assertEqual(self.c.check_page_break(5000, y), y)
        self.assertEqual(self.c.page_count, 1)

    def test_flow_text_continues_on_next_page(self):
        text = "\n".join(f"line {i}" for i in range(80))
        y = self.c.flow_text(text, 50, 100, 11, WHITE, width=400)
        self.assertGreater(self.c.page_count, 1)
        self.assertLessEqual(y, self.c.bottom_limit)

    def test_frames_continue_after_break(self):
        frame = self.c.open_frame(50, 100, self.c.content_width)
        self.c.new_page(break_y=700)
        self.assertEqual(frame.top, self.c.top_margin)
        self.c.close_frame(frame, 200)
        self.assertEqual(self.c._frames, [])


class TestTextLayout(unittest.TestCase):

    def setUp(self):
        self.c = ThemedCanvas()

    def test_wrap_text_respects_width(self):
        text = "grilled chicken with roasted sweet potato and a lemon tahini dressing " * 3
        lines = self.c.wrap_text(text.strip(), 12, 150)
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(self.c.string_width(line, 12), 150)

    def test_long_words_are_split(self):
        lines = self.c.wrap_text("x" * 300, 12, 100)
        self.assertGreater(len(lines), 1)
        self.assertEqual("".join(lines), "x" * 300)
        for line in lines:
            self.assertLessEqual(self.c.string_width(line, 12), 100)

    def test_blank_lines_are_kept(self):
        self.assertEqual(self.c.wrap_text("a\n\nb", 12, 200), ["a", "", "b"])

    def test_clamp_text(self):
        clamped = self.c.clamp_text("word " * 200, 15, 200, 4, bold=True)
        lines = clamped.split("\n")
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[-1].endswith("..."))
        self.assertEqual(self.c.clamp_text("short", 15, 200, 4), "short")

    def test_measure_text_height(self):
        self.assertEqual(self.c.measure_text_height("", 200, 11), 0)
        one = self.c.measure_text_height("one line", 400, 10)
        self.assertAlmostEqual(one, 12.0)
        self.assertAlmostEqual(self.c.measure_text_height("a\nb\nc", 400, 10, line_gap=5), 51.0)

    def test_text_returns_height(self):
        self.assertAlmostEqual(self.c.text("a\nb", 50, 100, 10, WHITE), 24.0)
        self.assertEqual(self.c.text("", 50, 100, 10, WHITE), 0)


class TestFinish(unittest.TestCase):

    def test_finish_returns_pdf_bytes(self):
        c = ThemedCanvas(is_free_tier=True)
        c.text("hello", 50, 100, 12, WHITE)
        pdf = c.finish()
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_stream_failure(self):
        c = ThemedCanvas()
        with patch.object(c._canvas, "save", side_effect=OSError("disk full")):
            with self.assertRaises(RenderStreamError) as ctx:
                c.finish()
        self.assertIsInstance(ctx.exception, DocumentGenerationError)
        self.assertIn("disk full", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
