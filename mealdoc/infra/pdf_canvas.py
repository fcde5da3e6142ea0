"""Drawing surface for the meal plan PDF.

ThemedCanvas wraps a reportlab canvas with a top-down coordinate system
(y grows downwards from the top edge, like a layout cursor) and the few
operations the page renderers need: painting, bordered boxes, wrapped
text, text measurement, page breaks and writing the final buffer.

new_page() is the only way a page gets created, and it runs every
registered page hook, so each page gets its background (and the free-tier
watermark) before anything else is drawn on it.
"""
from __future__ import annotations

import io
import logging
from typing import Callable, List, Optional

from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from mealdoc.utilities import config
from mealdoc.utilities.constants import (
    THEME_COLORS, PAGE_SIZE, PAGE_LAYOUT, PAGE_BREAK_BUFFER, LINE_HEIGHT_FACTOR,
)
from mealdoc.utilities.errors import RenderStreamError

logger = logging.getLogger(__name__)

PageHook = Callable[['ThemedCanvas'], None]

WATERMARK_FONT_SIZE = 44
WATERMARK_ALPHA = 0.12
WATERMARK_ANGLE = 45


class Frame:
    """An open card border that follows content across page breaks."""

    def __init__(self, x: float, top: float, width: float, color: colors.Color):
        self.x = x
        self.top = top
        self.width = width
        self.color = color


class ThemedCanvas:
    def __init__(self, is_free_tier: bool = False, fonts: tuple[str, str] = ("Helvetica", "Helvetica-Bold"),
                 page_size: tuple[float, float] = PAGE_SIZE):
        self.width, self.height = page_size
        self.font, self.bold_font = fonts
        self.is_free_tier = is_free_tier
        self.page_count = 1
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size, pageCompression=1)
        self._hooks: List[PageHook] = []
        self._frames: List[Frame] = []
        self.add_page_hook(ThemedCanvas.paint_background)
        if is_free_tier:
            self.add_page_hook(ThemedCanvas.draw_watermark)

    # --- pages ---------------------------------------------------------------

    @property
    def top_margin(self) -> float:
        return PAGE_LAYOUT["top_margin"]

    @property
    def bottom_limit(self) -> float:
        """Lowest y content may reach on a page."""
        return self.height - PAGE_LAYOUT["bottom_margin"]

    @property
    def content_width(self) -> float:
        return self.width - PAGE_LAYOUT["margin"] * 2

    def add_page_hook(self, hook: PageHook) -> None:
        """Register hook for every new page; it is also applied to the current one."""
        self._hooks.append(hook)
        hook(self)

    def new_page(self, break_y: Optional[float] = None) -> float:
        """Finish the current page and start a new one; return the fresh cursor.

        Open frames are closed at break_y on the old page and continue at the
        top of the new one.
        """
        if self._frames:
            bottom = self.bottom_limit if break_y is None else min(break_y + 10, self.bottom_limit)
            for frame in self._frames:
                self._draw_frame(frame, frame.top, bottom)
                frame.top = self.top_margin
        self._canvas.showPage()
        self.page_count += 1
        for hook in self._hooks:
            hook(self)
        return self.top_margin + 10

    def check_page_break(self, required_height: float, y: float) -> float:
        """Start a new page unless required_height (plus buffer) fits below y."""
        if y <= self.top_margin + 10:
            # Nothing drawn yet below the top margin; a break would only leave a blank page
            return y
        available = self.height - y - PAGE_LAYOUT["bottom_margin"]
        if available < required_height + PAGE_BREAK_BUFFER:
            return self.new_page(break_y=y)
        return y

    def paint_background(self) -> None:
        c = self._canvas
        c.saveState()
        c.setFillColor(THEME_COLORS["background"])
        c.rect(0, 0, self.width, self.height, stroke=0, fill=1)
        c.restoreState()

    def draw_watermark(self) -> None:
        c = self._canvas
        c.saveState()
        c.setFillColor(THEME_COLORS["primary"])
        c.setFillAlpha(WATERMARK_ALPHA)
        c.translate(self.width / 2, self.height / 2)
        c.rotate(WATERMARK_ANGLE)
        c.setFont(self.bold_font, WATERMARK_FONT_SIZE)
        c.drawCentredString(0, 0, config.WATERMARK_TEXT)
        c.restoreState()

    # --- frames --------------------------------------------------------------

    def open_frame(self, x: float, top: float, width: float, color: colors.Color = THEME_COLORS["border"]) -> Frame:
        frame = Frame(x, top, width, color)
        self._frames.append(frame)
        return frame

    def close_frame(self, frame: Frame, bottom: float) -> None:
        self._frames.remove(frame)
        self._draw_frame(frame, frame.top, min(bottom, self.bottom_limit))

    def _draw_frame(self, frame: Frame, top: float, bottom: float) -> None:
        if bottom <= top:
            return
        self.box(frame.x, top, frame.width, bottom - top, stroke=frame.color, line_width=2)
        self.box(frame.x, top, 4, bottom - top, fill=frame.color)

    # --- shapes --------------------------------------------------------------

    def box(self, x: float, y: float, width: float, height: float, fill: Optional[colors.Color] = None,
            stroke: Optional[colors.Color] = None, line_width: float = 1, radius: float = 0) -> None:
        """Rectangle whose top-left corner is (x, y); filled and/or bordered."""
        c = self._canvas
        c.saveState()
        if fill is not None:
            c.setFillColor(fill)
        if stroke is not None:
            c.setStrokeColor(stroke)
            c.setLineWidth(line_width)
        bottom = self.height - y - height
        if radius:
            c.roundRect(x, bottom, width, height, radius, stroke=int(stroke is not None), fill=int(fill is not None))
        else:
            c.rect(x, bottom, width, height, stroke=int(stroke is not None), fill=int(fill is not None))
        c.restoreState()

    def line(self, x1: float, x2: float, y: float, color: colors.Color, width: float = 1,
             alpha: float = 1.0) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(color)
        c.setStrokeAlpha(alpha)
        c.setLineWidth(width)
        c.line(x1, self.height - y, x2, self.height - y)
        c.restoreState()

    def dot(self, x: float, y: float, radius: float, color: colors.Color) -> None:
        c = self._canvas
        c.saveState()
        c.setFillColor(color)
        c.circle(x, self.height - y, radius, stroke=0, fill=1)
        c.restoreState()

    # --- text ----------------------------------------------------------------

    def _face(self, bold: bool) -> str:
        return self.bold_font if bold else self.font

    def line_height(self, size: float, line_gap: float = 0) -> float:
        return size * LINE_HEIGHT_FACTOR + line_gap

    def string_width(self, text: str, size: float, bold: bool = False) -> float:
        return pdfmetrics.stringWidth(text, self._face(bold), size)

    def wrap_text(self, text: str, size: float, width: float, bold: bool = False) -> List[str]:
        """Word-wrap text to width; explicit newlines and blank lines are kept."""
        lines: List[str] = []
        for paragraph in text.split("\n"):
            current = ""
            for word in paragraph.split(" "):
                candidate = f"{current} {word}" if current else word
                if self.string_width(candidate, size, bold) <= width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                while len(word) > 1 and self.string_width(word, size, bold) > width:
                    cut = self._fit_prefix(word, size, width, bold)
                    lines.append(word[:cut])
                    word = word[cut:]
                current = word
            lines.append(current)
        return lines

    def _fit_prefix(self, word: str, size: float, width: float, bold: bool) -> int:
        low, high = 1, len(word)
        while low < high:
            mid = (low + high + 1) // 2
            if self.string_width(word[:mid], size, bold) <= width:
                low = mid
            else:
                high = mid - 1
        return low

    def clamp_text(self, text: str, size: float, width: float, max_lines: int, bold: bool = False) -> str:
        """Wrap text and keep at most max_lines, ending the last kept line with '...'."""
        lines = self.wrap_text(text, size, width, bold)
        if len(lines) <= max_lines:
            return "\n".join(lines)
        kept = lines[:max_lines]
        last = kept[-1]
        while last and self.string_width(last + "...", size, bold) > width:
            last = last[:-1]
        kept[-1] = last.rstrip() + "..."
        return "\n".join(kept)

    def measure_text_height(self, text: str, width: float, size: float, line_gap: float = 0,
                            bold: bool = False) -> float:
        if not text:
            return 0
        return len(self.wrap_text(text, size, width, bold)) * self.line_height(size, line_gap)

    def _draw_line(self, text: str, x: float, baseline: float, size: float, width: Optional[float],
                   align: str, bold: bool) -> None:
        c = self._canvas
        c.setFont(self._face(bold), size)
        if align == "center" and width:
            c.drawCentredString(x + width / 2, baseline, text)
        elif align == "right" and width:
            c.drawRightString(x + width, baseline, text)
        else:
            c.drawString(x, baseline, text)

    def text(self, text: str, x: float, y: float, size: float, color: colors.Color,
             width: Optional[float] = None, align: str = "left", bold: bool = False,
             line_gap: float = 0, alpha: float = 1.0) -> float:
        """Draw text with its top at y, wrapping to width; return the height used."""
        if not text:
            return 0
        lines = self.wrap_text(text, size, width, bold) if width else text.split("\n")
        step = self.line_height(size, line_gap)
        ascent = pdfmetrics.getAscent(self._face(bold), size) or size * 0.8
        c = self._canvas
        c.saveState()
        c.setFillColor(color)
        c.setFillAlpha(alpha)
        for index, line in enumerate(lines):
            self._draw_line(line, x, self.height - (y + index * step + ascent), size, width, align, bold)
        c.restoreState()
        return len(lines) * step

    def rotated_text(self, text: str, x: float, y: float, angle: float, size: float,
                     color: colors.Color) -> None:
        """Centered text rotated by angle degrees around (x, y)."""
        c = self._canvas
        c.saveState()
        c.translate(x, self.height - y)
        c.rotate(angle)
        c.setFillColor(color)
        c.setFont(self.font, size)
        c.drawCentredString(0, 0, text)
        c.restoreState()

    def flow_text(self, text: str, x: float, y: float, size: float, color: colors.Color, width: float,
                  bold: bool = False, line_gap: float = 0) -> float:
        """Draw wrapped text line by line, breaking pages as needed; return the new cursor."""
        step = self.line_height(size, line_gap)
        for line in self.wrap_text(text, size, width, bold):
            if y + step > self.bottom_limit:
                y = self.new_page(break_y=y)
            self.text(line, x, y, size, color, bold=bold)
            y += step
        return y

    # --- output --------------------------------------------------------------

    def finish(self) -> bytes:
        """Write the document and return its bytes."""
        try:
            self._canvas.save()
            return self._buffer.getvalue()
        except Exception as e:
            logger.error("PDF stream error: %s", e)
            raise RenderStreamError(f"Failed to generate PDF: {e}") from e


__all__ = ['ThemedCanvas', 'Frame']
