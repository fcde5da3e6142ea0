"""Meal plan PDF generation.

generate_meal_plan_pdf(content, options) builds the whole document in
memory: cover page, nutrition overview page, one page per day and the
grocery list. Any failure comes out as DocumentGenerationError; no partial
documents are returned.
"""
import logging
from typing import Any, Union

from reportlab.pdfbase.ttfonts import TTFError

from mealdoc.domain.MealPlan import MealPlanContent
from mealdoc.domain.RenderOptions import RenderOptions
from mealdoc.infra.fonts import get_font_faces
from mealdoc.infra.pdf_canvas import ThemedCanvas
from mealdoc.infra.pdf_pages import (
    draw_cover_page, draw_nutrition_overview_page, has_overview_page,
    draw_day_page, grocery_categories, draw_grocery_list,
)
from mealdoc.utilities.errors import (
    DocumentGenerationError, DocumentConstructionError, is_font_error,
)

logger = logging.getLogger(__name__)


class RenderResult:
    def __init__(self, pdf: bytes, page_count: int):
        self.pdf = pdf
        self.page_count = page_count

    def __str__(self) -> str:
        return f"RenderResult - {self.page_count} pages - {len(self.pdf)} bytes"

    __repr__ = __str__


def _create_canvas(is_free_tier: bool) -> ThemedCanvas:
    try:
        return ThemedCanvas(is_free_tier=is_free_tier, fonts=get_font_faces())
    except (TTFError, OSError, ValueError, KeyError) as e:
        if is_font_error(e) or isinstance(e, TTFError):
            raise DocumentConstructionError(
                "PDF generation failed: the renderer cannot load required font files in this "
                f"environment. This is a known compatibility issue. Error: {e}") from e
        raise DocumentConstructionError(f"PDF generation failed: could not create document: {e}") from e


def _build(content: MealPlanContent, options: RenderOptions) -> RenderResult:
    c = _create_canvas(options.is_free_tier)

    draw_cover_page(c, content, options)

    if has_overview_page(content):
        c.new_page()
        draw_nutrition_overview_page(c, content)

    for position, day in enumerate(content.days, start=1):
        if day is None:
            logger.debug("Skipping malformed day entry at position %s", position)
            continue
        c.new_page()
        draw_day_page(c, day)

    categories = grocery_categories(content.grocery_list)
    if categories:
        c.new_page()
        draw_grocery_list(c, categories)

    pdf = c.finish()
    return RenderResult(pdf, c.page_count)


def render_meal_plan(content: Union[MealPlanContent, Any], options: Union[RenderOptions, Any]) -> RenderResult:
    """Render content to a PDF and report its page count."""
    try:
        if not isinstance(content, MealPlanContent):
            content = MealPlanContent.from_dict(content)
        if not isinstance(options, RenderOptions):
            options = RenderOptions.from_dict(options)
        result = _build(content, options)
    except DocumentGenerationError:
        logger.exception("Error generating PDF")
        raise
    except Exception as e:
        logger.exception("Error generating PDF")
        if is_font_error(e):
            raise DocumentGenerationError(
                f"PDF font error: Please ensure only standard fonts are used. {e}") from e
        raise DocumentGenerationError(f"Failed to generate PDF: {e}") from e

    logger.info("Generated %s plan PDF: %s pages, %s bytes",
                options.plan_type, result.page_count, len(result.pdf))
    return result


def generate_meal_plan_pdf(content: Union[MealPlanContent, Any], options: Union[RenderOptions, Any]) -> bytes:
    """Return the PDF bytes for a meal plan; raises DocumentGenerationError on failure."""
    return render_meal_plan(content, options).pdf


__all__ = ['generate_meal_plan_pdf', 'render_meal_plan', 'RenderResult']
