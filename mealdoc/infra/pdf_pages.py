"""Page renderers for the meal plan PDF.

Each renderer draws onto a ThemedCanvas and works with a top-down cursor
`y`. Page breaks are decided by canvas.check_page_break before each block
(day divider, snacks header, each snack, meal card head, nutrition box,
ingredients block, each ingredient, instructions block, each grocery
category and item).
"""
import logging
from typing import Any, Dict, Optional

from mealdoc.domain.MealPlan import Day, Meal, MealPlanContent, Overview
from mealdoc.domain.RenderOptions import RenderOptions
from mealdoc.infra.pdf_canvas import ThemedCanvas
from mealdoc.logic.reporting.nutrition import compute_daily_calories, compute_macro_split, calorie_scale
from mealdoc.utilities import config
from mealdoc.utilities.constants import (
    THEME_COLORS, MACRO_COLORS, PAGE_LAYOUT, FOOTER_CLEARANCE,
    DAY_DIVIDER_HEIGHT, SNACKS_HEADER_HEIGHT, MEAL_CARD_HEAD_HEIGHT, NUTRITION_BOX_HEIGHT,
    INGREDIENT_LINE_HEIGHT, LINE_CHECK_HEIGHT, GROCERY_ITEM_HEIGHT,
    MAX_INSTRUCTIONS_LENGTH, MAX_INSTRUCTIONS_BLOCK_HEIGHT,
)
from mealdoc.utilities.text import (
    sanitize_text, format_nutrition_info, format_number, build_instructions_text, non_empty,
)

logger = logging.getLogger(__name__)

MARGIN = PAGE_LAYOUT["margin"]
PAD = PAGE_LAYOUT["card_padding"]
BG = THEME_COLORS["background"]
PRIMARY = THEME_COLORS["primary"]
TEXT = THEME_COLORS["text_primary"]
MUTED = THEME_COLORS["text_secondary"]
CARD = THEME_COLORS["card_background"]

SNACK_NAME_MAX_LINES = 4
STAT_BOX_WIDTH = 120
STAT_BOX_HEIGHT = 100
STAT_BOX_SPACING = 20
CHART_HEIGHT = 200


def _advance(c: ThemedCanvas, start_page: int, start_y: float, end_y: float, minimum: float) -> float:
    """Cursor after a flowed block, at least `minimum` below its start unless the page changed."""
    if c.page_count != start_page:
        return end_y
    return max(end_y, start_y + minimum)


def _badge(c: ThemedCanvas, label: str, x: float, y: float, width: float, height: float,
           size: float, text_offset: float) -> None:
    c.box(x, y, width, height, fill=PRIMARY, radius=6)
    c.text(label, x, y + text_offset, size, BG, width=width, align="center", bold=True)


def draw_footer(c: ThemedCanvas, y: float) -> bool:
    """Brand footer, drawn only when the cursor is clear of it."""
    footer_y = c.height - PAGE_LAYOUT["bottom_margin"]
    if y >= footer_y - FOOTER_CLEARANCE:
        return False
    c.text(config.BRAND_NAME, MARGIN, footer_y - 5, 11, MUTED, width=c.content_width, align="center")
    c.text(config.BRAND_TAGLINE, MARGIN, footer_y + 10, 9, MUTED, width=c.content_width,
           align="center", alpha=0.8)
    return True


# --- cover ------------------------------------------------------------------

def _stat_boxes(overview: Overview) -> list:
    boxes = []
    if overview.daily_calories:
        boxes.append(("Daily Calories", format_number(overview.daily_calories), "kcal", PRIMARY))
    for macro, label in (("protein", "Protein"), ("carbs", "Carbs"), ("fat", "Fat")):
        grams = overview.macros.get(macro)
        if grams:
            boxes.append((label, f"{format_number(grams)}g", "grams", MACRO_COLORS[macro]))
    return boxes


def _draw_stat_box(c: ThemedCanvas, x: float, y: float, label: str, value: str, unit: str, color) -> None:
    inner = STAT_BOX_WIDTH - 20
    c.box(x, y, STAT_BOX_WIDTH, STAT_BOX_HEIGHT, fill=CARD, stroke=color, line_width=2)
    c.text(label, x + 10, y + 15, 10, MUTED, width=inner, align="center")
    c.text(c.clamp_text(value, 28, inner, 1, bold=True), x + 10, y + 35, 28, color,
           width=inner, align="center", bold=True)
    c.text(unit, x + 10, y + 75, 9, MUTED, width=inner, align="center", alpha=0.8)


def _draw_overview_stats(c: ThemedCanvas, overview: Overview, y: float) -> float:
    c.text("NUTRITION OVERVIEW", MARGIN, y, 20, TEXT, width=c.content_width, align="center", bold=True)
    y += 30
    c.line((c.width - 250) / 2, (c.width + 250) / 2, y, PRIMARY)
    y += 30

    boxes = _stat_boxes(overview)
    if boxes:
        # One row when it fits the content width, otherwise a 2x2 grid
        row_width = len(boxes) * STAT_BOX_WIDTH + (len(boxes) - 1) * STAT_BOX_SPACING
        per_row = len(boxes) if row_width <= c.content_width else 2
        for start in range(0, len(boxes), per_row):
            row = boxes[start:start + per_row]
            width = len(row) * STAT_BOX_WIDTH + (len(row) - 1) * STAT_BOX_SPACING
            x = (c.width - width) / 2
            for label, value, unit, color in row:
                _draw_stat_box(c, x, y, label, value, unit, color)
                x += STAT_BOX_WIDTH + STAT_BOX_SPACING
            y += STAT_BOX_HEIGHT + STAT_BOX_SPACING

    if overview.duration:
        y += 10
        unit = "day" if overview.duration == 1 else "days"
        c.text(f"Plan Duration: {overview.duration} {unit}", MARGIN, y, 11, MUTED,
               width=c.content_width, align="center", alpha=0.8)
        y += 20
    return y


def draw_cover_page(c: ThemedCanvas, content: MealPlanContent, options: RenderOptions) -> float:
    y = 100
    c.line((c.width - 200) / 2, (c.width + 200) / 2, y, PRIMARY, width=3)
    y += 20
    c.text(config.BRAND_NAME.upper(), MARGIN, y, 20, PRIMARY, width=c.content_width, align="center", bold=True)
    y += 50

    badge_width, badge_height = 180, 45
    _badge(c, options.plan_label, (c.width - badge_width) / 2, y, badge_width, badge_height, 18, 13)
    y += badge_height + 50

    c.text("YOUR PERSONALIZED", MARGIN, y, 36, TEXT, width=c.content_width, align="center", bold=True)
    y += 48
    c.text("MEAL PLAN", MARGIN, y, 36, PRIMARY, width=c.content_width, align="center", bold=True)
    y += 60
    c.text(f"Generated on {options.created_label}", MARGIN, y, 11, MUTED,
           width=c.content_width, align="center", alpha=0.7)
    y += 45

    if content.overview:
        y = _draw_overview_stats(c, content.overview, y)

    footer_y = c.height - PAGE_LAYOUT["bottom_margin"]
    c.line(MARGIN, c.width - MARGIN, footer_y - 20, PRIMARY, alpha=0.3)
    c.text(config.BRAND_NAME, MARGIN, footer_y - 5, 10, MUTED, width=c.content_width, align="center")
    c.text(config.BRAND_TAGLINE, MARGIN, footer_y + 8, 8, MUTED, width=c.content_width,
           align="center", alpha=0.7)
    return y


# --- nutrition overview -------------------------------------------------------

def has_overview_page(content: MealPlanContent) -> bool:
    return bool(content.overview) and (content.overview.has_macros() or bool(content.valid_days()))


def _section_heading(c: ThemedCanvas, title: str, y: float) -> float:
    c.text(title, MARGIN, y, 18, TEXT, bold=True)
    y += 24
    c.line(MARGIN, MARGIN + 200, y, PRIMARY, alpha=0.3)
    return y + 20


def _draw_macro_breakdown(c: ThemedCanvas, split: Dict[str, Dict[str, float]], y: float) -> float:
    y = _section_heading(c, "MACRO BREAKDOWN", y)
    card_height, spacing = 55, 12
    for macro, data in split.items():
        color = MACRO_COLORS[macro]
        c.box(MARGIN, y, c.content_width, card_height, fill=CARD, stroke=color, line_width=3)
        bar = (max(data["percent"], 0) / 100) * (c.content_width - 40)
        if bar > 0:
            c.box(MARGIN + 20, y + card_height - 12, bar, 6, fill=color)
        c.text(macro.upper(), MARGIN + 25, y + 10, 15, color, bold=True)
        c.text(f"{data['percent']:.0f}%", MARGIN + c.content_width - 120, y + 8, 24, color,
               width=100, align="right", bold=True)
        c.text(f"{format_number(data['grams'])}g", MARGIN + 25, y + 29, 12, MUTED)
        y += card_height + spacing
    return y + 20


def _draw_calorie_chart(c: ThemedCanvas, daily: list, scale: float, y: float) -> float:
    y = _section_heading(c, "DAILY CALORIES", y)
    chart_top = y
    chart_bottom = chart_top + CHART_HEIGHT
    c.box(MARGIN, chart_top, c.content_width, CHART_HEIGHT, fill=CARD, stroke=PRIMARY, line_width=2)
    for i in range(1, 5):
        c.line(MARGIN + 5, c.width - MARGIN - 5, chart_top + (CHART_HEIGHT / 5) * i, MUTED,
               width=0.5, alpha=0.2)

    padding = 40
    available = c.content_width - padding * 2
    count = len(daily)
    spacing = min(15, available * 0.3 / count)
    bar_width = min((available - (count - 1) * spacing) / count, 60)
    used = count * bar_width + (count - 1) * spacing
    x = MARGIN + padding + (available - used) / 2
    base = chart_bottom - 30
    scale = scale if scale > 0 else 1
    for entry in daily:
        bar_height = max(entry["calories"], 0) / scale * (CHART_HEIGHT - 60)
        if bar_height > 0:
            c.box(x, base - bar_height, bar_width, bar_height, fill=MACRO_COLORS["protein"])
        label = f"Day {entry['day']}" if bar_width >= 36 else str(entry["day"])
        c.text(label, x - 4, chart_bottom - 22, 9 if bar_width >= 20 else 6, TEXT,
               width=bar_width + 8, align="center")
        if bar_width >= 24:
            c.text(format_number(round(entry["calories"])), x - 6, base - bar_height - 14, 9,
                   TEXT if bar_height > 25 else MUTED, width=bar_width + 12, align="center")
        x += bar_width + spacing

    c.rotated_text("Calories (kcal)", MARGIN + 16, chart_top + CHART_HEIGHT / 2, 90, 9, MUTED)
    return chart_bottom + 30


def draw_nutrition_overview_page(c: ThemedCanvas, content: MealPlanContent) -> float:
    y = c.top_margin + 20
    c.text("NUTRITION OVERVIEW", MARGIN, y, 28, PRIMARY, width=c.content_width, align="center", bold=True)
    y += 36
    c.line((c.width - 300) / 2, (c.width + 300) / 2, y, PRIMARY, width=2)
    y += 30

    split = compute_macro_split(content.overview)
    if split:
        y = _draw_macro_breakdown(c, split, y)

    days = content.valid_days()
    if days:
        daily = compute_daily_calories(days)
        y = c.check_page_break(CHART_HEIGHT + 74, y)
        y = _draw_calorie_chart(c, daily, calorie_scale(daily, content.overview), y)

    draw_footer(c, y)
    return y


# --- day pages ---------------------------------------------------------------

def draw_meal_card(c: ThemedCanvas, meal: Optional[Meal], meal_type: str, y: float) -> float:
    """Draw one breakfast/lunch/dinner card starting at y; return the cursor after it."""
    if meal is None:
        return y
    card_width = c.content_width
    inner_width = card_width - PAD * 2

    y = c.check_page_break(MEAL_CARD_HEAD_HEIGHT, y)
    _badge(c, meal_type.upper(), MARGIN, y, 100, 28, 13, 7)
    y += 28 + 20

    frame = c.open_frame(MARGIN, y - 10, card_width)

    name = sanitize_text(meal.name)
    if name:
        y = c.flow_text(name, MARGIN + PAD, y, 18, TEXT, inner_width, bold=True, line_gap=4) + 5
    else:
        y += 10

    nutrition_text = format_nutrition_info(meal.nutrition)
    if nutrition_text:
        y = c.check_page_break(NUTRITION_BOX_HEIGHT + 30, y)
        c.box(MARGIN + PAD, y, inner_width, NUTRITION_BOX_HEIGHT, fill=CARD, stroke=PRIMARY, line_width=2)
        c.text(c.clamp_text(nutrition_text, 13, inner_width - 20, 2), MARGIN + PAD + 10, y + 14, 13,
               PRIMARY, width=inner_width - 20)
        y += NUTRITION_BOX_HEIGHT + 25
    else:
        y += 10

    ingredients = non_empty(meal.ingredients)
    if ingredients:
        y = c.check_page_break(25 + len(ingredients) * INGREDIENT_LINE_HEIGHT, y)
        c.text("INGREDIENTS:", MARGIN + PAD, y, 13, PRIMARY, bold=True)
        y += 20
        line_width = inner_width - 25
        for ingredient in ingredients:
            y = c.check_page_break(LINE_CHECK_HEIGHT, y)
            page, start = c.page_count, y
            c.dot(MARGIN + PAD + 5, y + 6, 3, PRIMARY)
            end = c.flow_text(ingredient, MARGIN + PAD + 15, y, 11, TEXT, line_width, line_gap=3)
            y = _advance(c, page, start, end, INGREDIENT_LINE_HEIGHT) + 2
        y += 18

    instructions = build_instructions_text(meal.instructions, MAX_INSTRUCTIONS_LENGTH)
    if instructions:
        text_width = inner_width - 20
        estimate = min(c.measure_text_height(instructions, text_width, 11, 5) + 50,
                       MAX_INSTRUCTIONS_BLOCK_HEIGHT)
        y = c.check_page_break(estimate, y)
        c.text("INSTRUCTIONS:", MARGIN + PAD, y, 13, PRIMARY, bold=True)
        y += 20
        y = c.flow_text(instructions, MARGIN + PAD + 10, y, 11, TEXT, text_width, line_gap=5)
        y += 20

    c.close_frame(frame, y + 10)
    return y + 15


def draw_snacks(c: ThemedCanvas, snacks: list, y: float) -> float:
    y = c.check_page_break(SNACKS_HEADER_HEIGHT, y)
    _badge(c, "SNACKS", MARGIN, y, 100, 30, 14, 8)
    y += 30 + 20

    card_width = c.content_width
    name_width = card_width - PAD * 2 - 20
    for snack in snacks:
        name = c.clamp_text(sanitize_text(snack.name) or "Snack", 15, name_width, SNACK_NAME_MAX_LINES, bold=True)
        name_height = max(c.measure_text_height(name, name_width, 15, 3, bold=True), 20)
        calories = snack.nutrition.get("calories")
        card_height = max(55, 12 + name_height + (23 if calories else 0) + 8)

        y = c.check_page_break(card_height + 15, y)
        c.box(MARGIN, y, card_width, card_height, fill=CARD, stroke=PRIMARY, line_width=2)
        c.box(MARGIN, y, 4, card_height, fill=PRIMARY)
        c.text(name, MARGIN + PAD + 10, y + 12, 15, TEXT, width=name_width, bold=True, line_gap=3)
        if calories:
            c.text(f"{format_number(calories)} kcal", MARGIN + PAD + 10, y + 12 + name_height + 5, 12, PRIMARY)
        y += card_height + 20
    return y


def draw_day_page(c: ThemedCanvas, day: Day) -> float:
    """Render one day; the caller has already started its page."""
    y = c.top_margin + 10
    _badge(c, f"DAY {day.day}", MARGIN, y, 120, 40, 24, 9)
    y += 40 + 30

    y = c.check_page_break(DAY_DIVIDER_HEIGHT, y)
    c.line(MARGIN, c.width - MARGIN, y, PRIMARY, width=2)
    y += 40

    for slot, meal in day.meals().items():
        y = draw_meal_card(c, meal, slot.capitalize(), y)
        y += PAGE_LAYOUT["meal_spacing"] + 10

    if day.snacks:
        y = draw_snacks(c, day.snacks, y)

    draw_footer(c, y)
    return y


# --- grocery list --------------------------------------------------------------

def grocery_categories(grocery_list: Dict[str, Any]) -> list:
    """(label, items) for every category with at least one printable item."""
    categories = []
    for category, items in grocery_list.items():
        if not isinstance(items, list) or not items:
            logger.debug("Skipping grocery category %r: no items", category)
            continue
        names = non_empty(items)
        if not names:
            logger.debug("Skipping grocery category %r: items sanitize to nothing", category)
            continue
        categories.append((sanitize_text(category).upper() or "OTHER", names))
    return categories


def draw_grocery_list(c: ThemedCanvas, categories: list) -> float:
    """Render the grocery list; the caller has already started its first page."""
    y = c.top_margin + 10
    header_width, header_height = 180, 45
    _badge(c, "GROCERY LIST", (c.width - header_width) / 2, y, header_width, header_height, 22, 13)
    y += header_height + 40
    c.line(MARGIN, c.width - MARGIN, y, PRIMARY, width=3)
    y += 35

    width = c.content_width
    item_width = width - PAD * 2 - 20
    for label, items in categories:
        y = c.check_page_break(40 + len(items) * GROCERY_ITEM_HEIGHT + 25, y)
        c.box(MARGIN, y, width, 40, fill=CARD, stroke=PRIMARY, line_width=2)
        c.box(MARGIN, y, 5, 40, fill=PRIMARY)
        c.text(c.clamp_text(label, 17, width - 40, 1, bold=True), MARGIN + 20, y + 12, 17, PRIMARY, bold=True)
        y += 40 + 18

        for item in items:
            y = c.check_page_break(LINE_CHECK_HEIGHT, y)
            page, start = c.page_count, y
            c.dot(MARGIN + PAD + 5, y + 6, 3, PRIMARY)
            end = c.flow_text(item, MARGIN + PAD + 15, y, 12, TEXT, item_width, line_gap=3)
            y = _advance(c, page, start, end, GROCERY_ITEM_HEIGHT) + 3
        y += 20

    draw_footer(c, y)
    return y


__all__ = [
    'draw_cover_page', 'draw_nutrition_overview_page', 'has_overview_page', 'draw_day_page',
    'draw_meal_card', 'draw_snacks', 'grocery_categories', 'draw_grocery_list', 'draw_footer',
]
