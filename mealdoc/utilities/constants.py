from typing import Final

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4

PLAN_TYPES: Final[tuple[str, ...]] = ("daily", "weekly", "monthly")
DEFAULT_PLAN_TYPE: Final[str] = "daily"

# Dark theme palette
THEME_COLORS: Final[dict[str, colors.Color]] = {
    "background": colors.HexColor("#000000"),
    "primary": colors.HexColor("#7CB342"),
    "text_primary": colors.HexColor("#FFFFFF"),
    "text_secondary": colors.HexColor("#B3B3B3"),
    "card_background": colors.HexColor("#1A1A1A"),
    "border": colors.HexColor("#7CB342"),
    "accent": colors.HexColor("#FF6B4A"),
    "divider": colors.HexColor("#7CB342"),
}
MACRO_COLORS: Final[dict[str, colors.Color]] = {
    "protein": colors.HexColor("#84CC16"),
    "carbs": colors.HexColor("#3B82F6"),
    "fat": colors.HexColor("#F59E0B"),
}

PAGE_SIZE: Final[tuple[float, float]] = A4
PAGE_LAYOUT: Final[dict[str, float]] = {
    "margin": 50,
    "top_margin": 60,
    "bottom_margin": 60,
    "card_padding": 15,
    "section_spacing": 25,
    "meal_spacing": 20,
    "min_content_height": 100,
}
PAGE_BREAK_BUFFER: Final[float] = 60
FOOTER_CLEARANCE: Final[float] = 25

# Height estimates used by the page-break checks
DAY_DIVIDER_HEIGHT: Final[float] = 50
SNACKS_HEADER_HEIGHT: Final[float] = 100
MEAL_CARD_HEAD_HEIGHT: Final[float] = 200
NUTRITION_BOX_HEIGHT: Final[float] = 45
INGREDIENT_LINE_HEIGHT: Final[float] = 18
LINE_CHECK_HEIGHT: Final[float] = 25
GROCERY_ITEM_HEIGHT: Final[float] = 20

MAX_INSTRUCTIONS_LENGTH: Final[int] = 2000
MAX_INSTRUCTIONS_BLOCK_HEIGHT: Final[float] = 400
LINE_HEIGHT_FACTOR: Final[float] = 1.2

# Built-in fallback faces; a registered TTF family replaces them when available
FALLBACK_FONT: Final[str] = "Helvetica"
FALLBACK_FONT_BOLD: Final[str] = "Helvetica-Bold"
TTF_FONT_NAME: Final[str] = "MealDoc"
TTF_FONT_BOLD_NAME: Final[str] = "MealDoc-Bold"
TTF_FONT_FILES: Final[dict[str, str]] = {
    TTF_FONT_NAME: "Vera.ttf",
    TTF_FONT_BOLD_NAME: "VeraBd.ttf",
}
