"""Text helpers shared by the PDF renderer and the text export.

Every user-influenced string goes through sanitize_text before it is
measured or drawn, whatever part of the document it ends up in.
"""
import re
from typing import Any, Dict, Iterable, Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
# Printable ASCII, line breaks/tabs and the BMP outside surrogates/non-characters
_DISALLOWED_CHARS = re.compile(r"[^\x20-\x7E\n\r\t\u00A0-\uD7FF\uE000-\uFFFD]")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")

NUTRITION_SEPARATOR = " • "


def sanitize_text(value: Any) -> str:
    """Return a layout-safe version of value.

    Falsy input gives ''. Control characters and code points outside the
    allowed ranges are dropped, spaces/tabs collapse to one space, line
    endings become LF, each line is trimmed and runs of blank lines are
    collapsed to a single blank line.
    """
    if not value:
        return ""
    text = value if isinstance(value, str) else str(value)
    text = _CONTROL_CHARS.sub("", text)
    text = _DISALLOWED_CHARS.sub("", text)
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _EXCESS_BLANK_LINES.sub("\n\n", text)
    return text.strip()


def format_number(value: Any) -> str:
    """300.0 -> '300', 12.345 -> '12.3'; other values via str()."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.1f}".rstrip("0").rstrip(".")
    return str(value)


def format_nutrition_info(nutrition: Optional[Dict[str, Any]]) -> str:
    """Join the present nutrition fields: '300 kcal • P: 10g • C: 50g • F: 5g'."""
    if not isinstance(nutrition, dict):
        return ""
    parts = []
    if nutrition.get("calories"):
        parts.append(f"{format_number(nutrition['calories'])} kcal")
    if nutrition.get("protein"):
        parts.append(f"P: {format_number(nutrition['protein'])}g")
    if nutrition.get("carbs"):
        parts.append(f"C: {format_number(nutrition['carbs'])}g")
    if nutrition.get("fat"):
        parts.append(f"F: {format_number(nutrition['fat'])}g")
    return NUTRITION_SEPARATOR.join(parts)


def format_grocery_list(grocery_list: Any) -> str:
    """'category: a, b' per category; names are sanitized and empty items dropped."""
    if not isinstance(grocery_list, dict):
        return "No items"
    lines = []
    for category, items in grocery_list.items():
        if not isinstance(items, list):
            continue
        names = non_empty(items)
        if names:
            lines.append(f"{sanitize_text(category) or 'other'}: {', '.join(names)}")
    return "\n".join(lines)


def build_instructions_text(instructions: Any, max_length: int) -> str:
    """Flatten instructions (a string or a list of steps) into one block.

    Steps are numbered '1. ', '2. ', ... and separated by a blank line;
    steps that sanitize to nothing are left out. Text longer than
    max_length is cut and suffixed with '...'.
    """
    if isinstance(instructions, (list, tuple)):
        steps = [s for s in (sanitize_text(step) for step in instructions) if s]
        text = sanitize_text("\n\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1)))
    else:
        text = sanitize_text(instructions)
    if len(text) > max_length:
        text = text[:max_length].rstrip() + "..."
    return text


def non_empty(values: Iterable[Any]) -> list:
    """Sanitize each value and keep the ones that are not empty."""
    return [s for s in (sanitize_text(v) for v in values) if s]


__all__ = [
    "sanitize_text", "format_number", "format_nutrition_info",
    "format_grocery_list", "build_instructions_text", "non_empty",
]
