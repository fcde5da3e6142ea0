"""Nutrition aggregation for the overview page.

Provides compute_daily_calories(days) and compute_macro_split(overview).
"""
from typing import Dict, List, Optional

from mealdoc.domain.MealPlan import Day, Overview

DEFAULT_CALORIE_SCALE = 2500
MACROS = ('protein', 'carbs', 'fat')


def compute_daily_calories(days: List[Optional[Day]]) -> List[Dict[str, float]]:
    """Total calories per day (breakfast + lunch + dinner + snacks).

    Returns [{'day': 1, 'calories': 1850}, ...] in plan order; malformed
    day entries count as 0 so positions stay aligned.
    """
    result = []
    for position, day in enumerate(days, start=1):
        if day is None:
            result.append({'day': position, 'calories': 0})
            continue
        result.append({'day': day.day, 'calories': day.total_calories()})
    return result


def compute_macro_split(overview: Optional[Overview]) -> Dict[str, Dict[str, float]]:
    """Grams and share of the macro total for each macro present.

    {'protein': {'grams': 150, 'percent': 35.7}, ...}
    """
    if not overview or not overview.has_macros():
        return {}
    total = sum(overview.macros.get(m, 0) for m in MACROS)
    split = {}
    for macro in MACROS:
        grams = overview.macros.get(macro)
        if not grams:
            continue
        split[macro] = {
            'grams': grams,
            'percent': (grams / total) * 100 if total > 0 else 0,
        }
    return split


def calorie_scale(daily: List[Dict[str, float]], overview: Optional[Overview]) -> float:
    target = (overview.daily_calories if overview else None) or DEFAULT_CALORIE_SCALE
    return max([d['calories'] for d in daily] + [target])


__all__ = ["compute_daily_calories", "compute_macro_split", "calorie_scale"]
