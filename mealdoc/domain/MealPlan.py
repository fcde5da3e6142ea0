"""Meal plan content entities: overview, days, meals and grocery list.

The content comes from an AI generation step whose output shape is not
guaranteed, so from_dict never raises: malformed parts become absent.
"""
import math
from typing import Any, Dict, List, Optional, Union

MEAL_SLOTS = ('breakfast', 'lunch', 'dinner')
NUTRITION_FIELDS = ('calories', 'protein', 'carbs', 'fat')


def _as_number(value: Any) -> Optional[Union[int, float]]:
    """Positive/negative numbers and numeric strings; zero and junk are absent."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not value:
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        # int beyond float range
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


class Meal:
    def __init__(self, name: Any = None, nutrition: Optional[Dict[str, Any]] = None,
                 ingredients: Optional[List[Any]] = None, instructions: Any = None):
        self.name = name
        self.nutrition = dict(nutrition) if nutrition else {}
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions

    def __str__(self) -> str:
        return f"{self.name} - {len(self.ingredients)} ingredients - Nutrition: {self.nutrition}"

    __repr__ = __str__

    @property
    def calories(self):
        return self.nutrition.get('calories') or 0

    @staticmethod
    def from_dict(data) -> Optional['Meal']:
        '''Creates a Meal from a dictionary; returns None when data is not a dict.'''
        if not isinstance(data, dict):
            return None
        raw_nutrition = data.get('nutrition')
        nutrition = {}
        if isinstance(raw_nutrition, dict):
            for field in NUTRITION_FIELDS:
                number = _as_number(raw_nutrition.get(field))
                if number is not None:
                    nutrition[field] = number
        ingredients = data.get('ingredients')
        if not isinstance(ingredients, list):
            ingredients = []
        instructions = data.get('instructions')
        if not isinstance(instructions, (str, list)):
            instructions = None
        return Meal(name=data.get('name'), nutrition=nutrition,
                    ingredients=ingredients, instructions=instructions)

    def to_dict(self):
        return {
            "name": self.name,
            "nutrition": dict(self.nutrition),
            "ingredients": self.ingredients[:],
            "instructions": self.instructions,
        }


class Day:
    def __init__(self, day: int, breakfast: Optional[Meal] = None, lunch: Optional[Meal] = None,
                 dinner: Optional[Meal] = None, snacks: Optional[List[Meal]] = None):
        self.day = day
        self.breakfast = breakfast
        self.lunch = lunch
        self.dinner = dinner
        self.snacks = snacks[:] if snacks else []

    def __str__(self) -> str:
        slots = [s for s in MEAL_SLOTS if getattr(self, s)]
        return f"Day {self.day} - Meals: {', '.join(slots) or '-'} - Snacks: {len(self.snacks)}"

    __repr__ = __str__

    def meals(self) -> Dict[str, Meal]:
        """Present main meals in display order."""
        return {slot: getattr(self, slot) for slot in MEAL_SLOTS if getattr(self, slot)}

    def total_calories(self):
        total = sum(meal.calories for meal in self.meals().values())
        return total + sum(snack.calories for snack in self.snacks)

    @staticmethod
    def from_dict(data, position: int) -> Optional['Day']:
        '''Creates a Day; position is the 1-based index used when "day" is missing.'''
        if not isinstance(data, dict):
            return None
        number = _as_number(data.get('day'))
        if not isinstance(number, int) or number < 1:
            number = position
        meals = data.get('meals')
        if not isinstance(meals, dict):
            meals = {}
        snacks = meals.get('snacks')
        if isinstance(snacks, list):
            snacks = [m for m in (Meal.from_dict(s) for s in snacks) if m is not None]
        else:
            snacks = []
        return Day(
            day=number,
            breakfast=Meal.from_dict(meals.get('breakfast')),
            lunch=Meal.from_dict(meals.get('lunch')),
            dinner=Meal.from_dict(meals.get('dinner')),
            snacks=snacks,
        )

    def to_dict(self):
        meals = {slot: meal.to_dict() for slot, meal in self.meals().items()}
        if self.snacks:
            meals['snacks'] = [s.to_dict() for s in self.snacks]
        return {"day": self.day, "meals": meals}


class Overview:
    def __init__(self, daily_calories=None, protein=None, carbs=None, fat=None, duration=None):
        self.daily_calories = daily_calories
        self.macros = {k: v for k, v in (('protein', protein), ('carbs', carbs), ('fat', fat)) if v}
        self.duration = duration

    def __str__(self) -> str:
        return f"Overview - {self.daily_calories} kcal/day - Macros: {self.macros} - Duration: {self.duration}"

    __repr__ = __str__

    def has_macros(self) -> bool:
        return bool(self.macros)

    @staticmethod
    def from_dict(data) -> Optional['Overview']:
        if not isinstance(data, dict):
            return None
        macros = data.get('macros')
        if not isinstance(macros, dict):
            macros = {}
        duration = _as_number(data.get('duration'))
        return Overview(
            daily_calories=_as_number(_pick(data, 'dailyCalories', 'daily_calories')),
            protein=_as_number(macros.get('protein')),
            carbs=_as_number(_pick(macros, 'carbs', 'carbohydrates')),
            fat=_as_number(_pick(macros, 'fat', 'fats')),
            duration=duration if isinstance(duration, int) else None,
        )

    def to_dict(self):
        return {
            "dailyCalories": self.daily_calories,
            "macros": dict(self.macros),
            "duration": self.duration,
        }


class MealPlanContent:
    def __init__(self, overview: Optional[Overview] = None, days: Optional[List[Optional[Day]]] = None,
                 grocery_list: Optional[Dict[str, Any]] = None):
        self.overview = overview
        # Non-object entries stay as None so positions are preserved
        self.days = days[:] if days else []
        self.grocery_list = dict(grocery_list) if grocery_list else {}

    def __str__(self) -> str:
        return (f"MealPlanContent - {len(self.valid_days())} days - "
                f"Grocery categories: {len(self.grocery_list)}")

    __repr__ = __str__

    def valid_days(self) -> List[Day]:
        return [d for d in self.days if d is not None]

    @staticmethod
    def from_dict(data) -> 'MealPlanContent':
        '''Creates content from a (possibly malformed) dictionary.'''
        d = data if isinstance(data, dict) else {}
        raw_days = d.get('days')
        days = []
        if isinstance(raw_days, list):
            days = [Day.from_dict(entry, index) for index, entry in enumerate(raw_days, start=1)]
        grocery_list = _pick(d, 'groceryList', 'grocery_list')
        if not isinstance(grocery_list, dict):
            grocery_list = {}
        return MealPlanContent(
            overview=Overview.from_dict(d.get('overview')),
            days=days,
            grocery_list=grocery_list,
        )

    def to_dict(self):
        return {
            "overview": self.overview.to_dict() if self.overview else None,
            "days": [d.to_dict() for d in self.valid_days()],
            "groceryList": dict(self.grocery_list),
        }
