"""Pantry helpers: category guessing and the dashboard's fridge statistics."""

from datetime import date
from typing import Iterable

from smart_fridge.config import settings
from smart_fridge.schemas.pantry import FridgeStats
from smart_fridge.storage.models import Ingredient

DEFAULT_CATEGORY = "Other"

# Checked in order; the first category with a keyword inside the name wins
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Dairy", ("milk", "yogurt", "cheese", "butter")),
    ("Bakery", ("bread", "bun", "cake", "pastry")),
    ("Fruits", ("apple", "banana", "orange", "berry", "fruit")),
    ("Vegetables", ("tomato", "potato", "onion", "carrot", "lettuce", "vegetable")),
    ("Meat", ("beef", "chicken", "pork", "steak", "fish", "meat")),
    ("Grains", ("rice", "pasta", "flour", "cereal", "grain")),
    ("Spices", ("sugar", "salt", "pepper", "spice", "herb")),
    ("Condiments", ("oil", "vinegar", "sauce", "ketchup", "mayonnaise", "dressing")),
    ("Beverages", ("juice", "soda", "water", "tea", "coffee", "drink")),
    ("Snacks", ("cookie", "chocolate", "candy", "sweet", "snack", "chips")),
]


def infer_category(name: str) -> str:
    lowered = name.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            return category
    return DEFAULT_CATEGORY


def fridge_stats(ingredients: Iterable[Ingredient], today: date) -> FridgeStats:
    items = list(ingredients)
    categories: dict[str, int] = {}
    expiring_soon = 0
    expired = 0
    for item in items:
        if item.category:
            categories[item.category] = categories.get(item.category, 0) + 1
        if item.expiry_date is None:
            continue
        days_left = (item.expiry_date - today).days
        if days_left < 0:
            expired += 1
        elif days_left <= settings.expiring_soon_days:
            expiring_soon += 1

    capacity = max(1, settings.fridge_capacity)
    fullness = min(100, round(len(items) / capacity * 100))
    return FridgeStats(
        total=len(items),
        expiring_soon=expiring_soon,
        expired=expired,
        categories=categories,
        fullness_percentage=fullness,
    )
