"""Recipe pipeline: prompt building, model-text parsing, pantry matching and cart fulfillment."""

from smart_fridge.services.recipes.fulfillment import fulfill_missing_ingredients
from smart_fridge.services.recipes.generation import generate_recipes, saved_recipes_for_user
from smart_fridge.services.recipes.matcher import availability_match, match_recipe, rank_by_availability
from smart_fridge.services.recipes.parser import parse_recipe_response
from smart_fridge.services.llm.prompt_builder import build_recipe_prompt

__all__ = [
    "availability_match",
    "build_recipe_prompt",
    "fulfill_missing_ingredients",
    "generate_recipes",
    "match_recipe",
    "parse_recipe_response",
    "rank_by_availability",
    "saved_recipes_for_user",
]
