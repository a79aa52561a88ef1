import pytest

from smart_fridge.config import settings
from smart_fridge.schemas.llm import GatewayRequest
from smart_fridge.services.exceptions import EmptyInputError
from smart_fridge.services.llm.prompt_builder import (
    build_recipe_mode_prompt,
    build_recipe_prompt,
    format_ingredient_line,
    resolve_prompt,
)
from smart_fridge.storage.models import Ingredient


def _items():
    return [
        Ingredient(user_id="u", name="Chicken", quantity=500, unit="g"),
        Ingredient(user_id="u", name="Lime", quantity=2.5, unit="pcs"),
    ]


def test_format_ingredient_line():
    chicken, lime = _items()
    assert format_ingredient_line(chicken) == "Chicken (500 g)"
    assert format_ingredient_line(lime) == "Lime (2.5 pcs)"


def test_prompt_lists_every_ingredient_and_format():
    prompt = build_recipe_prompt(_items(), recipe_count=3, cuisine="Thai")
    assert "Chicken (500 g)\nLime (2.5 pcs)" in prompt
    assert "Suggest 3 recipes with a focus on Thai cuisine if possible" in prompt
    for label in ("RECIPE:", "Title:", "Match:", "Available Ingredients:", "Missing Ingredients:",
                  "Instructions:", "Cooking Time:", "Difficulty:"):
        assert label in prompt


def test_prompt_defaults_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "recipe_count", 4)
    monkeypatch.setattr(settings, "recipe_cuisine_focus", "Italian")
    prompt = build_recipe_prompt(_items())
    assert "Suggest 4 recipes with a focus on Italian cuisine" in prompt


def test_blank_cuisine_drops_clause():
    prompt = build_recipe_prompt(_items(), cuisine="")
    assert "cuisine" not in prompt
    assert "recipes, sorted by" in prompt


def test_empty_pantry_raises():
    with pytest.raises(EmptyInputError):
        build_recipe_prompt([])


def test_recipe_mode_single_and_multiple():
    single = build_recipe_mode_prompt(["rice"], ["basil"])
    assert single.startswith("Generate a recipe based on the following ingredients:")
    assert "Available Ingredients:\nrice" in single
    assert "Missing Ingredients (suggest alternatives if possible):\nbasil" in single
    assert "Alternative Ingredients (for missing ones):" in single

    multiple = build_recipe_mode_prompt(["rice"], [], multiple=True)
    assert "generate 3 different recipe options" in multiple
    assert "Missing Ingredients (suggest" not in multiple
    assert "RECIPE OPTION 3:" in multiple


def test_recipe_mode_requires_an_ingredient():
    with pytest.raises(EmptyInputError):
        build_recipe_mode_prompt([" "], [])


def test_gateway_request_aliases_and_prompt():
    request = GatewayRequest.model_validate(
        {"recipeMode": True, "availableIngredients": ["rice"], "generateMultipleRecipes": True}
    )
    assert request.recipe_mode is True
    assert "RECIPE OPTION 1:" in resolve_prompt(request)
    assert request.to_payload()["availableIngredients"] == ["rice"]

    with pytest.raises(EmptyInputError):
        resolve_prompt(GatewayRequest(prompt="   "))
    assert GatewayRequest(prompt="hi").to_payload() == {"prompt": "hi"}
