from typing import Iterable, Sequence

from smart_fridge.config import settings
from smart_fridge.schemas.llm import GatewayRequest
from smart_fridge.services.exceptions import EmptyInputError
from smart_fridge.services.llm.prompts import (
    CUISINE_CLAUSE,
    RECIPE_MODE_MULTIPLE_FORMAT,
    RECIPE_MODE_MULTIPLE_HEADER,
    RECIPE_MODE_SINGLE_FORMAT,
    RECIPE_MODE_SINGLE_HEADER,
    RECIPE_PROMPT_TEMPLATE,
)
from smart_fridge.storage.models import Ingredient


def format_ingredient_line(ingredient: Ingredient) -> str:
    """'Basil (2 bunch)'; whole quantities drop the trailing .0."""
    return f"{ingredient.name} ({ingredient.quantity:g} {ingredient.unit})"


def build_recipe_prompt(
    ingredients: Sequence[Ingredient],
    recipe_count: int | None = None,
    cuisine: str | None = None,
) -> str:
    if not ingredients:
        raise EmptyInputError("No ingredients available to generate recipes")
    count = recipe_count or settings.recipe_count
    focus = settings.recipe_cuisine_focus if cuisine is None else cuisine
    cuisine_clause = CUISINE_CLAUSE.format(cuisine=focus.strip()) if focus and focus.strip() else ""
    return RECIPE_PROMPT_TEMPLATE.format(
        ingredient_lines="\n".join(format_ingredient_line(i) for i in ingredients),
        recipe_count=count,
        cuisine_clause=cuisine_clause,
    )


def build_recipe_mode_prompt(
    available: Iterable[str], missing: Iterable[str], multiple: bool = False
) -> str:
    available = [a.strip() for a in available if a and a.strip()]
    missing = [m.strip() for m in missing if m and m.strip()]
    if not available and not missing:
        raise EmptyInputError("At least one ingredient (available or missing) is required")

    parts = [RECIPE_MODE_MULTIPLE_HEADER if multiple else RECIPE_MODE_SINGLE_HEADER]
    if available:
        parts.append("Available Ingredients:\n" + "\n".join(available) + "\n\n")
    if missing:
        parts.append(
            "Missing Ingredients (suggest alternatives if possible):\n" + "\n".join(missing) + "\n\n"
        )
    parts.append(RECIPE_MODE_MULTIPLE_FORMAT if multiple else RECIPE_MODE_SINGLE_FORMAT)
    return "".join(parts)


def resolve_prompt(request: GatewayRequest) -> str:
    """Final prompt for a gateway request; recipe-mode prompts are built here, never by the caller."""
    if request.recipe_mode:
        return build_recipe_mode_prompt(
            request.available_ingredients,
            request.missing_ingredients,
            multiple=request.generate_multiple_recipes,
        )
    if not request.prompt or not request.prompt.strip():
        raise EmptyInputError("Prompt is required and must be a non-empty string")
    return request.prompt
