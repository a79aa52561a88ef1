from sqlmodel import Session

from smart_fridge.logging import get_logger
from smart_fridge.schemas.llm import GatewayRequest
from smart_fridge.schemas.recipe import (
    GeneratedRecipe,
    IngredientMention,
    ParsedRecipe,
    SavedRecipeView,
)
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.llm.gateway import TextGateway
from smart_fridge.services.recipes.matcher import match_recipe, rank_by_availability, reclassify
from smart_fridge.services.recipes.parser import parse_recipe_response
from smart_fridge.services.llm.prompt_builder import build_recipe_prompt
from smart_fridge.storage.models import Ingredient, SavedRecipe, SavedRecipeIngredient
from smart_fridge.storage.repositories import get_ingredients, get_saved_recipes
from smart_fridge.utils.timing import time_span

logger = get_logger(__name__)


def load_inventory(session: Session, user: UserContext) -> list[Ingredient]:
    return get_ingredients(session, user.user_id)


def generate_recipes(
    session: Session,
    user: UserContext,
    gateway: TextGateway,
    cuisine: str | None = None,
) -> list[GeneratedRecipe]:
    """Pantry -> prompt -> model text -> parsed recipes, each with a pantry cross-check.

    Raises EmptyInputError for an empty pantry and GatewayError when generation fails.
    The availability snapshot goes stale as soon as the pantry changes.
    """
    with time_span("recipes.generate", user=user.user_id):
        inventory = load_inventory(session, user)
        prompt = build_recipe_prompt(inventory, cuisine=cuisine)
        logger.info(
            "recipes.generate.start user=%s ingredients=%s transport=%s",
            user.user_id,
            len(inventory),
            gateway.name,
        )
        text = gateway.generate(GatewayRequest(prompt=prompt))
        recipes = parse_recipe_response(text)
    logger.info("recipes.generate.end user=%s recipes=%s", user.user_id, len(recipes))
    return [GeneratedRecipe(recipe=r, availability=match_recipe(r, inventory)) for r in recipes]


def _saved_to_parsed(recipe: SavedRecipe, items: list[SavedRecipeIngredient]) -> ParsedRecipe:
    mentions = [
        IngredientMention(name=item.ingredient_name, quantity=f"{item.quantity:g}", unit=item.unit)
        for item in items
    ]
    return ParsedRecipe(
        name=recipe.name,
        missing_ingredients=mentions,
        cooking_time=recipe.preparation_time,
        difficulty=recipe.difficulty,
    )


def saved_recipes_for_user(session: Session, user: UserContext, limit: int | None = None) -> list[SavedRecipeView]:
    """Stored recipes scored against the user's pantry, best match first (ties keep catalog order)."""
    inventory = load_inventory(session, user)
    ranked = rank_by_availability(
        get_saved_recipes(session),
        inventory,
        lambda pair: [item.ingredient_name for item in pair[1]],
        limit=limit,
    )
    views = []
    for (recipe, items), availability in ranked:
        views.append(
            SavedRecipeView(
                id=recipe.id,
                name=recipe.name,
                description=recipe.description,
                category=recipe.category,
                recipe=reclassify(_saved_to_parsed(recipe, items), inventory),
                availability=availability,
            )
        )
    return views
