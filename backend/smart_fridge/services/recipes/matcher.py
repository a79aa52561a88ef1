from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from smart_fridge.schemas.recipe import AvailabilityMatch, IngredientMention, ParsedRecipe
from smart_fridge.storage.models import Ingredient

T = TypeVar("T")


def inventory_names(inventory: Iterable[Ingredient]) -> set[str]:
    return {item.name.strip().lower() for item in inventory if item.name}


def match_percentage(available_count: int, total_count: int) -> int:
    """Share of available ingredients as a whole percent; half rounds up, empty recipes score 0."""
    if total_count <= 0:
        return 0
    ratio = Decimal(available_count) * 100 / Decimal(total_count)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def availability_match(ingredient_names: Iterable[str], inventory: Iterable[Ingredient]) -> AvailabilityMatch:
    """Exact, case-insensitive name check of each ingredient against the pantry."""
    have = inventory_names(inventory)
    available: list[str] = []
    missing: list[str] = []
    for name in ingredient_names:
        if name.strip().lower() in have:
            available.append(name)
        else:
            missing.append(name)
    total = len(available) + len(missing)
    return AvailabilityMatch(
        available=available,
        missing=missing,
        available_count=len(available),
        total_count=total,
        match_percentage=match_percentage(len(available), total),
    )


def match_recipe(recipe: ParsedRecipe, inventory: Iterable[Ingredient]) -> AvailabilityMatch:
    """Independent cross-check of a parsed recipe; ignores the model's own available/missing split."""
    return availability_match((m.name for m in recipe.all_ingredients()), inventory)


def reclassify(recipe: ParsedRecipe, inventory: Iterable[Ingredient]) -> ParsedRecipe:
    """Copy of `recipe` with available/missing and match_score recomputed from the pantry."""
    have = inventory_names(inventory)
    available: list[IngredientMention] = []
    missing: list[IngredientMention] = []
    for mention in recipe.all_ingredients():
        is_available = mention.name.strip().lower() in have
        copy = mention.model_copy(update={"available": is_available})
        (available if is_available else missing).append(copy)
    return recipe.model_copy(
        update={
            "available_ingredients": available,
            "missing_ingredients": missing,
            "match_score": match_percentage(len(available), len(available) + len(missing)),
        }
    )


def rank_by_availability(
    items: Sequence[T],
    inventory: Iterable[Ingredient],
    ingredient_names: Callable[[T], Iterable[str]],
    limit: Optional[int] = None,
) -> list[tuple[T, AvailabilityMatch]]:
    """Pair each item with its match and order by match_percentage, highest first.

    Ties keep input order.
    """
    pantry = list(inventory)
    scored = [(item, availability_match(ingredient_names(item), pantry)) for item in items]
    scored.sort(key=lambda pair: pair[1].match_percentage, reverse=True)
    if limit is not None:
        return scored[:limit]
    return scored
