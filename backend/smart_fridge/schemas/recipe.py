from typing import Literal, Optional

from pydantic import BaseModel, Field


class IngredientMention(BaseModel):
    """One ingredient line pulled out of model text; quantity/unit are best-effort strings."""

    name: str
    quantity: str = ""
    unit: str = ""
    available: bool = False


class ParsedRecipe(BaseModel):
    name: str
    match_score: int = Field(default=0, ge=0, le=100)
    available_ingredients: list[IngredientMention] = Field(default_factory=list)
    missing_ingredients: list[IngredientMention] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    cooking_time: Optional[str] = None
    difficulty: Optional[str] = None

    def all_ingredients(self) -> list[IngredientMention]:
        return [*self.available_ingredients, *self.missing_ingredients]


class AvailabilityMatch(BaseModel):
    available: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    available_count: int = 0
    total_count: int = 0
    match_percentage: int = 0


class GeneratedRecipe(BaseModel):
    recipe: ParsedRecipe
    availability: AvailabilityMatch


class GenerateRecipesResponse(BaseModel):
    recipes: list[GeneratedRecipe]


class SavedRecipeView(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    recipe: ParsedRecipe
    availability: AvailabilityMatch


class FulfillRequest(BaseModel):
    missing_ingredients: list[IngredientMention]


class FulfillmentFailure(BaseModel):
    name: str
    error: str


FulfillmentOutcome = Literal["empty", "added", "partial", "none_added"]


class FulfillmentResult(BaseModel):
    attempted: int = 0
    added: int = 0
    product_ids: list[int] = Field(default_factory=list)
    created_product_ids: list[int] = Field(default_factory=list)
    failures: list[FulfillmentFailure] = Field(default_factory=list)

    @property
    def outcome(self) -> FulfillmentOutcome:
        if self.attempted == 0:
            return "empty"
        if self.added == 0:
            return "none_added"
        if self.failures:
            return "partial"
        return "added"

    def message(self) -> str:
        if self.outcome == "none_added":
            return "No ingredients were added to cart"
        return f"Added {self.added} of {self.attempted} ingredients to cart"


class FulfillmentResponse(BaseModel):
    outcome: FulfillmentOutcome
    message: str
    result: FulfillmentResult
