from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GatewayRequest(BaseModel):
    """Either a raw prompt, or recipeMode with ingredient lists for a server-built prompt."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    recipe_mode: bool = Field(False, alias="recipeMode")
    available_ingredients: list[str] = Field(default_factory=list, alias="availableIngredients")
    missing_ingredients: list[str] = Field(default_factory=list, alias="missingIngredients")
    generate_multiple_recipes: bool = Field(False, alias="generateMultipleRecipes")

    def to_payload(self) -> dict:
        if self.recipe_mode:
            return self.model_dump(by_alias=True, exclude={"prompt"})
        return {"prompt": self.prompt}


class GatewayResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    was_recipe_mode: bool = Field(False, alias="wasRecipeMode")
    was_multiple_recipes: bool = Field(False, alias="wasMultipleRecipes")
