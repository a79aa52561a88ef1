from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_text_gateway, get_user
from smart_fridge.logging import get_logger
from smart_fridge.schemas.recipe import (
    FulfillmentResponse,
    FulfillRequest,
    GenerateRecipesResponse,
    SavedRecipeView,
)
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import EmptyInputError, GatewayError
from smart_fridge.services.llm.gateway import TextGateway
from smart_fridge.services.recipes import fulfill_missing_ingredients, generate_recipes, saved_recipes_for_user

router = APIRouter(prefix="/recipes", tags=["recipes"])
logger = get_logger(__name__)


@router.post("/generate", response_model=GenerateRecipesResponse)
def generate(
    cuisine: str | None = Query(default=None, description="Cuisine focus; empty string disables it"),
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
    gateway: TextGateway = Depends(get_text_gateway),
) -> GenerateRecipesResponse:
    try:
        recipes = generate_recipes(session, user, gateway, cuisine=cuisine)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GatewayError as e:
        logger.warning("recipes.generate.gateway_failed user=%s error=%s", user.user_id, e)
        raise HTTPException(status_code=502, detail=f"Failed to generate recipes: {e}")
    return GenerateRecipesResponse(recipes=recipes)


@router.get("/saved", response_model=list[SavedRecipeView])
def saved(user: UserContext = Depends(get_user), session: Session = Depends(get_db)):
    return saved_recipes_for_user(session, user)


@router.get("/cookable", response_model=list[SavedRecipeView])
def cookable(
    limit: int = Query(default=3, ge=1, le=50),
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    return saved_recipes_for_user(session, user, limit=limit)


@router.post("/fulfill", response_model=FulfillmentResponse)
def fulfill(
    payload: FulfillRequest,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
) -> FulfillmentResponse:
    result = fulfill_missing_ingredients(session, user, payload.missing_ingredients)
    return FulfillmentResponse(outcome=result.outcome, message=result.message(), result=result)
