from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.config import settings
from smart_fridge.schemas.pantry import FridgeStats, IngredientCreate, IngredientRead
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import NotFoundError
from smart_fridge.services.pantry import fridge_stats, infer_category
from smart_fridge.storage.models import Ingredient
from smart_fridge.storage.repositories import (
    create_ingredient,
    delete_ingredient,
    get_expiring_ingredients,
    get_ingredients,
)

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("", response_model=list[IngredientRead])
def list_ingredients(user: UserContext = Depends(get_user), session: Session = Depends(get_db)):
    return get_ingredients(session, user.user_id)


@router.post("", response_model=IngredientRead, status_code=201)
def add_ingredient(
    payload: IngredientCreate,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    ingredient = Ingredient(
        user_id=user.user_id,
        name=payload.name.strip(),
        quantity=payload.quantity,
        unit=payload.unit,
        category=payload.category or infer_category(payload.name),
        expiry_date=payload.expiry_date,
        product_id=payload.product_id,
    )
    return create_ingredient(session, ingredient)


@router.delete("/{ingredient_id}", status_code=204)
def remove_ingredient(
    ingredient_id: int,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
) -> None:
    try:
        delete_ingredient(session, user.user_id, ingredient_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/expiring", response_model=list[IngredientRead])
def expiring_ingredients(
    days: int | None = Query(default=None, ge=0),
    limit: int = Query(default=5, ge=1, le=100),
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    window = settings.expiring_window_days if days is None else days
    return get_expiring_ingredients(session, user.user_id, date.today(), window, limit)


@router.get("/stats", response_model=FridgeStats)
def ingredient_stats(user: UserContext = Depends(get_user), session: Session = Depends(get_db)):
    return fridge_stats(get_ingredients(session, user.user_id), date.today())
