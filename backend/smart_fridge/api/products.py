from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.schemas.catalog import ProductCreate, ProductRead, ProductUpdate
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import ConflictError, NotFoundError
from smart_fridge.services.pantry import infer_category
from smart_fridge.storage.models import Product
from smart_fridge.storage.repositories import (
    create_product,
    get_product,
    list_product_categories,
    list_products,
    update_product,
)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
def browse_products(
    store_id: int | None = Query(default=None),
    category: str | None = Query(default=None),
    q: str | None = Query(default=None, description="Matched against name and description"),
    session: Session = Depends(get_db),
    user: UserContext = Depends(get_user),
):
    return list_products(session, store_id=store_id, category=category, query=q)


@router.get("/categories", response_model=list[str])
def product_categories(session: Session = Depends(get_db), user: UserContext = Depends(get_user)):
    return list_product_categories(session)


@router.get("/{product_id}", response_model=ProductRead)
def product_detail(product_id: int, session: Session = Depends(get_db), user: UserContext = Depends(get_user)):
    try:
        return get_product(session, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=ProductRead, status_code=201)
def add_product(
    payload: ProductCreate,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    product = Product(
        name=payload.name,
        normalized_name="",
        unit=payload.unit,
        price=payload.price,
        category=payload.category or infer_category(payload.name),
        description=payload.description,
        store_id=payload.store_id,
        user_id=user.user_id,
    )
    try:
        return create_product(session, product)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{product_id}", response_model=ProductRead)
def edit_product(
    product_id: int,
    payload: ProductUpdate,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
):
    try:
        return update_product(session, user.user_id, product_id, payload.model_dump(exclude_none=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
