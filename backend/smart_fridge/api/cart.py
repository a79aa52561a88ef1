from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.schemas.cart import CartAdd, CartLine, CartUpdate, CartView, StoreGroup
from smart_fridge.schemas.catalog import ProductRead
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import NotFoundError
from smart_fridge.storage.repositories import add_to_cart, get_cart, remove_cart_item, update_cart_quantity

router = APIRouter(prefix="/cart", tags=["cart"])

DEFAULT_STORE_NAME = "General Store"


def _cart_view(session: Session, user_id: str) -> CartView:
    lines: list[CartLine] = []
    groups: dict[int | None, StoreGroup] = {}
    for item, product, store in get_cart(session, user_id):
        line = CartLine(
            id=item.id,
            quantity=item.quantity,
            product=ProductRead.model_validate(product),
            line_total=round(product.price * item.quantity, 2),
        )
        lines.append(line)
        group = groups.get(product.store_id)
        if group is None:
            group = StoreGroup(
                store_id=product.store_id,
                store_name=store.name if store else DEFAULT_STORE_NAME,
                items=[],
                subtotal=0.0,
            )
            groups[product.store_id] = group
        group.items.append(line)
        group.subtotal = round(group.subtotal + line.line_total, 2)
    return CartView(
        items=lines,
        total_items=sum(line.quantity for line in lines),
        subtotal=round(sum(line.line_total for line in lines), 2),
        stores=list(groups.values()),
    )


@router.get("", response_model=CartView)
def view_cart(user: UserContext = Depends(get_user), session: Session = Depends(get_db)) -> CartView:
    return _cart_view(session, user.user_id)


@router.post("", response_model=CartView)
def add_item(payload: CartAdd, user: UserContext = Depends(get_user), session: Session = Depends(get_db)) -> CartView:
    try:
        add_to_cart(session, user.user_id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_view(session, user.user_id)


@router.patch("/{cart_item_id}", response_model=CartView)
def update_item(
    cart_item_id: int,
    payload: CartUpdate,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
) -> CartView:
    try:
        update_cart_quantity(session, user.user_id, cart_item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_view(session, user.user_id)


@router.delete("/{cart_item_id}", response_model=CartView)
def remove_item(
    cart_item_id: int,
    user: UserContext = Depends(get_user),
    session: Session = Depends(get_db),
) -> CartView:
    try:
        remove_cart_item(session, user.user_id, cart_item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cart_view(session, user.user_id)
