from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.schemas.cart import OrderItemRead, OrderRead
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import EmptyCartError
from smart_fridge.storage.repositories import list_orders, place_order

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_read(order, items) -> OrderRead:
    return OrderRead(
        id=order.id,
        status=order.status,
        total_amount=order.total_amount,
        created_at=order.created_at,
        items=[
            OrderItemRead(product_id=p.id, product_name=p.name, quantity=oi.quantity, price=oi.price)
            for oi, p in items
        ],
    )


@router.post("", response_model=OrderRead, status_code=201)
def create_order(user: UserContext = Depends(get_user), session: Session = Depends(get_db)) -> OrderRead:
    try:
        order = place_order(session, user.user_id)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    for placed, items in list_orders(session, user.user_id):
        if placed.id == order.id:
            return _order_read(placed, items)
    raise HTTPException(status_code=500, detail="Order was placed but could not be read back")


@router.get("", response_model=list[OrderRead])
def my_orders(user: UserContext = Depends(get_user), session: Session = Depends(get_db)) -> list[OrderRead]:
    return [_order_read(order, items) for order, items in list_orders(session, user.user_id)]
