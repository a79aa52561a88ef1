from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from smart_fridge.schemas.catalog import ProductRead


class CartAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class CartUpdate(BaseModel):
    quantity: int = Field(..., ge=1)


class CartLine(BaseModel):
    id: int
    quantity: int
    product: ProductRead
    line_total: float


class StoreGroup(BaseModel):
    store_id: Optional[int] = None
    store_name: str
    items: list[CartLine]
    subtotal: float


class CartView(BaseModel):
    items: list[CartLine]
    total_items: int
    subtotal: float
    stores: list[StoreGroup]


class OrderItemRead(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: float


class OrderRead(BaseModel):
    id: int
    status: str
    total_amount: float
    created_at: datetime
    items: list[OrderItemRead]


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    message: str
    related_type: Optional[str] = None
    related_id: Optional[int] = None
    is_read: bool
    created_at: datetime
