from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Ingredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    quantity: float = Field(default=0.0, ge=0)
    unit: str = "pcs"
    category: Optional[str] = None
    expiry_date: Optional[date] = None
    product_id: Optional[int] = Field(default=None, foreign_key="product.id")
    created_at: datetime = Field(default_factory=utc_now)


class Store(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    address: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    # name.strip().lower(); unique catalog-wide, so one name maps to one product
    # whichever store stocks it and recipe-driven creation is an upsert
    normalized_name: str = Field(index=True, unique=True)
    unit: str = "pcs"
    price: float = Field(default=0.0, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    store_id: Optional[int] = Field(default=None, foreign_key="store.id")
    user_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class CartItem(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    product_id: int = Field(foreign_key="product.id")
    quantity: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=utc_now)


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    status: str = "pending"  # pending | completed | cancelled
    total_amount: float = 0.0
    created_at: datetime = Field(default_factory=utc_now)


class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id")
    product_id: int = Field(foreign_key="product.id")
    quantity: int
    price: float
    created_at: datetime = Field(default_factory=utc_now)


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    message: str
    related_type: Optional[str] = None  # e.g. "order"
    related_id: Optional[int] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class SavedRecipe(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    preparation_time: Optional[str] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class SavedRecipeIngredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    recipe_id: int = Field(foreign_key="savedrecipe.id")
    ingredient_name: str
    quantity: float = 0.0
    unit: str = ""


class LLMCallLog(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    prompt_name: str
    prompt_version: str
    model: str
    input_payload: str
    output_payload: str
    latency_ms: int
    created_at: datetime = Field(default_factory=utc_now)
