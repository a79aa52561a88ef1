from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(1.0, ge=0)
    unit: str = "pcs"
    category: Optional[str] = None
    expiry_date: Optional[date] = None
    product_id: Optional[int] = None


class IngredientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: float
    unit: str
    category: Optional[str] = None
    expiry_date: Optional[date] = None
    product_id: Optional[int] = None
    created_at: datetime


class FridgeStats(BaseModel):
    total: int
    expiring_soon: int
    expired: int
    categories: dict[str, int]
    fullness_percentage: int
