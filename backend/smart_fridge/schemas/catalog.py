from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None


class StoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: Optional[str] = None
    created_at: datetime


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    unit: str = "pcs"
    category: Optional[str] = None
    description: Optional[str] = None
    store_id: Optional[int] = None


class ProductUpdate(BaseModel):
    """Partial edit; omitted fields keep their value."""

    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    store_id: Optional[int] = None


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    unit: str
    price: float
    category: Optional[str] = None
    description: Optional[str] = None
    store_id: Optional[int] = None
