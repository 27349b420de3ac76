from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from garage.core.money import Money


class Performance(BaseModel):
    p: int = Field(0, ge=0, le=9)
    a: int = Field(0, ge=0, le=9)
    m: int = Field(0, ge=0, le=9)


class Part(BaseModel):
    id: str
    name: str
    category: str
    price: Money
    stock: int
    performance: Performance = Field(default_factory=Performance)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PartCreate(BaseModel):
    name: str
    category: str
    price: Decimal
    stock: int
    performance: Optional[dict] = None   # validated by the catalog store


class Restock(BaseModel):
    qty: int


class PartResponse(BaseModel):
    part: Part


class PartsResponse(BaseModel):
    parts: List[Part]
