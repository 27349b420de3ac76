from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class TeamCreate(BaseModel):
    name: str
    country: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None


class BudgetPatch(BaseModel):
    total: Optional[Decimal] = None
    spent: Optional[Decimal] = None


class SponsorCreate(BaseModel):
    name: str
    description: Optional[str] = None
    contribution: Optional[Decimal] = None


class ContributionCreate(BaseModel):
    sponsor_id: str
    amount: Decimal
    date: Optional[datetime] = None
    description: Optional[str] = None


class DriverCreate(BaseModel):
    name: str
    skill: Optional[int] = None


class DriverResultCreate(BaseModel):
    date: str
    race: str
    position: int
    points: float = 0.0


class PurchaseRequest(BaseModel):
    part_id: str
    qty: int = 1


class CarCreate(BaseModel):
    code: str
    name: Optional[str] = None


class InventoryItemCreate(BaseModel):
    part_name: str
    category: Optional[str] = None
    qty: int = 0
    unit_cost: Decimal = Decimal("0")


class InstallRequest(BaseModel):
    inventory_item_id: str


class UninstallRequest(BaseModel):
    installed_part_id: str


class AssignDriverRequest(BaseModel):
    driver_id: Optional[str] = None
