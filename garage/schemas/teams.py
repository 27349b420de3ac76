from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from garage.core.money import Money, ZERO
from garage.schemas.parts import Performance


class Budget(BaseModel):
    total: Money = ZERO
    spent: Money = ZERO


class Sponsor(BaseModel):
    id: str
    name: str
    description: str = ""
    created_at: Optional[datetime] = None


class Contribution(BaseModel):
    id: str
    sponsor_id: str
    sponsor_name: str = ""
    amount: Money
    date: datetime
    description: str = ""


class InventoryItem(BaseModel):
    id: str
    source_part_id: Optional[str] = None   # None for manually added items
    part_name: str
    category: str = ""
    performance: Performance = Field(default_factory=Performance)
    quantity: int = 0
    unit_cost: Money = ZERO
    acquired_at: Optional[datetime] = None


class RaceResult(BaseModel):
    date: str
    race: str
    position: int
    points: float = 0.0


class Driver(BaseModel):
    id: str
    name: str
    skill: int = 50
    results: List[RaceResult] = Field(default_factory=list)


class InstalledPart(BaseModel):
    id: str
    inventory_item_id: str
    part_name: str
    category: str
    category_key: str
    performance: Performance = Field(default_factory=Performance)
    installed_at: Optional[datetime] = None


class Car(BaseModel):
    id: str
    code: str
    name: str = ""
    driver_id: Optional[str] = None
    is_finalized: bool = False
    installed_parts: List[InstalledPart] = Field(default_factory=list)
    state: str = "EMPTY"   # derived, refreshed on every snapshot


class Team(BaseModel):
    """Root aggregate; every child collection is mutated through it."""
    id: str
    name: str
    country: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    budget: Budget = Field(default_factory=Budget)
    sponsors: List[Sponsor] = Field(default_factory=list)
    contributions: List[Contribution] = Field(default_factory=list)
    inventory: List[InventoryItem] = Field(default_factory=list)
    cars: List[Car] = Field(default_factory=list)
    drivers: List[Driver] = Field(default_factory=list)


class TeamResponse(BaseModel):
    team: Team


class TeamsResponse(BaseModel):
    teams: List[Team]
