from sqlalchemy import (
    CheckConstraint, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, Numeric, String,
)
from sqlalchemy.orm import relationship
from garage.db.base import Base


class Part(Base):
    __tablename__ = "parts"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_parts_stock_non_negative"),)
    id = Column(String(36), primary_key=True)
    name = Column(String(160), nullable=False, unique=True)
    category = Column(String(120), nullable=False)
    price = Column(Numeric(38, 9), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    p = Column(Integer, nullable=False, default=0)
    a = Column(Integer, nullable=False, default=0)
    m = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class Team(Base):
    __tablename__ = "teams"
    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    country = Column(String(120), nullable=True)
    budget_total = Column(Numeric(38, 9), nullable=False, default=0)
    budget_spent = Column(Numeric(38, 9), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # children are owned by the team and follow its lifecycle
    sponsors = relationship("Sponsor", cascade="all, delete-orphan", order_by="Sponsor.seq")
    contributions = relationship("Contribution", cascade="all, delete-orphan", order_by="Contribution.seq")
    inventory = relationship("InventoryItem", cascade="all, delete-orphan", order_by="InventoryItem.seq")
    cars = relationship("Car", cascade="all, delete-orphan", order_by="Car.seq")
    drivers = relationship("Driver", cascade="all, delete-orphan", order_by="Driver.seq")


class Sponsor(Base):
    __tablename__ = "team_sponsors"
    id = Column(String(36), primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    name = Column(String(120), nullable=False)
    description = Column(String(300), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)


class Contribution(Base):
    __tablename__ = "contributions"
    id = Column(String(36), primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    sponsor_id = Column(String(36), nullable=False, index=True)
    sponsor_name = Column(String(120), nullable=True)
    amount = Column(Numeric(38, 9), nullable=False, default=0)
    date = Column(DateTime(timezone=True), nullable=False)
    description = Column(String(300), nullable=True)


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),)
    id = Column(String(36), primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    source_part_id = Column(String(36), nullable=True, index=True)
    part_name = Column(String(160), nullable=False)
    category = Column(String(120), nullable=True)
    p = Column(Integer, nullable=False, default=0)
    a = Column(Integer, nullable=False, default=0)
    m = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    unit_cost = Column(Numeric(38, 9), nullable=False, default=0)
    acquired_at = Column(DateTime(timezone=True), nullable=True)


class Driver(Base):
    __tablename__ = "drivers"
    id = Column(String(36), primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    name = Column(String(120), nullable=False)
    skill = Column(Integer, nullable=False, default=50)
    results = relationship("RaceResult", cascade="all, delete-orphan", order_by="RaceResult.seq")


class RaceResult(Base):
    __tablename__ = "race_results"
    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_id = Column(String(36), ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    date = Column(String(40), nullable=False)
    race = Column(String(160), nullable=False)
    position = Column(Integer, nullable=False)
    points = Column(Float, nullable=False, default=0)


class Car(Base):
    __tablename__ = "cars"
    id = Column(String(36), primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    code = Column(String(40), nullable=False)
    name = Column(String(120), nullable=True)
    driver_id = Column(String(36), nullable=True)     # same-team driver, not enforced by FK
    is_finalized = Column(Boolean, nullable=False, default=False)
    installed_parts = relationship("InstalledPart", cascade="all, delete-orphan", order_by="InstalledPart.seq")


class InstalledPart(Base):
    __tablename__ = "installed_parts"
    id = Column(String(36), primary_key=True)
    car_id = Column(String(36), ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    seq = Column(Integer, nullable=False, default=0)
    # back-reference only: inventory stays the source of truth for remaining units
    inventory_item_id = Column(String(36), nullable=False, index=True)
    part_name = Column(String(160), nullable=False)
    category = Column(String(120), nullable=False)
    category_key = Column(String(120), nullable=False)
    p = Column(Integer, nullable=False, default=0)
    a = Column(Integer, nullable=False, default=0)
    m = Column(Integer, nullable=False, default=0)
    installed_at = Column(DateTime(timezone=True), nullable=True)


class DirectorySponsor(Base):
    __tablename__ = "sponsors"
    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False)
    date = Column(Date, nullable=False)
