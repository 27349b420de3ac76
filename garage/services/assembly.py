"""Car assembly state machine.

A car moves between EMPTY / PARTIALLY_BUILT / READY while it is being
edited, and to FINALIZED once locked for racing. Every unit installed on a
car is taken out of the team's inventory and given back when it comes off,
so the per-item total (available + installed) never changes here.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from garage.core.categories import REQUIRED_CATEGORIES, category_key, missing_categories
from garage.core.errors import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from garage.schemas.teams import Car, InstalledPart, Team
from garage.services.inventory import TeamInventory


class CarState(str, Enum):
    EMPTY = "EMPTY"
    PARTIALLY_BUILT = "PARTIALLY_BUILT"
    READY = "READY"
    FINALIZED = "FINALIZED"


class AssemblyEngine:
    def __init__(self, inventory: Optional[TeamInventory] = None):
        self.inventory = inventory or TeamInventory()

    # -------- lookups ----------
    def find_car(self, team: Team, car_id: str) -> Car:
        car = next((c for c in team.cars if c.id == car_id), None)
        if car is None:
            raise NotFoundError("Car not found.")
        return car

    def _has_driver(self, team: Team, car: Car) -> bool:
        return car.driver_id is not None and any(d.id == car.driver_id for d in team.drivers)

    def missing_requirements(self, team: Team, car: Car) -> List[str]:
        problems = []
        if not self._has_driver(team, car):
            problems.append("missing driver")
        missing = missing_categories(ip.category_key for ip in car.installed_parts)
        if missing:
            noun = "category" if len(missing) == 1 else "categories"
            problems.append(f"missing {len(missing)} {noun} ({', '.join(missing)})")
        return problems

    def car_state(self, team: Team, car: Car) -> CarState:
        if car.is_finalized:
            return CarState.FINALIZED
        if not self.missing_requirements(team, car):
            return CarState.READY
        if not car.installed_parts:
            return CarState.EMPTY
        return CarState.PARTIALLY_BUILT

    def refresh_states(self, team: Team) -> None:
        for car in team.cars:
            car.state = self.car_state(team, car).value

    def _ensure_editable(self, car: Car) -> None:
        if car.is_finalized:
            raise ConflictError(f"Car {car.code} is finalized; unfinalize it before making changes.")

    def _release(self, team: Team, car: Car, installed: InstalledPart) -> None:
        self.inventory.return_unit(team, installed.inventory_item_id)
        car.installed_parts.remove(installed)

    # -------- transitions ----------
    def install_part(self, team: Team, car_id: str, inventory_item_id: str) -> InstalledPart:
        car = self.find_car(team, car_id)
        self._ensure_editable(car)
        item = self.inventory.find(team, inventory_item_id)
        if item.quantity <= 0:
            raise InsufficientStockError(
                f"No units left of '{item.part_name}'", required=1, available=item.quantity
            )
        key = category_key(item.category)
        if key not in REQUIRED_CATEGORIES:
            raise ValidationError(
                f"Category '{item.category}' cannot be installed. Expected one of: {', '.join(REQUIRED_CATEGORIES)}."
            )

        # swap: whatever occupies the slot goes back to inventory first
        current = next((ip for ip in car.installed_parts if ip.category_key == key), None)
        if current is not None:
            self._release(team, car, current)

        self.inventory.take_unit(item)
        installed = InstalledPart(
            id=str(uuid.uuid4()),
            inventory_item_id=item.id,
            part_name=item.part_name,
            category=item.category,
            category_key=key,
            performance=item.performance.model_copy(),
            installed_at=datetime.now(timezone.utc),
        )
        car.installed_parts.append(installed)
        car.is_finalized = False
        return installed

    def uninstall_part(self, team: Team, car_id: str, installed_part_id: str) -> None:
        car = self.find_car(team, car_id)
        self._ensure_editable(car)
        installed = next((ip for ip in car.installed_parts if ip.id == installed_part_id), None)
        if installed is None:
            raise NotFoundError("Installed part not found.")
        self._release(team, car, installed)

    def assign_driver(self, team: Team, car_id: str, driver_id: Optional[str]) -> Car:
        car = self.find_car(team, car_id)
        self._ensure_editable(car)
        if driver_id and not any(d.id == driver_id for d in team.drivers):
            raise NotFoundError("Driver not found.")
        car.driver_id = driver_id or None
        return car

    def finalize(self, team: Team, car_id: str) -> Car:
        car = self.find_car(team, car_id)
        if car.is_finalized:
            return car
        problems = self.missing_requirements(team, car)
        if problems:
            raise ValidationError(f"Cannot finalize car {car.code}: {', '.join(problems)}.")
        car.is_finalized = True
        return car

    def unfinalize(self, team: Team, car_id: str) -> Car:
        car = self.find_car(team, car_id)
        car.is_finalized = False
        return car

    def remove_car(self, team: Team, car_id: str) -> None:
        car = self.find_car(team, car_id)
        for installed in list(car.installed_parts):
            self._release(team, car, installed)
        team.cars.remove(car)
