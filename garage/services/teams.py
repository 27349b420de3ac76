"""Team aggregate orchestration.

Each public mutator opens one unit of work on the team (``_editing``), runs the
catalog / ledger / inventory / assembly steps against the working copy, and
returns the resulting snapshot. A failure anywhere inside the block discards the
working copy, so observers see either the full change or none of it.
"""
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional

from garage.core.categories import REQUIRED_CATEGORIES, is_required_category
from garage.core.errors import (
    ConflictError, InsufficientStockError, NotFoundError, ValidationError,
)
from garage.repositories.base import TeamRepository
from garage.schemas.stats import DriverStats
from garage.schemas.teams import Car, Driver, RaceResult, Sponsor, Team
from garage.services import validation as v
from garage.services.assembly import AssemblyEngine
from garage.services.budget import BudgetLedger
from garage.services.catalog import CatalogStore
from garage.services.inventory import TeamInventory
from garage.services.stats import driver_stats

logger = logging.getLogger(__name__)

MAX_CARS_PER_TEAM = 2


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TeamService:
    def __init__(self, teams: TeamRepository, catalog: CatalogStore,
                 ledger: Optional[BudgetLedger] = None, inventory: Optional[TeamInventory] = None,
                 assembly: Optional[AssemblyEngine] = None):
        self.teams = teams
        self.catalog = catalog
        self.ledger = ledger or BudgetLedger()
        self.inventory = inventory or TeamInventory()
        self.assembly = assembly or AssemblyEngine(self.inventory)

    @contextmanager
    def _editing(self, team_id: str):
        with self.teams.edit(team_id) as team:
            if team is None:
                raise NotFoundError("Team not found.")
            yield team
            self.assembly.refresh_states(team)

    # -------- Teams ----------
    def list(self) -> List[Team]:
        teams = self.teams.list()
        for team in teams:
            self.assembly.refresh_states(team)
        return teams

    def get(self, team_id: str) -> Team:
        team = self.teams.get(team_id)
        if team is None:
            raise NotFoundError("Team not found.")
        self.assembly.refresh_states(team)
        return team

    def create(self, name, country=None) -> Team:
        now = _now()
        team = Team(
            id=str(uuid.uuid4()),
            name=v.require_text(name, "Team name"),
            country=v.optional_text(country),
            created_at=now,
            updated_at=now,
        )
        created = self.teams.create(team)
        logger.info("Created team %s (%s)", created.id, created.name)
        return created

    def update(self, team_id: str, name=None, country=None) -> Team:
        with self._editing(team_id) as team:
            if name is not None:
                team.name = v.require_text(name, "Team name")
            if country is not None:
                team.country = v.optional_text(country)
        return team

    def delete(self, team_id: str) -> None:
        if not self.teams.delete(team_id):
            raise NotFoundError("Team not found.")
        logger.info("Deleted team %s", team_id)

    # -------- Budget ----------
    def set_budget(self, team_id: str, total=None, spent=None) -> Team:
        self.get(team_id)
        raise ConflictError(
            "The budget is derived from sponsor contributions and cannot be set directly."
        )

    def record_contribution(self, team_id: str, sponsor_id, amount, date=None, description=None) -> Team:
        with self._editing(team_id) as team:
            contribution = self.ledger.record_contribution(team, sponsor_id, amount, date, description)
        logger.info("Team %s: contribution %s from sponsor %s (total %s)",
                    team_id, contribution.amount, contribution.sponsor_id, team.budget.total)
        return team

    # -------- Sponsors ----------
    def add_sponsor(self, team_id: str, name, description=None, contribution=None) -> Team:
        with self._editing(team_id) as team:
            sponsor = Sponsor(
                id=str(uuid.uuid4()),
                name=v.require_text(name, "Sponsor name"),
                description=v.optional_text(description),
                created_at=_now(),
            )
            team.sponsors.append(sponsor)
            if contribution is not None:
                self.ledger.record_contribution(team, sponsor.id, contribution, description="Initial contribution")
        return team

    def remove_sponsor(self, team_id: str, sponsor_id: str) -> Team:
        with self._editing(team_id) as team:
            sponsor = next((sp for sp in team.sponsors if sp.id == sponsor_id), None)
            if sponsor is None:
                raise NotFoundError("Sponsor not found.")
            if any(c.sponsor_id == sponsor_id for c in team.contributions):
                raise ConflictError(
                    f"Sponsor '{sponsor.name}' has recorded contributions and cannot be removed."
                )
            team.sponsors.remove(sponsor)
        return team

    # -------- Drivers ----------
    def _find_driver(self, team: Team, driver_id: str) -> Driver:
        driver = next((d for d in team.drivers if d.id == driver_id), None)
        if driver is None:
            raise NotFoundError("Driver not found.")
        return driver

    def add_driver(self, team_id: str, name, skill=None) -> Team:
        with self._editing(team_id) as team:
            team.drivers.append(Driver(
                id=str(uuid.uuid4()),
                name=v.require_text(name, "Driver name"),
                skill=50 if skill is None else v.int_in_range(skill, "skill", 0, 100),
            ))
        return team

    def remove_driver(self, team_id: str, driver_id: str) -> Team:
        with self._editing(team_id) as team:
            driver = self._find_driver(team, driver_id)
            for car in team.cars:
                if car.driver_id != driver.id:
                    continue
                if car.is_finalized:
                    raise ConflictError(
                        f"Driver '{driver.name}' is assigned to finalized car {car.code}."
                    )
                car.driver_id = None
            team.drivers.remove(driver)
        return team

    def add_driver_result(self, team_id: str, driver_id: str, date, race, position, points=0) -> Team:
        with self._editing(team_id) as team:
            driver = self._find_driver(team, driver_id)
            driver.results.append(RaceResult(
                date=v.require_text(date, "Race date"),
                race=v.require_text(race, "Race name"),
                position=v.positive_int(position, "position"),
                points=v.non_negative_number(points, "points"),
            ))
        return team

    def get_driver_stats(self, team_id: str, driver_id: str) -> DriverStats:
        return driver_stats(self._find_driver(self.get(team_id), driver_id))

    # -------- Store ----------
    def purchase_part(self, team_id: str, part_id: str, qty=1) -> Team:
        """Buy ``qty`` units of a catalog part for the team.

        Checks run in a fixed order (category, stock, budget) so the caller
        always gets the same error for the same state. Once catalog stock has
        been taken, any later failure gives it back before the error surfaces.
        """
        qty = v.positive_int(qty, "qty")
        decremented = False
        try:
            with self._editing(team_id) as team:
                part = self.catalog.get(part_id)
                if not is_required_category(part.category):
                    raise ValidationError(
                        f"Part category '{part.category}' is not purchasable. "
                        f"Expected one of: {', '.join(REQUIRED_CATEGORIES)}."
                    )
                if part.stock < qty:
                    raise InsufficientStockError(
                        f"Insufficient stock for part '{part.name}'", required=qty, available=part.stock
                    )
                cost = self.ledger.ensure_available(team, part.price * qty)

                self.catalog.decrement_stock(part.id, qty)
                decremented = True
                self.ledger.reserve(team, cost)
                self.inventory.upsert_from_purchase(
                    team, part.id, part.name, part.category, qty, part.price, part.performance
                )
        except Exception:
            if decremented:
                logger.warning("Purchase of part %s by team %s failed; restoring %d units of stock",
                               part_id, team_id, qty)
                self.catalog.increment_stock(part_id, qty)
            raise
        logger.info("Team %s bought %d x %s (spent %s of %s)",
                    team_id, qty, part_id, team.budget.spent, team.budget.total)
        return team

    # -------- Cars ----------
    def add_car(self, team_id: str, code, name=None) -> Team:
        with self._editing(team_id) as team:
            if len(team.cars) >= MAX_CARS_PER_TEAM:
                raise ConflictError(f"A team can own at most {MAX_CARS_PER_TEAM} cars.")
            team.cars.append(Car(
                id=str(uuid.uuid4()),
                code=v.require_text(code, "Car code"),
                name=v.optional_text(name),
            ))
        return team

    def remove_car(self, team_id: str, car_id: str) -> Team:
        with self._editing(team_id) as team:
            self.assembly.remove_car(team, car_id)
        logger.info("Team %s: removed car %s", team_id, car_id)
        return team

    def install_part(self, team_id: str, car_id: str, inventory_item_id: str) -> Team:
        with self._editing(team_id) as team:
            installed = self.assembly.install_part(team, car_id, inventory_item_id)
        logger.info("Team %s: installed %s on car %s", team_id, installed.category_key, car_id)
        return team

    def uninstall_part(self, team_id: str, car_id: str, installed_part_id: str) -> Team:
        with self._editing(team_id) as team:
            self.assembly.uninstall_part(team, car_id, installed_part_id)
        return team

    def assign_car_driver(self, team_id: str, car_id: str, driver_id: Optional[str]) -> Team:
        with self._editing(team_id) as team:
            self.assembly.assign_driver(team, car_id, driver_id)
        return team

    def finalize_car(self, team_id: str, car_id: str) -> Team:
        with self._editing(team_id) as team:
            self.assembly.finalize(team, car_id)
        logger.info("Team %s: car %s finalized", team_id, car_id)
        return team

    def unfinalize_car(self, team_id: str, car_id: str) -> Team:
        with self._editing(team_id) as team:
            self.assembly.unfinalize(team, car_id)
        return team

    # -------- Inventory ----------
    def add_inventory_item(self, team_id: str, part_name, category=None, qty=0, unit_cost=0) -> Team:
        with self._editing(team_id) as team:
            self.inventory.add_manual(team, part_name, category, qty, unit_cost)
        return team

    def remove_inventory_item(self, team_id: str, item_id: str) -> Team:
        with self._editing(team_id) as team:
            self.inventory.remove(team, item_id)
        return team
