"""SQLAlchemy adapters for the repository ports.

A team and all of its children are loaded as one aggregate and written back as
one transaction; the team row is locked with ``SELECT ... FOR UPDATE`` for the
duration of an edit.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from garage.core.errors import ConflictError
from garage.core.locks import KeyedLock
from garage.core.money import ZERO, to_money
from garage.db.session import Database
from garage.models import garage as m
from garage.repositories.base import PartRepository, SponsorDirectoryRepository, TeamRepository
from garage.schemas import teams as s
from garage.schemas.parts import Part, Performance
from garage.schemas.sponsors import DirectorySponsor


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _perf(row) -> Performance:
    return Performance(p=row.p or 0, a=row.a or 0, m=row.m or 0)


def _set_perf(row, performance: Performance) -> None:
    row.p, row.a, row.m = performance.p, performance.a, performance.m


def _money(value) -> Decimal:
    return to_money(value) if value is not None else ZERO


def _part_from_row(row: m.Part) -> Part:
    return Part(
        id=row.id,
        name=row.name,
        category=row.category,
        price=_money(row.price),
        stock=int(row.stock or 0),
        performance=_perf(row),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlPartRepository(PartRepository):
    def __init__(self, db: Database):
        self._db = db

    def list(self) -> List[Part]:
        with self._db.session() as session:
            rows = session.execute(select(m.Part).order_by(m.Part.category, m.Part.name)).scalars().all()
            return [_part_from_row(r) for r in rows]

    def get(self, part_id: str) -> Optional[Part]:
        with self._db.session() as session:
            row = session.get(m.Part, part_id)
            return _part_from_row(row) if row else None

    def get_by_name(self, name: str) -> Optional[Part]:
        with self._db.session() as session:
            row = session.execute(select(m.Part).where(m.Part.name == name)).scalar_one_or_none()
            return _part_from_row(row) if row else None

    def create(self, part: Part) -> Part:
        row = m.Part(
            id=part.id,
            name=part.name,
            category=part.category,
            price=part.price,
            stock=part.stock,
            created_at=part.created_at,
            updated_at=part.updated_at,
        )
        _set_perf(row, part.performance)
        try:
            with self._db.session() as session, session.begin():
                session.add(row)
        except IntegrityError:
            raise ConflictError(f"A part named '{part.name}' already exists.")
        return part

    def _adjust(self, part_id: str, delta: int) -> Optional[Part]:
        # conditional UPDATE: the row itself is the lock scope, stock never goes negative
        stmt = (
            update(m.Part)
            .where(m.Part.id == part_id, m.Part.stock + delta >= 0)
            .values(stock=m.Part.stock + delta, updated_at=_utcnow())
            .execution_options(synchronize_session=False)
        )
        with self._db.session() as session, session.begin():
            result = session.execute(stmt)
            if result.rowcount == 0:
                return None
            return _part_from_row(session.get(m.Part, part_id))

    def decrement_stock(self, part_id: str, qty: int) -> Optional[Part]:
        return self._adjust(part_id, -qty)

    def increment_stock(self, part_id: str, qty: int) -> Optional[Part]:
        return self._adjust(part_id, qty)


# ---------------------------------------------------------------------------
# Team aggregate mapping
# ---------------------------------------------------------------------------

def _installed_from_row(row: m.InstalledPart) -> s.InstalledPart:
    return s.InstalledPart(
        id=row.id,
        inventory_item_id=row.inventory_item_id,
        part_name=row.part_name,
        category=row.category,
        category_key=row.category_key,
        performance=_perf(row),
        installed_at=row.installed_at,
    )


def _team_from_row(row: m.Team) -> s.Team:
    return s.Team(
        id=row.id,
        name=row.name,
        country=row.country or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
        budget=s.Budget(total=_money(row.budget_total), spent=_money(row.budget_spent)),
        sponsors=[
            s.Sponsor(id=r.id, name=r.name, description=r.description or "", created_at=r.created_at)
            for r in row.sponsors
        ],
        contributions=[
            s.Contribution(
                id=r.id,
                sponsor_id=r.sponsor_id,
                sponsor_name=r.sponsor_name or "",
                amount=_money(r.amount),
                date=r.date,
                description=r.description or "",
            )
            for r in row.contributions
        ],
        inventory=[
            s.InventoryItem(
                id=r.id,
                source_part_id=r.source_part_id,
                part_name=r.part_name,
                category=r.category or "",
                performance=_perf(r),
                quantity=int(r.quantity or 0),
                unit_cost=_money(r.unit_cost),
                acquired_at=r.acquired_at,
            )
            for r in row.inventory
        ],
        cars=[
            s.Car(
                id=r.id,
                code=r.code,
                name=r.name or "",
                driver_id=r.driver_id,
                is_finalized=bool(r.is_finalized),
                installed_parts=[_installed_from_row(ip) for ip in r.installed_parts],
            )
            for r in row.cars
        ],
        drivers=[
            s.Driver(
                id=r.id,
                name=r.name,
                skill=int(r.skill if r.skill is not None else 50),
                results=[
                    s.RaceResult(date=res.date, race=res.race, position=res.position, points=float(res.points or 0))
                    for res in r.results
                ],
            )
            for r in row.drivers
        ],
    )


def _sync(rows: Sequence, items: Sequence, make: Callable, apply: Callable) -> list:
    """Match child rows to schema items by id; unmatched rows become orphans."""
    existing: Dict[str, object] = {r.id: r for r in rows}
    kept = []
    for seq, item in enumerate(items):
        row = existing.pop(item.id, None)
        if row is None:
            row = make(item)
        apply(row, item)
        row.seq = seq
        kept.append(row)
    return kept


def _apply_sponsor(row: m.Sponsor, item: s.Sponsor) -> None:
    row.name = item.name
    row.description = item.description or None
    row.created_at = item.created_at


def _apply_contribution(row: m.Contribution, item: s.Contribution) -> None:
    row.sponsor_id = item.sponsor_id
    row.sponsor_name = item.sponsor_name
    row.amount = item.amount
    row.date = item.date
    row.description = item.description or None


def _apply_inventory(row: m.InventoryItem, item: s.InventoryItem) -> None:
    row.source_part_id = item.source_part_id
    row.part_name = item.part_name
    row.category = item.category or None
    _set_perf(row, item.performance)
    row.quantity = item.quantity
    row.unit_cost = item.unit_cost
    row.acquired_at = item.acquired_at


def _apply_installed(row: m.InstalledPart, item: s.InstalledPart) -> None:
    row.inventory_item_id = item.inventory_item_id
    row.part_name = item.part_name
    row.category = item.category
    row.category_key = item.category_key
    _set_perf(row, item.performance)
    row.installed_at = item.installed_at


def _apply_car(row: m.Car, item: s.Car) -> None:
    row.code = item.code
    row.name = item.name or None
    row.driver_id = item.driver_id
    row.is_finalized = item.is_finalized
    row.installed_parts = _sync(
        row.installed_parts, item.installed_parts, lambda i: m.InstalledPart(id=i.id), _apply_installed
    )


def _apply_driver(row: m.Driver, item: s.Driver) -> None:
    row.name = item.name
    row.skill = item.skill
    # results have no identity of their own; rewrite them in order
    row.results = [
        m.RaceResult(seq=seq, date=r.date, race=r.race, position=r.position, points=r.points)
        for seq, r in enumerate(item.results)
    ]


def _apply_team(row: m.Team, team: s.Team) -> None:
    row.name = team.name
    row.country = team.country or None
    row.budget_total = team.budget.total
    row.budget_spent = team.budget.spent
    row.updated_at = team.updated_at
    row.sponsors = _sync(row.sponsors, team.sponsors, lambda i: m.Sponsor(id=i.id), _apply_sponsor)
    row.contributions = _sync(
        row.contributions, team.contributions, lambda i: m.Contribution(id=i.id), _apply_contribution
    )
    row.inventory = _sync(row.inventory, team.inventory, lambda i: m.InventoryItem(id=i.id), _apply_inventory)
    row.cars = _sync(row.cars, team.cars, lambda i: m.Car(id=i.id), _apply_car)
    row.drivers = _sync(row.drivers, team.drivers, lambda i: m.Driver(id=i.id), _apply_driver)


def _team_query():
    return select(m.Team).options(
        selectinload(m.Team.sponsors),
        selectinload(m.Team.contributions),
        selectinload(m.Team.inventory),
        selectinload(m.Team.cars).selectinload(m.Car.installed_parts),
        selectinload(m.Team.drivers).selectinload(m.Driver.results),
    )


class SqlTeamRepository(TeamRepository):
    def __init__(self, db: Database):
        self._db = db
        # FOR UPDATE is a no-op on SQLite, so writers in this process also queue here
        self._locks = KeyedLock()

    def list(self) -> List[s.Team]:
        with self._db.session() as session:
            rows = session.execute(_team_query().order_by(m.Team.name)).scalars().all()
            return [_team_from_row(r) for r in rows]

    def get(self, team_id: str) -> Optional[s.Team]:
        with self._db.session() as session:
            row = session.execute(_team_query().where(m.Team.id == team_id)).scalar_one_or_none()
            return _team_from_row(row) if row else None

    def create(self, team: s.Team) -> s.Team:
        row = m.Team(id=team.id, created_at=team.created_at)
        try:
            with self._db.session() as session, session.begin():
                _apply_team(row, team)
                session.add(row)
        except IntegrityError:
            raise ConflictError("A team with that id already exists.")
        return team

    def delete(self, team_id: str) -> bool:
        with self._locks.hold(team_id):
            with self._db.session() as session, session.begin():
                row = session.get(m.Team, team_id)
                if row is None:
                    return False
                session.delete(row)
                return True

    @contextmanager
    def edit(self, team_id: str):
        with self._locks.hold(team_id):
            with self._db.session() as session, session.begin():
                row = session.execute(
                    _team_query().where(m.Team.id == team_id).with_for_update(of=m.Team)
                ).scalar_one_or_none()
                if row is None:
                    yield None
                    return
                working = _team_from_row(row)
                yield working
                working.updated_at = _utcnow()
                _apply_team(row, working)


class SqlSponsorDirectoryRepository(SponsorDirectoryRepository):
    def __init__(self, db: Database):
        self._db = db

    @staticmethod
    def _from_row(row: m.DirectorySponsor) -> DirectorySponsor:
        return DirectorySponsor(id=row.id, name=row.name, date=row.date)

    def list(self) -> List[DirectorySponsor]:
        with self._db.session() as session:
            rows = session.execute(
                select(m.DirectorySponsor).order_by(m.DirectorySponsor.date, m.DirectorySponsor.name)
            ).scalars().all()
            return [self._from_row(r) for r in rows]

    def get(self, sponsor_id: str) -> Optional[DirectorySponsor]:
        with self._db.session() as session:
            row = session.get(m.DirectorySponsor, sponsor_id)
            return self._from_row(row) if row else None

    def create(self, sponsor: DirectorySponsor) -> DirectorySponsor:
        with self._db.session() as session, session.begin():
            session.add(m.DirectorySponsor(id=sponsor.id, name=sponsor.name, date=sponsor.date))
        return sponsor

    def update(self, sponsor: DirectorySponsor) -> Optional[DirectorySponsor]:
        with self._db.session() as session, session.begin():
            row = session.get(m.DirectorySponsor, sponsor.id)
            if row is None:
                return None
            row.name = sponsor.name
            row.date = sponsor.date
        return sponsor

    def delete(self, sponsor_id: str) -> bool:
        with self._db.session() as session, session.begin():
            row = session.get(m.DirectorySponsor, sponsor_id)
            if row is None:
                return False
            session.delete(row)
            return True
