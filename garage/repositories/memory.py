import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from garage.core.errors import ConflictError
from garage.core.locks import KeyedLock
from garage.repositories.base import PartRepository, SponsorDirectoryRepository, TeamRepository
from garage.schemas.parts import Part
from garage.schemas.sponsors import DirectorySponsor
from garage.schemas.teams import Team


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryPartRepository(PartRepository):
    def __init__(self, seed: Iterable[Part] = ()):
        self._by_id: Dict[str, Part] = {p.id: p.model_copy(deep=True) for p in seed}
        self._names = threading.Lock()
        self._locks = KeyedLock()   # one lock scope per part row

    def list(self) -> List[Part]:
        return [p.model_copy(deep=True) for p in list(self._by_id.values())]

    def get(self, part_id: str) -> Optional[Part]:
        part = self._by_id.get(part_id)
        return part.model_copy(deep=True) if part else None

    def get_by_name(self, name: str) -> Optional[Part]:
        for part in list(self._by_id.values()):
            if part.name == name:
                return part.model_copy(deep=True)
        return None

    def create(self, part: Part) -> Part:
        with self._names:
            if any(p.name == part.name for p in self._by_id.values()):
                raise ConflictError(f"A part named '{part.name}' already exists.")
            self._by_id[part.id] = part.model_copy(deep=True)
        return part

    def _adjust(self, part_id: str, delta: int) -> Optional[Part]:
        with self._locks.hold(part_id):
            existing = self._by_id.get(part_id)
            if existing is None:
                return None
            next_stock = existing.stock + delta
            if next_stock < 0:
                return None
            updated = existing.model_copy(update={"stock": next_stock, "updated_at": _utcnow()}, deep=True)
            self._by_id[part_id] = updated
            return updated.model_copy(deep=True)

    def decrement_stock(self, part_id: str, qty: int) -> Optional[Part]:
        return self._adjust(part_id, -qty)

    def increment_stock(self, part_id: str, qty: int) -> Optional[Part]:
        return self._adjust(part_id, qty)


class InMemoryTeamRepository(TeamRepository):
    def __init__(self, seed: Iterable[Team] = ()):
        self._by_id: Dict[str, Team] = {t.id: t.model_copy(deep=True) for t in seed}
        self._locks = KeyedLock()

    def list(self) -> List[Team]:
        return [t.model_copy(deep=True) for t in list(self._by_id.values())]

    def get(self, team_id: str) -> Optional[Team]:
        team = self._by_id.get(team_id)
        return team.model_copy(deep=True) if team else None

    def create(self, team: Team) -> Team:
        with self._locks.hold(team.id):
            if team.id in self._by_id:
                raise ConflictError("A team with that id already exists.")
            self._by_id[team.id] = team.model_copy(deep=True)
        return team

    def delete(self, team_id: str) -> bool:
        with self._locks.hold(team_id):
            return self._by_id.pop(team_id, None) is not None

    @contextmanager
    def edit(self, team_id: str):
        with self._locks.hold(team_id):
            current = self._by_id.get(team_id)
            if current is None:
                yield None
                return
            working = current.model_copy(deep=True)
            yield working
            working.updated_at = _utcnow()
            # the caller keeps ``working``; store a private copy
            self._by_id[team_id] = working.model_copy(deep=True)


class InMemorySponsorDirectoryRepository(SponsorDirectoryRepository):
    def __init__(self):
        self._by_id: Dict[str, DirectorySponsor] = {}

    def list(self) -> List[DirectorySponsor]:
        return sorted(self._by_id.values(), key=lambda s: (s.date, s.name))

    def get(self, sponsor_id: str) -> Optional[DirectorySponsor]:
        return self._by_id.get(sponsor_id)

    def create(self, sponsor: DirectorySponsor) -> DirectorySponsor:
        self._by_id[sponsor.id] = sponsor
        return sponsor

    def update(self, sponsor: DirectorySponsor) -> Optional[DirectorySponsor]:
        if sponsor.id not in self._by_id:
            return None
        self._by_id[sponsor.id] = sponsor
        return sponsor

    def delete(self, sponsor_id: str) -> bool:
        return self._by_id.pop(sponsor_id, None) is not None
