"""Repository ports.

Services depend only on these contracts; the concrete adapter (in-process
maps or SQLAlchemy) is chosen at startup. Lookups return ``None`` instead of
raising so the services decide which error the caller sees.
"""
from abc import ABC, abstractmethod
from typing import ContextManager, List, Optional

from garage.schemas.parts import Part
from garage.schemas.sponsors import DirectorySponsor
from garage.schemas.teams import Team


class PartRepository(ABC):
    @abstractmethod
    def list(self) -> List[Part]: ...

    @abstractmethod
    def get(self, part_id: str) -> Optional[Part]: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Part]: ...

    @abstractmethod
    def create(self, part: Part) -> Part:
        """Persist a new part; raises ConflictError when the name is taken."""

    @abstractmethod
    def decrement_stock(self, part_id: str, qty: int) -> Optional[Part]:
        """Atomically take ``qty`` units; ``None`` if the part is missing or short."""

    @abstractmethod
    def increment_stock(self, part_id: str, qty: int) -> Optional[Part]: ...


class TeamRepository(ABC):
    @abstractmethod
    def list(self) -> List[Team]: ...

    @abstractmethod
    def get(self, team_id: str) -> Optional[Team]: ...

    @abstractmethod
    def create(self, team: Team) -> Team: ...

    @abstractmethod
    def delete(self, team_id: str) -> bool: ...

    @abstractmethod
    def edit(self, team_id: str) -> ContextManager[Optional[Team]]:
        """Exclusive read-modify-write of one team.

        Yields a private working copy (``None`` if the team does not exist)
        while holding the team's lock. The stored aggregate is replaced by the
        working copy only if the block exits without an exception.
        """


class SponsorDirectoryRepository(ABC):
    @abstractmethod
    def list(self) -> List[DirectorySponsor]: ...

    @abstractmethod
    def get(self, sponsor_id: str) -> Optional[DirectorySponsor]: ...

    @abstractmethod
    def create(self, sponsor: DirectorySponsor) -> DirectorySponsor: ...

    @abstractmethod
    def update(self, sponsor: DirectorySponsor) -> Optional[DirectorySponsor]: ...

    @abstractmethod
    def delete(self, sponsor_id: str) -> bool: ...
