import logging
from dataclasses import dataclass
from typing import Optional

from garage.core.config import Settings
from garage.db.session import Database
from garage.repositories.memory import (
    InMemoryPartRepository, InMemorySponsorDirectoryRepository, InMemoryTeamRepository,
)
from garage.repositories.sql import SqlPartRepository, SqlSponsorDirectoryRepository, SqlTeamRepository
from garage.services.catalog import CatalogStore
from garage.services.sponsors import SponsorDirectory
from garage.services.teams import TeamService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    catalog: CatalogStore
    teams: TeamService
    sponsors: SponsorDirectory
    db: Optional[Database] = None

    def close(self) -> None:
        if self.db is not None:
            self.db.dispose()


def build_services(settings: Settings) -> Services:
    backend = settings.repository_backend.lower()
    if backend == "memory":
        parts, teams, sponsors, db = (
            InMemoryPartRepository(), InMemoryTeamRepository(), InMemorySponsorDirectoryRepository(), None
        )
    elif backend == "sql":
        db = Database(settings.database_url)
        if settings.env == "dev":
            db.create_all()   # production schemas come from alembic
        parts, teams, sponsors = SqlPartRepository(db), SqlTeamRepository(db), SqlSponsorDirectoryRepository(db)
    else:
        raise ValueError(f"Unknown repository backend: {settings.repository_backend!r}")

    logger.info("Using %s repositories", backend)
    catalog = CatalogStore(parts)
    return Services(
        catalog=catalog,
        teams=TeamService(teams, catalog),
        sponsors=SponsorDirectory(sponsors),
        db=db,
    )
