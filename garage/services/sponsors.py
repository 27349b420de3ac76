import uuid
from datetime import date as date_type
from typing import List

from garage.core.errors import NotFoundError
from garage.repositories.base import SponsorDirectoryRepository
from garage.schemas.sponsors import DirectorySponsor
from garage.services import validation as v


class SponsorDirectory:
    """Global sponsor directory, independent of any team's sponsor list."""

    def __init__(self, sponsors: SponsorDirectoryRepository):
        self.sponsors = sponsors

    def list(self) -> List[DirectorySponsor]:
        return self.sponsors.list()

    def get(self, sponsor_id: str) -> DirectorySponsor:
        sponsor = self.sponsors.get(sponsor_id)
        if sponsor is None:
            raise NotFoundError("Sponsor not found.")
        return sponsor

    def create(self, name, date=None) -> DirectorySponsor:
        sponsor = DirectorySponsor(
            id=str(uuid.uuid4()),
            name=v.require_text(name, "Sponsor name"),
            date=date or date_type.today(),
        )
        return self.sponsors.create(sponsor)

    def update(self, sponsor_id: str, name=None, date=None) -> DirectorySponsor:
        current = self.get(sponsor_id)
        patch = {}
        if name is not None:
            patch["name"] = v.require_text(name, "Sponsor name")
        if date is not None:
            patch["date"] = date
        updated = self.sponsors.update(current.model_copy(update=patch))
        if updated is None:
            raise NotFoundError("Sponsor not found.")
        return updated

    def delete(self, sponsor_id: str) -> None:
        self.get(sponsor_id)
        if not self.sponsors.delete(sponsor_id):
            raise NotFoundError("Sponsor not found.")
