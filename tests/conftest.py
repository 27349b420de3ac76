import pytest
from fastapi.testclient import TestClient

from garage.core.categories import REQUIRED_CATEGORIES
from garage.core.config import Settings
from garage.main import create_app
from garage.repositories.memory import InMemoryPartRepository, InMemoryTeamRepository
from garage.services.catalog import CatalogStore
from garage.services.teams import TeamService

ADMIN_HEADERS = {"X-User-Id": "u-admin", "X-User-Role": "ADMIN"}
ENGINEER_HEADERS = {"X-User-Id": "u-eng", "X-User-Role": "ENGINEER"}


@pytest.fixture
def catalog():
    return CatalogStore(InMemoryPartRepository())


@pytest.fixture
def service(catalog):
    return TeamService(InMemoryTeamRepository(), catalog)


@pytest.fixture
def funded_team(service):
    """A team with one sponsor and 100k of contributions."""
    team = service.create("Scuderia Test", "CR")
    team = service.add_sponsor(team.id, "Acme")
    team = service.record_contribution(team.id, team.sponsors[0].id, 100000)
    return team


@pytest.fixture
def kit(catalog):
    """One catalog part per required category, keyed by category."""
    return {
        category: catalog.create(f"{category} Mk1", category, 1000, 10, {"p": 5, "a": 5, "m": 5})
        for category in REQUIRED_CATEGORIES
    }


def buy_kit(service, team_id, kit, qty=1):
    team = None
    for part in kit.values():
        team = service.purchase_part(team_id, part.id, qty)
    return team


def item_for(team, category):
    return next(i for i in team.inventory if i.category == category)


def car_by_id(team, car_id):
    return next(c for c in team.cars if c.id == car_id)


@pytest.fixture
def client():
    app = create_app(Settings(repository_backend="memory", log_level="WARNING"))
    with TestClient(app) as c:
        yield c
