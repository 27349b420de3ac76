import pytest
from fastapi.testclient import TestClient

from garage.core.config import Settings
from garage.main import create_app

from conftest import ADMIN_HEADERS, ENGINEER_HEADERS


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_roles_are_enforced(client):
    assert client.get("/teams").status_code == 401
    r = client.post("/teams", json={"name": "Nope"}, headers=ENGINEER_HEADERS)
    assert r.status_code == 403
    r = client.get("/teams", headers=ENGINEER_HEADERS)
    assert r.status_code == 200
    assert r.json() == {"teams": []}


def _setup_team(client):
    team = client.post("/teams", json={"name": "API Team", "country": "CR"}, headers=ADMIN_HEADERS).json()["team"]
    team = client.post(f"/teams/{team['id']}/sponsors", json={"name": "S", "contribution": 5000},
                       headers=ENGINEER_HEADERS).json()["team"]
    return team


def test_purchase_and_install_flow(client):
    team = _setup_team(client)
    assert team["budget"] == {"total": 5000.0, "spent": 0.0}

    r = client.post("/parts", json={"name": "V6", "category": "Power Unit", "price": 1200, "stock": 2,
                                     "performance": {"p": 9, "a": 1, "m": 4}}, headers=ADMIN_HEADERS)
    assert r.status_code == 201
    part = r.json()["part"]
    assert part["performance"] == {"p": 9, "a": 1, "m": 4}

    r = client.post(f"/teams/{team['id']}/store/purchase", json={"part_id": part["id"], "qty": 1},
                    headers=ENGINEER_HEADERS)
    assert r.status_code == 201
    team = r.json()["team"]
    assert team["budget"]["spent"] == 1200
    item = team["inventory"][0]
    assert item["quantity"] == 1 and item["source_part_id"] == part["id"]

    team = client.post(f"/teams/{team['id']}/cars", json={"code": "C1"}, headers=ENGINEER_HEADERS).json()["team"]
    car = team["cars"][0]
    assert car["state"] == "EMPTY"
    r = client.post(f"/teams/{team['id']}/cars/{car['id']}/install", json={"inventory_item_id": item["id"]},
                    headers=ENGINEER_HEADERS)
    assert r.status_code == 200
    team = r.json()["team"]
    assert team["cars"][0]["installed_parts"][0]["category_key"] == "Power Unit"
    assert team["inventory"][0]["quantity"] == 0

    r = client.post(f"/teams/{team['id']}/cars/{car['id']}/finalize", headers=ENGINEER_HEADERS)
    assert r.status_code == 400
    assert "missing driver" in r.json()["error"]

    parts = client.get("/parts", headers=ENGINEER_HEADERS).json()["parts"]
    assert parts[0]["stock"] == 1


def test_error_mapping(client):
    team = _setup_team(client)
    tid = team["id"]

    r = client.get("/teams/does-not-exist", headers=ENGINEER_HEADERS)
    assert r.status_code == 404
    assert r.json() == {"error": "Team not found."}

    r = client.patch(f"/teams/{tid}/budget", json={"total": 1}, headers=ENGINEER_HEADERS)
    assert r.status_code == 409

    r = client.post("/parts", json={"name": "Bad", "category": "Brakes", "price": 1, "stock": 1},
                    headers=ADMIN_HEADERS)
    assert r.status_code == 400

    r = client.post("/parts", json={"name": "Bad", "category": "Tires", "price": 1, "stock": "lots"},
                    headers=ADMIN_HEADERS)
    assert r.status_code == 400

    part = client.post("/parts", json={"name": "Gold Tires", "category": "Tires", "price": 9000, "stock": 1},
                       headers=ADMIN_HEADERS).json()["part"]
    r = client.post(f"/teams/{tid}/store/purchase", json={"part_id": part["id"], "qty": 1},
                    headers=ENGINEER_HEADERS)
    assert r.status_code == 400
    assert "Insufficient budget" in r.json()["error"]

    client.post(f"/teams/{tid}/cars", json={"code": "C1"}, headers=ENGINEER_HEADERS)
    client.post(f"/teams/{tid}/cars", json={"code": "C2"}, headers=ENGINEER_HEADERS)
    r = client.post(f"/teams/{tid}/cars", json={"code": "C3"}, headers=ENGINEER_HEADERS)
    assert r.status_code == 409


def test_restock_and_driver_stats(client):
    part = client.post("/parts", json={"name": "Box", "category": "Gearbox", "price": 10, "stock": 0},
                       headers=ADMIN_HEADERS).json()["part"]
    r = client.post(f"/parts/{part['id']}/restock", json={"qty": 3}, headers=ADMIN_HEADERS)
    assert r.status_code == 200
    assert r.json()["part"]["stock"] == 3

    team = _setup_team(client)
    team = client.post(f"/teams/{team['id']}/drivers", json={"name": "Ace", "skill": 88},
                       headers=ENGINEER_HEADERS).json()["team"]
    driver = team["drivers"][0]
    client.post(f"/teams/{team['id']}/drivers/{driver['id']}/results",
                json={"date": "2025-05-04", "race": "Miami", "position": 2, "points": 18}, headers=ENGINEER_HEADERS)
    r = client.get(f"/teams/{team['id']}/drivers/{driver['id']}/stats", headers=ENGINEER_HEADERS)
    assert r.status_code == 200
    assert r.json()["stats"] == {"races": 1, "avg_position": 2.0, "avg_points": 18.0,
                                 "best_position": 2, "total_points": 18.0}


def test_sponsor_directory(client):
    r = client.post("/sponsors", json={"name": "Globex", "date": "2025-01-15"}, headers=ADMIN_HEADERS)
    assert r.status_code == 201
    sponsor = r.json()["sponsor"]
    r = client.put(f"/sponsors/{sponsor['id']}", json={"name": "Globex Corp"}, headers=ADMIN_HEADERS)
    assert r.json()["sponsor"] == {"id": sponsor["id"], "name": "Globex Corp", "date": "2025-01-15"}
    assert len(client.get("/sponsors", headers=ENGINEER_HEADERS).json()["sponsors"]) == 1
    assert client.delete(f"/sponsors/{sponsor['id']}", headers=ADMIN_HEADERS).status_code == 204
    assert client.get(f"/sponsors/{sponsor['id']}", headers=ENGINEER_HEADERS).status_code == 404


def test_delete_team(client):
    team = _setup_team(client)
    assert client.delete(f"/teams/{team['id']}", headers=ADMIN_HEADERS).status_code == 204
    assert client.get(f"/teams/{team['id']}", headers=ADMIN_HEADERS).status_code == 404


def test_auth_errors_use_error_body(client):
    r = client.get("/teams")
    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}
    r = client.post("/teams", json={"name": "Nope"}, headers=ENGINEER_HEADERS)
    assert r.status_code == 403
    assert r.json() == {"error": "Insufficient permissions"}


def test_earnings_is_an_admin_contribution(client):
    team = _setup_team(client)
    sponsor_id = team["sponsors"][0]["id"]
    body = {"sponsor_id": sponsor_id, "amount": 250.5, "description": "podium bonus"}

    r = client.post(f"/teams/{team['id']}/earnings", json=body, headers=ENGINEER_HEADERS)
    assert r.status_code == 403
    r = client.post(f"/teams/{team['id']}/earnings", json=body, headers=ADMIN_HEADERS)
    assert r.status_code == 201
    team = r.json()["team"]
    assert team["budget"]["total"] == 5250.5
    assert team["contributions"][-1]["description"] == "podium bonus"


@pytest.fixture
def sql_client():
    app = create_app(Settings(repository_backend="sql", database_url="sqlite://", env="dev", log_level="WARNING"))
    with TestClient(app) as c:
        yield c


def test_sql_backend_reads_show_car_state(sql_client):
    team = _setup_team(sql_client)
    tid = team["id"]
    part = sql_client.post("/parts", json={"name": "V6", "category": "Power Unit", "price": 1200, "stock": 2},
                           headers=ADMIN_HEADERS).json()["part"]
    team = sql_client.post(f"/teams/{tid}/store/purchase", json={"part_id": part["id"]},
                           headers=ENGINEER_HEADERS).json()["team"]
    team = sql_client.post(f"/teams/{tid}/cars", json={"code": "C1"}, headers=ENGINEER_HEADERS).json()["team"]
    car_id = team["cars"][0]["id"]
    r = sql_client.post(f"/teams/{tid}/cars/{car_id}/install",
                        json={"inventory_item_id": team["inventory"][0]["id"]}, headers=ENGINEER_HEADERS)
    assert r.json()["team"]["cars"][0]["state"] == "PARTIALLY_BUILT"

    r = sql_client.get(f"/teams/{tid}", headers=ENGINEER_HEADERS)
    assert r.json()["team"]["cars"][0]["state"] == "PARTIALLY_BUILT"
    r = sql_client.get("/teams", headers=ENGINEER_HEADERS)
    assert r.json()["teams"][0]["cars"][0]["state"] == "PARTIALLY_BUILT"
