import random

import pytest

from garage.core.categories import REQUIRED_CATEGORIES
from garage.core.errors import (
    ConflictError, InsufficientStockError, NotFoundError, ValidationError,
)

from conftest import buy_kit, car_by_id, item_for


@pytest.fixture
def garage(service, funded_team, kit):
    """Team with two units of every required category, one car and one driver."""
    team = buy_kit(service, funded_team.id, kit, qty=2)
    team = service.add_car(team.id, "C1", "Car One")
    team = service.add_driver(team.id, "Driver One", 80)
    return team


def build_ready_car(service, team):
    car = team.cars[0]
    for category in REQUIRED_CATEGORIES:
        team = service.install_part(team.id, car.id, item_for(team, category).id)
    return service.assign_car_driver(team.id, car.id, team.drivers[0].id)


def unit_totals(team):
    installed = {}
    for car in team.cars:
        for ip in car.installed_parts:
            installed[ip.inventory_item_id] = installed.get(ip.inventory_item_id, 0) + 1
    return {item.id: item.quantity + installed.get(item.id, 0) for item in team.inventory}


def test_install_moves_one_unit(service, garage):
    car = garage.cars[0]
    item = item_for(garage, "Power Unit")
    team = service.install_part(garage.id, car.id, item.id)

    assert item_for(team, "Power Unit").quantity == 1
    installed = car_by_id(team, car.id).installed_parts
    assert len(installed) == 1
    assert installed[0].category_key == "Power Unit"
    assert installed[0].inventory_item_id == item.id
    assert car_by_id(team, car.id).state == "PARTIALLY_BUILT"


def test_install_same_category_swaps(service, catalog, garage):
    car = garage.cars[0]
    first = item_for(garage, "Tires")
    service.install_part(garage.id, car.id, first.id)

    hard = catalog.create("Hard Set", "Tires", 50, 3)
    team = service.purchase_part(garage.id, hard.id, 1)
    second = next(i for i in team.inventory if i.source_part_id == hard.id)
    team = service.install_part(team.id, car.id, second.id)

    tires = [ip for ip in car_by_id(team, car.id).installed_parts if ip.category_key == "Tires"]
    assert len(tires) == 1
    assert tires[0].inventory_item_id == second.id
    assert next(i for i in team.inventory if i.id == first.id).quantity == 2
    assert next(i for i in team.inventory if i.id == second.id).quantity == 0


def test_install_requires_available_unit(service, garage):
    car = garage.cars[0]
    item = item_for(garage, "Gearbox")
    service.install_part(garage.id, car.id, item.id)
    team = service.add_car(garage.id, "C2")
    car2 = team.cars[1]
    service.install_part(team.id, car2.id, item.id)

    with pytest.raises(InsufficientStockError):
        service.install_part(team.id, car2.id, item.id)
    with pytest.raises(NotFoundError):
        service.install_part(team.id, car2.id, "missing-item")


def test_install_rejects_non_required_category(service, garage):
    team = service.add_inventory_item(garage.id, "Steering Wheel", "Cockpit", 1, 10)
    wheel = item_for(team, "Cockpit")
    with pytest.raises(ValidationError):
        service.install_part(team.id, team.cars[0].id, wheel.id)
    assert item_for(service.get(team.id), "Cockpit").quantity == 1


def test_units_are_conserved_across_assembly(service, catalog, garage):
    extra = catalog.create("Wet Set", "Tires", 10, 5)
    team = service.purchase_part(garage.id, extra.id, 2)
    team = service.add_car(team.id, "C2")
    baseline = unit_totals(team)

    rng = random.Random(42)
    for _ in range(60):
        car = rng.choice(team.cars)
        if car.installed_parts and rng.random() < 0.4:
            team = service.uninstall_part(team.id, car.id, rng.choice(car.installed_parts).id)
            continue
        candidates = [i for i in team.inventory if i.quantity > 0]
        if candidates:
            team = service.install_part(team.id, car.id, rng.choice(candidates).id)

        assert unit_totals(team) == baseline
        for c in team.cars:
            keys = [ip.category_key for ip in c.installed_parts]
            assert len(keys) == len(set(keys))
        assert all(i.quantity >= 0 for i in team.inventory)


def test_finalize_gate(service, garage):
    car = garage.cars[0]
    with pytest.raises(ValidationError) as exc:
        service.finalize_car(garage.id, car.id)
    assert "missing driver, missing 5 categories" in str(exc.value)

    team = build_ready_car(service, garage)
    assert car_by_id(team, car.id).state == "READY"
    team = service.finalize_car(team.id, car.id)
    assert car_by_id(team, car.id).is_finalized
    assert car_by_id(team, car.id).state == "FINALIZED"


def test_failed_finalize_leaves_car_unchanged(service, garage):
    team = build_ready_car(service, garage)
    car = team.cars[0]
    gearbox = next(ip for ip in car.installed_parts if ip.category_key == "Gearbox")
    team = service.uninstall_part(team.id, car.id, gearbox.id)
    before = car_by_id(team, car.id)

    with pytest.raises(ValidationError) as exc:
        service.finalize_car(team.id, car.id)
    assert str(exc.value).endswith("missing 1 category (Gearbox).")
    assert car_by_id(service.get(team.id), car.id) == before


def test_finalized_car_is_locked(service, garage):
    team = build_ready_car(service, garage)
    car = team.cars[0]
    team = service.finalize_car(team.id, car.id)
    installed = car_by_id(team, car.id).installed_parts[0]

    with pytest.raises(ConflictError):
        service.uninstall_part(team.id, car.id, installed.id)
    with pytest.raises(ConflictError):
        service.install_part(team.id, car.id, item_for(team, "Tires").id)
    with pytest.raises(ConflictError):
        service.assign_car_driver(team.id, car.id, None)
    assert service.get(team.id) == team


def test_unfinalize_keeps_parts(service, garage):
    team = build_ready_car(service, garage)
    car = team.cars[0]
    service.finalize_car(team.id, car.id)
    team = service.unfinalize_car(team.id, car.id)
    unlocked = car_by_id(team, car.id)
    assert not unlocked.is_finalized
    assert len(unlocked.installed_parts) == 5
    assert unlocked.state == "READY"


def test_assign_driver_must_belong_to_team(service, garage):
    other = service.create("Other")
    other = service.add_driver(other.id, "Stranger")
    with pytest.raises(NotFoundError):
        service.assign_car_driver(garage.id, garage.cars[0].id, other.drivers[0].id)
    team = service.assign_car_driver(garage.id, garage.cars[0].id, garage.drivers[0].id)
    assert team.cars[0].driver_id == garage.drivers[0].id
    team = service.assign_car_driver(garage.id, garage.cars[0].id, None)
    assert team.cars[0].driver_id is None


def test_remove_car_returns_parts(service, garage):
    team = build_ready_car(service, garage)
    car = team.cars[0]
    service.finalize_car(team.id, car.id)
    team = service.remove_car(team.id, car.id)
    assert team.cars == []
    assert all(i.quantity == 2 for i in team.inventory)


def test_max_two_cars(service, garage):
    team = service.add_car(garage.id, "C2")
    with pytest.raises(ConflictError):
        service.add_car(team.id, "C3")
    assert len(service.get(team.id).cars) == 2
