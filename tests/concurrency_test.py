import threading
from concurrent.futures import ThreadPoolExecutor

from garage.core.errors import InsufficientBudgetError, InsufficientStockError

from conftest import buy_kit, car_by_id
from garage.core.categories import REQUIRED_CATEGORIES


def _run_all(fn, count):
    start = threading.Barrier(count)

    def task(i):
        start.wait()
        try:
            fn(i)
            return "ok"
        except (InsufficientBudgetError, InsufficientStockError) as exc:
            return type(exc).__name__

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(task, range(count)))


def test_concurrent_purchases_never_overspend(service, catalog):
    team = service.create("Race")
    team = service.add_sponsor(team.id, "S", contribution=1000)
    part = catalog.create("Bolt-on Wing", "Aero Package", 100, 100)

    outcomes = _run_all(lambda i: service.purchase_part(team.id, part.id, 1), 25)

    team = service.get(team.id)
    assert outcomes.count("ok") == 10
    assert team.budget.spent == 1000
    assert team.inventory[0].quantity == 10
    assert catalog.get(part.id).stock == 90


def test_last_unit_is_sold_once(service, catalog):
    teams = []
    for n in range(8):
        t = service.create(f"Team {n}")
        teams.append(service.add_sponsor(t.id, "S", contribution=1000))
    part = catalog.create("Last PU", "Power Unit", 10, 1)

    outcomes = _run_all(lambda i: service.purchase_part(teams[i].id, part.id, 1), len(teams))

    assert outcomes.count("ok") == 1
    assert catalog.get(part.id).stock == 0
    owners = [t for t in service.list() if t.inventory]
    assert len(owners) == 1
    assert sum(t.budget.spent for t in service.list()) == 10


def test_concurrent_installs_on_one_car_keep_every_slot(service, funded_team, kit):
    team = buy_kit(service, funded_team.id, kit)
    team = service.add_car(team.id, "C1")
    car_id = team.cars[0].id
    items = [next(i for i in team.inventory if i.category == c).id for c in REQUIRED_CATEGORIES]

    outcomes = _run_all(lambda i: service.install_part(team.id, car_id, items[i]), len(items))

    assert outcomes == ["ok"] * len(items)
    car = car_by_id(service.get(team.id), car_id)
    assert sorted(ip.category_key for ip in car.installed_parts) == sorted(REQUIRED_CATEGORIES)
