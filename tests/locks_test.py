import threading

import pytest

from garage.core.errors import NotFoundError
from garage.core.locks import KeyedLock


def test_entries_are_dropped_after_release():
    locks = KeyedLock()
    for key in range(100):
        with locks.hold(key):
            assert len(locks) == 1
    assert len(locks) == 0


def test_entry_survives_while_someone_waits():
    locks = KeyedLock()
    entered = threading.Event()
    release = threading.Event()
    order = []

    def holder():
        with locks.hold("team"):
            entered.set()
            release.wait(5)
            order.append("first")

    def waiter():
        with locks.hold("team"):
            order.append("second")

    t1 = threading.Thread(target=holder)
    t1.start()
    entered.wait(5)
    t2 = threading.Thread(target=waiter)
    t2.start()
    release.set()
    t1.join(5)
    t2.join(5)
    assert order == ["first", "second"]
    assert len(locks) == 0


def test_released_even_when_body_raises():
    locks = KeyedLock()
    with pytest.raises(RuntimeError):
        with locks.hold("k"):
            raise RuntimeError("boom")
    assert len(locks) == 0
    with locks.hold("k"):
        pass


def test_missing_teams_leave_no_lock_entries(service):
    for n in range(1000):
        with pytest.raises(NotFoundError):
            service.add_car(f"missing-{n}", "C1")
        service.teams.delete(f"missing-{n}")
    assert len(service.teams._locks) == 0
