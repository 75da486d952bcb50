import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from food_order.cart import CartLedger
from food_order.catalog import MenuCatalog
from food_order.data import seed_menu
from food_order.errors import RemoteReadError, RemoteWriteError
from food_order.session import KioskSession
from food_order.store import MemoryOrderStore


class FakeClock:
    """Returns a strictly increasing UTC instant on every call."""

    def __init__(self, start=datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc), step=timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self):
        now = self.current
        self.current = self.current + self.step
        return now


class FlakyStore(MemoryOrderStore):
    """Memory store whose writes or reads can be switched to fail."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.fail_reads = False

    def _insert(self, key, record):
        if self.fail_writes:
            raise RemoteWriteError("network unreachable")
        super()._insert(key, record)

    def _update(self, key, fields):
        if self.fail_writes:
            raise RemoteWriteError("network unreachable")
        return super()._update(key, fields)

    def _delete(self, key):
        if self.fail_writes:
            raise RemoteWriteError("network unreachable")
        super()._delete(key)

    def _read_all(self):
        if self.fail_reads:
            raise RemoteReadError("subscription dropped")
        return super()._read_all()


class GatedStore(MemoryOrderStore):
    """Memory store whose appends and updates wait until the gate opens."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def append(self, record):
        await self.gate.wait()
        return await super().append(record)

    async def update(self, key, fields):
        await self.gate.wait()
        await super().update(key, fields)


def order_record(quantity=5, total_amount=40, timestamp="2025-05-01T12:00:00+00:00", **overrides):
    record = {
        "foodId": 3,
        "foodName": "Patatas Fritas",
        "quantity": quantity,
        "totalAmount": total_amount,
        "customerName": "Ana",
        "phone": "600111222",
        "timestamp": timestamp,
    }
    record.update(overrides)
    return record


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return MenuCatalog(seed_menu())


@pytest.fixture
def cart():
    return CartLedger()


@pytest.fixture
def store():
    return MemoryOrderStore()


@pytest.fixture
def flaky_store():
    return FlakyStore()


@pytest.fixture
def gated_store():
    return GatedStore()


@pytest.fixture
def session(store, clock):
    return KioskSession(store, clock=clock)


@pytest.fixture
def make_record():
    return order_record
