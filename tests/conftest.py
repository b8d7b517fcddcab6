"""Shared pytest fixtures for ledger tests."""

from datetime import datetime, timezone

import pytest

from pos_ledger.catalog import ProductCatalog
from pos_ledger.ledger import Ledger
from pos_ledger.models import Product
from pos_ledger.persistence import MemoryKeyValueStore, PersistenceGateway

FIXED_MOMENT = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_MOMENT


@pytest.fixture
def tea() -> Product:
    return Product(id="p1", name="Tea", price=10, barcode="111")


@pytest.fixture
def coffee() -> Product:
    return Product(id="p2", name="Coffee", price=15, barcode="222")


@pytest.fixture
def catalog(tea, coffee) -> ProductCatalog:
    return ProductCatalog([tea, coffee])


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def ledger(kv_store) -> Ledger:
    return Ledger(PersistenceGateway(kv_store), clock=fixed_clock)
