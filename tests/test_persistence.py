"""Tests for write-through persistence and startup loading."""

import json
import sqlite3

import pytest

from conftest import fixed_clock
from pos_ledger.config import DEFAULT_APP_NAME
from pos_ledger.ledger import Ledger
from pos_ledger.models import AppSettings, Product
from pos_ledger.persistence import (
    INVOICES_KEY,
    PRODUCTS_KEY,
    SETTINGS_KEY,
    MemoryKeyValueStore,
    PersistenceGateway,
    SqliteKeyValueStore,
)


class BrokenStore:
    def get(self, key):
        raise sqlite3.OperationalError("unable to open database file")

    def put(self, key, value):
        raise sqlite3.OperationalError("unable to open database file")


@pytest.fixture
def sqlite_store(tmp_path) -> SqliteKeyValueStore:
    store = SqliteKeyValueStore(str(tmp_path / "nested" / "ledger.db"))
    store.bootstrap_schema()
    return store


class TestSqliteKeyValueStore:
    def test_missing_key_is_none(self, sqlite_store):
        assert sqlite_store.get(PRODUCTS_KEY) is None

    def test_put_overwrites(self, sqlite_store):
        sqlite_store.put(SETTINGS_KEY, '{"appName": "A"}')
        sqlite_store.put(SETTINGS_KEY, '{"appName": "B"}')

        assert sqlite_store.get(SETTINGS_KEY) == '{"appName": "B"}'

    def test_bootstrap_is_idempotent(self, sqlite_store):
        sqlite_store.bootstrap_schema()

        assert sqlite_store.get(INVOICES_KEY) is None


class TestLoad:
    def test_empty_store_loads_defaults(self):
        state = PersistenceGateway(MemoryKeyValueStore()).load()

        assert state.products == []
        assert state.invoices == []
        assert state.settings == AppSettings(app_name=DEFAULT_APP_NAME)

    @pytest.mark.parametrize(
        "values",
        [
            {PRODUCTS_KEY: "{not json", INVOICES_KEY: "[", SETTINGS_KEY: "nope"},
            {PRODUCTS_KEY: "{}", INVOICES_KEY: '"x"', SETTINGS_KEY: "[]"},
            {PRODUCTS_KEY: '[{"name": "no id"}]', INVOICES_KEY: '[{"id": "1"}]', SETTINGS_KEY: "{}"},
            {PRODUCTS_KEY: '[{"id": "p1", "name": "Tea", "price": "10"}]', INVOICES_KEY: "[]", SETTINGS_KEY: "{}"},
        ],
    )
    def test_unparsable_keys_fall_back_to_defaults(self, values):
        state = PersistenceGateway(MemoryKeyValueStore(values)).load()

        assert state.products == []
        assert state.invoices == []
        assert state.settings.app_name == DEFAULT_APP_NAME

    def test_one_bad_key_does_not_discard_the_others(self):
        store = MemoryKeyValueStore(
            {
                PRODUCTS_KEY: json.dumps([{"id": "p1", "name": "Tea", "price": 10, "barcode": ""}]),
                SETTINGS_KEY: "{broken",
            }
        )

        state = PersistenceGateway(store).load()

        assert state.products == [Product(id="p1", name="Tea", price=10, barcode="")]
        assert state.settings.app_name == DEFAULT_APP_NAME

    def test_read_errors_fall_back_to_defaults(self):
        state = PersistenceGateway(BrokenStore()).load()

        assert state.products == []
        assert state.settings.app_name == DEFAULT_APP_NAME

    def test_write_errors_propagate(self):
        gateway = PersistenceGateway(BrokenStore())

        with pytest.raises(sqlite3.OperationalError):
            gateway.save_settings(AppSettings(app_name="X"))


class TestWriteThrough:
    def test_every_mutation_is_written_immediately(self, ledger, kv_store):
        product = ledger.catalog.add("Tea", 10, "111")
        assert json.loads(kv_store.get(PRODUCTS_KEY)) == [
            {"id": product.id, "name": "Tea", "price": 10, "barcode": "111"}
        ]

        ledger.add_to_cart(product.id)
        assert kv_store.get(INVOICES_KEY) is None

        invoice = ledger.checkout("cash")
        saved = json.loads(kv_store.get(INVOICES_KEY))
        assert saved == [
            {
                "id": invoice.id,
                "items": [{"productId": product.id, "name": "Tea", "price": 10, "quantity": 1, "total": 10}],
                "totalAmount": 10,
                "date": "2024-05-01T09:30:00.000Z",
                "timestamp": 1714555800000,
                "paymentMethod": "cash",
            }
        ]

        ledger.settings.rename("Corner Shop")
        assert json.loads(kv_store.get(SETTINGS_KEY)) == {"appName": "Corner Shop"}

        ledger.invoices.delete(invoice.id)
        assert json.loads(kv_store.get(INVOICES_KEY)) == []

    def test_cart_is_never_persisted(self, ledger, kv_store, tea):
        ledger.cart.add_product(tea)
        ledger.cart.set_quantity(tea.id, 3)

        assert kv_store.values == {}

    def test_state_survives_restart_on_sqlite(self, sqlite_store):
        first = Ledger(PersistenceGateway(sqlite_store), clock=fixed_clock)
        product = first.catalog.add("Tea", 10)
        first.add_to_cart(product.id)
        first.add_to_cart(product.id)
        invoice = first.checkout("instapay")
        first.settings.rename("Corner Shop")

        second = Ledger(PersistenceGateway(sqlite_store), clock=fixed_clock)

        assert second.catalog.list_products() == [product]
        assert second.invoices.list_invoices() == (invoice,)
        assert second.settings.current().app_name == "Corner Shop"
        assert len(second.cart) == 0
