"""Tests for snapshot import/export and the sales export table."""

import json

import pytest

from pos_ledger.constant import GRAND_TOTAL_LABEL
from pos_ledger.errors import SnapshotImportError
from pos_ledger.models import Product, SalesRow


def _invoice_record(price=10, quantity=2, total=20, total_amount=20):
    return {
        "id": "inv-1",
        "items": [{"productId": "p1", "name": "Tea", "price": price, "quantity": quantity, "total": total}],
        "totalAmount": total_amount,
        "date": "2024-05-01T09:30:00.000Z",
        "timestamp": 1714555800000,
        "paymentMethod": "cash",
    }


@pytest.fixture
def stocked(ledger):
    """A ledger with two products, two invoices and a custom name."""
    tea = ledger.catalog.add("Tea", 10, "111")
    cake = ledger.catalog.add("Cake", 7.5)
    ledger.add_to_cart(tea.id)
    ledger.add_to_cart(tea.id)
    ledger.checkout("cash")
    ledger.add_to_cart(cake.id)
    ledger.add_to_cart(tea.id)
    ledger.checkout("instapay")
    ledger.settings.rename("Corner Shop")
    return ledger


def test_export_snapshot_has_all_three_stores(stocked):
    snapshot = stocked.transfer.export_snapshot()

    assert [p["name"] for p in snapshot["products"]] == ["Tea", "Cake"]
    assert [inv["totalAmount"] for inv in snapshot["invoices"]] == [17.5, 20]
    assert snapshot["settings"] == {"appName": "Corner Shop"}


def test_export_is_a_copy(stocked):
    snapshot = stocked.transfer.export_snapshot()

    snapshot["products"].clear()
    snapshot["invoices"][0]["items"].clear()

    assert len(stocked.catalog) == 2
    assert len(stocked.invoices.list_invoices()[0].items) == 2


def test_round_trip_is_byte_identical(stocked, kv_store):
    before = dict(kv_store.values)

    stocked.transfer.import_snapshot(stocked.transfer.dump_snapshot())

    assert kv_store.values == before


def test_round_trip_through_mapping(stocked):
    snapshot = stocked.transfer.export_snapshot()

    stocked.transfer.import_snapshot(snapshot)

    assert stocked.transfer.export_snapshot() == snapshot


def test_partial_import_only_touches_present_keys(stocked):
    products = stocked.catalog.list_products()
    invoices = stocked.invoices.list_invoices()

    stocked.transfer.import_snapshot(json.dumps({"settings": {"appName": "X"}}))

    assert stocked.settings.current().app_name == "X"
    assert stocked.catalog.list_products() == products
    assert stocked.invoices.list_invoices() == invoices


def test_import_replaces_catalog_and_ignores_unknown_keys(stocked):
    blob = json.dumps(
        {
            "products": [{"id": "z", "name": "Juice", "price": 4, "barcode": "9"}],
            "cart": [{"anything": True}],
        }
    )

    stocked.transfer.import_snapshot(blob.encode("utf-8"))

    assert stocked.catalog.list_products() == [Product(id="z", name="Juice", price=4, barcode="9")]
    assert len(stocked.invoices) == 2


def test_import_empty_lists_clear_stores(stocked):
    stocked.transfer.import_snapshot('{"products": [], "invoices": []}')

    assert len(stocked.catalog) == 0
    assert len(stocked.invoices) == 0
    assert stocked.settings.current().app_name == "Corner Shop"


@pytest.mark.parametrize("blob", ["{oops", "", b"\xff\xfe", None])
def test_unparsable_blob_raises(stocked, blob):
    with pytest.raises(SnapshotImportError):
        stocked.transfer.import_snapshot(blob)


@pytest.mark.parametrize("blob", ["[]", "42", '"text"', "null"])
def test_non_object_blob_raises(stocked, blob):
    with pytest.raises(SnapshotImportError):
        stocked.transfer.import_snapshot(blob)


@pytest.mark.parametrize(
    "payload",
    [
        {"settings": {"appName": "X"}, "products": "not a list"},
        {"settings": {"appName": "X"}, "invoices": [{"id": "1"}]},
        {"settings": {"appName": "X"}, "products": [{"id": "z", "name": "Juice", "price": 4}], "invoices": [
            {
                "id": "1",
                "items": [],
                "totalAmount": 0,
                "date": "2024-05-01T09:30:00.000Z",
                "timestamp": 0,
                "paymentMethod": "card",
            }
        ]},
        {"settings": "X"},
        {"settings": {"appName": "X"}, "products": [{"id": "z", "name": "Juice", "price": "10"}]},
        {"settings": {"appName": "X"}, "products": [{"id": "z", "name": "Juice", "price": True}]},
        {"settings": {"appName": "X"}, "invoices": [_invoice_record(price="10", total="20", total_amount="20")]},
        {"settings": {"appName": "X"}, "invoices": [_invoice_record(total=None)]},
        {"settings": {"appName": "X"}, "invoices": [_invoice_record(total_amount=999)]},
        {"settings": {"appName": "X"}, "invoices": [_invoice_record(total=7)]},
    ],
)
def test_malformed_fields_reject_whole_import(stocked, payload):
    before = stocked.transfer.export_snapshot()

    with pytest.raises(SnapshotImportError):
        stocked.transfer.import_snapshot(json.dumps(payload))

    assert stocked.transfer.export_snapshot() == before


def test_well_formed_invoice_record_imports(stocked):
    stocked.transfer.import_snapshot({"invoices": [_invoice_record()]})

    assert stocked.invoices.get("inv-1").total_amount == 20
    assert stocked.reports().grand_total() == 20


def test_rejected_numbers_never_reach_reports(stocked):
    with pytest.raises(SnapshotImportError):
        stocked.transfer.import_snapshot(json.dumps({"invoices": [_invoice_record(price="10", total="20")]}))

    assert stocked.reports().grand_total() == 37.5


class TestSalesTable:
    def test_rows_group_by_name_and_end_with_grand_total(self, stocked):
        rows = stocked.transfer.export_sales_table()

        assert rows == [
            SalesRow(item_name="Cake", quantity_sold=1, total_value=7.5),
            SalesRow(item_name="Tea", quantity_sold=3, total_value=30),
            SalesRow(item_name=GRAND_TOTAL_LABEL, quantity_sold=0, total_value=37.5),
        ]

    def test_empty_history_has_only_total_row(self, ledger):
        assert ledger.transfer.export_sales_table() == [
            SalesRow(item_name=GRAND_TOTAL_LABEL, quantity_sold=0, total_value=0)
        ]

    def test_records_use_column_headings(self, stocked):
        records = stocked.transfer.export_sales_table_records()

        assert records[-1] == {"Item Name": GRAND_TOTAL_LABEL, "Quantity Sold": 0, "Total Value": 37.5}
        assert list(records[0]) == ["Item Name", "Quantity Sold", "Total Value"]
