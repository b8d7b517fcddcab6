"""Tests for text rendering helpers."""

import pytest

from pos_ledger.models import Invoice, InvoiceItem, PaymentMethod, Product, SoldItem
from pos_ledger.rendering import (
    badge_style,
    editable_amount,
    format_amount,
    format_cart_line,
    format_invoice_row,
    format_payment_badge,
    format_product_label,
    format_sold_item,
    parse_amount,
    payment_label,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(20, "20"), (20.0, "20"), (7.5, "7.50"), (0, "0"), (-15, "-15"), (1 / 3, "0.33")],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


@pytest.mark.parametrize(
    ("method", "expected"),
    [("cash", "Cash"), (PaymentMethod.INSTAPAY, "InstaPay")],
)
def test_payment_label(method, expected):
    assert payment_label(method) == expected


def test_badge_styles_differ_per_method():
    assert badge_style("cash") != badge_style("instapay")
    assert format_payment_badge("instapay").plain == " InstaPay "


def test_product_label_shows_barcode_when_present():
    assert format_product_label(Product(id="p1", name="Tea", price=10, barcode="111")).plain == "Tea - 10 [111]"
    assert format_product_label(Product(id="p2", name="Cake", price=7.5)).plain == "Cake - 7.50"


def test_cart_line():
    assert format_cart_line(InvoiceItem.create("p1", "Tea", 10, 3)).plain == "Tea  10 x 3 = 30"


def test_invoice_row():
    invoice = Invoice(
        id="abcd1234",
        items=(InvoiceItem.create("p1", "Tea", 10, 2),),
        total_amount=20,
        date="2024-05-01T09:30:00.000Z",
        timestamp=1714555800000,
        payment_method=PaymentMethod.CASH,
    )

    assert format_invoice_row(invoice).plain == "Invoice #1234  2024-05-01 09:30  20   Cash "


def test_sold_item():
    assert format_sold_item(SoldItem(product_id="p1", name="Tea", count=2, value=20)).plain == "Tea  sold: 2  20"


@pytest.mark.parametrize(("text", "expected"), [("12", 12), (" 7.5 ", 7.5), ("-3", -3), ("0.125", 0.125)])
def test_parse_amount(text, expected):
    value = parse_amount(text)

    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("text", ["", "ten", "1,5"])
def test_parse_amount_rejects_non_numbers(text):
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize(("value", "expected"), [(10, "10"), (12.0, "12"), (7.456, "7.456")])
def test_editable_amount_keeps_full_precision(value, expected):
    assert editable_amount(value) == expected
