"""Domain models for pos-ledger."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


def _number(raw: Mapping[str, Any], key: str) -> float:
    """Read a finite int or float; bools and numeric strings are rejected."""
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return value


def _matches(stored: float, expected: float) -> bool:
    return math.isclose(stored, expected, rel_tol=1e-9, abs_tol=1e-9)


class PaymentMethod(str, Enum):
    """Accepted ways of paying for an invoice."""

    CASH = "cash"
    INSTAPAY = "instapay"


@dataclass(frozen=True)
class Product:
    """A sellable catalog product."""

    id: str
    name: str
    price: float
    barcode: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": self.price, "barcode": self.barcode}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Product:
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            price=_number(raw, "price"),
            barcode=str(raw.get("barcode") or ""),
        )


@dataclass(frozen=True)
class InvoiceItem:
    """A priced line item on a cart or a saved invoice.

    ``total`` is derived from ``price * quantity``. Build items through
    :meth:`create` or :meth:`with_changes` so the total always follows.
    """

    product_id: str
    name: str
    price: float
    quantity: float
    total: float

    @classmethod
    def create(cls, product_id: str, name: str, price: float, quantity: float) -> InvoiceItem:
        return cls(product_id=product_id, name=name, price=price, quantity=quantity, total=price * quantity)

    @classmethod
    def for_product(cls, product: Product) -> InvoiceItem:
        return cls.create(product.id, product.name, product.price, 1)

    def with_changes(self, **changes: Any) -> InvoiceItem:
        name = changes.get("name", self.name)
        price = changes.get("price", self.price)
        quantity = changes.get("quantity", self.quantity)
        return InvoiceItem.create(self.product_id, name, price, quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> InvoiceItem:
        price = _number(raw, "price")
        quantity = _number(raw, "quantity")
        total = _number(raw, "total")
        if not _matches(total, price * quantity):
            raise ValueError(f"total {total!r} does not match price x quantity")
        return cls(
            product_id=str(raw["productId"]),
            name=str(raw["name"]),
            price=price,
            quantity=quantity,
            total=total,
        )


@dataclass(frozen=True)
class Invoice:
    """A finalized sale record."""

    id: str
    items: tuple[InvoiceItem, ...]
    total_amount: float
    date: str
    timestamp: int
    payment_method: PaymentMethod

    @property
    def label(self) -> str:
        """Short display label, e.g. ``#3f9a``."""
        return f"#{self.id[-4:]}"

    def with_items(self, items: tuple[InvoiceItem, ...]) -> Invoice:
        return Invoice(
            id=self.id,
            items=items,
            total_amount=sum_totals(items),
            date=self.date,
            timestamp=self.timestamp,
            payment_method=self.payment_method,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "totalAmount": self.total_amount,
            "date": self.date,
            "timestamp": self.timestamp,
            "paymentMethod": self.payment_method.value,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Invoice:
        items = tuple(InvoiceItem.from_dict(item) for item in raw["items"])
        total_amount = _number(raw, "totalAmount")
        if not _matches(total_amount, sum_totals(items)):
            raise ValueError(f"totalAmount {total_amount!r} does not match the item totals")
        timestamp = raw["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise TypeError(f"timestamp must be an integer, got {type(timestamp).__name__}")
        return cls(
            id=str(raw["id"]),
            items=items,
            total_amount=total_amount,
            date=str(raw["date"]),
            timestamp=timestamp,
            payment_method=PaymentMethod(raw["paymentMethod"]),
        )


@dataclass(frozen=True)
class AppSettings:
    """Process-wide application settings."""

    app_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"appName": self.app_name}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> AppSettings:
        return cls(app_name=str(raw["appName"]))


@dataclass
class SoldItem:
    """One row of the sold-items report, grouped by product id."""

    product_id: str
    name: str
    count: float = 0
    value: float = 0


@dataclass
class SalesTotals:
    """Quantity and value sold under one item name."""

    quantity: float = 0
    total: float = 0


@dataclass(frozen=True)
class SalesRow:
    """A flattened sales-export row."""

    item_name: str
    quantity_sold: float
    total_value: float


def sum_totals(items: tuple[InvoiceItem, ...] | list[InvoiceItem]) -> float:
    """Sum line totals; ``0`` for no items."""
    return sum((item.total for item in items), 0)
