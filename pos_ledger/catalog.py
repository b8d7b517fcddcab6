"""Product catalog: the durable set of sellable products."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Callable, Iterable
from uuid import uuid4

import structlog

from pos_ledger.errors import NotFoundError, ValidationError, errmsg
from pos_ledger.models import Product

logger = structlog.get_logger(__name__)

_PATCHABLE_FIELDS = {"name", "price", "barcode"}


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(errmsg.NAME_REQUIRED)
    return name


def _validate_price(price: Any) -> float:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError(errmsg.PRICE_POSITIVE)
    if not math.isfinite(price) or price <= 0:
        raise ValidationError(errmsg.PRICE_POSITIVE)
    return price


class ProductCatalog:
    """Insertion-ordered products keyed by id.

    There is no delete operation; saved invoices keep their own copies of
    product names and prices.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._products: dict[str, Product] = {product.id: product for product in products}
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._products)

    def list_products(self) -> list[Product]:
        return list(self._products.values())

    def add(self, name: str, price: float, barcode: str = "") -> Product:
        """Create a product and append it to the catalog."""
        product = Product(
            id=uuid4().hex,
            name=_validate_name(name),
            price=_validate_price(price),
            barcode=barcode or "",
        )
        self._products[product.id] = product
        logger.info("product_added", product_id=product.id, name=product.name, price=product.price)
        self._changed()
        return product

    def update(self, product_id: str, patch: dict[str, Any]) -> Product:
        """Partially update ``name``, ``price`` or ``barcode``."""
        current = self._products.get(product_id)
        if current is None:
            raise NotFoundError(f"{errmsg.PRODUCT_NOT_FOUND}: {product_id}")

        unknown = set(patch) - _PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"{errmsg.UNKNOWN_PRODUCT_FIELD}: {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        if "name" in patch:
            changes["name"] = _validate_name(patch["name"])
        if "price" in patch:
            changes["price"] = _validate_price(patch["price"])
        if "barcode" in patch:
            changes["barcode"] = patch["barcode"] or ""

        updated = replace(current, **changes)
        self._products[product_id] = updated
        logger.info("product_updated", product_id=product_id, fields=sorted(changes))
        self._changed()
        return updated

    def find_by_barcode(self, code: str) -> Product | None:
        """Return the first product whose barcode equals ``code``, else ``None``."""
        if not code:
            return None
        for product in self._products.values():
            if product.barcode == code:
                return product
        return None

    def find_by_id(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def replace_all(self, products: Iterable[Product]) -> None:
        """Swap in a full product list, e.g. from a snapshot import."""
        self._products = {product.id: product for product in products}
        logger.info("catalog_replaced", count=len(self._products))
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
