"""Product entry and edit modal screen."""

from __future__ import annotations

from typing import Any

from pos_ledger.barcode_modal import BarcodeModal
from pos_ledger.errors import LedgerError
from pos_ledger.form_modal import FormModal
from pos_ledger.ledger import Ledger, ScanTarget
from pos_ledger.models import Product
from pos_ledger.rendering import editable_amount, parse_amount


class ProductModal(FormModal):
    """Form for a catalog product: name, price and barcode.

    With ``product`` set the form starts from its values and saves through
    ``catalog.update``; otherwise it adds a new product.
    """

    FIELDS = ("name", "price", "barcode")
    LABELS = {"name": "Name", "price": "Price", "barcode": "Barcode"}
    HELP = "Tab/Up/Down switch field. Ctrl+B scan barcode. Enter save. Esc cancel."

    def __init__(self, ledger: Ledger, product: Product | None = None) -> None:
        values = None
        if product is not None:
            values = {"name": product.name, "price": editable_amount(product.price), "barcode": product.barcode}
        super().__init__("Edit Product" if product else "New Product", values)
        self.ledger = ledger
        self.product = product

    def handle_extra_key(self, key: str) -> bool:
        if key != "ctrl+b":
            return False
        self.app.push_screen(BarcodeModal("Scan Product Barcode"), self._on_barcode)
        return True

    def _on_barcode(self, code: str | None) -> None:
        scanned = self.ledger.handle_scan(code, ScanTarget.PRODUCT_FORM)
        if isinstance(scanned, str):
            self.values["barcode"] = scanned
            self._refresh_content()

    def _save(self) -> None:
        try:
            price = parse_amount(self.values["price"])
        except ValueError:
            self._fail("Price must be a number.")
            return

        fields: dict[str, Any] = {
            "name": self.values["name"],
            "price": price,
            "barcode": self.values["barcode"].strip(),
        }
        try:
            if self.product is None:
                saved = self.ledger.catalog.add(**fields)
            else:
                saved = self.ledger.catalog.update(self.product.id, fields)
        except LedgerError as exc:
            self._fail(str(exc))
            return
        self.dismiss(saved)
