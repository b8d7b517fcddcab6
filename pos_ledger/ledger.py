"""Application state holder wiring the stores to persistence."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable

import structlog

from pos_ledger.cart import CartBuilder, parse_payment_method, utc_now
from pos_ledger.catalog import ProductCatalog
from pos_ledger.errors import NotFoundError, errmsg
from pos_ledger.invoices import InvoiceStore
from pos_ledger.models import Invoice, InvoiceItem, PaymentMethod, Product
from pos_ledger.persistence import MemoryKeyValueStore, PersistenceGateway
from pos_ledger.reports import SalesAggregator
from pos_ledger.settings import SettingsStore
from pos_ledger.snapshot import ImportExportService

logger = structlog.get_logger(__name__)


class ScanTarget(str, Enum):
    """Where a scanned barcode should go."""

    CART = "cart"
    PRODUCT_FORM = "product_form"


class Ledger:
    """Catalog, cart, invoices and settings for one point of sale.

    Every catalog, invoice and settings mutation is written through to the
    gateway before the mutating call returns. The cart is never persisted.
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.gateway = gateway or PersistenceGateway(MemoryKeyValueStore())
        state = self.gateway.load()

        self.catalog = ProductCatalog(state.products, on_change=self._persist_products)
        self.invoices = InvoiceStore(state.invoices, on_change=self._persist_invoices)
        self.settings = SettingsStore(state.settings, on_change=self._persist_settings)
        self.cart = CartBuilder(store=self.invoices, clock=clock)
        self.transfer = ImportExportService(self.catalog, self.invoices, self.settings)
        self.payment_method = PaymentMethod.CASH

    def reports(self) -> SalesAggregator:
        return SalesAggregator(self.invoices.list_invoices())

    def add_to_cart(self, product_id: str) -> InvoiceItem:
        """Add a catalog product to the cart by id."""
        product = self.catalog.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"{errmsg.PRODUCT_NOT_FOUND}: {product_id}")
        return self.cart.add_product(product)

    def handle_scan(self, code: str | None, target: ScanTarget = ScanTarget.CART) -> Product | str | None:
        """Route a decoded barcode.

        ``None`` means the scan was cancelled and nothing happens. For the
        cart, returns the product added or ``None`` when no product carries
        the code. For the product form, returns the code to prefill.
        """
        if code is None:
            logger.info("scan_cancelled", target=target.value)
            return None

        if target is ScanTarget.PRODUCT_FORM:
            logger.info("scan_for_product_form", code=code)
            return code

        product = self.catalog.find_by_barcode(code)
        if product is None:
            logger.info("scan_unmatched", code=code)
            return None
        self.cart.add_product(product)
        return product

    def select_payment_method(self, method: PaymentMethod | str) -> PaymentMethod:
        self.payment_method = parse_payment_method(method)
        return self.payment_method

    def checkout(self, payment_method: PaymentMethod | str | None = None) -> Invoice:
        """Finalize and save the cart, then reset it for the next sale."""
        invoice = self.cart.finalize(payment_method or self.payment_method)
        self.cart.clear()
        self.payment_method = PaymentMethod.CASH
        return invoice

    def _persist_products(self) -> None:
        self.gateway.save_products(self.catalog.list_products())

    def _persist_invoices(self) -> None:
        self.gateway.save_invoices(self.invoices.list_invoices())

    def _persist_settings(self) -> None:
        self.gateway.save_settings(self.settings.current())
