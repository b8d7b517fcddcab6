"""Cart builder: line items for the sale in progress."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable
from uuid import uuid4

import structlog

from pos_ledger.errors import EmptyCartError, ValidationError, errmsg
from pos_ledger.models import Invoice, InvoiceItem, PaymentMethod, Product, sum_totals

if TYPE_CHECKING:
    from pos_ledger.invoices import InvoiceStore

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso_millis(moment: datetime) -> str:
    """Format a UTC moment as ``2024-05-01T09:30:00.000Z``."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def parse_payment_method(value: PaymentMethod | str) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        raise ValidationError(f"{errmsg.UNKNOWN_PAYMENT_METHOD}: {value!r}") from None


class CartBuilder:
    """Ordered cart with one line per product id.

    The cart is transient and never persisted. ``finalize`` copies its lines
    into a new invoice and leaves the cart as it was; call ``clear`` after.
    """

    def __init__(
        self,
        store: InvoiceStore | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._items: list[InvoiceItem] = []
        self.store = store
        self.clock = clock

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple[InvoiceItem, ...]:
        return tuple(self._items)

    def add_product(self, product: Product) -> InvoiceItem:
        """Add one unit of ``product``, merging into an existing line."""
        for idx, item in enumerate(self._items):
            if item.product_id == product.id:
                updated = item.with_changes(quantity=item.quantity + 1)
                self._items[idx] = updated
                logger.info("cart_item_incremented", product_id=product.id, quantity=updated.quantity)
                return updated

        item = InvoiceItem.for_product(product)
        self._items.append(item)
        logger.info("cart_item_added", product_id=product.id, name=product.name)
        return item

    def set_quantity(self, product_id: str, quantity: float) -> None:
        """Set a line's quantity; zero or below removes the line.

        Unknown product ids are ignored.
        """
        for idx, item in enumerate(self._items):
            if item.product_id != product_id:
                continue
            if quantity <= 0:
                del self._items[idx]
                logger.info("cart_item_removed", product_id=product_id)
            else:
                self._items[idx] = item.with_changes(quantity=quantity)
                logger.info("cart_quantity_set", product_id=product_id, quantity=quantity)
            return

    def quantity_of(self, product_id: str) -> float:
        for item in self._items:
            if item.product_id == product_id:
                return item.quantity
        return 0

    def total(self) -> float:
        return sum_totals(self._items)

    def clear(self) -> None:
        self._items.clear()
        logger.info("cart_cleared")

    def finalize(self, payment_method: PaymentMethod | str) -> Invoice:
        """Build an invoice from the current lines and hand it to the store."""
        if not self._items:
            raise EmptyCartError(errmsg.CART_EMPTY)
        method = parse_payment_method(payment_method)

        moment = self.clock()
        items = tuple(self._items)
        invoice = Invoice(
            id=uuid4().hex,
            items=items,
            total_amount=sum_totals(items),
            date=to_iso_millis(moment),
            timestamp=to_epoch_millis(moment),
            payment_method=method,
        )
        logger.info(
            "cart_finalized",
            invoice_id=invoice.id,
            lines=len(items),
            total=invoice.total_amount,
            payment_method=method.value,
        )
        if self.store is not None:
            self.store.append(invoice)
        return invoice
