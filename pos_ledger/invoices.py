"""Invoice store: the durable, newest-first collection of saved invoices."""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Sequence

import structlog

from pos_ledger.errors import NotFoundError, ValidationError, errmsg
from pos_ledger.models import Invoice, InvoiceItem

logger = structlog.get_logger(__name__)

_EDITABLE_ITEM_FIELDS = {"name", "price", "quantity"}


def _validate_item_patch(patch: dict[str, Any]) -> dict[str, Any]:
    unknown = set(patch) - _EDITABLE_ITEM_FIELDS
    if unknown:
        raise ValidationError(f"{errmsg.UNKNOWN_ITEM_FIELD}: {', '.join(sorted(unknown))}")
    for key in ("price", "quantity"):
        if key not in patch:
            continue
        value = patch[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValidationError(errmsg.ITEM_VALUE_NUMERIC)
    if "name" in patch:
        patch = {**patch, "name": str(patch["name"])}
    return patch


class InvoiceStore:
    """Saved invoices, newest first.

    Editing a saved item's quantity to zero or below keeps the item on the
    invoice. Only the cart drops lines at quantity zero.
    """

    def __init__(
        self,
        invoices: Iterable[Invoice] = (),
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._invoices: list[Invoice] = list(invoices)
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._invoices)

    def list_invoices(self) -> tuple[Invoice, ...]:
        return tuple(self._invoices)

    def get(self, invoice_id: str) -> Invoice | None:
        for invoice in self._invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    def append(self, invoice: Invoice) -> None:
        """Store a newly finalized invoice at the front."""
        self._invoices.insert(0, invoice)
        logger.info("invoice_saved", invoice_id=invoice.id, total=invoice.total_amount)
        self._changed()

    def delete(self, invoice_id: str) -> None:
        """Remove an invoice; unknown ids are ignored.

        Callers confirm with the operator before deleting.
        """
        remaining = [invoice for invoice in self._invoices if invoice.id != invoice_id]
        if len(remaining) == len(self._invoices):
            logger.info("invoice_delete_skipped", invoice_id=invoice_id)
        else:
            logger.info("invoice_deleted", invoice_id=invoice_id)
        self._invoices = remaining
        self._changed()

    def update(self, invoice_id: str, new_items: Sequence[InvoiceItem]) -> Invoice:
        """Replace an invoice's items and recompute its total."""
        idx = self._index_of(invoice_id)
        items = tuple(item.with_changes() for item in new_items)
        updated = self._invoices[idx].with_items(items)
        self._invoices[idx] = updated
        logger.info("invoice_updated", invoice_id=invoice_id, lines=len(items), total=updated.total_amount)
        self._changed()
        return updated

    def update_item(self, invoice_id: str, item_index: int, patch: dict[str, Any]) -> Invoice:
        """Edit one item's ``name``, ``price`` or ``quantity``."""
        invoice = self._invoices[self._index_of(invoice_id)]
        if not (0 <= item_index < len(invoice.items)):
            raise NotFoundError(f"{errmsg.ITEM_NOT_FOUND}: {invoice_id}[{item_index}]")

        changes = _validate_item_patch(patch)
        items = list(invoice.items)
        items[item_index] = items[item_index].with_changes(**changes)
        return self.update(invoice_id, items)

    def replace_all(self, invoices: Iterable[Invoice]) -> None:
        """Swap in a full invoice list, e.g. from a snapshot import."""
        self._invoices = list(invoices)
        logger.info("invoices_replaced", count=len(self._invoices))
        self._changed()

    def _index_of(self, invoice_id: str) -> int:
        for idx, invoice in enumerate(self._invoices):
            if invoice.id == invoice_id:
                return idx
        raise NotFoundError(f"{errmsg.INVOICE_NOT_FOUND}: {invoice_id}")

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
