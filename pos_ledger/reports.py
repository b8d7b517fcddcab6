"""Sales aggregation over saved invoices."""

from __future__ import annotations

from typing import Iterable

from pos_ledger.models import Invoice, SalesTotals, SoldItem


class SalesAggregator:
    """Read-only reports derived from a sequence of invoices.

    Invoices are walked in the order given (newest first when taken from
    :class:`~pos_ledger.invoices.InvoiceStore`), so "first seen" means the
    most recent sale.
    """

    def __init__(self, invoices: Iterable[Invoice]) -> None:
        self._invoices = tuple(invoices)

    def sold_items_report(self) -> list[SoldItem]:
        """Quantity and value sold per product id.

        The displayed name is the one from the first line seen for that id.
        """
        report: dict[str, SoldItem] = {}
        for invoice in self._invoices:
            for item in invoice.items:
                row = report.get(item.product_id)
                if row is None:
                    row = report[item.product_id] = SoldItem(product_id=item.product_id, name=item.name)
                row.count += item.quantity
                row.value += item.total
        return list(report.values())

    def sales_by_name(self) -> dict[str, SalesTotals]:
        """Quantity and value sold per item name.

        Unlike :meth:`sold_items_report`, distinct products sharing a name
        are merged here.
        """
        by_name: dict[str, SalesTotals] = {}
        for invoice in self._invoices:
            for item in invoice.items:
                totals = by_name.setdefault(item.name, SalesTotals())
                totals.quantity += item.quantity
                totals.total += item.total
        return by_name

    def grand_total(self) -> float:
        """Sum of every line total across all invoices."""
        return sum((item.total for invoice in self._invoices for item in invoice.items), 0)

    def invoices_total(self) -> float:
        """Sum of invoice ``totalAmount`` values."""
        return sum((invoice.total_amount for invoice in self._invoices), 0)
