"""Snapshot import/export and the flattened sales table."""

from __future__ import annotations

import json
from typing import Any, Mapping

import structlog

from pos_ledger.catalog import ProductCatalog
from pos_ledger.constant import GRAND_TOTAL_LABEL, SALES_TABLE_COLUMNS
from pos_ledger.errors import SnapshotImportError, errmsg
from pos_ledger.invoices import InvoiceStore
from pos_ledger.models import AppSettings, Invoice, Product, SalesRow
from pos_ledger.persistence import dump_json
from pos_ledger.reports import SalesAggregator
from pos_ledger.settings import SettingsStore

logger = structlog.get_logger(__name__)


def _parse_records(payload: Mapping[str, Any], key: str, parse: Any) -> list[Any]:
    records = payload[key]
    if not isinstance(records, list):
        raise SnapshotImportError(f"{errmsg.SNAPSHOT_MALFORMED}: {key} must be a list")
    try:
        return [parse(record) for record in records]
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotImportError(f"{errmsg.SNAPSHOT_MALFORMED}: {key} ({exc!r})") from exc


class ImportExportService:
    """Pure transformer over the catalog, invoice and settings stores."""

    def __init__(self, catalog: ProductCatalog, invoices: InvoiceStore, settings: SettingsStore) -> None:
        self.catalog = catalog
        self.invoices = invoices
        self.settings = settings

    def export_snapshot(self) -> dict[str, Any]:
        """Structural copy of all three stores in their wire format."""
        return {
            "products": [product.to_dict() for product in self.catalog.list_products()],
            "invoices": [invoice.to_dict() for invoice in self.invoices.list_invoices()],
            "settings": self.settings.current().to_dict(),
        }

    def dump_snapshot(self) -> str:
        """Snapshot as JSON text, ready to write to a backup file."""
        return dump_json(self.export_snapshot())

    def import_snapshot(self, blob: str | bytes | Mapping[str, Any]) -> None:
        """Replace each store whose key is present in ``blob``.

        Missing keys leave their store untouched and unknown keys are ignored.
        Every present key is validated before any store changes.
        """
        if isinstance(blob, Mapping):
            payload: Any = dict(blob)
        else:
            try:
                payload = json.loads(blob)
            except (ValueError, TypeError) as exc:
                logger.warning("snapshot_rejected", reason="unparsable", error=str(exc))
                raise SnapshotImportError(errmsg.SNAPSHOT_UNPARSABLE) from exc

        if not isinstance(payload, dict):
            logger.warning("snapshot_rejected", reason="not_object")
            raise SnapshotImportError(errmsg.SNAPSHOT_NOT_OBJECT)

        products: list[Product] | None = None
        invoices: list[Invoice] | None = None
        settings: AppSettings | None = None
        try:
            if payload.get("products") is not None:
                products = _parse_records(payload, "products", Product.from_dict)
            if payload.get("invoices") is not None:
                invoices = _parse_records(payload, "invoices", Invoice.from_dict)
            if payload.get("settings") is not None:
                try:
                    settings = AppSettings.from_dict(payload["settings"])
                except (KeyError, TypeError) as exc:
                    raise SnapshotImportError(f"{errmsg.SNAPSHOT_MALFORMED}: settings ({exc!r})") from exc
        except SnapshotImportError as exc:
            logger.warning("snapshot_rejected", reason="malformed", error=str(exc))
            raise

        if products is not None:
            self.catalog.replace_all(products)
        if invoices is not None:
            self.invoices.replace_all(invoices)
        if settings is not None:
            self.settings.replace(settings)
        logger.info(
            "snapshot_imported",
            products=products is not None,
            invoices=invoices is not None,
            settings=settings is not None,
        )

    def export_sales_table(self) -> list[SalesRow]:
        """Name-grouped sales rows closed by a grand-total row."""
        aggregator = SalesAggregator(self.invoices.list_invoices())
        rows = [
            SalesRow(item_name=name, quantity_sold=totals.quantity, total_value=totals.total)
            for name, totals in aggregator.sales_by_name().items()
        ]
        # The total row's quantity is a placeholder, not a sum.
        rows.append(SalesRow(item_name=GRAND_TOTAL_LABEL, quantity_sold=0, total_value=aggregator.grand_total()))
        return rows

    def export_sales_table_records(self) -> list[dict[str, Any]]:
        """Sales rows keyed by spreadsheet column headings."""
        return [
            {heading: getattr(row, attr) for attr, heading in SALES_TABLE_COLUMNS.items()}
            for row in self.export_sales_table()
        ]
