"""Editable display labels and export headings."""

from __future__ import annotations

PAYMENT_METHOD_LABELS: dict[str, str] = {
    "cash": "Cash",
    "instapay": "InstaPay",
}

GRAND_TOTAL_LABEL = "Grand Total"

# Spreadsheet column headings, in column order.
SALES_TABLE_COLUMNS: dict[str, str] = {
    "item_name": "Item Name",
    "quantity_sold": "Quantity Sold",
    "total_value": "Total Value",
}

SALES_TABLE_SHEET_NAME = "Sales Report"
