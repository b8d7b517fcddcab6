"""Tests for the sales workbook writer."""

import openpyxl

from pos_ledger.constant import GRAND_TOTAL_LABEL, SALES_TABLE_SHEET_NAME
from pos_ledger.spreadsheet import write_sales_workbook


def test_workbook_has_headings_then_records(ledger, tmp_path):
    tea = ledger.catalog.add("Tea", 10)
    ledger.add_to_cart(tea.id)
    ledger.add_to_cart(tea.id)
    ledger.checkout("cash")

    path = write_sales_workbook(ledger.transfer.export_sales_table_records(), tmp_path / "out" / "sales.xlsx")

    sheet = openpyxl.load_workbook(path)[SALES_TABLE_SHEET_NAME]
    assert [list(row) for row in sheet.iter_rows(values_only=True)] == [
        ["Item Name", "Quantity Sold", "Total Value"],
        ["Tea", 2, 20],
        [GRAND_TOTAL_LABEL, 0, 20],
    ]
    assert sheet["A1"].font.bold


def test_empty_history_still_writes_total_row(ledger, tmp_path):
    path = write_sales_workbook(ledger.transfer.export_sales_table_records(), tmp_path / "sales.xlsx")

    rows = list(openpyxl.load_workbook(path).active.iter_rows(values_only=True))
    assert rows[-1] == (GRAND_TOTAL_LABEL, 0, 0)
