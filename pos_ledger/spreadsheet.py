"""Write the sales table to an .xlsx workbook."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import openpyxl
import structlog
from openpyxl.styles import Font

from pos_ledger.constant import SALES_TABLE_COLUMNS, SALES_TABLE_SHEET_NAME

logger = structlog.get_logger(__name__)


def write_sales_workbook(records: Sequence[Mapping[str, Any]], path: str | Path) -> Path:
    """Save heading-keyed sales records as a one-sheet workbook at ``path``.

    The first row holds the column headings in bold; each record becomes one
    row below it, in order.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = SALES_TABLE_SHEET_NAME

    headings = list(SALES_TABLE_COLUMNS.values())
    for col, heading in enumerate(headings, 1):
        worksheet.cell(row=1, column=col, value=heading).font = Font(bold=True)
    for row_idx, record in enumerate(records, 2):
        for col, heading in enumerate(headings, 1):
            worksheet.cell(row=row_idx, column=col, value=record.get(heading, ""))

    for col, heading in enumerate(headings, 1):
        width = max([len(heading)] + [len(str(record.get(heading, ""))) for record in records])
        worksheet.column_dimensions[worksheet.cell(row=1, column=col).column_letter].width = width + 2

    workbook.save(target)
    logger.info("sales_workbook_written", path=str(target), rows=len(records))
    return target
