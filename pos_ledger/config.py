"""Runtime configuration defaults for persistence, logging and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("POS_LEDGER_DB_PATH", "data/ledger.db")
SNAPSHOT_PATH = os.environ.get("POS_LEDGER_SNAPSHOT_PATH", "data/backup_data.json")
SALES_REPORT_PATH = os.environ.get("POS_LEDGER_SALES_REPORT_PATH", "data/sales_report.xlsx")
DEBUG_LOG_PATH = os.environ.get("POS_LEDGER_DEBUG_LOG", "/tmp/pos-ledger-debug.log")

DEFAULT_APP_NAME = "My Store"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70
