"""Sold items report modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from pos_ledger.ledger import Ledger
from pos_ledger.rendering import format_amount, format_sold_item


class ReportModal(ModalScreen[None]):
    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
    ]

    CSS = """
    ReportModal {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 64;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #report-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, ledger: Ledger) -> None:
        super().__init__()
        self.ledger = ledger

    def compose(self) -> ComposeResult:
        with Container(id="report-dialog"):
            yield Static("Sold Items", id="report-title")
            yield Static(id="report-body")
            yield Static("Esc / q close", id="report-help")

    def on_mount(self) -> None:
        reports = self.ledger.reports()
        rows = reports.sold_items_report()
        if not rows:
            self.query_one("#report-body", Static).update("(no sales yet)")
            return

        lines = Text()
        for idx, row in enumerate(rows):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_sold_item(row))
        lines.append(f"\n\nGrand total: {format_amount(reports.grand_total())}", style="bold")
        self.query_one("#report-body", Static).update(lines)

    def action_close(self) -> None:
        self.dismiss()
