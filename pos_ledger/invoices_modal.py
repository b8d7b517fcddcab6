"""Saved invoices modal with item editing and delete confirmation."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from pos_ledger.errors import LedgerError
from pos_ledger.form_modal import FormModal
from pos_ledger.ledger import Ledger
from pos_ledger.models import Invoice
from pos_ledger.rendering import editable_amount, format_amount, format_cart_line, format_invoice_row, parse_amount


class ConfirmModal(ModalScreen[bool]):
    """Yes/no prompt; dismisses with ``True`` only on an explicit yes."""

    CSS = """
    ConfirmModal {
        align: center middle;
        background: $background 60%;
    }

    #confirm-dialog {
        width: 48;
        height: auto;
        border: round $error;
        background: $panel;
        padding: 1 2;
    }

    #confirm-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static(self.prompt)
            yield Static("y confirm. n / Esc cancel.", id="confirm-help")

    def on_key(self, event: Key) -> None:
        if event.key == "y":
            self.dismiss(True)
        elif event.key in {"n", "escape", "q", "ctrl+c"}:
            self.dismiss(False)
        else:
            return
        event.stop()


class InvoiceItemModal(FormModal):
    """Edit one line of a saved invoice; totals are recomputed on save.

    Dismisses with the updated invoice, or ``None`` when cancelled.
    """

    FIELDS = ("name", "price", "quantity")
    LABELS = {"name": "Name", "price": "Price", "quantity": "Quantity"}

    def __init__(self, ledger: Ledger, invoice: Invoice, item_index: int) -> None:
        item = invoice.items[item_index]
        super().__init__(
            f"Edit {invoice.label} line {item_index + 1}",
            {"name": item.name, "price": editable_amount(item.price), "quantity": editable_amount(item.quantity)},
        )
        self.ledger = ledger
        self.invoice_id = invoice.id
        self.item_index = item_index

    def _save(self) -> None:
        try:
            price = parse_amount(self.values["price"])
            quantity = parse_amount(self.values["quantity"])
        except ValueError:
            self._fail("Price and quantity must be numbers.")
            return

        patch = {"name": self.values["name"], "price": price, "quantity": quantity}
        try:
            updated = self.ledger.invoices.update_item(self.invoice_id, self.item_index, patch)
        except LedgerError as exc:
            self._fail(str(exc))
            return
        self.dismiss(updated)


class InvoicesModal(ModalScreen[None]):
    """Newest-first invoice list with item details for the selection."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("up", "move_cursor(-1)", "Previous"),
        ("l", "move_item(1)", "Next item"),
        ("h", "move_item(-1)", "Previous item"),
        ("e", "edit_item", "Edit item"),
        ("d", "delete_selected", "Delete"),
    ]

    CSS = """
    InvoicesModal {
        align: center middle;
        background: $background 60%;
    }

    #invoices-dialog {
        width: 80;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #invoices-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #invoices-body {
        color: white;
    }

    #invoices-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    item_index = reactive(0)

    def __init__(self, ledger: Ledger) -> None:
        super().__init__()
        self.ledger = ledger

    def compose(self) -> ComposeResult:
        with Container(id="invoices-dialog"):
            yield Static(id="invoices-title")
            yield Static(id="invoices-body")
            yield Static("j/k invoice. h/l item. e edit item. d delete. Esc / q close.", id="invoices-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def action_move_cursor(self, delta: int) -> None:
        invoices = self.ledger.invoices.list_invoices()
        if not invoices:
            return
        self.cursor_index = (self.cursor_index + delta) % len(invoices)
        self.item_index = 0
        self._refresh_content()

    def action_move_item(self, delta: int) -> None:
        invoice = self._selected_invoice()
        if invoice is None or not invoice.items:
            return
        self.item_index = (self.item_index + delta) % len(invoice.items)
        self._refresh_content()

    def action_edit_item(self) -> None:
        invoice = self._selected_invoice()
        if invoice is None or not (0 <= self.item_index < len(invoice.items)):
            return

        def on_saved(updated: Invoice | None) -> None:
            if updated is not None:
                self._refresh_content()

        self.app.push_screen(InvoiceItemModal(self.ledger, invoice, self.item_index), on_saved)

    def action_delete_selected(self) -> None:
        invoice = self._selected_invoice()
        if invoice is None:
            return

        def on_confirm(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self.ledger.invoices.delete(invoice.id)
            self.item_index = 0
            self._refresh_content()

        self.app.push_screen(ConfirmModal(f"Delete invoice {invoice.label}?"), on_confirm)

    def _selected_invoice(self) -> Invoice | None:
        invoices = self.ledger.invoices.list_invoices()
        if not (0 <= self.cursor_index < len(invoices)):
            return None
        return invoices[self.cursor_index]

    def _refresh_content(self) -> None:
        invoices = self.ledger.invoices.list_invoices()
        total = self.ledger.reports().invoices_total()
        self.query_one("#invoices-title", Static).update(f"Saved Invoices  (total {format_amount(total)})")

        body = self.query_one("#invoices-body", Static)
        if not invoices:
            self.cursor_index = 0
            body.update("(no saved invoices)")
            return
        if self.cursor_index >= len(invoices):
            self.cursor_index = len(invoices) - 1

        lines = Text()
        for idx, invoice in enumerate(invoices):
            if idx > 0:
                lines.append("\n")
            lines.append("➤ " if idx == self.cursor_index else "  ")
            lines.append_text(format_invoice_row(invoice))
            if idx == self.cursor_index:
                for item_idx, item in enumerate(invoice.items):
                    lines.append("\n    " + ("› " if item_idx == self.item_index else "  "))
                    lines.append_text(format_cart_line(item))
        body.update(lines)
