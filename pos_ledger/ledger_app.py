"""Main Textual app class."""

from __future__ import annotations

from pathlib import Path

import structlog
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from pos_ledger.barcode_modal import BarcodeModal
from pos_ledger.config import SALES_REPORT_PATH, SNAPSHOT_PATH
from pos_ledger.errors import LedgerError
from pos_ledger.invoices_modal import InvoicesModal
from pos_ledger.ledger import Ledger, ScanTarget
from pos_ledger.models import PaymentMethod, Product
from pos_ledger.printer import check_printer_dependencies, print_invoice
from pos_ledger.product_modal import ProductModal
from pos_ledger.prompt_modal import PromptModal
from pos_ledger.rendering import format_amount, format_cart_line, format_payment_badge, format_product_label
from pos_ledger.report_modal import ReportModal
from pos_ledger.spreadsheet import write_sales_workbook

logger = structlog.get_logger(__name__)


class LedgerApp(App):
    """A Textual register for building carts and saving invoices."""

    TITLE = "POS Ledger"
    SUB_TITLE = "Register"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-footer {
        height: 2;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add product"),
        ("ctrl+e", "edit_selected_product", "Edit product"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "checkout", "Save + Print", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        ledger: Ledger,
        snapshot_path: str = SNAPSHOT_PATH,
        sales_report_path: str = SALES_REPORT_PATH,
    ) -> None:
        super().__init__()
        self.ledger = ledger
        self.snapshot_path = Path(snapshot_path)
        self.sales_report_path = Path(sales_report_path)
        self.system_status = ""
        self.printer_ready = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Current Sale", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-footer")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        self.title = self.ledger.settings.current().app_name
        self.printer_ready, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("app_mounted", printer_status=msg)
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if self.screen is not self.screen_stack[0]:
            return

        if event.key == "ctrl+s":
            self.action_checkout()
            event.stop()
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        if self.input_state == "active":
            self.search_query += event.character
            self.selected_index = 0
            self._refresh_search()
            event.stop()
            return

        key = event.character.lower()
        handlers = {
            "/": self._enter_search,
            "s": self._enter_search,
            "j": lambda: self._move_cart_selection(1),
            "k": lambda: self._move_cart_selection(-1),
            "+": lambda: self._change_selected_quantity(1),
            "=": lambda: self._change_selected_quantity(1),
            "-": lambda: self._change_selected_quantity(-1),
            "x": self._remove_selected_line,
            "b": self._open_scanner,
            "p": self._toggle_payment_method,
            "a": self._open_product_form,
            "i": lambda: self.push_screen(InvoicesModal(self.ledger), lambda _: self._refresh_all()),
            "r": lambda: self.push_screen(ReportModal(self.ledger)),
            "e": self._export_snapshot,
            "o": self._import_snapshot,
            "t": self._export_sales_table,
            "n": self._open_rename,
        }
        handler = handlers.get(key)
        if handler is None:
            return
        handler()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        product = results[self.selected_index]
        self.ledger.add_to_cart(product.id)
        self._select_cart_line(product.id)
        self._refresh_cart()

    def action_edit_selected_product(self) -> None:
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        def on_saved(product: Product | None) -> None:
            if product is not None:
                self._set_status(f"Updated product {product.name}")
            self._refresh_search()

        self.push_screen(ProductModal(self.ledger, results[self.selected_index]), on_saved)

    def action_backspace_query(self) -> None:
        if self.input_state != "active":
            return

        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_checkout(self) -> None:
        if self.screen is not self.screen_stack[0]:
            return
        if self.input_state != "normal":
            self._set_status("Save only outside search (Ctrl+C to exit search)")
            return

        try:
            invoice = self.ledger.checkout()
        except LedgerError as exc:
            self._set_status(str(exc))
            return

        self.cart_selected_index = None
        self._refresh_cart()
        if not self.printer_ready:
            self._set_status(f"Saved invoice {invoice.label}")
            return
        try:
            print_invoice(invoice, self.ledger.settings.current().app_name)
        except Exception as exc:
            logger.warning("invoice_print_failed", invoice_id=invoice.id, error=repr(exc))
            self._set_status(f"Saved {invoice.label} but print failed: {exc}")
            return
        self._set_status(f"Saved + printed: {invoice.label}")

    def _enter_search(self) -> None:
        self.input_state = "active"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def _open_scanner(self) -> None:
        self.push_screen(BarcodeModal(), self._on_scanned)

    def _on_scanned(self, code: str | None) -> None:
        product = self.ledger.handle_scan(code, ScanTarget.CART)
        if not isinstance(product, Product):
            if code is not None:
                self._set_status(f"Product not registered: {code}")
            return
        self._select_cart_line(product.id)
        self._set_status(f"Added {product.name}")
        self._refresh_cart()

    def _open_product_form(self) -> None:
        def on_saved(product: Product | None) -> None:
            if product is not None:
                self._set_status(f"Added product {product.name}")
            self._refresh_search()

        self.push_screen(ProductModal(self.ledger), on_saved)

    def _open_rename(self) -> None:
        current = self.ledger.settings.current().app_name
        self.push_screen(PromptModal(f"Rename store (now: {current})"), self._on_renamed)

    def _on_renamed(self, name: str | None) -> None:
        if name is None:
            return
        self.ledger.settings.rename(name)
        self.title = name
        self._set_status(f"Store renamed to {name}")

    def _toggle_payment_method(self) -> None:
        if self.ledger.payment_method is PaymentMethod.CASH:
            self.ledger.select_payment_method(PaymentMethod.INSTAPAY)
        else:
            self.ledger.select_payment_method(PaymentMethod.CASH)
        self._refresh_cart()

    def _export_snapshot(self) -> None:
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            self.snapshot_path.write_text(self.ledger.transfer.dump_snapshot(), encoding="utf-8")
        except OSError as exc:
            self._set_status(f"Export failed: {exc}")
            return
        logger.info("snapshot_exported", path=str(self.snapshot_path))
        self._set_status(f"Exported backup to {self.snapshot_path}")

    def _export_sales_table(self) -> None:
        try:
            write_sales_workbook(self.ledger.transfer.export_sales_table_records(), self.sales_report_path)
        except OSError as exc:
            self._set_status(f"Sales export failed: {exc}")
            return
        self._set_status(f"Exported sales report to {self.sales_report_path}")

    def _import_snapshot(self) -> None:
        try:
            blob = self.snapshot_path.read_bytes()
            self.ledger.transfer.import_snapshot(blob)
        except OSError as exc:
            self._set_status(f"Import failed: {exc}")
            return
        except LedgerError as exc:
            self._set_status(f"Invalid backup file: {exc}")
            return
        self.title = self.ledger.settings.current().app_name
        self._set_status(f"Imported backup from {self.snapshot_path}")
        self._refresh_all()

    def _filtered_results(self) -> list[Product]:
        source = self.ledger.catalog.list_products()
        if not self.search_query:
            return source
        q = self.search_query.lower()
        return [product for product in source if q in product.name.lower() or q == product.barcode]

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_search_bar()

    def _select_cart_line(self, product_id: str) -> None:
        for idx, item in enumerate(self.ledger.cart.items):
            if item.product_id == product_id:
                self.cart_selected_index = idx
                return

    def _move_cart_selection(self, delta: int) -> None:
        items = self.ledger.cart.items
        if not items:
            return

        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else len(items) - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % len(items)
        self._refresh_cart()

    def _selected_line_product_id(self) -> str | None:
        items = self.ledger.cart.items
        if self.cart_selected_index is None or not (0 <= self.cart_selected_index < len(items)):
            return None
        return items[self.cart_selected_index].product_id

    def _change_selected_quantity(self, delta: int) -> None:
        product_id = self._selected_line_product_id()
        if product_id is None:
            return
        self.ledger.cart.set_quantity(product_id, self.ledger.cart.quantity_of(product_id) + delta)
        self._refresh_cart()

    def _remove_selected_line(self) -> None:
        product_id = self._selected_line_product_id()
        if product_id is None:
            return
        self.ledger.cart.set_quantity(product_id, 0)
        self._refresh_cart()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            footer = self.query_one("#cart-footer", Static)
        except NoMatches:
            return

        footer_text = Text()
        footer_text.append(f"Total: {format_amount(self.ledger.cart.total())}  ", style="bold")
        footer_text.append_text(format_payment_badge(self.ledger.payment_method))
        footer.update(footer_text)

        items = self.ledger.cart.items
        if not items:
            self.cart_selected_index = None
            cart_widget.update("(cart is empty)")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(items):
            self.cart_selected_index = len(items) - 1

        visible_rows = self._visible_rows(cart_widget)
        start, end = self._window_bounds(len(items), visible_rows, self.cart_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")

            pointer = "➤ " if idx == self.cart_selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_cart_line(items[idx]))

        if end < len(items):
            lines.append("\n⋮", style="dim")

        cart_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                "/ search  b scan  p payment  a product  i invoices  r report  t sales xlsx\n"
                f"n rename  e/o backup  Ctrl+S save/print. {status}"
            )
            return

        text = Text()
        text.append("Search", style="bold")
        text.append(f": {self.search_query}")
        text.append("\nEnter add  Ctrl+E edit  Ctrl+C exit", style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[Product]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_product_label(results[idx]))

        if end < len(results):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
