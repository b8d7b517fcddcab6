"""Rendering helpers for cart, invoice and report rows."""

from __future__ import annotations

from rich.text import Text

from pos_ledger.constant import PAYMENT_METHOD_LABELS
from pos_ledger.models import Invoice, InvoiceItem, PaymentMethod, Product, SoldItem


def format_amount(value: float) -> str:
    """Plain number text: whole values without decimals, others to 2 places."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def editable_amount(value: float) -> str:
    """Unrounded text for prefilling an input field."""
    if float(value).is_integer():
        return str(int(value))
    return repr(value)


def parse_amount(text: str) -> float:
    """Parse typed amount text; whole numbers stay ``int``."""
    cleaned = text.strip()
    try:
        return int(cleaned)
    except ValueError:
        return float(cleaned)


def payment_label(method: PaymentMethod | str) -> str:
    return PAYMENT_METHOD_LABELS.get(PaymentMethod(method).value, str(method))


def badge_style(method: PaymentMethod | str) -> str:
    """Return a consistent badge style for payment method tags."""
    if PaymentMethod(method) is PaymentMethod.INSTAPAY:
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_payment_badge(method: PaymentMethod | str) -> Text:
    text = Text()
    text.append(f" {payment_label(method)} ", style=badge_style(method))
    return text


def format_product_label(product: Product) -> Text:
    text = Text()
    text.append(product.name)
    text.append(f" - {format_amount(product.price)}", style="dim")
    if product.barcode:
        text.append(f" [{product.barcode}]", style="dim")
    return text


def format_cart_line(item: InvoiceItem) -> Text:
    """Render ``name  price x qty = total``."""
    text = Text()
    text.append(item.name, style="bold")
    text.append(f"  {format_amount(item.price)} x {format_amount(item.quantity)} = ")
    text.append(format_amount(item.total), style="bold #5fbf72")
    return text


def format_invoice_row(invoice: Invoice) -> Text:
    text = Text()
    text.append(f"Invoice {invoice.label}", style="bold")
    text.append(f"  {invoice.date[:10]} {invoice.date[11:16]}  ", style="dim")
    text.append(format_amount(invoice.total_amount), style="bold #5fbf72")
    text.append("  ")
    text.append_text(format_payment_badge(invoice.payment_method))
    return text


def format_sold_item(row: SoldItem) -> Text:
    text = Text()
    text.append(row.name, style="bold")
    text.append(f"  sold: {format_amount(row.count)}  ")
    text.append(format_amount(row.value), style="bold #5fbf72")
    return text
