"""Invoice receipt printing on an ESC/POS thermal printer."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from pos_ledger.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from pos_ledger.models import Invoice
from pos_ledger.rendering import format_amount, payment_label

logger = structlog.get_logger(__name__)

_SEPARATOR_TOKEN = "__SEP__"
_SEPARATOR_HEIGHT_PX = 14
_SEPARATOR_THICKNESS_PX = 2
# Extra vertical headroom so descenders are not clipped on thermal output.
_LINE_EXTRA_PX = 12
_FONT_OVERRIDE_ENV = "POS_LEDGER_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def receipt_lines(invoice: Invoice, app_name: str) -> list[str]:
    """Text lines of a printed receipt, with separator tokens between sections."""
    lines = [app_name, f"Invoice {invoice.label}", f"{invoice.date[:10]} {invoice.date[11:19]}", _SEPARATOR_TOKEN]
    for item in invoice.items:
        lines.append(item.name)
        lines.append(f"  {format_amount(item.price)} x {format_amount(item.quantity)} = {format_amount(item.total)}")
    lines.append(_SEPARATOR_TOKEN)
    lines.append(f"Total: {format_amount(invoice.total_amount)}")
    lines.append(f"Paid: {payment_label(invoice.payment_method)}")
    return lines


def _font_candidates() -> list[str]:
    override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    ordered = [override, PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS]
    return list(dict.fromkeys(path for path in ordered if path))


def resolve_printer_font_path() -> str:
    """First existing font file among the override, the configured path and Linux fallbacks."""
    candidates = _font_candidates()
    for candidate in candidates:
        if Path(candidate).is_file():
            return candidate
    raise RuntimeError(f"no receipt font found, set {_FONT_OVERRIDE_ENV} (tried: {', '.join(candidates)})")


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether receipts can be printed, with a status message."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printing disabled: {exc}")
    return (True, "Printer ready")


def _blank(height_px: int):
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_line(text: str, font):
    from PIL import ImageDraw

    height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = _blank(height)
    draw = ImageDraw.Draw(img)
    left, top, _, bottom = draw.textbbox((0, 0), text, font=font)
    # Shift by the bbox top so descenders stay on the canvas.
    draw.text((PRINTER_LEFT_INDENT_PX - left, (height - (bottom - top)) // 2 - top), text, font=font, fill=0)
    return img


def _render_separator():
    from PIL import ImageDraw

    img = _blank(_SEPARATOR_HEIGHT_PX)
    top = (_SEPARATOR_HEIGHT_PX - _SEPARATOR_THICKNESS_PX) // 2
    ImageDraw.Draw(img).rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _SEPARATOR_THICKNESS_PX - 1), fill=0)
    return img


def print_invoice(invoice: Invoice, app_name: str) -> None:
    """Print one invoice receipt and cut the ticket."""
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except ImportError as exc:
        raise RuntimeError(f"printing needs python-escpos and Pillow: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    device = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    for line in receipt_lines(invoice, app_name):
        device.image(_render_separator() if line == _SEPARATOR_TOKEN else _render_line(line, font))
    device.image(_blank(PRINTER_TAIL_SPACER_PX))
    device.cut()
    logger.info("invoice_printed", invoice_id=invoice.id, lines=len(invoice.items))
