"""Barcode entry modal screen."""

from __future__ import annotations

from pos_ledger.prompt_modal import PromptModal


class BarcodeModal(PromptModal):
    """Capture one scanned or typed barcode.

    Scanners in keyboard-wedge mode type the code and press Enter. Dismisses
    with ``None`` when cancelled.
    """

    def __init__(self, title: str = "Scan Barcode") -> None:
        super().__init__(
            title,
            help_text="Scan or type the code. Enter confirm. Backspace delete. Esc cancel.",
            required_message="Barcode is required.",
        )
