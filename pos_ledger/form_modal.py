"""Keyboard-driven multi-field form modal."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class FormModal(ModalScreen[Any]):
    """Base for small text forms.

    Subclasses set ``FIELDS`` and ``LABELS`` and implement :meth:`_save`, which
    dismisses the screen on success or sets ``self.error`` and returns.
    """

    DEFAULT_CSS = """
    FormModal {
        align: center middle;
        background: $background 60%;
    }

    #form-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #form-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #form-fields {
        color: white;
        margin-bottom: 1;
    }

    #form-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #form-help {
        color: #dddddd;
    }
    """

    FIELDS: tuple[str, ...] = ()
    LABELS: dict[str, str] = {}
    HELP = "Tab/Up/Down switch field. Enter save. Esc cancel."

    def __init__(self, title: str, values: dict[str, str] | None = None) -> None:
        super().__init__()
        self.title_text = title
        self.values = {name: "" for name in self.FIELDS}
        self.values.update(values or {})
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="form-dialog"):
            yield Static(self.title_text, id="form-title")
            yield Static(id="form-fields")
            yield Static(id="form-error")
            yield Static(self.HELP, id="form-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        current = self.FIELDS[self.field_index]
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if self.handle_extra_key(event.key):
            event.stop()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self.FIELDS)
        elif event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self.FIELDS)
        elif event.key == "enter":
            self._save()
        elif event.key == "backspace":
            self.values[current] = self.values[current][:-1]
        elif event.is_printable and event.character and len(event.character) == 1:
            self.values[current] += event.character
            self.error = ""
        else:
            return

        self._refresh_content()
        event.stop()

    def handle_extra_key(self, key: str) -> bool:
        """Hook for subclass shortcuts; return ``True`` when ``key`` was used."""
        return False

    def _save(self) -> None:
        raise NotImplementedError

    def _fail(self, message: str) -> None:
        self.error = message
        self._refresh_content()

    def _refresh_content(self) -> None:
        form = Text()
        for idx, name in enumerate(self.FIELDS):
            if idx > 0:
                form.append("\n")
            selected = idx == self.field_index
            form.append(f"{'➤ ' if selected else '  '}{self.LABELS[name]}: ", style="bold" if selected else "")
            form.append(self.values[name])
        self.query_one("#form-fields", Static).update(form)
        self.query_one("#form-error", Static).update(self.error)
