"""Single-line text prompt modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class PromptModal(ModalScreen[str | None]):
    """Collect one line of text; dismisses with ``None`` when cancelled."""

    DEFAULT_CSS = """
    PromptModal {
        align: center middle;
        background: $background 60%;
    }

    #prompt-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #prompt-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #prompt-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #prompt-help {
        color: #dddddd;
    }
    """

    def __init__(
        self,
        title: str,
        help_text: str = "Enter confirm. Backspace delete. Esc cancel.",
        initial: str = "",
        required_message: str = "A value is required.",
    ) -> None:
        super().__init__()
        self.title_text = title
        self.help_text = help_text
        self.required_message = required_message
        self.value = initial
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="prompt-dialog"):
            yield Static(self.title_text, id="prompt-title")
            yield Static(id="prompt-value")
            yield Static(id="prompt-error")
            yield Static(self.help_text, id="prompt-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
        elif event.key == "enter":
            self._confirm()
        elif event.key == "backspace":
            self.value = self.value[:-1]
            self.error = ""
            self._refresh_content()
        elif event.is_printable and event.character and len(event.character) == 1:
            self.value += event.character
            self.error = ""
            self._refresh_content()
        else:
            return
        event.stop()

    def _confirm(self) -> None:
        value = self.value.strip()
        if not value:
            self.error = self.required_message
            self._refresh_content()
            return
        self.dismiss(value)

    def _refresh_content(self) -> None:
        self.query_one("#prompt-value", Static).update(self.value)
        self.query_one("#prompt-error", Static).update(self.error)
