"""Terminal form: named text slots plus a scrollable item list.

Drawing goes through rich; single key presses are captured with
prompt_toolkit key bindings.
"""
from __future__ import annotations

from typing import Iterable

from prompt_toolkit import prompt
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console
from rich.text import Text

from .components import quote

# Rows taken by title, header, info and status lines.
CHROME_LINES = 4


class Form:
    """Screen state of one view.

    Slots (all markup strings): title, subtle (column header), showsubtle,
    info, status, pos (selected list index).
    """

    def __init__(self, console: Console):
        self.console = console
        self.values: dict[str, str] = {"pos": "0", "showsubtle": "0"}
        self.items: list[str] = []

    # ── slots ──────────────────────────────────────────────────────

    def set(self, name: str, text: str) -> None:
        self.values[name] = text

    def get(self, name: str, default: str = "") -> str:
        return self.values.get(name, default)

    def append_list_item(self, text: str) -> None:
        self.items.append(text)

    def clear_list(self) -> None:
        self.items = []

    @property
    def pos(self) -> int:
        try:
            return int(self.get("pos", "0"))
        except ValueError:
            return 0

    # ── drawing ────────────────────────────────────────────────────

    def draw(self) -> None:
        console = self.console
        width = console.width
        height = max(console.height - CHROME_LINES, 1)
        pos = self.pos
        top = max(0, pos - height + 1)

        console.clear()
        self._line(self.get("title"), "reverse bold", width)
        if self.get("showsubtle") == "1":
            self._line(self.get("subtle"), "bold", width)
        for idx, item in enumerate(self.items[top : top + height], start=top):
            self._line(item, "reverse" if idx == pos else "", width)
        self._line(self.get("info"), "reverse", width)
        self._line(self.get("status"), "", width)

    def _line(self, markup: str, style: str, width: int) -> None:
        text = Text.from_markup(markup, style=style, emoji=False)
        if style:
            # Pad the visible text; markup escapes take no cells.
            text.pad_right(width - text.cell_len)
        self.console.print(
            text,
            highlight=False,
            emoji=False,
            no_wrap=True,
            overflow="crop",
            soft_wrap=False,
        )

    # ── input ──────────────────────────────────────────────────────

    def read_key(self, keys: Iterable[str]) -> str | None:
        """Block until one key is pressed.

        Returns:
            The key name if it is one of `keys`, otherwise None
        """
        kb = KeyBindings()

        def _bind(key: str) -> None:
            @kb.add(key)
            def _hit(event):
                event.app.exit(result=key)

        for key in dict.fromkeys(keys):
            _bind(key)

        @kb.add("<any>")
        def _ignored(event):
            event.app.exit(result="")

        result = prompt("", key_bindings=kb, default="")
        return result or None

    def ask(self, message: str, opts: str = "yn") -> str:
        """Blocking choice on the status line; Enter picks the first option."""
        self.set("status", quote(message))
        while True:
            self.draw()
            key = self.read_key([*opts, "enter"])
            if key == "enter":
                answer = opts[0]
                break
            if key and key in opts:
                answer = key
                break
        self.set("status", "")
        return answer
