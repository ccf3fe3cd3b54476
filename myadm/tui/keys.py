"""Key binding table.

Key names follow prompt_toolkit: single characters, "enter", "up", "down",
"c-c". A binding with mode None is active in every view.

Lookup scans the table in order and the FIRST matching binding wins, so a
mode-specific override must be listed before the global binding it shadows.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class Action(Enum):
    QUIT = "quit"
    BACK = "back"
    SELECT = "select"
    RELOAD = "reload"
    OPEN_DATABASE = "open_database"
    OPEN_TABLE = "open_table"
    EDIT_RECORD = "edit_record"
    EDIT_SCHEMA = "edit_schema"
    SHOW_SCHEMA = "show_schema"


@dataclass(frozen=True)
class KeyBinding:
    mode: str | None
    key: str
    action: Action
    arg: int | bool | None = None

    def matches(self, mode: str, key: str) -> bool:
        return self.key == key and (self.mode is None or self.mode == mode)


KEYS: tuple[KeyBinding, ...] = (
    #          mode          key       action                arg
    KeyBinding("databases", "q",       Action.QUIT,          False),
    KeyBinding(None,        "Q",       Action.QUIT,          True),
    KeyBinding(None,        "c-c",     Action.QUIT,          True),
    KeyBinding(None,        "q",       Action.BACK),
    KeyBinding(None,        "k",       Action.SELECT,        -1),
    KeyBinding(None,        "up",      Action.SELECT,        -1),
    KeyBinding(None,        "j",       Action.SELECT,        +1),
    KeyBinding(None,        "down",    Action.SELECT,        +1),
    KeyBinding(None,        "I",       Action.RELOAD),
    KeyBinding("databases", "enter",   Action.OPEN_DATABASE),
    KeyBinding("databases", " ",       Action.OPEN_DATABASE),
    KeyBinding("tables",    "enter",   Action.OPEN_TABLE),
    KeyBinding("tables",    " ",       Action.OPEN_TABLE),
    KeyBinding("tables",    "e",       Action.EDIT_SCHEMA),
    KeyBinding("tables",    "s",       Action.SHOW_SCHEMA),
    KeyBinding("records",   "enter",   Action.EDIT_RECORD),
    KeyBinding("records",   "e",       Action.EDIT_RECORD),
    KeyBinding("records",   "s",       Action.SHOW_SCHEMA),
    KeyBinding("text",      "e",       Action.EDIT_SCHEMA),
)


def lookup(bindings: Sequence[KeyBinding], mode: str, key: str | None) -> KeyBinding | None:
    """First binding for `key` active in `mode`, or None when the key is unbound."""
    if not key:
        return None
    for binding in bindings:
        if binding.matches(mode, key):
            return binding
    return None


def bound_keys(bindings: Iterable[KeyBinding], mode: str) -> list[str]:
    """Keys worth capturing in `mode`, in table order without duplicates."""
    return list(dict.fromkeys(b.key for b in bindings if b.mode is None or b.mode == mode))
