"""Tray menu, UI event and shortcut configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class MenuEntry:
    """Declarative tray menu item definition."""

    id: str
    label: str


class TrayMenuItem(Enum):
    """Enum of tray menu items (single source of truth)."""

    START_SESSION = MenuEntry("start_session", "Start/Switch Session")
    END_SESSION = MenuEntry("end_session", "End Session")
    QUIT = MenuEntry("quit", "Quit")


class UiEvent(str, Enum):
    """Events emitted to the UI windows."""

    OPEN_SESSION_MODAL = "open-session-modal"
    SESSION_STATE_CHANGED = "session-state-changed"


SCREENSHOT_SHORTCUTS = frozenset({"ctrl+shift+s", "cmd+shift+s"})

_MODIFIERS = frozenset({"ctrl", "cmd", "shift", "alt"})


def tray_menu_items() -> list[dict[str, str]]:
    """Return menu items formatted for the desktop shell."""
    return [{"id": item.value.id, "label": item.value.label} for item in TrayMenuItem]


def normalize_shortcut(shortcut: str) -> str:
    """Normalise an accelerator like ``Shift+Ctrl+S`` to ``ctrl+shift+s``."""
    parts = [part.strip().lower() for part in shortcut.split("+") if part.strip()]
    aliases = {"control": "ctrl", "command": "cmd", "meta": "cmd", "super": "cmd"}
    parts = [aliases.get(part, part) for part in parts]
    modifiers = sorted(part for part in parts if part in _MODIFIERS)
    keys = [part for part in parts if part not in _MODIFIERS]
    return "+".join([*modifiers, *keys])
