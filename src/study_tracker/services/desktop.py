"""Tray menu and global shortcut handlers."""

import logging
from dataclasses import dataclass
from typing import Protocol

from study_tracker.errors import StorageError
from study_tracker.services.sessions import SessionManager
from study_tracker.tray_menu import (
    SCREENSHOT_SHORTCUTS,
    TrayMenuItem,
    UiEvent,
    normalize_shortcut,
)

logger = logging.getLogger(__name__)


class DesktopShell(Protocol):
    """Window, notification and event surface of the desktop host."""

    def notify(self, title: str, body: str) -> None:
        """Show a system notification without stealing focus."""

    def emit(self, event: UiEvent) -> None:
        """Send an event to the UI windows."""

    def focus_main_window(self) -> None:
        """Show and focus the main window, creating it if needed."""

    def any_window_visible(self) -> bool:
        """Return True when at least one UI window is visible."""

    def open_screenshot_overlay(self) -> None:
        """Capture the screen and open the screenshot overlay."""

    def quit(self) -> None:
        """Exit the application."""


@dataclass
class TrayMenuHandler:
    """Handle clicks on the tray menu (called on the UI event thread)."""

    manager: SessionManager
    shell: DesktopShell

    def handle(self, item_id: str) -> None:
        """Dispatch a tray menu click by item id."""
        if item_id == TrayMenuItem.QUIT.value.id:
            logger.info("Quit menu item clicked")
            self.shell.quit()
        elif item_id == TrayMenuItem.START_SESSION.value.id:
            logger.info("Start/Switch Session menu item clicked")
            self.shell.focus_main_window()
            self.shell.emit(UiEvent.OPEN_SESSION_MODAL)
        elif item_id == TrayMenuItem.END_SESSION.value.id:
            logger.info("End Session menu item clicked")
            self._end_session()
        else:
            logger.debug("Ignoring unknown tray menu item %s", item_id)

    def _end_session(self) -> None:
        active = self.manager.get_active_session()
        try:
            ended = self.manager.end_session()
        except StorageError:
            # Ended in memory; only the flush failed and the manager logged it.
            ended = active

        if ended is not None:
            self.shell.notify("Session Ended", f"Ended: {ended.name}")
        else:
            self.shell.notify(
                "No Active Session", "There was no active session to end."
            )
        if self.shell.any_window_visible():
            self.shell.emit(UiEvent.SESSION_STATE_CHANGED)


@dataclass
class ShortcutHandler:
    """Handle global shortcuts (called on the input-handling thread)."""

    manager: SessionManager
    shell: DesktopShell

    def handle(self, shortcut: str, pressed: bool) -> None:
        """React to a screenshot shortcut being pressed."""
        if normalize_shortcut(shortcut) not in SCREENSHOT_SHORTCUTS or not pressed:
            return
        if self.manager.get_active_session() is None:
            logger.info("Screenshot shortcut pressed without an active session")
            self.shell.notify(
                "No Active Session", "Start a session before taking a screenshot."
            )
            self.shell.focus_main_window()
            self.shell.emit(UiEvent.OPEN_SESSION_MODAL)
            return
        logger.info("Screenshot shortcut pressed")
        self.shell.open_screenshot_overlay()
