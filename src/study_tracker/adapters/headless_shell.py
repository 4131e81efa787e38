"""Desktop shell stand-in for running the service without a desktop host."""

import logging
from dataclasses import dataclass

from study_tracker.services.desktop import DesktopShell
from study_tracker.tray_menu import UiEvent

logger = logging.getLogger(__name__)


@dataclass
class HeadlessShell(DesktopShell):
    """Logs shell calls instead of touching windows or notifications."""

    quit_requested: bool = False

    def notify(self, title: str, body: str) -> None:
        logger.info("Notification: %s: %s", title, body)

    def emit(self, event: UiEvent) -> None:
        logger.info("UI event: %s", event.value)

    def focus_main_window(self) -> None:
        logger.info("No main window to focus")

    def any_window_visible(self) -> bool:
        return False

    def open_screenshot_overlay(self) -> None:
        logger.warning("Screenshot overlay requested but no desktop host is attached")

    def quit(self) -> None:
        self.quit_requested = True
