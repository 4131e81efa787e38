"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from study_tracker.adapters.headless_shell import HeadlessShell
from study_tracker.adapters.local_image_storage import LocalImageStorage
from study_tracker.adapters.session_file import JsonSessionFileRepository
from study_tracker.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from study_tracker.config import Settings, resolve_data_dir
from study_tracker.errors import StorageError
from study_tracker.services.catalog import CatalogService
from study_tracker.services.desktop import (
    DesktopShell,
    ShortcutHandler,
    TrayMenuHandler,
)
from study_tracker.services.screenshots import ScreenshotService
from study_tracker.services.session_commands import SessionCommands
from study_tracker.services.sessions import SessionManager, load_session_manager

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_manager: SessionManager
    catalog_service: CatalogService
    session_commands: SessionCommands
    screenshot_service: ScreenshotService
    tray_menu_handler: TrayMenuHandler
    shortcut_handler: ShortcutHandler
    shell: DesktopShell
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, shell: DesktopShell | None = None
) -> AppContainer:
    """Create the default dependency container.

    Raises ``DataDirectoryError`` when the data directory is unusable; every
    other startup problem with saved sessions is logged and recovered from.
    """
    resolved_settings = settings or Settings()
    data_dir = resolve_data_dir(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_service = CatalogService(SupabaseCatalogRepository(supabase_client))
    session_manager = load_session_manager(
        JsonSessionFileRepository(data_dir / resolved_settings.sessions_filename)
    )
    resolved_shell = shell or HeadlessShell()
    screenshot_service = ScreenshotService(
        manager=session_manager,
        catalog=catalog_service,
        image_storage=LocalImageStorage(
            data_dir / resolved_settings.screenshots_dirname
        ),
    )

    async def close_resources() -> None:
        try:
            session_manager.flush()
        except StorageError:
            logger.exception("Final session flush failed")

    return AppContainer(
        settings=resolved_settings,
        session_manager=session_manager,
        catalog_service=catalog_service,
        session_commands=SessionCommands(session_manager, catalog_service),
        screenshot_service=screenshot_service,
        tray_menu_handler=TrayMenuHandler(session_manager, resolved_shell),
        shortcut_handler=ShortcutHandler(session_manager, resolved_shell),
        shell=resolved_shell,
        close_resources=close_resources,
    )
