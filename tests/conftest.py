"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from study_tracker.config import Settings
from study_tracker.containers import AppContainer
from study_tracker.domain.catalog import CatalogEntry, ProblemRecord
from study_tracker.domain.sessions import ContextNames, SessionStore
from study_tracker.errors import StorageError
from study_tracker.services.catalog import CatalogRepository, CatalogService
from study_tracker.services.desktop import (
    DesktopShell,
    ShortcutHandler,
    TrayMenuHandler,
)
from study_tracker.services.screenshots import ImageStorage, ScreenshotService
from study_tracker.services.session_commands import SessionCommands
from study_tracker.services.sessions import SessionManager, SessionStateRepository
from study_tracker.tray_menu import UiEvent


@dataclass
class TickingClock:
    """Clock that advances by a fixed step on every call."""

    current: datetime = field(
        default_factory=lambda: datetime(2026, 10, 19, 9, 0, 0, 123456, tzinfo=UTC)
    )
    step: timedelta = timedelta(milliseconds=1500)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    user_id: UUID = field(default_factory=uuid4)
    folders: dict[UUID, CatalogEntry] = field(default_factory=dict)
    courses: dict[UUID, CatalogEntry] = field(default_factory=dict)
    sets: dict[UUID, CatalogEntry] = field(default_factory=dict)
    problems: list[ProblemRecord] = field(default_factory=list)

    def get_or_create_default_user(self) -> UUID:
        return self.user_id

    def find_or_create_folder(self, user_id: UUID, name: str) -> CatalogEntry:
        return _find_or_create(self.folders, user_id, name)

    def find_or_create_course(self, folder_id: UUID, name: str) -> CatalogEntry:
        return _find_or_create(self.courses, folder_id, name)

    def find_or_create_set(self, course_id: UUID, name: str) -> CatalogEntry:
        return _find_or_create(self.sets, course_id, name)

    def get_folder(self, folder_id: UUID) -> CatalogEntry | None:
        return self.folders.get(folder_id)

    def get_course(self, course_id: UUID) -> CatalogEntry | None:
        return self.courses.get(course_id)

    def get_set(self, set_id: UUID) -> CatalogEntry | None:
        return self.sets.get(set_id)

    def create_problem(
        self, set_id: UUID, title: str, image_path: str | None
    ) -> ProblemRecord:
        problem = ProblemRecord(
            id=uuid4(),
            set_id=set_id,
            title=title,
            image_path=image_path,
            created_at=datetime.now(tz=UTC),
        )
        self.problems.append(problem)
        return problem


def _find_or_create(
    entries: dict[UUID, CatalogEntry], parent_id: UUID, name: str
) -> CatalogEntry:
    siblings = [entry for entry in entries.values() if entry.parent_id == parent_id]
    for entry in siblings:
        if entry.name == name:
            return entry
    entry = CatalogEntry(
        id=uuid4(),
        parent_id=parent_id,
        name=name,
        sort_order=max((item.sort_order for item in siblings), default=-1) + 1,
    )
    entries[entry.id] = entry
    return entry


@dataclass
class InMemorySessionStateRepository(SessionStateRepository):
    """Session state repository that keeps saved copies in memory."""

    saved: list[SessionStore] = field(default_factory=list)
    initial: SessionStore | None = None
    fail_saves: bool = False

    def load(self) -> SessionStore:
        return self.initial or SessionStore()

    def save(self, store: SessionStore) -> None:
        if self.fail_saves:
            raise StorageError("disk full")
        self.saved.append(
            SessionStore(
                sessions=list(store.sessions),
                active_session_id=store.active_session_id,
            )
        )

    def backup_corrupt(self) -> Path | None:
        return None


@dataclass
class FakeDesktopShell(DesktopShell):
    """Desktop shell that records every call."""

    notifications: list[tuple[str, str]] = field(default_factory=list)
    events: list[UiEvent] = field(default_factory=list)
    focus_count: int = 0
    overlay_count: int = 0
    visible: bool = False
    quit_called: bool = False

    def notify(self, title: str, body: str) -> None:
        self.notifications.append((title, body))

    def emit(self, event: UiEvent) -> None:
        self.events.append(event)

    def focus_main_window(self) -> None:
        self.focus_count += 1

    def any_window_visible(self) -> bool:
        return self.visible

    def open_screenshot_overlay(self) -> None:
        self.overlay_count += 1

    def quit(self) -> None:
        self.quit_called = True


@dataclass
class InMemoryImageStorage(ImageStorage):
    """Image storage that keeps bytes in a dict keyed by path."""

    images: dict[str, bytes] = field(default_factory=dict)

    def save_image(
        self, names: ContextNames, problem_name: str, data: bytes
    ) -> str:
        path = "/".join(
            [names.folder_name, names.course_name, names.set_name, problem_name]
        )
        path = f"{path}.png"
        self.images[path] = data
        return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def session_repository() -> InMemorySessionStateRepository:
    return InMemorySessionStateRepository()


@pytest.fixture
def shell() -> FakeDesktopShell:
    return FakeDesktopShell()


@pytest.fixture
def session_manager(
    session_repository: InMemorySessionStateRepository, clock: TickingClock
) -> SessionManager:
    return SessionManager(
        store=SessionStore(clock=clock), repository=session_repository
    )


@pytest.fixture
def container(
    settings: Settings,
    catalog_repository: InMemoryCatalogRepository,
    session_manager: SessionManager,
    shell: FakeDesktopShell,
) -> AppContainer:
    catalog_service = CatalogService(catalog_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_manager=session_manager,
        catalog_service=catalog_service,
        session_commands=SessionCommands(session_manager, catalog_service),
        screenshot_service=ScreenshotService(
            manager=session_manager,
            catalog=catalog_service,
            image_storage=InMemoryImageStorage(),
        ),
        tray_menu_handler=TrayMenuHandler(session_manager, shell),
        shortcut_handler=ShortcutHandler(session_manager, shell),
        shell=shell,
        close_resources=close_resources,
    )
