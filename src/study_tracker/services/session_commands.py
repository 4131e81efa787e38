"""Command entry points the UI uses to manage sessions."""

from dataclasses import dataclass
from uuid import UUID

from study_tracker.domain.sessions import SessionRecord, SessionView
from study_tracker.errors import SessionNotFoundError
from study_tracker.services.catalog import CatalogService
from study_tracker.services.sessions import SessionManager


def session_name_for(folder_name: str, course_name: str, set_name: str) -> str:
    """Build the display name for a session from its hierarchy names."""
    return f"{folder_name.strip()} / {course_name.strip()} / {set_name.strip()}"


@dataclass
class SessionCommands:
    """Session commands combining the shared manager with catalog lookups.

    Catalog calls are made only with the manager's lock released; records
    are copied out first.
    """

    manager: SessionManager
    catalog: CatalogService

    def list_sessions(self) -> list[SessionView]:
        """Return every saved session with its resolved names."""
        return [self._view(record) for record in self.manager.list_sessions()]

    def get_active_session(self) -> SessionView | None:
        record = self.manager.get_active_session()
        return self._view(record) if record else None

    def create_and_start_session(
        self, folder_name: str, course_name: str, set_name: str
    ) -> SessionView:
        """Find or create the hierarchy, then create and start a session."""
        context = self.catalog.resolve_context(folder_name, course_name, set_name)
        record = self.manager.create_session_for_context(
            session_name_for(folder_name, course_name, set_name),
            context,
            start_immediately=True,
        )
        return self._view(record)

    def start_session(self, session_id: UUID) -> SessionView:
        """Make a session active once its names still resolve."""
        current = self.manager.get_session(session_id)
        if current is None:
            raise SessionNotFoundError(session_id)
        names = self.catalog.describe(current.context)
        return SessionView(record=self.manager.start_session(session_id), names=names)

    def end_session(self) -> SessionRecord | None:
        return self.manager.end_session()

    def delete_session(self, session_id: UUID) -> SessionRecord:
        return self.manager.delete_session(session_id)

    def _view(self, record: SessionRecord) -> SessionView:
        return SessionView(record=record, names=self.catalog.describe(record.context))
