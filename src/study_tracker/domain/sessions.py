"""Domain models for study sessions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from study_tracker.errors import SessionNotFoundError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SessionContext:
    """The folder/course/set triple a session files captures under."""

    folder_id: UUID
    course_id: UUID
    set_id: UUID


@dataclass(frozen=True)
class ContextNames:
    """Display names resolved for a session context."""

    folder_name: str
    course_name: str
    set_name: str


@dataclass(frozen=True)
class SessionRecord:
    """A named, persisted pointer to a study context."""

    id: UUID
    name: str
    folder_id: UUID
    course_id: UUID
    set_id: UUID
    created_at: datetime
    last_used: datetime

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        name: str,
        folder_id: UUID,
        course_id: UUID,
        set_id: UUID,
        now: datetime | None = None,
    ) -> "SessionRecord":
        """Build a new record with a fresh id and both timestamps set to now."""
        timestamp = now or utc_now()
        return cls(
            id=uuid4(),
            name=name,
            folder_id=folder_id,
            course_id=course_id,
            set_id=set_id,
            created_at=timestamp,
            last_used=timestamp,
        )

    @property
    def context(self) -> SessionContext:
        return SessionContext(
            folder_id=self.folder_id, course_id=self.course_id, set_id=self.set_id
        )

    def mark_used(self, now: datetime | None = None) -> "SessionRecord":
        """Return a copy with last_used moved to now, never before created_at."""
        timestamp = now or utc_now()
        return replace(self, last_used=max(timestamp, self.created_at))


@dataclass(frozen=True)
class SessionView:
    """A session record together with its resolved display names."""

    record: SessionRecord
    names: ContextNames


@dataclass
class SessionStore:
    """Ordered saved sessions plus at most one active pointer.

    The store is not synchronised; callers share it through
    ``SessionManager``.
    """

    sessions: list[SessionRecord] = field(default_factory=list)
    active_session_id: UUID | None = None
    clock: Callable[[], datetime] = field(
        default=utc_now, compare=False, repr=False
    )

    def create_session(  # noqa: PLR0913
        self,
        name: str,
        folder_id: UUID,
        course_id: UUID,
        set_id: UUID,
        start_immediately: bool = False,
    ) -> SessionRecord:
        """Append a new session and optionally make it active.

        No duplicate-context check happens here; see
        ``session_exists_for_context``.
        """
        session = SessionRecord.create(
            name, folder_id, course_id, set_id, now=self.clock()
        )
        self.sessions.append(session)
        if start_immediately:
            self.active_session_id = session.id
        logger.info("Created session: %s", session.name)
        return session

    def start_session(self, session_id: UUID) -> SessionRecord:
        """Mark a session used and make it active."""
        index = self._index_of(session_id)
        session = self.sessions[index].mark_used(self.clock())
        self.sessions[index] = session
        self.active_session_id = session.id
        logger.info("Started session: %s", session.name)
        return session

    def end_session(self) -> SessionRecord | None:
        """Clear the active pointer and return the session that was active."""
        ended = self.get_active_session()
        if self.active_session_id is not None:
            logger.info("Ended session with id: %s", self.active_session_id)
        self.active_session_id = None
        return ended

    def delete_session(self, session_id: UUID) -> SessionRecord:
        """Remove a session, clearing the active pointer if it was active."""
        session = self.sessions.pop(self._index_of(session_id))
        if self.active_session_id == session_id:
            self.active_session_id = None
        logger.info("Deleted session: %s", session.name)
        return session

    def get_active_session(self) -> SessionRecord | None:
        if self.active_session_id is None:
            return None
        return self.get_session_by_id(self.active_session_id)

    def get_all_sessions(self) -> list[SessionRecord]:
        return list(self.sessions)

    def get_session_by_id(self, session_id: UUID) -> SessionRecord | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def session_exists_for_context(
        self, folder_id: UUID, course_id: UUID, set_id: UUID
    ) -> bool:
        """Return True if any session, active or not, uses this exact triple."""
        context = SessionContext(folder_id, course_id, set_id)
        return any(session.context == context for session in self.sessions)

    def _index_of(self, session_id: UUID) -> int:
        for index, session in enumerate(self.sessions):
            if session.id == session_id:
                return index
        raise SessionNotFoundError(session_id)
