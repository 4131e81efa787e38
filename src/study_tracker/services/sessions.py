"""Shared, lock-protected access to the session store."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TypeVar
from uuid import UUID

from study_tracker.domain.sessions import SessionContext, SessionRecord, SessionStore
from study_tracker.errors import (
    CorruptSessionDataError,
    DuplicateSessionError,
    StorageError,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class SessionStateRepository(Protocol):
    """Durable storage for the whole session store."""

    def load(self) -> SessionStore:
        """Return the persisted store, or an empty one if nothing is saved."""

    def save(self, store: SessionStore) -> None:
        """Persist the full store."""

    def backup_corrupt(self) -> Path | None:
        """Move an unreadable state file aside and return its new path."""


@dataclass
class SessionManager:
    """The single session store shared by UI commands, tray and hotkey.

    Every call takes the lock for exactly one logical operation. Mutations
    flush to the repository before the lock is released. Returned records
    are immutable snapshots, so callers can keep them after the lock is
    gone.
    """

    store: SessionStore
    repository: SessionStateRepository
    saves_blocked_reason: str | None = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def list_sessions(self) -> list[SessionRecord]:
        """Return all sessions in insertion order."""
        with self._lock:
            return self.store.get_all_sessions()

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        with self._lock:
            return self.store.get_session_by_id(session_id)

    def get_active_session(self) -> SessionRecord | None:
        with self._lock:
            return self.store.get_active_session()

    def get_active_session_context(self) -> SessionContext | None:
        """Return the context triple captures should be filed under."""
        with self._lock:
            active = self.store.get_active_session()
            return active.context if active else None

    def session_exists_for_context(self, context: SessionContext) -> bool:
        with self._lock:
            return self.store.session_exists_for_context(
                context.folder_id, context.course_id, context.set_id
            )

    def create_session(
        self, name: str, context: SessionContext, start_immediately: bool = False
    ) -> SessionRecord:
        """Create a session without checking for an existing context."""
        return self._mutate(
            lambda store: store.create_session(
                name,
                context.folder_id,
                context.course_id,
                context.set_id,
                start_immediately,
            )
        )

    def create_session_for_context(
        self, name: str, context: SessionContext, start_immediately: bool = True
    ) -> SessionRecord:
        """Create a session unless one already uses the same context."""

        def create(store: SessionStore) -> SessionRecord:
            if store.session_exists_for_context(
                context.folder_id, context.course_id, context.set_id
            ):
                raise DuplicateSessionError(name)
            return store.create_session(
                name,
                context.folder_id,
                context.course_id,
                context.set_id,
                start_immediately,
            )

        return self._mutate(create)

    def start_session(self, session_id: UUID) -> SessionRecord:
        return self._mutate(lambda store: store.start_session(session_id))

    def end_session(self) -> SessionRecord | None:
        """End the active session, returning it if there was one."""
        return self._mutate(lambda store: store.end_session())

    def delete_session(self, session_id: UUID) -> SessionRecord:
        return self._mutate(lambda store: store.delete_session(session_id))

    def reload(self) -> None:
        """Replace the in-memory store with the persisted state.

        A successful reload lifts any block on saving.
        """
        with self._lock:
            loaded = self.repository.load()
            loaded.clock = self.store.clock
            self.store = loaded
            self.saves_blocked_reason = None

    def flush(self) -> None:
        """Persist the current state without changing it."""
        with self._lock:
            self._save()

    def _save(self) -> None:
        if self.saves_blocked_reason is not None:
            raise StorageError(self.saves_blocked_reason)
        self.repository.save(self.store)

    def _mutate(self, operation: Callable[[SessionStore], _T]) -> _T:
        with self._lock:
            result = operation(self.store)
            try:
                self._save()
            except StorageError as exc:
                logger.exception("Failed to save sessions")
                if isinstance(result, SessionRecord):
                    exc.details = {**(exc.details or {}), "session_id": str(result.id)}
                raise
            return result


def load_session_manager(repository: SessionStateRepository) -> SessionManager:
    """Build the shared manager at startup without ever failing on bad state."""
    blocked_reason = None
    try:
        store = repository.load()
    except CorruptSessionDataError as exc:
        backup = repository.backup_corrupt()
        if backup is None:
            # Saving now would overwrite the only copy of the corrupt file.
            blocked_reason = (
                f"Not saving sessions: corrupt file {exc.path} could not be "
                "moved aside. Move or fix it, then reload."
            )
            logger.error("%s; sessions will not be saved", exc.message)
        else:
            logger.warning(
                "%s; starting with no saved sessions (corrupt file kept at %s)",
                exc.message,
                backup,
            )
        store = SessionStore()
    except StorageError as exc:
        logger.error(
            "Could not read saved sessions: %s; starting with none", exc.message
        )
        store = SessionStore()
    return SessionManager(
        store=store, repository=repository, saves_blocked_reason=blocked_reason
    )
