"""JSON file persistence for the session store."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from study_tracker.domain.sessions import SessionRecord, SessionStore
from study_tracker.errors import CorruptSessionDataError, StorageError
from study_tracker.services.sessions import SessionStateRepository

logger = logging.getLogger(__name__)

SESSION_FILE_VERSION = 1


class SessionEntryModel(BaseModel):
    """One saved session as written to disk."""

    id: UUID
    name: str
    folder_id: UUID
    course_id: UUID
    set_id: UUID
    created_at: datetime
    last_used: datetime

    @field_validator("created_at", "last_used")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Files written before timestamps carried an offset stored naive UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def _used_after_created(self) -> "SessionEntryModel":
        if self.last_used < self.created_at:
            raise ValueError("last_used is earlier than created_at")
        return self


class SessionFileModel(BaseModel):
    """Top-level document of the session state file."""

    version: int = SESSION_FILE_VERSION
    sessions: list[SessionEntryModel]
    active_session_id: UUID | None = None

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value < 1 or value > SESSION_FILE_VERSION:
            raise ValueError(f"unsupported session file version {value}")
        return value

    @model_validator(mode="after")
    def _unique_ids(self) -> "SessionFileModel":
        ids = [entry.id for entry in self.sessions]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate session ids")
        return self


def save_store(store: SessionStore, path: Path) -> None:
    """Write the full store to path, creating parent directories."""
    document = SessionFileModel(
        version=SESSION_FILE_VERSION,
        sessions=[
            SessionEntryModel(
                id=session.id,
                name=session.name,
                folder_id=session.folder_id,
                course_id=session.course_id,
                set_id=session.set_id,
                created_at=session.created_at,
                last_used=session.last_used,
            )
            for session in store.sessions
        ],
        active_session_id=store.active_session_id,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Failed to save sessions to {path}: {exc}") from exc
    logger.info("Saved %d sessions to file", len(store.sessions))


def load_store(path: Path) -> SessionStore:
    """Read the store from path; a missing file yields an empty store."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("Session file does not exist, starting with no sessions")
        return SessionStore()
    except UnicodeDecodeError as exc:
        raise CorruptSessionDataError(path, "not valid UTF-8 text") from exc
    except OSError as exc:
        raise StorageError(f"Failed to read sessions from {path}: {exc}") from exc

    try:
        document = SessionFileModel.model_validate_json(raw)
    except ValidationError as exc:
        first = exc.errors(include_url=False)[0]
        location = ".".join(str(part) for part in first["loc"]) or "document"
        raise CorruptSessionDataError(path, f"{location}: {first['msg']}") from exc

    sessions = [
        SessionRecord(
            id=entry.id,
            name=entry.name,
            folder_id=entry.folder_id,
            course_id=entry.course_id,
            set_id=entry.set_id,
            created_at=entry.created_at,
            last_used=entry.last_used,
        )
        for entry in document.sessions
    ]
    active_session_id = document.active_session_id
    if active_session_id is not None and all(
        session.id != active_session_id for session in sessions
    ):
        logger.warning(
            "Active session %s is not among saved sessions; clearing it",
            active_session_id,
        )
        active_session_id = None
    logger.info("Loaded %d sessions from file", len(sessions))
    return SessionStore(sessions=sessions, active_session_id=active_session_id)


@dataclass
class JsonSessionFileRepository(SessionStateRepository):
    """Session state stored as one JSON document per user profile."""

    path: Path

    def load(self) -> SessionStore:
        return load_store(self.path)

    def save(self, store: SessionStore) -> None:
        save_store(store, self.path)

    def backup_corrupt(self) -> Path | None:
        """Rename the state file to ``<name>.corrupt``, replacing older backups."""
        target = self.path.with_name(f"{self.path.name}.corrupt")
        try:
            self.path.replace(target)
        except OSError:
            logger.exception("Could not move corrupt session file %s aside", self.path)
            return None
        return target
