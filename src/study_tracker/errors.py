"""Error types shared by the session core and its collaborators."""

from pathlib import Path
from uuid import UUID


class StudyTrackerError(Exception):
    """Base error carrying a stable code for the command layer."""

    def __init__(
        self, code: str, message: str, details: dict[str, object] | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class SessionNotFoundError(StudyTrackerError):
    def __init__(self, session_id: UUID) -> None:
        super().__init__(
            "session_not_found",
            f"Session with id {session_id} not found",
            {"session_id": str(session_id)},
        )
        self.session_id = session_id


class DuplicateSessionError(StudyTrackerError):
    def __init__(self, session_name: str) -> None:
        super().__init__(
            "duplicate_session",
            (
                f"A session for '{session_name}' already exists. "
                "Please select a different folder/course/set combination."
            ),
            {"name": session_name},
        )


class NoActiveSessionError(StudyTrackerError):
    def __init__(self) -> None:
        super().__init__("no_active_session", "No active session. Start one first.")


class CorruptSessionDataError(StudyTrackerError):
    """The session file exists but cannot be read as session state."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            "corrupt_data",
            f"Session file {path} is corrupt: {reason}",
            {"path": str(path)},
        )
        self.path = path


class StorageError(StudyTrackerError):
    """A read or write against local storage failed."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__("io_error", message, details)


class RelatedDataNotFoundError(StudyTrackerError):
    """A session points at a folder, course or set that no longer exists."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        super().__init__(
            "related_data_not_found",
            f"{kind.capitalize()} with id {entity_id} not found",
            {"kind": kind, "id": str(entity_id)},
        )
        self.kind = kind
        self.entity_id = entity_id


class InvalidScreenshotError(StudyTrackerError):
    def __init__(self, message: str) -> None:
        super().__init__("invalid_screenshot", message)


class DataDirectoryError(StudyTrackerError):
    """The per-user data directory cannot be located or created."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            "data_directory_unavailable",
            f"Cannot use data directory {path}: {reason}",
            {"path": str(path)},
        )
