"""Pydantic models for the local command API."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, StringConstraints

from study_tracker.domain.catalog import ProblemRecord
from study_tracker.domain.sessions import SessionRecord, SessionView

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CreateSessionRequest(BaseModel):
    """Names of the folder, course and set a new session captures into."""

    folder_name: NonBlankStr
    course_name: NonBlankStr
    set_name: NonBlankStr


class SessionResponse(BaseModel):
    """A saved session with its resolved hierarchy names."""

    id: UUID
    name: str
    folder_id: UUID
    course_id: UUID
    set_id: UUID
    folder_name: str
    course_name: str
    set_name: str
    created_at: datetime
    last_used: datetime

    @classmethod
    def from_view(cls, view: SessionView) -> "SessionResponse":
        record = view.record
        return cls(
            id=record.id,
            name=record.name,
            folder_id=record.folder_id,
            course_id=record.course_id,
            set_id=record.set_id,
            folder_name=view.names.folder_name,
            course_name=view.names.course_name,
            set_name=view.names.set_name,
            created_at=record.created_at,
            last_used=record.last_used,
        )


class SessionSummary(BaseModel):
    """Identifier and name of a session, without catalog lookups."""

    id: UUID
    name: str

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionSummary":
        return cls(id=record.id, name=record.name)


class ScreenshotRequest(BaseModel):
    """Screenshot image data from the capture overlay."""

    image_base64: NonBlankStr
    problem_name: str | None = None


class ProblemResponse(BaseModel):
    """A problem created from a screenshot."""

    id: UUID
    set_id: UUID
    title: str
    image_path: str | None
    created_at: datetime

    @classmethod
    def from_record(cls, problem: ProblemRecord) -> "ProblemResponse":
        return cls(
            id=problem.id,
            set_id=problem.set_id,
            title=problem.title,
            image_path=problem.image_path,
            created_at=problem.created_at,
        )
