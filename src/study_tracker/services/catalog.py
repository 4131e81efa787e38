"""Folder/course/set lookups used by the session core."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from study_tracker.domain.catalog import CatalogEntry, ProblemRecord
from study_tracker.domain.sessions import ContextNames, SessionContext
from study_tracker.errors import RelatedDataNotFoundError


class CatalogRepository(Protocol):
    """Persistence interface for the study hierarchy and its problems."""

    def get_or_create_default_user(self) -> UUID:
        """Return the id of the local default user, creating it if needed."""

    def find_or_create_folder(self, user_id: UUID, name: str) -> CatalogEntry:
        """Return the user's folder with this name, creating it if absent."""

    def find_or_create_course(self, folder_id: UUID, name: str) -> CatalogEntry:
        """Return the folder's course with this name, creating it if absent."""

    def find_or_create_set(self, course_id: UUID, name: str) -> CatalogEntry:
        """Return the course's set with this name, creating it if absent."""

    def get_folder(self, folder_id: UUID) -> CatalogEntry | None:
        """Return a folder by id, if present."""

    def get_course(self, course_id: UUID) -> CatalogEntry | None:
        """Return a course by id, if present."""

    def get_set(self, set_id: UUID) -> CatalogEntry | None:
        """Return a set by id, if present."""

    def create_problem(
        self, set_id: UUID, title: str, image_path: str | None
    ) -> ProblemRecord:
        """Create a problem inside a set and return it."""


@dataclass
class CatalogService:
    """Application service for resolving session contexts."""

    repository: CatalogRepository

    def resolve_context(
        self, folder_name: str, course_name: str, set_name: str
    ) -> SessionContext:
        """Find or create each level of the hierarchy and return its ids."""
        user_id = self.repository.get_or_create_default_user()
        folder = self.repository.find_or_create_folder(user_id, folder_name.strip())
        course = self.repository.find_or_create_course(folder.id, course_name.strip())
        study_set = self.repository.find_or_create_set(course.id, set_name.strip())
        return SessionContext(
            folder_id=folder.id, course_id=course.id, set_id=study_set.id
        )

    def describe(self, context: SessionContext) -> ContextNames:
        """Return display names, failing if any level has been deleted."""
        folder = self.repository.get_folder(context.folder_id)
        if folder is None:
            raise RelatedDataNotFoundError("folder", context.folder_id)
        course = self.repository.get_course(context.course_id)
        if course is None:
            raise RelatedDataNotFoundError("course", context.course_id)
        study_set = self.repository.get_set(context.set_id)
        if study_set is None:
            raise RelatedDataNotFoundError("set", context.set_id)
        return ContextNames(
            folder_name=folder.name, course_name=course.name, set_name=study_set.name
        )

    def add_problem(
        self, set_id: UUID, title: str, image_path: str | None
    ) -> ProblemRecord:
        """Record a captured problem in a set."""
        return self.repository.create_problem(set_id, title, image_path)
