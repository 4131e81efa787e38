"""Supabase-backed folder/course/set catalog."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from study_tracker.domain.catalog import CatalogEntry, ProblemRecord
from study_tracker.services.catalog import CatalogRepository

DEFAULT_USER_EMAIL = "local@study-tracker.local"
DEFAULT_USER_NAME = "Local User"


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation of the study hierarchy."""

    client: Client

    def get_or_create_default_user(self) -> UUID:
        """Return the local default user's id, creating the row on first use."""
        response = (
            self.client.table("users")
            .select("id")
            .eq("email", DEFAULT_USER_EMAIL)
            .limit(1)
            .execute()
        )
        if response.data:
            return UUID(response.data[0]["id"])
        response = (
            self.client.table("users")
            .insert({"email": DEFAULT_USER_EMAIL, "name": DEFAULT_USER_NAME})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create default user")
        return UUID(response.data[0]["id"])

    def find_or_create_folder(self, user_id: UUID, name: str) -> CatalogEntry:
        return self._find_or_create("folders", "user_id", user_id, name)

    def find_or_create_course(self, folder_id: UUID, name: str) -> CatalogEntry:
        return self._find_or_create("courses", "folder_id", folder_id, name)

    def find_or_create_set(self, course_id: UUID, name: str) -> CatalogEntry:
        return self._find_or_create("sets", "course_id", course_id, name)

    def get_folder(self, folder_id: UUID) -> CatalogEntry | None:
        return self._get("folders", "user_id", folder_id)

    def get_course(self, course_id: UUID) -> CatalogEntry | None:
        return self._get("courses", "folder_id", course_id)

    def get_set(self, set_id: UUID) -> CatalogEntry | None:
        return self._get("sets", "course_id", set_id)

    def create_problem(
        self, set_id: UUID, title: str, image_path: str | None
    ) -> ProblemRecord:
        """Insert a problem row and return it."""
        response = (
            self.client.table("problems")
            .insert(
                {
                    "set_id": str(set_id),
                    "title": title,
                    "image_path": image_path,
                    "confidence_level": 0,
                    "attempt_count": 0,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create problem")
        row = response.data[0]
        return ProblemRecord(
            id=UUID(row["id"]),
            set_id=UUID(row["set_id"]),
            title=row["title"],
            image_path=row.get("image_path"),
            created_at=_parse_timestamp(row.get("created_at")),
        )

    def _find_or_create(
        self, table: str, parent_column: str, parent_id: UUID, name: str
    ) -> CatalogEntry:
        response = (
            self.client.table(table)
            .select(f"id, {parent_column}, name, sort_order")
            .eq(parent_column, str(parent_id))
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if response.data:
            return _entry(response.data[0], parent_column)

        last = (
            self.client.table(table)
            .select("sort_order")
            .eq(parent_column, str(parent_id))
            .order("sort_order", desc=True)
            .limit(1)
            .execute()
        )
        sort_order = int(last.data[0]["sort_order"]) + 1 if last.data else 0
        created = (
            self.client.table(table)
            .insert(
                {
                    parent_column: str(parent_id),
                    "name": name,
                    "sort_order": sort_order,
                }
            )
            .execute()
        )
        if not created.data:
            raise RuntimeError(f"Failed to create row in {table}")
        return _entry(created.data[0], parent_column)

    def _get(
        self, table: str, parent_column: str, entry_id: UUID
    ) -> CatalogEntry | None:
        response = (
            self.client.table(table)
            .select(f"id, {parent_column}, name, sort_order")
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _entry(response.data[0], parent_column)


def _entry(row: dict[str, object], parent_column: str) -> CatalogEntry:
    return CatalogEntry(
        id=UUID(str(row["id"])),
        parent_id=UUID(str(row[parent_column])),
        name=str(row["name"]),
        sort_order=int(row.get("sort_order") or 0),
    )


def _parse_timestamp(value: object) -> datetime:
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(tz=UTC)
