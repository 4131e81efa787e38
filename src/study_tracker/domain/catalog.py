"""Domain models for the folder/course/set catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class CatalogEntry:
    """A folder, course or set, identified within its parent."""

    id: UUID
    parent_id: UUID
    name: str
    sort_order: int


@dataclass(frozen=True)
class ProblemRecord:
    """A practice problem captured from a screenshot."""

    id: UUID
    set_id: UUID
    title: str
    image_path: str | None
    created_at: datetime
