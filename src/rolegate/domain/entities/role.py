"""Role entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    """Role - named, handle-addressable group of users.

    id 0 means the role was not persisted yet.
    """

    id: int = 0
    name: str = ""
    handle: str = ""
    organisation_id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    archived_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
