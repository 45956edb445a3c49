from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


COLLECTION_VERSION = 1


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------
class Note(BaseModel):
    """A stored unit of text with identity and creation time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    content: str
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Stored timestamps without an offset were written in UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class NoteCollection(BaseModel):
    """Versioned on-disk shape of the whole note collection."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = COLLECTION_VERSION
    notes: List[Note] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "NoteCollection":
        seen = set()
        for note in self.notes:
            if note.id in seen:
                raise ValueError(f"duplicate note id {note.id!r}")
            seen.add(note.id)
        return self


class ControllerState(BaseModel):
    """Read-only view of the composer and feedback state for renderers."""

    model_config = ConfigDict(frozen=True)

    draft_content: str = ""
    editing_id: Optional[str] = None
    pending_delete_id: Optional[str] = None
    last_copied_id: Optional[str] = None
    just_saved: bool = False
    just_updated: bool = False

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None
