"""Announcement model definitions."""

from pydantic import BaseModel, ConfigDict, Field


class Announcement(BaseModel):
    """An admin announcement. Immutable once posted."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str
    title: str
    content: str
    created_at: str = Field(alias="createdAt")
