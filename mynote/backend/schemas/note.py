"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import Field

from mynote.backend.models.note import TITLE_MAX_LENGTH
from mynote.backend.schemas.base import CamelModel


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    content: str = Field(
        default="",
        description="Markdown source",
        examples=["# Groceries\n- milk"],
    )
    folder_id: str | None = Field(
        default=None,
        description="Folder to create the note in; omitted or null for the root",
    )


class NoteUpdate(CamelModel):
    """
    Schema for updating a note.

    Only fields present in the request are applied. Whether the caller
    may change them is decided by the access policy, not here.
    """

    content: str | None = Field(default=None, description="Markdown source")
    title: str | None = Field(
        default=None,
        max_length=TITLE_MAX_LENGTH,
        description="Title; only kept when isTitleManual is true",
    )
    is_title_manual: bool | None = Field(
        default=None,
        description="Freeze the title against automatic derivation",
    )
    is_pinned: bool | None = Field(
        default=None,
        description="Pin or unpin (admin only)",
    )


class NoteResponse(CamelModel):
    """Schema for a note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    is_title_manual: bool = Field(description="Whether the title is frozen")
    content: str = Field(description="Markdown source")
    is_pinned: bool = Field(description="Whether the note is pinned")
    folder_id: str | None = Field(description="Owning folder, null for the root")
    view_count: int = Field(description="Unique viewer count")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class NoteEnvelope(CamelModel):
    success: bool = True
    chat: NoteResponse


class NoteListEnvelope(CamelModel):
    success: bool = True
    chats: list[NoteResponse]
