"""
Folder Schemas.

Pydantic schemas for folder API request/response validation.
Password hashes have no field here, so they can never be serialized.
"""

from datetime import datetime

from pydantic import Field

from mynote.backend.models.folder import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from mynote.backend.schemas.base import CamelModel


class FolderCreate(CamelModel):
    """Schema for creating a folder."""

    name: str = Field(
        default="",
        max_length=NAME_MAX_LENGTH,
        description="Folder name (required, trimmed)",
        examples=["Work"],
    )
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    password: str | None = Field(
        default=None,
        description="Protect the folder with this password",
    )
    icon: str | None = Field(default=None, max_length=32, examples=["💼"])


class FolderUpdate(CamelModel):
    """
    Schema for updating a folder.

    Sending `password` as "" or null removes the protection. Non-admin
    callers changing the password of a protected folder must also send
    `currentPassword`.
    """

    name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    password: str | None = None
    icon: str | None = Field(default=None, max_length=32)
    current_password: str | None = None


class FolderVerify(CamelModel):
    password: str | None = None


class FolderResponse(CamelModel):
    """Schema for a folder in API responses."""

    id: str
    name: str
    description: str | None
    is_protected: bool
    icon: str
    created_at: datetime
    updated_at: datetime


class FolderWithCount(FolderResponse):
    chat_count: int = Field(description="Number of notes inside the folder")


class FolderEnvelope(CamelModel):
    success: bool = True
    folder: FolderResponse


class FolderListEnvelope(CamelModel):
    success: bool = True
    folders: list[FolderWithCount]


class FolderVerifyResponse(CamelModel):
    success: bool
    verified: bool
    error: str | None = None


class FolderDeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted_count: int
