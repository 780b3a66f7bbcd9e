"""
Base Schemas.

Shared response pieces. Successful responses keep the field names the
web client reads (`chat`, `chats`, `folder`, ...) next to `success`;
every error uses the ErrorResponse envelope.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mynote.backend.core.utils import utc_now


class CamelModel(BaseModel):
    """Schema whose JSON field names are camelCase (isPinned, folderId, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(BaseModel):
    """Metadata included in error responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class MessageResponse(BaseModel):
    """Acknowledgement for operations without a resource to return."""

    success: bool = True
    message: str
