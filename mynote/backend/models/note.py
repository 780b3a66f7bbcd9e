"""
Note Model.

A Markdown note, optionally pinned and optionally inside a folder.
"""

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mynote.backend.models.base import Base, TimestampMixin, UUIDMixin

TITLE_MAX_LENGTH = 200


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    `folder_id` is None for notes at the root. `last_viewed_by` maps a
    sanitized viewer fingerprint to the ISO timestamp of its last counted
    view; it only drives `view_count` and is never serialized.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        default="Untitled Note",
    )
    is_title_manual: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    folder_id: Mapped[str | None] = mapped_column(
        ForeignKey("folders.id"),
        nullable=True,
        index=True,
    )
    view_count: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
    )
    last_viewed_by: Mapped[dict[str, str]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, pinned={self.is_pinned})>"
