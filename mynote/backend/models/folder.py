"""
Folder Model.

A named group of notes, optionally protected by a password.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from mynote.backend.models.base import Base, TimestampMixin, UUIDMixin

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
DEFAULT_ICON = "📁"


class Folder(UUIDMixin, TimestampMixin, Base):
    """
    Folder database model.

    `is_protected` mirrors whether `password_hash` is set. Both are only
    written together through `set_password`.
    """

    __tablename__ = "folders"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    is_protected: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    icon: Mapped[str] = mapped_column(
        String(32),
        default=DEFAULT_ICON,
        nullable=False,
    )

    def set_password(self, password_hash: str | None) -> None:
        """Store a new hash (or clear it) and keep the protection flag in step."""
        self.password_hash = password_hash
        self.is_protected = password_hash is not None

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name!r}, protected={self.is_protected})>"
