"""
Folder Repository.

Data access layer for folders.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mynote.backend.models.folder import Folder
from mynote.backend.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Repository for Folder model."""

    model = Folder
    label = "Folder"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_all(self) -> list[Folder]:
        """All folders, newest first."""
        result = await self.session.execute(
            select(Folder).order_by(Folder.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_name(self, name: str, exclude_id: str | None = None) -> Folder | None:
        """
        Find a folder whose name matches case-insensitively.

        Args:
            name: Already trimmed folder name
            exclude_id: Folder to ignore (the one being renamed)
        """
        query = select(Folder).where(func.lower(Folder.name) == name.lower())
        if exclude_id is not None:
            query = query.where(Folder.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def protected_ids(self) -> set[str]:
        """Ids of every password-protected folder."""
        result = await self.session.execute(
            select(Folder.id).where(Folder.is_protected.is_(True))
        )
        return set(result.scalars().all())
