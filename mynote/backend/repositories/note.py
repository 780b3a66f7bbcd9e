"""
Note Repository.

Data access layer for notes. Listing queries never apply access control
themselves; callers pass the set of folders an actor may not see.
"""

from collections.abc import Collection

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from mynote.backend.models.folder import Folder
from mynote.backend.models.note import Note
from mynote.backend.repositories.base import BaseRepository


def _ordered(query: Select) -> Select:
    """Pinned notes first, then most recently updated."""
    return query.order_by(Note.is_pinned.desc(), Note.updated_at.desc())


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds folder-scoped queries.
    """

    model = Note
    label = "Note"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_all(self) -> list[Note]:
        """Every note in the system."""
        result = await self.session.execute(_ordered(select(Note)))
        return list(result.scalars().all())

    async def list_root(self) -> list[Note]:
        """Notes that are not inside any folder."""
        result = await self.session.execute(
            _ordered(select(Note).where(Note.folder_id.is_(None)))
        )
        return list(result.scalars().all())

    async def list_in_folder(self, folder_id: str) -> list[Note]:
        """Notes inside one folder, without any protection check."""
        result = await self.session.execute(
            _ordered(select(Note).where(Note.folder_id == folder_id))
        )
        return list(result.scalars().all())

    async def list_outside_protected(self) -> list[Note]:
        """Every note except those inside a password protected folder."""
        query = (
            select(Note)
            .outerjoin(Folder, Note.folder_id == Folder.id)
            .where(or_(Folder.id.is_(None), Folder.is_protected.is_(False)))
        )
        result = await self.session.execute(_ordered(query))
        return list(result.scalars().all())

    async def search(
        self,
        query: str,
        limit: int = 100,
        exclude_folder_ids: Collection[str] = (),
    ) -> list[Note]:
        """
        Case-insensitive substring search over title and content.

        LIKE wildcards in the query are matched literally. Notes inside
        `exclude_folder_ids` are dropped before the limit is applied.
        """
        needle = query.lower()
        statement = select(Note).where(
            or_(
                func.lower(Note.title).contains(needle, autoescape=True),
                func.lower(Note.content).contains(needle, autoescape=True),
            )
        )
        if exclude_folder_ids:
            statement = statement.where(
                or_(Note.folder_id.is_(None), Note.folder_id.not_in(list(exclude_folder_ids)))
            )
        result = await self.session.execute(
            statement.order_by(Note.updated_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_folder(self) -> dict[str, int]:
        """Map of folder id to number of notes inside it."""
        result = await self.session.execute(
            select(Note.folder_id, func.count())
            .where(Note.folder_id.is_not(None))
            .group_by(Note.folder_id)
        )
        return {folder_id: count for folder_id, count in result.all()}

    async def delete_in_folder(self, folder_id: str) -> int:
        """Delete every note inside a folder. Returns the number removed."""
        result = await self.session.execute(
            select(Note.id).where(Note.folder_id == folder_id)
        )
        note_ids = list(result.scalars().all())
        if not note_ids:
            return 0

        await self.session.execute(
            delete(Note)
            .where(Note.id.in_(note_ids))
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return len(note_ids)

    async def record_view(self, note: Note, viewed_by: dict[str, str]) -> Note:
        """
        Increment the view counter and store the viewer map.

        `updated_at` is written back unchanged so that a view does not
        reorder the note in listings.
        """
        await self.session.execute(
            update(Note)
            .where(Note.id == note.id)
            .values(
                view_count=Note.view_count + 1,
                last_viewed_by=viewed_by,
                updated_at=note.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        await self.session.refresh(note)
        return note
