"""
Note Service.

Business logic layer for notes: title derivation, view counting, and the
access policy applied to every mutation.
"""

import re
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mynote.backend.core.config import get_app_config
from mynote.backend.core.security import Actor
from mynote.backend.core.utils import utc_now
from mynote.backend.models.note import TITLE_MAX_LENGTH, Note
from mynote.backend.repositories.folder import FolderRepository
from mynote.backend.repositories.note import NoteRepository
from mynote.backend.schemas.note import NoteCreate, NoteUpdate
from mynote.backend.services import access
from mynote.backend.services.base import BaseService

UNTITLED = "Untitled Note"
DERIVED_TITLE_LENGTH = 50
_MARKDOWN_MARKERS = re.compile(r"[#*`]")


def derive_title(content: str) -> str:
    """
    Title shown for a note whose title is not set manually.

    First line of the content without heading, emphasis and code markers,
    trimmed and cut to 50 characters.
    """
    first_line = content.split("\n", 1)[0]
    title = _MARKDOWN_MARKERS.sub("", first_line).strip()[:DERIVED_TITLE_LENGTH]
    return title or UNTITLED


def should_count_view(last_seen: str | None, now: datetime, window: timedelta) -> bool:
    """A viewer counts again once its last counted view is older than `window`."""
    if last_seen is None:
        return True
    try:
        seen_at = datetime.fromisoformat(last_seen)
    except ValueError:
        return True
    return now - seen_at > window


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, and retrieval with
    proper validation and error handling.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.folder_repo = FolderRepository(session)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Raises:
            NotFoundError: If folder_id is given but does not exist
        """
        if data.folder_id is not None:
            await self._execute_db_operation(
                "create_note", self.folder_repo.get_by_id(data.folder_id),
            )

        self._log_operation("Creating note", folder_id=data.folder_id)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                content=data.content,
                title=derive_title(data.content),
                is_title_manual=False,
                folder_id=data.folder_id,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, note_id: str, fingerprint: str | None = None) -> Note:
        """
        Get a note by ID and count the view.

        Raises:
            NotFoundError: If note not found
        """
        note = await self._execute_db_operation("get_note", self.repo.get_by_id(note_id))
        if fingerprint is None:
            return note
        return await self._track_view(note_id, note, fingerprint)

    async def _track_view(self, note_id: str, note: Note, fingerprint: str) -> Note:
        """Best effort: a failed counter write never fails the read."""
        window = timedelta(hours=get_app_config().security.views.unique_window_hours)
        now = utc_now()
        viewed_by = dict(note.last_viewed_by or {})

        if not should_count_view(viewed_by.get(fingerprint), now, window):
            return note

        viewed_by[fingerprint] = now.isoformat()
        try:
            return await self.repo.record_view(note, viewed_by)
        except SQLAlchemyError as e:
            self._logger.warning(
                "View count update failed",
                extra={"note_id": note_id, "error": str(e)},
            )
            await self.session.rollback()
            return await self._execute_db_operation("get_note", self.repo.get_by_id(note_id))

    async def list_notes(self, folder_id: str | None, actor: Actor) -> list[Note]:
        """
        List notes for a folder scope.

        Args:
            folder_id: "all", "root"/None, or a folder id
            actor: Who is asking; only matters for "all"
        """
        scope, scoped_id = access.parse_list_scope(folder_id)
        self._log_debug("Listing notes", scope=scope, folder_id=scoped_id, actor=actor)

        if scope is access.ListScope.ALL:
            if access.sees_protected_notes(actor):
                return await self._execute_db_operation("list_notes", self.repo.list_all())
            return await self._execute_db_operation(
                "list_notes", self.repo.list_outside_protected(),
            )
        if scope is access.ListScope.ROOT:
            return await self._execute_db_operation("list_notes", self.repo.list_root())
        return await self._execute_db_operation(
            "list_notes", self.repo.list_in_folder(scoped_id),
        )

    async def search_notes(self, query: str, actor: Actor, limit: int = 100) -> list[Note]:
        """
        Search notes by title and content.

        Notes the actor may not see in aggregate results are excluded in the
        query itself, so they never count against `limit`.
        """
        self._log_debug("Searching notes", query=query)

        hidden: set[str] = set()
        if get_app_config().features.search_hides_protected and not access.sees_protected_notes(actor):
            protected = await self._execute_db_operation(
                "search_notes", self.folder_repo.protected_ids(),
            )
            hidden = access.hidden_in_aggregate(protected, actor)

        return await self._execute_db_operation(
            "search_notes",
            self.repo.search(query, limit=limit, exclude_folder_ids=hidden),
        )

    async def update_note(self, note_id: str, data: NoteUpdate, actor: Actor) -> Note:
        """
        Update an existing note.

        The policy check runs before anything is applied, so a rejected
        request leaves the note as it was. When the title is not manual it
        is re-derived from the content in the same write.

        Raises:
            NotFoundError: If note not found
            AuthorizationError: If the policy rejects the change
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        note = await self._execute_db_operation("update_note", self.repo.get_by_id(note_id))

        access.check_note_update(note, changes, actor)

        if not changes:
            return note

        self._log_operation("Updating note", note_id=note_id, fields=sorted(changes))

        if "content" in changes:
            note.content = changes["content"]
        if "is_title_manual" in changes:
            note.is_title_manual = changes["is_title_manual"]
        if "title" in changes:
            note.title = changes["title"].strip()[:TITLE_MAX_LENGTH] or UNTITLED
        if "is_pinned" in changes:
            note.is_pinned = changes["is_pinned"]

        if not note.is_title_manual:
            note.title = derive_title(note.content)

        return await self._execute_db_operation("update_note", self.repo.save(note))

    async def delete_note(self, note_id: str, actor: Actor) -> None:
        """
        Permanently delete a note.

        Raises:
            AuthorizationError: If the actor is not the admin
            NotFoundError: If note not found
        """
        access.require_admin(actor, "delete notes")
        note = await self._execute_db_operation("delete_note", self.repo.get_by_id(note_id))

        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation("delete_note", self.repo.delete(note))
