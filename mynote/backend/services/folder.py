"""
Folder Service.

Folder lifecycle, password protection and the cascading delete.
Password hashing is an explicit step of create and update; the model
never hashes on its own.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from mynote.backend.core.config import get_app_config
from mynote.backend.core.exceptions import ConflictError
from mynote.backend.core.security import Actor, hash_password
from mynote.backend.models.folder import DEFAULT_ICON, Folder
from mynote.backend.repositories.folder import FolderRepository
from mynote.backend.repositories.note import NoteRepository
from mynote.backend.schemas.folder import FolderCreate, FolderUpdate
from mynote.backend.services import access
from mynote.backend.services.base import BaseService


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    return description.strip() or None


class FolderService(BaseService):
    """Service for folder business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = FolderRepository(session)
        self.note_repo = NoteRepository(session)

    async def _check_name(self, name: str | None, exclude_id: str | None = None) -> str:
        """
        Trim and validate a folder name.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If another folder already uses it
        """
        self._validate_required({"name": name}, ["name"])
        name = name.strip()

        if get_app_config().features.folder_unique_names:
            existing = await self._execute_db_operation(
                "check_folder_name", self.repo.find_by_name(name, exclude_id=exclude_id),
            )
            if existing is not None:
                raise ConflictError(f"A folder named '{existing.name}' already exists")

        return name

    async def create_folder(self, data: FolderCreate) -> Folder:
        """
        Create a folder, protected when a password is given.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name is taken
        """
        name = await self._check_name(data.name)
        password_hash = hash_password(data.password) if data.password else None

        self._log_operation("Creating folder", name=name, protected=password_hash is not None)

        return await self._execute_db_operation(
            "create_folder",
            self.repo.create(
                name=name,
                description=_clean_description(data.description),
                password_hash=password_hash,
                is_protected=password_hash is not None,
                icon=data.icon or DEFAULT_ICON,
            ),
        )

    async def list_folders(self) -> list[tuple[Folder, int]]:
        """All folders, newest first, each with its note count."""
        folders = await self._execute_db_operation("list_folders", self.repo.list_all())
        counts = await self._execute_db_operation("list_folders", self.note_repo.count_by_folder())
        return [(folder, counts.get(folder.id, 0)) for folder in folders]

    async def verify_folder_password(
        self,
        folder_id: str,
        candidate: str | None,
        actor: Actor,
    ) -> bool:
        """
        Check a folder password. A wrong password is an answer, not an error.

        Raises:
            NotFoundError: If folder not found
        """
        folder = await self._execute_db_operation(
            "verify_folder_password", self.repo.get_by_id(folder_id),
        )
        verified = access.folder_password_accepted(folder, candidate, actor)

        if not verified:
            self._log_operation("Folder password rejected", folder_id=folder_id)
        return verified

    async def update_folder(self, folder_id: str, data: FolderUpdate, actor: Actor) -> Folder:
        """
        Update the fields present in the request.

        Raises:
            NotFoundError: If folder not found
            AuthenticationError: If a non-admin changes a protected folder's
                password without the right current password
            ValidationError: If the new name is blank
            ConflictError: If the new name is taken
        """
        changes = data.model_dump(exclude_unset=True)
        folder = await self._execute_db_operation("update_folder", self.repo.get_by_id(folder_id))

        if "password" in changes:
            access.check_folder_password_change(folder, actor, changes.get("current_password"))

        if "name" in changes:
            folder.name = await self._check_name(changes["name"], exclude_id=folder.id)
        if "description" in changes:
            folder.description = _clean_description(changes["description"])
        if "icon" in changes:
            folder.icon = changes["icon"] or DEFAULT_ICON
        if "password" in changes:
            password = changes["password"]
            folder.set_password(hash_password(password) if password else None)

        self._log_operation(
            "Updating folder",
            folder_id=folder_id,
            fields=sorted(k for k in changes if k != "current_password"),
        )
        return await self._execute_db_operation("update_folder", self.repo.save(folder))

    async def delete_folder(self, folder_id: str, actor: Actor) -> int:
        """
        Delete a folder and every note inside it.

        Notes go first, then the folder, all in the request's transaction.
        If anything fails the whole request is rolled back and reported as
        a DatabaseError, so the folder never disappears while its notes
        are in an unknown state.

        Returns:
            Number of notes removed

        Raises:
            AuthorizationError: If the actor is not the admin
            NotFoundError: If folder not found
            DatabaseError: If the store fails part way
        """
        access.require_admin(actor, "delete folders")
        folder = await self._execute_db_operation("delete_folder", self.repo.get_by_id(folder_id))

        self._log_operation("Deleting folder", folder_id=folder_id)
        removed = await self._execute_db_operation(
            "delete_folder", self._delete_with_notes(folder),
        )
        self._log_debug("Folder deleted", folder_id=folder_id, notes_removed=removed)
        return removed

    async def _delete_with_notes(self, folder: Folder) -> int:
        removed = await self.note_repo.delete_in_folder(folder.id)
        await self.repo.delete(folder)
        return removed
