"""
Access Policy.

Decides what an actor may do with notes and folders. Every function here
is pure: it looks at already loaded records and raises or answers, and
never touches the store.

Rules:
    - Only the admin may pin or unpin a note.
    - A pinned note's content, title and title mode are frozen for
      everyone but the admin.
    - Anything else on an unpinned note may be edited by anyone.
    - Deleting notes and folders is admin only; creating is open.
    - The "all notes" listing hides notes inside protected folders from
      non-admins. Protection guards discovery, not the note itself.
"""

from collections.abc import Collection, Mapping
from enum import StrEnum
from typing import Any

from mynote.backend.core.exceptions import AuthenticationError, AuthorizationError
from mynote.backend.core.security import Actor, verify_password
from mynote.backend.models.folder import Folder
from mynote.backend.models.note import Note

PIN_LOCKED_FIELDS = frozenset({"content", "title", "is_title_manual"})


class ListScope(StrEnum):
    ALL = "all"
    ROOT = "root"
    FOLDER = "folder"


def parse_list_scope(folder_id: str | None) -> tuple[ListScope, str | None]:
    """
    Interpret the `folderId` query parameter of the note listing.

    "all" is the aggregate view, "root" (or nothing) the notes outside any
    folder, any other value a folder id.
    """
    if folder_id is None or folder_id == "" or folder_id == ListScope.ROOT:
        return ListScope.ROOT, None
    if folder_id == ListScope.ALL:
        return ListScope.ALL, None
    return ListScope.FOLDER, folder_id


def is_admin(actor: Actor) -> bool:
    return actor == Actor.ADMIN


def require_admin(actor: Actor, action: str) -> None:
    """
    Raises:
        AuthorizationError: If the actor is not the admin
    """
    if not is_admin(actor):
        raise AuthorizationError(f"Admin access required to {action}")


def check_note_update(note: Note, changes: Mapping[str, Any], actor: Actor) -> None:
    """
    Authorize an update before any field of `note` is touched.

    Args:
        note: The note as currently stored
        changes: Fields present in the request (snake_case keys)
        actor: Who is asking

    Raises:
        AuthorizationError: On a non-admin pin toggle or an edit of a pinned note
    """
    if is_admin(actor):
        return

    if "is_pinned" in changes:
        raise AuthorizationError("Only the admin can pin or unpin notes")

    if note.is_pinned and PIN_LOCKED_FIELDS.intersection(changes):
        raise AuthorizationError("Pinned notes can only be edited by the admin")


def sees_protected_notes(actor: Actor) -> bool:
    """Whether aggregate listings include notes inside protected folders."""
    return is_admin(actor)


def visible_in_aggregate(
    folder_id: str | None,
    protected_folder_ids: Collection[str],
    actor: Actor,
) -> bool:
    """Whether a note with this folder shows up in an aggregate result."""
    if sees_protected_notes(actor) or folder_id is None:
        return True
    return folder_id not in protected_folder_ids


def hidden_in_aggregate(protected_folder_ids: Collection[str], actor: Actor) -> set[str]:
    """Folder ids whose notes an aggregate result leaves out for this actor."""
    return {
        folder_id
        for folder_id in protected_folder_ids
        if not visible_in_aggregate(folder_id, protected_folder_ids, actor)
    }


def folder_password_accepted(folder: Folder, candidate: str | None, actor: Actor) -> bool:
    """
    Check a folder password without raising.

    The admin always passes, unprotected folders need no password.
    """
    if is_admin(actor):
        return True
    if not folder.is_protected or folder.password_hash is None:
        return True
    return verify_password(candidate, folder.password_hash)


def check_folder_password_change(
    folder: Folder,
    actor: Actor,
    current_password: str | None,
) -> None:
    """
    Non-admins must prove the current password before replacing or
    removing it.

    Raises:
        AuthenticationError: If the current password is missing or wrong
    """
    if is_admin(actor) or not folder.is_protected:
        return
    if not current_password:
        raise AuthenticationError("Current password required to change password")
    if not folder_password_accepted(folder, current_password, actor):
        raise AuthenticationError("Incorrect current password")
