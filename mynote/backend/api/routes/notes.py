"""
Notes API Endpoints.

REST API endpoints for note management, served under /api/chat.
"""

from fastapi import APIRouter, Query

from mynote.backend.core.dependencies import AdminActor, CurrentActor, DbSession, ViewerFingerprint
from mynote.backend.schemas.base import MessageResponse
from mynote.backend.schemas.note import (
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteResponse,
    NoteUpdate,
)
from mynote.backend.services.note import NoteService

router = APIRouter()


def _envelope(note) -> NoteEnvelope:
    return NoteEnvelope(chat=NoteResponse.model_validate(note))


def _list_envelope(notes) -> NoteListEnvelope:
    return NoteListEnvelope(chats=[NoteResponse.model_validate(n) for n in notes])


@router.post(
    "/create",
    response_model=NoteEnvelope,
    status_code=201,
    summary="Create a note",
    description="Create a note at the root or inside a folder. The title comes from the first line.",
)
async def create_note(data: NoteCreate, db: DbSession) -> NoteEnvelope:
    note = await NoteService(db).create_note(data)
    return _envelope(note)


@router.get(
    "/list",
    response_model=NoteListEnvelope,
    summary="List notes",
    description=(
        "folderId=all lists every note the caller may discover, root (default) "
        "the notes outside folders, anything else one folder."
    ),
)
async def list_notes(
    db: DbSession,
    actor: CurrentActor,
    folder_id: str | None = Query(default=None, alias="folderId"),
) -> NoteListEnvelope:
    notes = await NoteService(db).list_notes(folder_id, actor)
    return _list_envelope(notes)


@router.get(
    "/search",
    response_model=NoteListEnvelope,
    summary="Search notes",
    description="Case-insensitive substring search over titles and content.",
)
async def search_notes(
    db: DbSession,
    actor: CurrentActor,
    q: str = Query(..., min_length=1, max_length=200, description="Search query"),
) -> NoteListEnvelope:
    notes = await NoteService(db).search_notes(q, actor)
    return _list_envelope(notes)


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Get a note",
    description="Get a single note. Counts one view per viewer per day.",
)
async def get_note(
    note_id: str,
    db: DbSession,
    fingerprint: ViewerFingerprint,
) -> NoteEnvelope:
    note = await NoteService(db).get_note(note_id, fingerprint)
    return _envelope(note)


@router.put(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Update a note",
    description="Only provided fields are changed. Pinning and editing pinned notes need the admin.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    actor: CurrentActor,
) -> NoteEnvelope:
    note = await NoteService(db).update_note(note_id, data, actor)
    return _envelope(note)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    summary="Delete a note",
    description="Permanently delete a note (admin only).",
)
async def delete_note(note_id: str, db: DbSession, actor: AdminActor) -> MessageResponse:
    await NoteService(db).delete_note(note_id, actor)
    return MessageResponse(message="Chat deleted")
