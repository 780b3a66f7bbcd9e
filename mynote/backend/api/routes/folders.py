"""
Folder API Endpoints.

REST API endpoints for folders and folder passwords, served under /api/folder.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from mynote.backend.core.dependencies import AdminActor, CurrentActor, DbSession
from mynote.backend.schemas.folder import (
    FolderCreate,
    FolderDeleteResponse,
    FolderEnvelope,
    FolderListEnvelope,
    FolderResponse,
    FolderUpdate,
    FolderVerify,
    FolderVerifyResponse,
    FolderWithCount,
)
from mynote.backend.services.folder import FolderService

router = APIRouter()


@router.post(
    "/create",
    response_model=FolderEnvelope,
    status_code=201,
    summary="Create a folder",
    description="Create a folder; giving a password makes it protected.",
)
async def create_folder(data: FolderCreate, db: DbSession) -> FolderEnvelope:
    folder = await FolderService(db).create_folder(data)
    return FolderEnvelope(folder=FolderResponse.model_validate(folder))


@router.get(
    "/list",
    response_model=FolderListEnvelope,
    summary="List folders",
    description="All folders, newest first, with the number of notes in each.",
)
async def list_folders(db: DbSession) -> FolderListEnvelope:
    rows = await FolderService(db).list_folders()
    return FolderListEnvelope(
        folders=[
            FolderWithCount(
                **FolderResponse.model_validate(folder).model_dump(),
                chat_count=count,
            )
            for folder, count in rows
        ]
    )


@router.post(
    "/{folder_id}/verify",
    response_model=FolderVerifyResponse,
    summary="Verify a folder password",
    description="Admins and unprotected folders always pass. A wrong password answers 401 with verified=false.",
    responses={401: {"model": FolderVerifyResponse}},
)
async def verify_folder_password(
    folder_id: str,
    data: FolderVerify,
    db: DbSession,
    actor: CurrentActor,
):
    verified = await FolderService(db).verify_folder_password(folder_id, data.password, actor)
    if verified:
        return FolderVerifyResponse(success=True, verified=True)

    body = FolderVerifyResponse(success=False, verified=False, error="Incorrect password")
    return JSONResponse(status_code=401, content=body.model_dump(by_alias=True))


@router.put(
    "/{folder_id}",
    response_model=FolderEnvelope,
    summary="Update a folder",
    description="Only provided fields are changed. Changing a protected folder's password needs currentPassword unless admin.",
)
async def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: DbSession,
    actor: CurrentActor,
) -> FolderEnvelope:
    folder = await FolderService(db).update_folder(folder_id, data, actor)
    return FolderEnvelope(folder=FolderResponse.model_validate(folder))


@router.delete(
    "/{folder_id}",
    response_model=FolderDeleteResponse,
    summary="Delete a folder",
    description="Delete a folder and every note inside it (admin only).",
)
async def delete_folder(folder_id: str, db: DbSession, actor: AdminActor) -> FolderDeleteResponse:
    removed = await FolderService(db).delete_folder(folder_id, actor)
    return FolderDeleteResponse(
        message=f"Folder and {removed} chat(s) deleted",
        deleted_count=removed,
    )
