"""
API Router.

Aggregates the endpoint routers mounted under the configured API prefix.
"""

from fastapi import APIRouter

from mynote.backend.api.routes import auth, folders, notes

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Notes keep their historical "chat" path segment
router.include_router(notes.router, prefix="/chat", tags=["notes"])

router.include_router(folders.router, prefix="/folder", tags=["folders"])
