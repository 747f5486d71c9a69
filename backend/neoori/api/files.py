"""Stored file endpoints: documents (owner only) and avatars."""

from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from neoori.dependencies.auth import get_storage, require_user
from neoori.exceptions import Forbidden
from neoori.services.auth_service import TokenPayload
from neoori.services.storage_service import LocalStorageService, content_type_for

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/documents/{user_id}/{category}/{filename}")
async def get_document(
    user_id: str,
    category: str,
    filename: str,
    identity: TokenPayload = Depends(require_user),
    storage: LocalStorageService = Depends(get_storage),
):
    """Serve a stored document; users can only read their own files."""
    if identity.user_id != user_id:
        raise Forbidden("Access denied")

    content = await run_in_threadpool(storage.read, f"documents/{user_id}/{category}/{filename}")
    return Response(
        content=content,
        media_type=content_type_for(filename),
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/avatars/{user_id}/{filename}")
async def get_avatar(
    user_id: str,
    filename: str,
    identity: TokenPayload = Depends(require_user),
    storage: LocalStorageService = Depends(get_storage),
):
    """Serve an avatar to any authenticated user."""
    content = await run_in_threadpool(storage.read, f"avatars/{user_id}/{filename}")
    return Response(
        content=content,
        media_type=content_type_for(filename),
        headers={"Cache-Control": "public, max-age=86400"},
    )
