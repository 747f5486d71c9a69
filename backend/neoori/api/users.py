"""User profile API endpoints: profile, sub-resources, uploads, password."""

import logging
import re
from pathlib import PurePosixPath

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from neoori.config import Settings
from neoori.dependencies.auth import (
    get_account_service,
    get_app_settings,
    get_profile_store,
    get_storage,
    require_user,
)
from neoori.exceptions import NotFound, ValidationError
from neoori.models.profile import Education, Experience, Skill, StoredDocument
from neoori.schemas import (
    AccountRead,
    AvatarRead,
    ChangePasswordRequest,
    EducationCreate,
    EducationUpdate,
    ExperienceCreate,
    ExperienceUpdate,
    GameProgressUpdate,
    PreferencesUpdate,
    ProfileUpdate,
    SkillCreate,
    SkillUpdate,
    envelope,
)
from neoori.services.account_service import AccountService
from neoori.services.auth_service import TokenPayload
from neoori.services.profile_service import ProfileStore
from neoori.services.storage_service import LocalStorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "text/plain",
}

_CATEGORY_RE = re.compile(r"^[A-Za-z0-9_-]{1,50}$")


async def _read_upload(upload: UploadFile, max_size: int) -> bytes:
    # One byte past the limit is enough to reject
    content = await upload.read(max_size + 1)
    if len(content) > max_size:
        raise ValidationError(f"File too large (max {max_size // (1024 * 1024)}MB)")
    return content


# --- Profile ---

@router.get("/profile")
async def get_profile(
    identity: TokenPayload = Depends(require_user),
    accounts: AccountService = Depends(get_account_service),
    profiles: ProfileStore = Depends(get_profile_store),
):
    """Return the caller's profile, creating it on first access."""
    account = await accounts.get_by_id(identity.user_id)
    profile = await profiles.get_or_create(identity.user_id, account.profile_id or identity.user_id)
    return envelope(profile)


@router.patch("/profile")
async def update_profile(
    payload: ProfileUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.update(identity.user_id, payload.model_dump(exclude_unset=True))
    return envelope(profile)


@router.patch("/profile/preferences")
async def update_preferences(
    payload: PreferencesUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.update_preferences(identity.user_id, payload.preferences)
    return envelope(profile)


# --- Education ---

@router.post("/profile/education", status_code=201)
async def add_education(
    payload: EducationCreate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.add_education(identity.user_id, Education(**payload.model_dump()))
    return envelope(profile)


@router.patch("/profile/education/{education_id}")
async def update_education(
    education_id: str,
    payload: EducationUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.update_education(identity.user_id, education_id, payload.model_dump(exclude_unset=True))
    return envelope(profile)


@router.delete("/profile/education/{education_id}")
async def delete_education(
    education_id: str,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.delete_education(identity.user_id, education_id)
    return envelope(profile)


# --- Experiences ---

@router.post("/profile/experiences", status_code=201)
async def add_experience(
    payload: ExperienceCreate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.add_experience(identity.user_id, Experience(**payload.model_dump()))
    return envelope(profile)


@router.patch("/profile/experiences/{experience_id}")
async def update_experience(
    experience_id: str,
    payload: ExperienceUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.update_experience(identity.user_id, experience_id, payload.model_dump(exclude_unset=True))
    return envelope(profile)


@router.delete("/profile/experiences/{experience_id}")
async def delete_experience(
    experience_id: str,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.delete_experience(identity.user_id, experience_id)
    return envelope(profile)


# --- Skills ---

@router.post("/profile/skills", status_code=201)
async def add_skill(
    payload: SkillCreate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.add_skill(identity.user_id, Skill(**payload.model_dump()))
    return envelope(profile)


@router.patch("/profile/skills/{skill_id}")
async def update_skill(
    skill_id: str,
    payload: SkillUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.update_skill(identity.user_id, skill_id, payload.model_dump(exclude_unset=True))
    return envelope(profile)


@router.delete("/profile/skills/{skill_id}")
async def delete_skill(
    skill_id: str,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.delete_skill(identity.user_id, skill_id)
    return envelope(profile)


# --- Documents ---

@router.post("/profile/documents", status_code=201)
async def upload_document(
    document: UploadFile | None = File(None),
    category: str = Form("other"),
    identity: TokenPayload = Depends(require_user),
    settings: Settings = Depends(get_app_settings),
    profiles: ProfileStore = Depends(get_profile_store),
    storage: LocalStorageService = Depends(get_storage),
):
    """Store an uploaded document and record it on the profile."""
    if document is None:
        raise ValidationError("No file provided")
    if document.content_type not in DOCUMENT_MIME_TYPES:
        raise ValidationError("File type not allowed")
    if not _CATEGORY_RE.match(category):
        raise ValidationError("Invalid document category")

    content = await _read_upload(document, settings.max_document_size)
    filename = document.filename or "document"

    stored = await run_in_threadpool(storage.save_document, identity.user_id, filename, content, category)
    entry = StoredDocument(
        name=filename,
        type=PurePosixPath(filename).suffix.lstrip(".").lower(),
        size=len(content),
        path=stored.path,
        url=stored.url,
        category=category,
        mime_type=document.content_type,
    )
    await profiles.add_document(identity.user_id, entry)
    await profiles.check_and_award_credits(identity.user_id)

    return envelope({"document": entry})


@router.delete("/profile/documents/{document_id}")
async def delete_document(
    document_id: str,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
    storage: LocalStorageService = Depends(get_storage),
):
    profile = await profiles.get(identity.user_id)
    entry = next((d for d in profile.documents if d.id == document_id), None)
    if not entry:
        raise NotFound("Document not found")

    await run_in_threadpool(storage.delete, entry.path)
    profile = await profiles.delete_document(identity.user_id, document_id)
    return envelope(profile)


# --- Games ---

@router.put("/profile/games/{game_id}")
async def save_game_progress(
    game_id: str,
    payload: GameProgressUpdate,
    identity: TokenPayload = Depends(require_user),
    profiles: ProfileStore = Depends(get_profile_store),
):
    profile = await profiles.save_game_progress(identity.user_id, game_id, payload.model_dump(exclude_unset=True))
    return envelope(profile)


# --- Avatar ---

@router.post("/profile/avatar")
async def upload_avatar(
    avatar: UploadFile | None = File(None),
    identity: TokenPayload = Depends(require_user),
    settings: Settings = Depends(get_app_settings),
    accounts: AccountService = Depends(get_account_service),
    storage: LocalStorageService = Depends(get_storage),
):
    """Replace the caller's avatar image."""
    if avatar is None:
        raise ValidationError("No file provided")
    if not (avatar.content_type or "").startswith("image/"):
        raise ValidationError("File must be an image")

    content = await _read_upload(avatar, settings.max_avatar_size)

    account = await accounts.get_by_id(identity.user_id)
    old_avatar = account.avatar

    stored = await run_in_threadpool(storage.save_avatar, identity.user_id, avatar.filename or "", content)
    account = await accounts.update_avatar(identity.user_id, stored.url)

    if old_avatar and "/api/files/avatars/" in old_avatar:
        # A different extension leaves the previous file behind
        old_path = old_avatar.split("/api/files/", 1)[1]
        if old_path != stored.path:
            await run_in_threadpool(storage.delete, old_path)

    return envelope(AvatarRead(avatar=stored.url, user=AccountRead.model_validate(account)))


# --- Password ---

@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    identity: TokenPayload = Depends(require_user),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.change_password(identity.user_id, payload.current_password, payload.new_password)
    return envelope(message="Password changed successfully")
