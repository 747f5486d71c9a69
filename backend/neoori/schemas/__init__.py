"""Pydantic schemas package."""

from neoori.schemas.base import CamelModel, envelope, error_envelope
from neoori.schemas.auth import (
    AccountRead,
    AuthRead,
    AvatarRead,
    ChangePasswordRequest,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairRead,
)
from neoori.schemas.profile import (
    EducationCreate,
    EducationUpdate,
    ExperienceCreate,
    ExperienceUpdate,
    GameProgressUpdate,
    PreferencesUpdate,
    ProfileUpdate,
    SkillCreate,
    SkillUpdate,
)

__all__ = [
    "CamelModel",
    "envelope",
    "error_envelope",
    # Auth
    "AccountRead",
    "AuthRead",
    "AvatarRead",
    "ChangePasswordRequest",
    "LoginRequest",
    "LogoutRequest",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPairRead",
    # Profile
    "EducationCreate",
    "EducationUpdate",
    "ExperienceCreate",
    "ExperienceUpdate",
    "GameProgressUpdate",
    "PreferencesUpdate",
    "ProfileUpdate",
    "SkillCreate",
    "SkillUpdate",
]
