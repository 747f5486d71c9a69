"""Auth API endpoints: register, login, token refresh, logout, current account."""

import logging

from fastapi import APIRouter, Depends

from neoori.dependencies.auth import get_account_service, get_profile_store, require_user
from neoori.schemas import (
    AccountRead,
    AuthRead,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairRead,
    envelope,
)
from neoori.services.account_service import AccountService, AuthResult
from neoori.services.auth_service import TokenPayload
from neoori.services.profile_service import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthRead:
    return AuthRead(
        user=AccountRead.model_validate(result.account),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@router.post("/register", status_code=201)
async def register(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
    profiles: ProfileStore = Depends(get_profile_store),
):
    """Create an account and its profile document."""
    result = await accounts.register(payload.email, payload.password, payload.name)

    # Best-effort: the profile is created lazily on first access anyway
    try:
        await profiles.get_or_create(str(result.account.id), result.account.profile_id)
    except Exception:
        logger.warning("Profile creation failed for account %s", result.account.id, exc_info=True)

    return envelope(_auth_response(result))


@router.post("/login")
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    result = await accounts.login(payload.email, payload.password)
    return envelope(_auth_response(result))


@router.post("/refresh")
async def refresh(
    payload: RefreshRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Rotate the refresh token and mint a new access token."""
    pair = await accounts.refresh(payload.refresh_token)
    return envelope(TokenPairRead(access_token=pair.access_token, refresh_token=pair.refresh_token))


@router.post("/logout")
async def logout(
    payload: LogoutRequest | None = None,
    accounts: AccountService = Depends(get_account_service),
):
    if payload and payload.refresh_token:
        await accounts.logout(payload.refresh_token)
    return envelope(message="Logged out successfully")


@router.get("/me")
async def me(
    identity: TokenPayload = Depends(require_user),
    accounts: AccountService = Depends(get_account_service),
):
    account = await accounts.get_by_id(identity.user_id)
    return envelope(AccountRead.model_validate(account))
