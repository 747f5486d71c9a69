"""Authentication and service dependencies for FastAPI routes."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from neoori.config import Settings
from neoori.exceptions import InvalidToken, Unauthorized
from neoori.models.base import get_db
from neoori.services.account_service import AccountService
from neoori.services.auth_service import TokenPayload, TokenService
from neoori.services.profile_service import ProfileStore
from neoori.services.storage_service import LocalStorageService

bearer = HTTPBearer(auto_error=False, description="Access token (JWT)")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_storage(request: Request) -> LocalStorageService:
    return request.app.state.storage


def get_profile_store(request: Request) -> ProfileStore:
    return ProfileStore(request.app.state.mongo.profiles)


def get_account_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AccountService:
    return AccountService(db, tokens)


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """Return the caller identity from the bearer token or raise 401."""
    if not credentials or not credentials.credentials:
        raise Unauthorized("No token provided")
    try:
        return tokens.verify_access_token(credentials.credentials)
    except InvalidToken:
        raise Unauthorized("Invalid or expired token")
