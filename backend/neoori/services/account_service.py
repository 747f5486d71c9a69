"""Account operations: register, login, token rotation, password change."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from neoori.exceptions import (
    AccountDeactivated,
    AlreadyExists,
    InvalidCredentials,
    InvalidOrExpiredToken,
    InvalidToken,
    NotFound,
    ValidationError,
)
from neoori.models.account import Account
from neoori.models.refresh_token import RefreshToken
from neoori.services.auth_service import (
    TokenPair,
    TokenPayload,
    TokenService,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    account: Account
    tokens: TokenPair


class AccountService:
    def __init__(self, db: AsyncSession, tokens: TokenService):
        self.db = db
        self.tokens = tokens

    async def _find_by_email(self, email: str) -> Account | None:
        result = await self.db.execute(select(Account).where(Account.email == email))
        return result.scalar_one_or_none()

    async def _issue_tokens(self, account: Account) -> TokenPair:
        """Issue a token pair and persist the refresh token."""
        pair = self.tokens.issue_pair(TokenPayload(user_id=str(account.id), email=account.email))
        self.db.add(
            RefreshToken(
                account_id=account.id,
                token=pair.refresh_token,
                expires_at=pair.refresh_expires_at,
            )
        )
        return pair

    async def register(self, email: str, password: str, name: str) -> AuthResult:
        email = email.strip().lower()
        if await self._find_by_email(email):
            raise AlreadyExists()

        account = Account(
            email=email,
            name=name.strip(),
            password_hash=hash_password(password),
            profile_id=str(uuid.uuid4()),
            oauth_provider="email",
        )
        self.db.add(account)

        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExists()

        pair = await self._issue_tokens(account)
        account.last_login_at = datetime.now(timezone.utc)
        await self.db.commit()

        logger.info("Registered account %s", account.id)
        return AuthResult(account=account, tokens=pair)

    async def login(self, email: str, password: str) -> AuthResult:
        account = await self._find_by_email(email.strip().lower())

        if not account:
            raise InvalidCredentials()

        if not account.is_active:
            raise AccountDeactivated()

        if not account.password_hash or not verify_password(password, account.password_hash):
            raise InvalidCredentials()

        pair = await self._issue_tokens(account)
        account.last_login_at = datetime.now(timezone.utc)
        await self.db.commit()

        return AuthResult(account=account, tokens=pair)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token: the consumed record is deleted and a new pair issued."""
        try:
            self.tokens.verify_refresh_token(refresh_token)
        except InvalidToken:
            raise InvalidToken("Invalid refresh token")

        result = await self.db.execute(
            select(RefreshToken).where(RefreshToken.token == refresh_token)
        )
        record = result.scalar_one_or_none()
        if not record or record.is_expired():
            raise InvalidOrExpiredToken()

        account = await self.db.get(Account, record.account_id)
        if not account:
            raise InvalidOrExpiredToken()

        await self.db.delete(record)
        pair = await self._issue_tokens(account)
        await self.db.commit()

        return pair

    async def logout(self, refresh_token: str) -> None:
        await self.db.execute(delete(RefreshToken).where(RefreshToken.token == refresh_token))
        await self.db.commit()

    async def get_by_id(self, account_id: str | uuid.UUID) -> Account:
        try:
            key = account_id if isinstance(account_id, uuid.UUID) else uuid.UUID(account_id)
        except ValueError:
            raise NotFound("User not found")

        account = await self.db.get(Account, key)
        if not account:
            raise NotFound("User not found")
        return account

    async def change_password(self, account_id: str, current_password: str, new_password: str) -> None:
        account = await self.get_by_id(account_id)

        if not account.password_hash:
            raise ValidationError("User does not have a password set")

        if not verify_password(current_password, account.password_hash):
            raise ValidationError("Current password is incorrect")

        account.password_hash = hash_password(new_password)
        await self.db.commit()

    async def update_avatar(self, account_id: str, avatar_url: str) -> Account:
        account = await self.get_by_id(account_id)
        account.avatar = avatar_url
        await self.db.commit()
        return account
