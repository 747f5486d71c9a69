"""Relational models (accounts, refresh tokens) and profile document models."""

from neoori.models.base import Base, Database, get_db
from neoori.models.account import Account
from neoori.models.refresh_token import RefreshToken

__all__ = ["Base", "Database", "get_db", "Account", "RefreshToken"]
