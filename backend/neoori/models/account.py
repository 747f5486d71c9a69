"""Account model for authentication."""

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from neoori.models.base import Base, TimestampMixin, UUIDMixin


class Account(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "accounts"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255))  # None for OAuth accounts
    avatar = Column(String(500))
    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    oauth_provider = Column(String(50), default="email", nullable=False)
    profile_id = Column(String(36), unique=True)
    last_login_at = Column(DateTime(timezone=True))

    # Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="account", cascade="all, delete-orphan")
