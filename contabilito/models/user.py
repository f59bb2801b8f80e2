"""User and per-user settings models."""

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, Index, func,
)
from sqlalchemy.orm import relationship
from contabilito.db.base import Base, utc_now


class User(Base):
    """Login identity. Company membership lives in ``user_company_roles``."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)  # stored trimmed and lower-cased
    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    terms_accepted = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    reset_token = Column(String(255), nullable=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    company_roles = relationship(
        "UserCompanyRole",
        back_populates="user",
        passive_deletes=True,
    )
    settings = relationship(
        "UserSettings",
        back_populates="user",
        uselist=False,
        passive_deletes=True,
    )

    # Case-insensitive uniqueness among live rows; lookups use lower() too.
    __table_args__ = (
        Index(
            "uq_users_email_ci",
            func.lower(email),
            unique=True,
            sqlite_where=deleted_at.is_(None),
            postgresql_where=deleted_at.is_(None),
        ),
        Index(
            "uq_users_username_ci",
            func.lower(username),
            unique=True,
            sqlite_where=deleted_at.is_(None),
            postgresql_where=deleted_at.is_(None),
        ),
    )


class UserSettings(Base):
    """Notification preferences, one row per user."""
    __tablename__ = "user_settings"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email_notifications = Column(Boolean, default=False, nullable=False)
    in_app_notifications = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="settings")
