"""Company (tenant), UserCompanyRole and CollaborationRequest models."""

import enum

from sqlalchemy import (
    CheckConstraint, Column, Integer, String, DateTime, ForeignKey, Enum, Index,
    UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from contabilito.db.base import Base, utc_now


class CompanyRoleEnum(str, enum.Enum):
    owner = "owner"
    admin = "admin"
    accountant = "accountant"
    member = "member"


class Company(Base):
    """Tenant whose accounts and transactions are isolated from other companies."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(255), nullable=False)  # stored trimmed
    owner_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    industry = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    roles = relationship("UserCompanyRole", back_populates="company", passive_deletes=True)

    __table_args__ = (
        Index(
            "uq_companies_name_ci",
            func.lower(company_name),
            unique=True,
            sqlite_where=deleted_at.is_(None),
            postgresql_where=deleted_at.is_(None),
        ),
    )


class UserCompanyRole(Base):
    """Single role a user holds within a company."""
    __tablename__ = "user_company_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(CompanyRoleEnum, name="company_role", native_enum=False, create_constraint=True),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    user = relationship("User", back_populates="company_roles")
    company = relationship("Company", back_populates="roles")

    __table_args__ = (
        UniqueConstraint("user_id", "company_id", name="uq_user_company_roles_user_company"),
    )


class CollaborationStatusEnum(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class CollaborationRequest(Base):
    """A user's request to join a company with a given role.

    Ownership is never requested; an accepted request becomes a
    ``UserCompanyRole`` row, so the requested role uses the same role set.
    """
    __tablename__ = "collaboration_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requesting_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    requested_role = Column(
        Enum(CompanyRoleEnum, name="requested_role", native_enum=False, create_constraint=True),
        nullable=False,
    )
    status = Column(
        Enum(CollaborationStatusEnum, name="collaboration_status", native_enum=False, create_constraint=True),
        default=CollaborationStatusEnum.pending,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    responded_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        CheckConstraint("requested_role != 'owner'", name="ck_collaboration_requests_not_owner"),
    )
