"""Account, Category and Transaction models (company-scoped bookkeeping data)."""

import enum

from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, ForeignKey, Enum, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from contabilito.db.base import Base, utc_now


class EntryTypeEnum(str, enum.Enum):
    income = "income"
    expense = "expense"


def _entry_type():
    return Enum(EntryTypeEnum, name="entry_type", native_enum=False, create_constraint=True)


class Account(Base):
    """Money account (bank, cash box, card) held by a company."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    account_name = Column(String(255), nullable=False)
    initial_balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "account_name", name="uq_accounts_company_name"),
    )


class Category(Base):
    """Income or expense category defined per company."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    category_name = Column(String(255), nullable=False)
    type = Column(_entry_type(), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "category_name", name="uq_categories_company_name"),
    )


class Transaction(Base):
    """Income or expense recorded against an account by a user."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    type = Column(_entry_type(), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String(500), nullable=True)
    transaction_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    account = relationship("Account")
    category = relationship("Category")

    __table_args__ = (
        Index("ix_transactions_company_date", "company_id", "transaction_date"),
    )
