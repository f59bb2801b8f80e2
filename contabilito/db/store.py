"""Credential store: engine lifecycle, schema provisioning and transactional writes.

The store is an explicit object passed to services instead of a module-level
engine, so each test (or process) can own an isolated database.

Writes go through :meth:`CredentialStore.run_in_transaction`. The work unit
returns :class:`Ok` or :class:`Err`; the store commits the former and rolls
back the latter. Exceptions raised inside the work unit, or at commit time,
also roll back before they propagate.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar, Union

from sqlalchemy import create_engine, event, func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from contabilito.core.exceptions import StorageError, UniqueConstraintViolation
from contabilito.db.base import Base
from contabilito.models import Company, CompanyRoleEnum, User, UserCompanyRole

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Exception)

# Substrings identifying each unique index in driver error messages.
# SQLite names expression indexes ("index 'uq_users_email_ci'") but reports
# plain UNIQUE constraints by column; PostgreSQL always names the constraint.
UNIQUE_CONSTRAINT_MARKERS = {
    "user.email": ("uq_users_email_ci", "users.email"),
    "user.username": ("uq_users_username_ci", "users.username"),
    "company.name": ("uq_companies_name_ci", "companies.company_name"),
    "user_company_role.user_company": (
        "uq_user_company_roles_user_company",
        "user_company_roles.user_id",
    ),
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Ok[T], Err[E]]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def constraint_from_integrity_error(exc: IntegrityError) -> Optional[str]:
    """Name the unique constraint behind an IntegrityError, if it is one of ours."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    for constraint, markers in UNIQUE_CONSTRAINT_MARKERS.items():
        if any(marker in message for marker in markers):
            return constraint
    return None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class StoreHandle:
    """Operations available to a work unit inside one transaction."""

    def __init__(self, session: Session):
        self.session = session

    def find_user_by_identifier(self, identifier: str) -> Optional[User]:
        """Match a live user by email OR username, ignoring case."""
        needle = identifier.strip().lower()
        return (
            self.session.query(User)
            .filter(
                or_(func.lower(User.email) == needle, func.lower(User.username) == needle),
                User.deleted_at.is_(None),
            )
            .first()
        )

    def find_company_by_name(self, name: str) -> Optional[Company]:
        needle = name.strip().lower()
        return (
            self.session.query(Company)
            .filter(func.lower(Company.company_name) == needle, Company.deleted_at.is_(None))
            .first()
        )

    def list_memberships(self, user_id: int) -> List[Dict[str, Any]]:
        """Companies the user holds a role in, with the role name."""
        rows = (
            self.session.query(UserCompanyRole, Company)
            .join(Company, Company.id == UserCompanyRole.company_id)
            .filter(UserCompanyRole.user_id == user_id, Company.deleted_at.is_(None))
            .order_by(UserCompanyRole.created_at, UserCompanyRole.id)
            .all()
        )
        return [
            {
                "company_id": company.id,
                "company_name": company.company_name,
                "role": role.role.value,
            }
            for role, company in rows
        ]

    def insert_user(self, fields: Dict[str, Any]) -> int:
        values = dict(fields)
        values["email"] = normalize_email(values["email"])
        return self._insert(User(**values)).id

    def insert_company(self, fields: Dict[str, Any]) -> int:
        values = dict(fields)
        values["company_name"] = values["company_name"].strip()
        return self._insert(Company(**values)).id

    def insert_role(self, fields: Dict[str, Any]) -> int:
        values = dict(fields)
        values["role"] = CompanyRoleEnum(values["role"])
        return self._insert(UserCompanyRole(**values)).id

    def _insert(self, row):
        """Add one row and flush so the generated id and constraints are checked now."""
        self.session.add(row)
        try:
            self.session.flush()
        except IntegrityError as exc:
            constraint = constraint_from_integrity_error(exc)
            if constraint is None:
                raise
            raise UniqueConstraintViolation(constraint) from exc
        return row


class CredentialStore:
    """Constraint-enforcing persistence for users, companies and roles."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    # ---- lifecycle ----

    def open(self) -> "CredentialStore":
        if self._engine is not None:
            return self
        engine = create_engine(self.database_url, echo=self.echo, pool_pre_ping=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info("Credential store opened (%s)", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Credential store closed")

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StorageError("Credential store is not open")
        return self._engine

    def __enter__(self) -> "CredentialStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---- schema ----

    def ensure_schema(self) -> None:
        """Create any missing tables and indexes; existing ones are left alone."""
        try:
            Base.metadata.create_all(self.engine, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.exception("Schema provisioning failed")
            raise StorageError("Could not provision database schema") from exc

    # ---- sessions ----

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Short-lived session for read-only queries."""
        if self._session_factory is None:
            raise StorageError("Credential store is not open")
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            logger.exception("Read query failed")
            raise StorageError("Database read failed") from exc
        finally:
            session.close()

    def run_in_transaction(self, work: Callable[[StoreHandle], Outcome]) -> Outcome:
        """Run ``work`` in one transaction, committing only on ``Ok``."""
        if self._session_factory is None:
            raise StorageError("Credential store is not open")
        session = self._session_factory()
        try:
            outcome = work(StoreHandle(session))
            if outcome.ok:
                session.commit()
            else:
                session.rollback()
            return outcome
        except IntegrityError as exc:
            session.rollback()
            constraint = constraint_from_integrity_error(exc)
            if constraint is not None:
                raise UniqueConstraintViolation(constraint) from exc
            logger.exception("Integrity error during transaction")
            raise StorageError("Database constraint failed") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Transaction failed")
            raise StorageError("Database write failed") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ---- read helpers ----

    def find_user_by_identifier(self, identifier: str) -> Optional[User]:
        with self.session() as session:
            return StoreHandle(session).find_user_by_identifier(identifier)

    def find_company_by_name(self, name: str) -> Optional[Company]:
        with self.session() as session:
            return StoreHandle(session).find_company_by_name(name)

    def list_memberships(self, user_id: int) -> List[Dict[str, Any]]:
        with self.session() as session:
            return StoreHandle(session).list_memberships(user_id)

    def count(self, model) -> int:
        """Row count for a model, soft-deleted rows included."""
        with self.session() as session:
            return session.query(model).count()
