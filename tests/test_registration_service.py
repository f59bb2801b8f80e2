"""Tests for the registration service."""

from datetime import datetime, timezone
from unittest.mock import patch

import bcrypt
import pytest

from contabilito.core.exceptions import (
    CompanyNameTakenError,
    EmailTakenError,
    MissingFieldError,
    TermsNotAcceptedError,
    UsernameTakenError,
    ValidationError,
    WeakPasswordError,
)
from contabilito.db.store import StoreHandle
from contabilito.models import Company, User, UserCompanyRole
from contabilito.schemas.schemas import RegisterRequest
from contabilito.services.registration_service import registration_service


def make_request(**overrides):
    fields = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": "secret1",
        "terms_accepted": True,
    }
    fields.update(overrides)
    return RegisterRequest(**fields)


def row_counts(store):
    return store.count(User), store.count(Company), store.count(UserCompanyRole)


class TestValidation:
    """Tests for input validation (no storage access)."""

    @pytest.mark.parametrize("field", ["first_name", "last_name", "username", "email", "password"])
    def test_missing_field(self, store, settings, field):
        with pytest.raises(MissingFieldError) as exc_info:
            registration_service.register(store, make_request(**{field: None}), settings)
        assert field in exc_info.value.fields
        assert row_counts(store) == (0, 0, 0)

    def test_blank_field_counts_as_missing(self, store, settings):
        with pytest.raises(MissingFieldError):
            registration_service.register(store, make_request(first_name="   "), settings)

    @pytest.mark.parametrize("terms", [None, False])
    def test_terms_not_accepted(self, store, settings, terms):
        with pytest.raises(TermsNotAcceptedError):
            registration_service.register(store, make_request(terms_accepted=terms), settings)
        assert row_counts(store) == (0, 0, 0)

    def test_terms_check_can_be_disabled(self, store, settings):
        settings.REQUIRE_TERMS_ACCEPTED = False
        result = registration_service.register(store, make_request(terms_accepted=None), settings)
        with store.session() as session:
            assert session.get(User, result.user_id).terms_accepted is False

    def test_password_of_five_characters_is_rejected(self, store, settings):
        with pytest.raises(WeakPasswordError):
            registration_service.register(store, make_request(password="12345"), settings)
        assert row_counts(store) == (0, 0, 0)

    def test_password_of_six_characters_is_accepted(self, store, settings):
        result = registration_service.register(store, make_request(password="123456"), settings)
        assert result.user_id is not None

    def test_password_over_bcrypt_limit_is_rejected(self, store, settings):
        with pytest.raises(ValidationError):
            registration_service.register(store, make_request(password="x" * 73), settings)

    def test_username_shaped_like_email_is_rejected(self, store, settings):
        registration_service.register(
            store, make_request(username="alice", email="a@b.com"), settings
        )

        with pytest.raises(ValidationError):
            registration_service.register(
                store, make_request(username="a@b.com", email="other@example.com"), settings
            )
        assert store.count(User) == 1

    def test_email_without_at_sign_is_rejected(self, store, settings):
        with pytest.raises(ValidationError):
            registration_service.register(store, make_request(email="ada"), settings)
        assert row_counts(store) == (0, 0, 0)

    def test_missing_field_checked_before_terms(self, store, settings):
        with pytest.raises(MissingFieldError):
            registration_service.register(
                store, make_request(email=None, terms_accepted=False), settings
            )


class TestRegister:
    """Tests for the registration transaction."""

    def test_user_without_company(self, store, settings):
        result = registration_service.register(store, make_request(), settings)

        assert result.company_id is None
        assert row_counts(store) == (1, 0, 0)

    def test_password_is_stored_hashed(self, store, settings):
        registration_service.register(store, make_request(), settings)
        user = store.find_user_by_identifier("ada")

        assert user.password_hash != "secret1"
        assert bcrypt.checkpw(b"secret1", user.password_hash.encode("utf-8"))

    def test_user_with_new_company(self, store, settings):
        result = registration_service.register(
            store, make_request(company_name="  Acme  "), settings
        )

        assert result.company_id is not None
        assert row_counts(store) == (1, 1, 1)
        with store.session() as session:
            company = session.get(Company, result.company_id)
            role = session.query(UserCompanyRole).one()
            assert company.company_name == "Acme"
            assert company.owner_user_id == result.user_id
            assert (role.user_id, role.company_id, role.role.value) == (
                result.user_id, result.company_id, "owner",
            )

    def test_blank_company_name_creates_no_company(self, store, settings):
        result = registration_service.register(store, make_request(company_name="   "), settings)
        assert result.company_id is None
        assert row_counts(store) == (1, 0, 0)

    def test_failure_before_role_insert_leaves_nothing(self, store, settings):
        with patch.object(StoreHandle, "insert_role", side_effect=RuntimeError("disk on fire")):
            with pytest.raises(RuntimeError):
                registration_service.register(store, make_request(company_name="Acme"), settings)

        assert row_counts(store) == (0, 0, 0)

    def test_duplicate_email_is_conflict(self, store, settings):
        registration_service.register(store, make_request(), settings)

        with pytest.raises(EmailTakenError):
            registration_service.register(
                store, make_request(username="ada2", email="ADA@example.com"), settings
            )
        assert store.count(User) == 1
        assert store.find_user_by_identifier("ada2") is None

    def test_duplicate_username_is_conflict(self, store, settings):
        registration_service.register(store, make_request(), settings)

        with pytest.raises(UsernameTakenError):
            registration_service.register(
                store, make_request(username="ADA", email="other@example.com"), settings
            )
        assert store.count(User) == 1

    def test_existing_company_name_is_conflict_and_user_rolled_back(self, store, settings):
        registration_service.register(store, make_request(company_name="Acme"), settings)

        with pytest.raises(CompanyNameTakenError):
            registration_service.register(
                store,
                make_request(username="bob", email="bob@example.com", company_name="acme"),
                settings,
            )
        assert row_counts(store) == (1, 1, 1)
        assert store.find_user_by_identifier("bob") is None

    def test_company_race_caught_by_unique_index(self, store, settings):
        registration_service.register(store, make_request(company_name="Acme"), settings)

        # Pre-check misses the company, as if a concurrent registration committed it.
        with patch.object(StoreHandle, "find_company_by_name", return_value=None):
            with pytest.raises(CompanyNameTakenError):
                registration_service.register(
                    store,
                    make_request(username="bob", email="bob@example.com", company_name="ACME"),
                    settings,
                )
        assert row_counts(store) == (1, 1, 1)
        assert store.find_user_by_identifier("bob") is None

    def test_soft_deleted_company_name_can_be_reused(self, store, settings):
        first = registration_service.register(store, make_request(company_name="Acme"), settings)
        with store.session() as session:
            session.get(Company, first.company_id).deleted_at = datetime.now(timezone.utc)
            session.commit()

        second = registration_service.register(
            store,
            make_request(username="bob", email="bob@example.com", company_name="Acme"),
            settings,
        )
        assert second.company_id != first.company_id
