"""
Accounts, password hashing and session tokens.
"""

from datetime import timedelta

import pytest

from stockdesk.errors import DuplicateKeyError, NotFoundError, ValidationError
from stockdesk.models import Expense, Sale, SessionToken, User
from stockdesk.services import auth_service, sales_service, session_service
from stockdesk.time_utils import utcnow


class TestPasswords:

    def test_hash_and_verify(self, app):
        hashed = auth_service.hash_password("secret1")

        assert hashed != "secret1"
        assert auth_service.verify_password("secret1", hashed)
        assert not auth_service.verify_password("secret2", hashed)

    def test_malformed_hash_is_mismatch(self, app):
        assert auth_service.verify_password("secret1", "not-a-bcrypt-hash") is False


class TestCreateUser:

    def test_create(self, db_session):
        user = auth_service.create_user({
            "email": "Mary@Shop.Local",
            "name": "Mary",
            "role": "salesgirl",
            "password": "secret1",
        })

        assert user.email == "mary@shop.local"
        assert user.role == "salesgirl"
        assert auth_service.verify_password("secret1", user.password_hash)
        assert "password_hash" not in user.to_dict()

    def test_duplicate_email_is_case_insensitive(self, db_session, admin_user):
        with pytest.raises(DuplicateKeyError):
            auth_service.create_user({
                "email": "ADMIN@inventory.com",
                "name": "Another Admin",
                "role": "admin",
                "password": "secret1",
            })

    def test_unknown_role(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user({
                "email": "x@shop.local", "name": "X", "role": "owner", "password": "secret1",
            })

    def test_short_password(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user({
                "email": "x@shop.local", "name": "X", "role": "manager", "password": "abc",
            })

    def test_missing_password(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user({"email": "x@shop.local", "name": "X", "role": "manager"})

    def test_non_object_payload(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user(["x@shop.local", "X", "manager", "secret1"])

    def test_invalid_email(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.create_user({
                "email": "not-an-email", "name": "X", "role": "manager", "password": "secret1",
            })


class TestAuthenticate:

    def test_valid_credentials(self, db_session, admin_user):
        user = auth_service.authenticate("admin@inventory.com", "Password123!")

        assert user is not None
        assert user.id == admin_user.id
        assert user.last_login_at is not None

    def test_email_is_case_insensitive(self, db_session, admin_user):
        assert auth_service.authenticate("Admin@Inventory.com", "Password123!") is not None

    def test_wrong_password(self, db_session, admin_user):
        assert auth_service.authenticate("admin@inventory.com", "wrong") is None

    def test_unknown_email(self, db_session):
        assert auth_service.authenticate("nobody@inventory.com", "Password123!") is None

    def test_empty_credentials(self, db_session):
        assert auth_service.authenticate("", "") is None

    def test_non_string_credentials(self, db_session, admin_user):
        assert auth_service.authenticate(["admin@inventory.com"], "Password123!") is None
        assert auth_service.authenticate("admin@inventory.com", 123456) is None

    def test_returned_row_serializes_without_hash(self, db_session, admin_user):
        user = auth_service.authenticate("admin@inventory.com", "Password123!")
        assert "password_hash" not in user.to_dict()


class TestDeleteUser:

    def test_references_are_cleared(self, db_session, admin_user, salesgirl_user, laptop):
        sale_id = sales_service.place_sale(laptop.id, 1, "cash", salesgirl_user.id).id
        expense = Expense(
            description="Till roll",
            amount_cents=300,
            category="Supplies",
            incurred_at=utcnow(),
            created_by_user_id=salesgirl_user.id,
        )
        db_session.add(expense)
        db_session.commit()
        expense_id = expense.id
        session_service.create_session(salesgirl_user.id)
        user_id = salesgirl_user.id

        auth_service.delete_user(user_id)

        assert db_session.get(User, user_id) is None
        sale = db_session.get(Sale, sale_id)
        assert sale.salesperson_id is None
        assert sale.to_dict()["salesperson_name"] is None
        assert db_session.get(Expense, expense_id).created_by_user_id is None
        assert db_session.query(SessionToken).filter_by(user_id=user_id).count() == 0

    def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            auth_service.delete_user(999)


class TestSessions:

    def test_create_and_validate(self, db_session, manager_user):
        session, token = session_service.create_session(manager_user.id, user_agent="pytest")

        assert session.token_hash == session_service.hash_token(token)
        assert session.token_hash != token

        context = session_service.validate_session(token)
        assert context is not None
        assert context.user_id == manager_user.id
        assert context.role == "manager"

    def test_unknown_token(self, db_session):
        assert session_service.validate_session("0" * 64) is None

    def test_revoked_token(self, db_session, manager_user):
        _session, token = session_service.create_session(manager_user.id)

        assert session_service.revoke_session(token) is True
        assert session_service.validate_session(token) is None
        assert session_service.revoke_session(token) is False

    def test_absolute_timeout(self, db_session, manager_user):
        session, token = session_service.create_session(manager_user.id)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert session_service.validate_session(token) is None

    def test_idle_timeout_revokes(self, db_session, manager_user):
        session, token = session_service.create_session(manager_user.id)
        session.last_used_at = utcnow() - timedelta(hours=3)
        db_session.commit()

        assert session_service.validate_session(token) is None
        db_session.refresh(session)
        assert session.is_revoked is True
        assert session.revoked_reason == "Idle timeout"

    def test_cleanup(self, db_session, manager_user):
        expired, _ = session_service.create_session(manager_user.id)
        expired.expires_at = utcnow() - timedelta(hours=1)
        old_revoked, _ = session_service.create_session(manager_user.id)
        old_revoked.is_revoked = True
        old_revoked.revoked_at = utcnow() - timedelta(days=31)
        session_service.create_session(manager_user.id)
        db_session.commit()

        assert session_service.cleanup_expired_sessions() == 2
        assert db_session.query(SessionToken).count() == 1
