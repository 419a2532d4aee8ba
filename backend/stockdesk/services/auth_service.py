# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication and staff account management.

Passwords are hashed with bcrypt (cost factor from BCRYPT_ROUNDS, 12 by
default). Emails are normalized to lower case so uniqueness and login are
case-insensitive.

authenticate() never says why it failed: unknown email and wrong password
both return None, so callers cannot probe which accounts exist.
"""

from __future__ import annotations

import bcrypt
from flask import current_app, has_app_context
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateKeyError, NotFoundError, StoreError, ValidationError
from ..extensions import db
from ..models import Expense, Sale, SessionToken, User
from ..validation import ModelValidationPolicy, enforce_rules_user, is_valid_id, validate_payload
from stockdesk.time_utils import utcnow


USER_POLICY = ModelValidationPolicy(
    writable_fields={"email", "name", "role"},
    required_on_create={"email", "name", "role"},
)

DEFAULT_BCRYPT_ROUNDS = 12


def _bcrypt_rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))
    return DEFAULT_BCRYPT_ROUNDS


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    """Hash password using bcrypt; returns the hash as a string for storage."""
    salt = bcrypt.gensalt(rounds=_bcrypt_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() is timing-safe. A malformed stored hash counts as a
    mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.name.asc(), User.id.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id) if is_valid_id(user_id) else None
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(payload: dict) -> User:
    """
    Create a staff account.

    payload: email, name, role, password. The password is hashed before
    anything is written; the plaintext is never stored.

    Raises:
        ValidationError: missing/blank fields, unknown role, short password
        DuplicateKeyError: email already registered
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    payload = dict(payload)
    password = payload.pop("password", None)

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)
    enforce_rules_user(patch, password)
    patch["email"] = normalize_email(patch["email"])

    existing = db.session.query(User).filter(User.email == patch["email"]).first()
    if existing:
        raise DuplicateKeyError("Email already exists")

    user = User(password_hash=hash_password(password), **patch)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent insert of the same email
        db.session.rollback()
        raise DuplicateKeyError("Email already exists") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Failed to create user") from exc
    return user


def delete_user(user_id: int) -> None:
    """
    Delete a staff account.

    Sales and expenses the user recorded are kept with their user reference
    cleared; the user's sessions are removed. Refusing to delete the acting
    user's own account is the caller's job.
    """
    user = get_user(user_id)
    try:
        db.session.query(Sale).filter(Sale.salesperson_id == user.id).update(
            {Sale.salesperson_id: None}, synchronize_session=False
        )
        db.session.query(Expense).filter(Expense.created_by_user_id == user.id).update(
            {Expense.created_by_user_id: None}, synchronize_session=False
        )
        db.session.query(SessionToken).filter(SessionToken.user_id == user.id).delete(
            synchronize_session=False
        )
        db.session.delete(user)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Failed to delete user") from exc
    # Relationships loaded before the bulk updates still point at the old user
    db.session.expire_all()


def authenticate(email: str, password: str) -> User | None:
    """
    Authenticate by email and password.

    Returns the User if credentials are valid, None otherwise.
    Updates last_login_at on success.

    The returned row still carries password_hash; anything leaving the
    process must go through User.to_dict(), which omits it.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        return None
    if not email or not password:
        return None

    try:
        user = db.session.query(User).filter(User.email == normalize_email(email)).first()
        if not user:
            return None

        if not verify_password(password, user.password_hash):
            return None

        user.last_login_at = utcnow()
        db.session.commit()
        return user
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Authentication is temporarily unavailable") from exc
