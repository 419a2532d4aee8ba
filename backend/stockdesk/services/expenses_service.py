"""Expense recording. Expenses are created and deleted, never edited."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from ..errors import NotFoundError, StoreError
from ..extensions import db
from ..models import Expense, User
from ..validation import ModelValidationPolicy, enforce_rules_expense, is_valid_id, validate_payload
from stockdesk.time_utils import utcnow

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"description", "amount_cents", "category"},
    required_on_create={"description", "amount_cents", "category"},
)

# Categories offered by the expense form; free text is still accepted.
EXPENSE_CATEGORIES = (
    "Supplies",
    "Utilities",
    "Rent",
    "Salaries",
    "Marketing",
    "Maintenance",
    "Other",
)


def list_expenses() -> list[Expense]:
    """All expenses, newest first."""
    return (
        db.session.query(Expense)
        .options(joinedload(Expense.created_by))
        .order_by(Expense.incurred_at.desc(), Expense.id.desc())
        .all()
    )


def get_expense(expense_id: int) -> Expense:
    expense = db.session.get(Expense, expense_id) if is_valid_id(expense_id) else None
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def create_expense(payload: dict, created_by_user_id: int) -> Expense:
    """
    Record an expense dated now.

    Raises:
        ValidationError: blank description/category, amount_cents <= 0
        NotFoundError: creator does not exist
    """
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
    enforce_rules_expense(patch)

    if not is_valid_id(created_by_user_id) or not db.session.get(User, created_by_user_id):
        raise NotFoundError("User not found")

    expense = Expense(incurred_at=utcnow(), created_by_user_id=created_by_user_id, **patch)
    db.session.add(expense)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Failed to record expense") from exc
    return expense


def delete_expense(expense_id: int) -> None:
    expense = get_expense(expense_id)
    db.session.delete(expense)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Failed to delete expense") from exc
