"""
Sales Service - atomic sale placement and reversal

A sale and the stock movement it causes are one unit of work: the sale row
and the product quantity change commit together or not at all.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from ..errors import InsufficientStockError, NotFoundError, StockdeskError, StoreError
from ..extensions import db
from ..models import Product, Sale, User
from ..validation import enforce_rules_sale, is_valid_id
from stockdesk.time_utils import utcnow
from .concurrency import lock_for_update, run_with_retry


def list_sales() -> list[Sale]:
    """All sales, newest first, with salesperson preloaded for to_dict()."""
    return (
        db.session.query(Sale)
        .options(joinedload(Sale.salesperson))
        .order_by(Sale.sold_at.desc(), Sale.id.desc())
        .all()
    )


def get_sale(sale_id: int) -> Sale:
    sale = db.session.get(Sale, sale_id) if is_valid_id(sale_id) else None
    if not sale:
        raise NotFoundError("Sale not found")
    return sale


def _transactional(func, failure_message: str):
    """
    Run func under run_with_retry; domain errors propagate as-is, anything
    the database raises after retries becomes StoreError.
    """
    try:
        return run_with_retry(func)
    except StockdeskError:
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError(failure_message) from exc


def place_sale(
    product_id: int,
    quantity: int,
    payment_mode: str,
    salesperson_id: int,
) -> Sale:
    """
    Record a sale and deduct stock atomically.

    total = product price x quantity, priced at the moment of sale.

    Raises:
        ValidationError: quantity not a positive integer, unknown payment mode
        NotFoundError: product or salesperson does not exist
        InsufficientStockError: quantity exceeds stock on hand (nothing written)
        StoreError: database failure (transaction rolled back)
    """
    quantity = enforce_rules_sale(quantity, payment_mode)
    if not is_valid_id(product_id):
        raise NotFoundError("Product not found")
    if not is_valid_id(salesperson_id):
        raise NotFoundError("Salesperson not found")

    def _op():
        product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
        if not product:
            raise NotFoundError("Product not found")

        if not db.session.get(User, salesperson_id):
            raise NotFoundError("Salesperson not found")

        if product.quantity < quantity:
            raise InsufficientStockError(
                "Insufficient stock",
                details={
                    "product_id": product.id,
                    "requested_quantity": quantity,
                    "on_hand": product.quantity,
                },
            )

        sale = Sale(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price_cents=product.price_cents,
            total_cents=product.price_cents * quantity,
            payment_mode=payment_mode,
            sold_at=utcnow(),
            salesperson_id=salesperson_id,
        )
        db.session.add(sale)
        product.quantity = product.quantity - quantity

        db.session.commit()
        return sale

    return _transactional(_op, "Failed to record sale")


def reverse_sale(sale_id: int) -> dict:
    """
    Delete a sale and restore its quantity to stock atomically.

    A sale whose product has since been deleted is removed without a
    restock, since there is no stock row left to restore.

    Returns the serialized sale as it was before deletion.

    Raises:
        NotFoundError: sale does not exist (including a second reversal)
        StoreError: database failure (transaction rolled back)
    """
    if not is_valid_id(sale_id):
        raise NotFoundError("Sale not found")

    def _op():
        sale = lock_for_update(db.session.query(Sale).filter_by(id=sale_id)).first()
        if not sale:
            raise NotFoundError("Sale not found")

        if sale.product_id is not None:
            product = lock_for_update(db.session.query(Product).filter_by(id=sale.product_id)).first()
            if product:
                product.quantity = product.quantity + sale.quantity

        snapshot = sale.to_dict()
        db.session.delete(sale)
        db.session.commit()
        return snapshot

    return _transactional(_op, "Failed to reverse sale")
