# backend/stockdesk/services/products_service.py
"""
Product CRUD.

Inputs are raw JSON-like dicts; validation (column metadata plus
enforce_rules_product) happens here so every caller, route or CLI, gets the
same rules.
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateKeyError, NotFoundError, StoreError
from ..extensions import db
from ..models import Product, Sale
from ..validation import ModelValidationPolicy, enforce_rules_product, is_valid_id, validate_payload

PRODUCT_MUTABLE_FIELDS = {"name", "sku", "category", "quantity", "reorder_level", "price_cents", "cost_cents"}

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=PRODUCT_MUTABLE_FIELDS,
    required_on_create={"name", "sku", "category", "quantity", "reorder_level", "price_cents", "cost_cents"},
)


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _sku_taken(sku: str, exclude_id: int | None = None) -> bool:
    query = db.session.query(Product.id).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


def _commit(action: str) -> None:
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise DuplicateKeyError("A product with this SKU already exists.") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError(f"Failed to {action} product due to a database error. Please try again.") from exc


def list_products() -> list[Product]:
    """All products, alphabetical by name."""
    return db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()


def get_product(product_id: int) -> Product:
    p = db.session.get(Product, product_id) if is_valid_id(product_id) else None
    if not p:
        raise NotFoundError("Product not found")
    return p


def create_product(payload: dict) -> Product:
    """
    Create product from a raw payload.

    Raises:
        ValidationError: name/sku/category blank, negative numbers, bad types
        DuplicateKeyError: SKU already exists
    """
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch)

    if _sku_taken(patch["sku"]):
        raise DuplicateKeyError("A product with this SKU already exists.")

    p = Product()
    apply_product_patch(p, patch)

    db.session.add(p)
    _commit("add")
    return p


def update_product(product_id: int, payload: dict) -> Product:
    """
    Update only the supplied fields.

    An empty payload is a no-op: the product is returned untouched and
    nothing is written.

    Raises:
        NotFoundError: unknown product id
        ValidationError: same rules as create, for supplied fields
        DuplicateKeyError: new SKU belongs to another product
    """
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch)

    p = get_product(product_id)
    if not patch:
        return p

    # SKU uniqueness enforcement if changing SKU
    if "sku" in patch and patch["sku"] != p.sku and _sku_taken(patch["sku"], exclude_id=p.id):
        raise DuplicateKeyError("A product with this SKU already exists.")

    apply_product_patch(p, patch)
    _commit("update")
    return p


def delete_product(product_id: int) -> int:
    """
    Delete a product.

    Sales that reference it are orphaned explicitly: their product_id is
    cleared and the snapshotted product_name keeps them readable. Returns
    the number of sales orphaned.
    """
    p = get_product(product_id)
    try:
        orphaned = db.session.query(Sale).filter(Sale.product_id == p.id).update(
            {Sale.product_id: None}, synchronize_session=False
        )
        db.session.delete(p)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreError("Failed to delete product due to a database error. Please try again.") from exc
    db.session.expire_all()
    return orphaned
