from __future__ import annotations

from ..extensions import db
from stockdesk.time_utils import to_utc_z


class Sale(db.Model):
    """
    A single-product sale.

    unit_price_cents is a snapshot of Product.price_cents at sale time, so
    later price edits never rewrite history. product_name is snapshotted for
    the same reason: when a product is deleted its sales are orphaned
    (product_id set to NULL) but still readable.

    Sales are immutable. Deleting one is a reversal and restores stock
    (see sales_service.reverse_sale).
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_sales_quantity_positive"),
        db.CheckConstraint("payment_mode IN ('POS', 'transfer', 'cash')", name="ck_sales_payment_mode"),
        db.Index("ix_sales_sold_at", "sold_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    total_cents = db.Column(db.Integer, nullable=False)

    payment_mode = db.Column(db.String(16), nullable=False)
    sold_at = db.Column(db.DateTime(timezone=True), nullable=False)

    salesperson_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    product = db.relationship("Product", backref=db.backref("sales", lazy=True, passive_deletes=True))
    salesperson = db.relationship("User", backref=db.backref("sales", lazy=True, passive_deletes=True))

    def __repr__(self) -> str:
        return f"<Sale id={self.id} product_id={self.product_id} quantity={self.quantity} total_cents={self.total_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "total_cents": self.total_cents,
            "payment_mode": self.payment_mode,
            "sold_at": to_utc_z(self.sold_at),
            "salesperson_id": self.salesperson_id,
            "salesperson_name": self.salesperson.name if self.salesperson else None,
        }
