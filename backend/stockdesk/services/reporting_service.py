# Overview: Aggregate figures for the dashboard and reports endpoints.

"""
All aggregation is a pure reduction over record sets that were already
fetched (products, sales, expenses). The reduction functions accept any
objects with the model attribute names, so they work equally on ORM rows
and plain test doubles, and never query the database themselves.

Only load_records() touches the store; dashboard_stats() and
summary_report() take its output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from ..extensions import db
from ..models import Expense, Product, Sale


@dataclass
class RecordSet:
    products: list
    sales: list
    expenses: list


def load_records() -> RecordSet:
    return RecordSet(
        products=db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all(),
        sales=db.session.query(Sale).order_by(Sale.sold_at.asc(), Sale.id.asc()).all(),
        expenses=db.session.query(Expense).order_by(Expense.incurred_at.asc(), Expense.id.asc()).all(),
    )


# -- reductions --

def total_revenue(sales: Iterable) -> int:
    return sum(s.total_cents for s in sales)


def total_expenses(expenses: Iterable) -> int:
    return sum(e.amount_cents for e in expenses)


def profit(sales: Iterable, expenses: Iterable) -> int:
    return total_revenue(sales) - total_expenses(expenses)


def low_stock_products(products: Iterable) -> list:
    return [p for p in products if p.quantity <= p.reorder_level]


def low_stock_count(products: Iterable) -> int:
    return len(low_stock_products(products))


def inventory_value(products: Iterable) -> int:
    """Stock on hand valued at cost."""
    return sum(p.quantity * p.cost_cents for p in products)


def average_order_value(sales: Sequence) -> int:
    """Revenue per sale in cents, rounded; 0 when there are no sales."""
    if not sales:
        return 0
    return round(total_revenue(sales) / len(sales))


def average_product_price(products: Sequence) -> int:
    if not products:
        return 0
    return round(sum(p.price_cents for p in products) / len(products))


def profit_margin_percent(sales: Sequence, expenses: Iterable) -> float:
    """Net profit as a percentage of revenue, one decimal; 0.0 without revenue."""
    revenue = total_revenue(sales)
    if revenue <= 0:
        return 0.0
    return round(profit(sales, expenses) / revenue * 100, 1)


def expenses_by_category(expenses: Iterable) -> list[dict]:
    """Per-category sums, largest first; categories summing to zero are omitted."""
    totals: dict[str, int] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0) + e.amount_cents
    rows = [{"category": cat, "amount_cents": amount} for cat, amount in totals.items() if amount > 0]
    rows.sort(key=lambda r: (-r["amount_cents"], r["category"]))
    return rows


def sales_by_product(products: Iterable, sales: Iterable) -> list[dict]:
    """
    One row per product, including products that never sold. Sales whose
    product was deleted are not attributed to any row.
    """
    counts: dict[int, int] = {}
    units: dict[int, int] = {}
    revenue: dict[int, int] = {}
    for s in sales:
        if s.product_id is None:
            continue
        counts[s.product_id] = counts.get(s.product_id, 0) + 1
        units[s.product_id] = units.get(s.product_id, 0) + s.quantity
        revenue[s.product_id] = revenue.get(s.product_id, 0) + s.total_cents

    return [
        {
            "product_id": p.id,
            "name": p.name,
            "sales_count": counts.get(p.id, 0),
            "units_sold": units.get(p.id, 0),
            "revenue_cents": revenue.get(p.id, 0),
        }
        for p in products
    ]


def sales_summary(sales: Sequence) -> dict:
    return {
        "total_revenue_cents": total_revenue(sales),
        "total_sales": len(sales),
        "average_order_value_cents": average_order_value(sales),
    }


# -- composed reports --

def dashboard_stats(records: RecordSet) -> dict:
    return {
        "total_products": len(records.products),
        "total_revenue_cents": total_revenue(records.sales),
        "total_expenses_cents": total_expenses(records.expenses),
        "profit_cents": profit(records.sales, records.expenses),
        "low_stock": low_stock_count(records.products),
    }


def summary_report(records: RecordSet) -> dict:
    low = low_stock_products(records.products)
    return {
        "total_revenue_cents": total_revenue(records.sales),
        "total_expenses_cents": total_expenses(records.expenses),
        "net_profit_cents": profit(records.sales, records.expenses),
        "inventory_value_cents": inventory_value(records.products),
        "total_products": len(records.products),
        "total_sales": len(records.sales),
        "low_stock_count": len(low),
        "adequate_stock_count": len(records.products) - len(low),
        "profit_margin_percent": profit_margin_percent(records.sales, records.expenses),
        "average_product_price_cents": average_product_price(records.products),
        "average_order_value_cents": average_order_value(records.sales),
        "sales_by_product": sales_by_product(records.products, records.sales),
        "expenses_by_category": expenses_by_category(records.expenses),
        "low_stock_products": [
            {
                "id": p.id,
                "name": p.name,
                "sku": p.sku,
                "quantity": p.quantity,
                "reorder_level": p.reorder_level,
            }
            for p in low
        ],
    }
