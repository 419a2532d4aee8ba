# Overview: Domain error kinds raised by the record access layer.

"""
Every error carries a human-readable message (str(exc)) and an optional
`details` dict the routes echo back to the client. Routes map each kind to
an HTTP status via `http_status`.
"""

from __future__ import annotations


class StockdeskError(Exception):
    """Base class for record access failures."""

    http_status = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        payload = {"error": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(StockdeskError, ValueError):
    """400-level input problem."""

    http_status = 400


class DuplicateKeyError(StockdeskError):
    """409-level unique constraint violation (SKU, email)."""

    http_status = 409


class NotFoundError(StockdeskError):
    """Referenced entity does not exist."""

    http_status = 404


class InsufficientStockError(StockdeskError):
    """Requested sale quantity exceeds the product's quantity on hand."""

    http_status = 409


class StoreError(StockdeskError):
    """Underlying database failure (connectivity, aborted transaction)."""

    http_status = 503
