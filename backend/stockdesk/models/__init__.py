from .auth import User, SessionToken
from .inventory import Product
from .sales import Sale
from .expenses import Expense

__all__ = [
    'User', 'SessionToken',
    'Product',
    'Sale',
    'Expense',
]
