"""SQLAlchemy models registry for the recap database.

Holds the catalog, transaction, and reference-name tables used by
``monthly_recap``.
"""

from .recap import Base, CustomerRow, ProductRow, StoreRow, TransactionRow

__all__ = [
    "Base",
    "CustomerRow",
    "ProductRow",
    "StoreRow",
    "TransactionRow",
]
