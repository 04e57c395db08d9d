"""db: shared database library (SQLAlchemy) for the monthly recap system.

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models in ``db.models.recap`` (re-exported for convenience)
- Engine/session helpers in ``db.client``
"""

from __future__ import annotations

from .models.recap import Base, CustomerRow, ProductRow, StoreRow, TransactionRow

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "CustomerRow",
    "ProductRow",
    "StoreRow",
    "TransactionRow",
]
