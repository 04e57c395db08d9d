"""Record store contract shared by the in-memory and SQL implementations.

The service layer only talks to these protocols, so the same code (and the
same tests) run against either backend. Failures surface as
:class:`~monthly_recap.errors.StorageError` subclasses:

- ``DuplicateNameError`` when a product name is already taken;
- ``NotFoundError`` when an ``update`` addresses a missing id;
- ``StorageError`` for anything else.

``delete``/``delete_many`` of unknown ids are no-ops.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from ..models import Product, ProductInput, Transaction, TransactionInput

# Columns a partial update may touch.
PRODUCT_FIELDS: frozenset[str] = frozenset({"name", "type", "price"})
TRANSACTION_FIELDS: frozenset[str] = frozenset(
    {
        "date",
        "item_purchased",
        "customer_name",
        "store_name",
        "payment_method",
        "purchase_price",
        "selling_price",
        "revenue",
        "notes",
        "month",
        "year",
    }
)


def check_fields(changes: Mapping[str, Any], allowed: frozenset[str], entity: str) -> None:
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValueError(f"Unknown {entity} field(s): {', '.join(unknown)}")


class ProductRepository(Protocol):
    def insert_one(self, product: ProductInput) -> Product: ...

    def insert_many(self, products: Sequence[ProductInput]) -> list[Product]: ...

    def find_by_names(self, names: Iterable[str]) -> list[Product]: ...

    def update(self, product_id: int, changes: Mapping[str, Any]) -> Product: ...

    def delete(self, product_id: int) -> None: ...

    def delete_many(self, product_ids: Sequence[int]) -> None: ...

    def list_all(self) -> list[Product]:
        """All products ordered by name."""
        ...


class TransactionRepository(Protocol):
    def insert_one(self, transaction: TransactionInput) -> Transaction: ...

    def insert_many(self, transactions: Sequence[TransactionInput]) -> list[Transaction]: ...

    def get(self, transaction_id: int) -> Transaction: ...

    def update(self, transaction_id: int, changes: Mapping[str, Any]) -> Transaction: ...

    def delete(self, transaction_id: int) -> None: ...

    def delete_many(self, transaction_ids: Sequence[int]) -> None: ...

    def list_by_period(self, month: int, year: int) -> list[Transaction]:
        """Transactions of one month, newest date first."""
        ...

    def list_all(self) -> list[Transaction]: ...


class RecordStore(Protocol):
    """A backend exposing both repositories plus the reference name lists."""

    @property
    def products(self) -> ProductRepository: ...

    @property
    def transactions(self) -> TransactionRepository: ...

    def customer_names(self) -> list[str]: ...

    def store_names(self) -> list[str]: ...

    def add_customer(self, name: str) -> None: ...

    def add_store(self, name: str) -> None: ...

    def ping(self) -> None:
        """Raise ``StorageError`` when the backend cannot be reached."""
        ...


__all__ = [
    "PRODUCT_FIELDS",
    "TRANSACTION_FIELDS",
    "ProductRepository",
    "RecordStore",
    "TransactionRepository",
    "check_fields",
]
