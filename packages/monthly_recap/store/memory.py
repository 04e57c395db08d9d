"""In-memory record store.

Used when no database is configured and as a fixture in tests. State lives on
the instance, never at module level, so every store is independent. It
enforces the same product-name uniqueness as the SQL schema.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
from collections.abc import Iterable, Mapping, Sequence
from itertools import count
from typing import Any

from ..errors import DuplicateNameError, NotFoundError
from ..mapping import product_from_input, transaction_from_input
from ..models import Product, ProductInput, Transaction, TransactionInput
from .base import PRODUCT_FIELDS, TRANSACTION_FIELDS, check_fields


def _now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class InMemoryProducts:
    def __init__(self) -> None:
        self._rows: dict[int, Product] = {}
        self._ids = count(1)

    def _name_taken(self, name: str, *, exclude_id: int | None = None) -> bool:
        return any(p.name == name and p.id != exclude_id for p in self._rows.values())

    def insert_one(self, product: ProductInput) -> Product:
        return self.insert_many([product])[0]

    def insert_many(self, products: Sequence[ProductInput]) -> list[Product]:
        # All-or-nothing, like a single INSERT statement with a unique index.
        names = [p.name for p in products]
        clashes = [n for i, n in enumerate(names) if self._name_taken(n) or n in names[:i]]
        if clashes:
            raise DuplicateNameError(names=clashes)
        now = _now()
        created = [product_from_input(next(self._ids), p, now=now) for p in products]
        for p in created:
            self._rows[p.id] = p
        return created

    def find_by_names(self, names: Iterable[str]) -> list[Product]:
        wanted = set(names)
        return [p for p in self._rows.values() if p.name in wanted]

    def update(self, product_id: int, changes: Mapping[str, Any]) -> Product:
        check_fields(changes, PRODUCT_FIELDS, "product")
        current = self._rows.get(product_id)
        if current is None:
            raise NotFoundError("Product not found")
        new_name = changes.get("name")
        if new_name is not None and self._name_taken(new_name, exclude_id=product_id):
            raise DuplicateNameError(names=[new_name])
        updated = dataclasses.replace(current, updated_at=_now(), **changes)
        self._rows[product_id] = updated
        return updated

    def delete(self, product_id: int) -> None:
        self._rows.pop(product_id, None)

    def delete_many(self, product_ids: Sequence[int]) -> None:
        for pid in product_ids:
            self._rows.pop(pid, None)

    def list_all(self) -> list[Product]:
        return sorted(self._rows.values(), key=lambda p: p.name)


class InMemoryTransactions:
    def __init__(self) -> None:
        self._rows: dict[int, Transaction] = {}
        self._ids = count(1)

    def insert_one(self, transaction: TransactionInput) -> Transaction:
        return self.insert_many([transaction])[0]

    def insert_many(self, transactions: Sequence[TransactionInput]) -> list[Transaction]:
        now = _now()
        created = [transaction_from_input(next(self._ids), t, now=now) for t in transactions]
        for t in created:
            self._rows[t.id] = t
        return created

    def get(self, transaction_id: int) -> Transaction:
        current = self._rows.get(transaction_id)
        if current is None:
            raise NotFoundError("Transaction not found")
        return current

    def update(self, transaction_id: int, changes: Mapping[str, Any]) -> Transaction:
        check_fields(changes, TRANSACTION_FIELDS, "transaction")
        updated = dataclasses.replace(self.get(transaction_id), updated_at=_now(), **changes)
        self._rows[transaction_id] = updated
        return updated

    def delete(self, transaction_id: int) -> None:
        self._rows.pop(transaction_id, None)

    def delete_many(self, transaction_ids: Sequence[int]) -> None:
        for tid in transaction_ids:
            self._rows.pop(tid, None)

    def list_by_period(self, month: int, year: int) -> list[Transaction]:
        rows = [t for t in self._rows.values() if t.month == month and t.year == year]
        return sorted(rows, key=lambda t: (t.date, t.id), reverse=True)

    def list_all(self) -> list[Transaction]:
        return sorted(self._rows.values(), key=lambda t: (t.date, t.id), reverse=True)


class InMemoryStore:
    """Process-local :class:`~monthly_recap.store.base.RecordStore`."""

    def __init__(
        self,
        *,
        customers: Iterable[str] = (),
        stores: Iterable[str] = (),
    ) -> None:
        self._products = InMemoryProducts()
        self._transactions = InMemoryTransactions()
        self._customers: list[str] = list(customers)
        self._stores: list[str] = list(stores)

    @property
    def products(self) -> InMemoryProducts:
        return self._products

    @property
    def transactions(self) -> InMemoryTransactions:
        return self._transactions

    def customer_names(self) -> list[str]:
        return list(self._customers)

    def store_names(self) -> list[str]:
        return list(self._stores)

    def add_customer(self, name: str) -> None:
        if name not in self._customers:
            self._customers.append(name)

    def add_store(self, name: str) -> None:
        if name not in self._stores:
            self._stores.append(name)

    def ping(self) -> None:
        return None

    @classmethod
    def with_demo_data(cls) -> InMemoryStore:
        """A store pre-filled with a small catalog and two December 2024 sales."""

        store = cls(
            customers=["John Smith", "Sarah Johnson"],
            stores=["Tech Store Downtown", "Home Goods Plus"],
        )
        store.products.insert_many(
            [
                ProductInput(name="Wireless Headphones", type="Electronics", price=1499850),
                ProductInput(name="Coffee Mug", type="Kitchenware", price=194850),
                ProductInput(name="Notebook", type="Stationery", price=49950),
            ]
        )
        store.transactions.insert_many(
            [
                TransactionInput(
                    date=dt.date(2024, 12, 15),
                    item_purchased="Wireless Headphones",
                    customer_name="John Smith",
                    store_name="Tech Store Downtown",
                    payment_method="Credit Card",
                    purchase_price=1125000,
                    selling_price=1499850,
                    notes="Customer was very satisfied with the product",
                ),
                TransactionInput(
                    date=dt.date(2024, 12, 16),
                    item_purchased="Coffee Mug",
                    customer_name="Sarah Johnson",
                    store_name="Home Goods Plus",
                    payment_method="Cash",
                    purchase_price=127500,
                    selling_price=194850,
                    notes="Part of a bulk order",
                ),
            ]
        )
        return store


__all__ = ["InMemoryProducts", "InMemoryStore", "InMemoryTransactions"]
