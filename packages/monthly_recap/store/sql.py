"""SQLAlchemy-backed record store.

Each repository call runs in its own ``db.client.session_scope`` so a bulk
insert is one transaction: either every row lands or none does. Driver
errors are translated at this boundary; callers only ever see
:mod:`monthly_recap.errors` types.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db.client import init_schema, session_scope
from db.models.recap import CustomerRow, ProductRow, StoreRow, TransactionRow

from ..errors import DuplicateNameError, NotFoundError, StorageError
from ..logging_setup import get_logger
from ..mapping import (
    product_from_row,
    product_values,
    transaction_from_row,
    transaction_values,
)
from ..models import Product, ProductInput, Transaction, TransactionInput
from .base import PRODUCT_FIELDS, TRANSACTION_FIELDS, check_fields

_logger = get_logger("monthly_recap.store.sql")


def _now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def _is_unique_violation(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed"; postgres: "... violates unique constraint"
    return "unique" in str(exc.orig).lower()


class _Repository:
    def __init__(self, database_url: str) -> None:
        self._url = database_url

    @contextmanager
    def _session(self, *, names: Iterable[str] = ()) -> Iterator[Session]:
        try:
            with session_scope(database_url=self._url) as session:
                yield session
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateNameError(names=names) from exc
            raise StorageError(f"Constraint violation: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            _logger.error("database error: %s", exc)
            raise StorageError(str(exc)) from exc


class SqlProducts(_Repository):
    def insert_one(self, product: ProductInput) -> Product:
        return self.insert_many([product])[0]

    def insert_many(self, products: Sequence[ProductInput]) -> list[Product]:
        if not products:
            return []
        now = _now()
        names = [p.name for p in products]
        try:
            with self._session(names=names) as s:
                rows = [
                    ProductRow(created_at=now, updated_at=now, **product_values(p))
                    for p in products
                ]
                s.add_all(rows)
                s.flush()
                return [product_from_row(r) for r in rows]
        except DuplicateNameError as exc:
            # The whole insert rolled back; narrow to the names that actually collide.
            stored = {p.name for p in self.find_by_names(names)}
            clashes = [n for i, n in enumerate(names) if n in stored or n in names[:i]]
            raise DuplicateNameError(names=clashes or exc.names) from exc

    def find_by_names(self, names: Iterable[str]) -> list[Product]:
        wanted = list(dict.fromkeys(names))
        if not wanted:
            return []
        with self._session() as s:
            rows = s.scalars(select(ProductRow).where(ProductRow.name.in_(wanted))).all()
            return [product_from_row(r) for r in rows]

    def update(self, product_id: int, changes: Mapping[str, Any]) -> Product:
        check_fields(changes, PRODUCT_FIELDS, "product")
        names = [changes["name"]] if "name" in changes else []
        with self._session(names=names) as s:
            row = s.get(ProductRow, product_id)
            if row is None:
                raise NotFoundError("Product not found")
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = _now()
            s.flush()
            return product_from_row(row)

    def delete(self, product_id: int) -> None:
        self.delete_many([product_id])

    def delete_many(self, product_ids: Sequence[int]) -> None:
        if not product_ids:
            return
        with self._session() as s:
            s.execute(delete(ProductRow).where(ProductRow.id.in_(list(product_ids))))

    def list_all(self) -> list[Product]:
        with self._session() as s:
            rows = s.scalars(select(ProductRow).order_by(ProductRow.name)).all()
            return [product_from_row(r) for r in rows]


class SqlTransactions(_Repository):
    def insert_one(self, transaction: TransactionInput) -> Transaction:
        return self.insert_many([transaction])[0]

    def insert_many(self, transactions: Sequence[TransactionInput]) -> list[Transaction]:
        if not transactions:
            return []
        now = _now()
        with self._session() as s:
            rows = [
                TransactionRow(created_at=now, updated_at=now, **transaction_values(t))
                for t in transactions
            ]
            s.add_all(rows)
            s.flush()
            return [transaction_from_row(r) for r in rows]

    def get(self, transaction_id: int) -> Transaction:
        with self._session() as s:
            row = s.get(TransactionRow, transaction_id)
            if row is None:
                raise NotFoundError("Transaction not found")
            return transaction_from_row(row)

    def update(self, transaction_id: int, changes: Mapping[str, Any]) -> Transaction:
        check_fields(changes, TRANSACTION_FIELDS, "transaction")
        with self._session() as s:
            row = s.get(TransactionRow, transaction_id)
            if row is None:
                raise NotFoundError("Transaction not found")
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = _now()
            s.flush()
            return transaction_from_row(row)

    def delete(self, transaction_id: int) -> None:
        self.delete_many([transaction_id])

    def delete_many(self, transaction_ids: Sequence[int]) -> None:
        if not transaction_ids:
            return
        with self._session() as s:
            s.execute(
                delete(TransactionRow).where(TransactionRow.id.in_(list(transaction_ids)))
            )

    def list_by_period(self, month: int, year: int) -> list[Transaction]:
        stmt = (
            select(TransactionRow)
            .where(TransactionRow.month == month, TransactionRow.year == year)
            .order_by(TransactionRow.date.desc(), TransactionRow.id.desc())
        )
        with self._session() as s:
            return [transaction_from_row(r) for r in s.scalars(stmt).all()]

    def list_all(self) -> list[Transaction]:
        stmt = select(TransactionRow).order_by(
            TransactionRow.date.desc(), TransactionRow.id.desc()
        )
        with self._session() as s:
            return [transaction_from_row(r) for r in s.scalars(stmt).all()]


class SqlStore(_Repository):
    """:class:`~monthly_recap.store.base.RecordStore` over a SQLAlchemy database URL.

    Parameters
    ----------
    database_url:
        Any SQLAlchemy URL; ``sqlite:///recap.db`` works out of the box.
    create_schema:
        Create missing tables on construction.
    """

    def __init__(self, database_url: str, *, create_schema: bool = False) -> None:
        super().__init__(database_url)
        if create_schema:
            try:
                init_schema(database_url=database_url)
            except SQLAlchemyError as exc:
                raise StorageError(str(exc)) from exc
        self._products = SqlProducts(database_url)
        self._transactions = SqlTransactions(database_url)

    @property
    def products(self) -> SqlProducts:
        return self._products

    @property
    def transactions(self) -> SqlTransactions:
        return self._transactions

    def customer_names(self) -> list[str]:
        with self._session() as s:
            return list(s.scalars(select(CustomerRow.name).order_by(CustomerRow.id)).all())

    def store_names(self) -> list[str]:
        with self._session() as s:
            return list(s.scalars(select(StoreRow.name).order_by(StoreRow.id)).all())

    def add_customer(self, name: str) -> None:
        with self._session() as s:
            exists = s.scalar(select(CustomerRow.id).where(CustomerRow.name == name))
            if exists is None:
                s.add(CustomerRow(name=name))

    def add_store(self, name: str) -> None:
        with self._session() as s:
            exists = s.scalar(select(StoreRow.id).where(StoreRow.name == name))
            if exists is None:
                s.add(StoreRow(name=name))

    def ping(self) -> None:
        with self._session() as s:
            s.execute(select(1))


__all__ = ["SqlProducts", "SqlStore", "SqlTransactions"]
