"""Total mappings between store rows and domain records.

One function per direction and entity, each covering every column, so no call
site renames fields ad hoc. Rows are the SQLAlchemy models from
``db.models.recap``; records are the frozen dataclasses in
:mod:`monthly_recap.models`.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from db.models.recap import ProductRow, TransactionRow

from .models import Product, ProductInput, Transaction, TransactionInput


def product_values(product: ProductInput) -> dict[str, Any]:
    """Column values for inserting ``product``."""

    return {
        "name": product.name,
        "type": product.type,
        "price": product.price,
    }


def transaction_values(tx: TransactionInput) -> dict[str, Any]:
    """Column values for inserting ``tx``, including the derived columns."""

    return {
        "date": tx.date,
        "item_purchased": tx.item_purchased,
        "customer_name": tx.customer_name,
        "store_name": tx.store_name,
        "payment_method": tx.payment_method,
        "purchase_price": tx.purchase_price,
        "selling_price": tx.selling_price,
        "revenue": tx.revenue,
        "notes": tx.notes,
        "month": tx.month,
        "year": tx.year,
    }


def product_from_row(row: ProductRow) -> Product:
    return Product(
        id=int(row.id),
        name=row.name,
        type=row.type,
        price=int(row.price),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def transaction_from_row(row: TransactionRow) -> Transaction:
    purchase = int(row.purchase_price)
    selling = int(row.selling_price or 0)
    return Transaction(
        id=int(row.id),
        date=row.date,
        item_purchased=row.item_purchased,
        customer_name=row.customer_name,
        store_name=row.store_name,
        payment_method=row.payment_method,
        purchase_price=purchase,
        selling_price=selling,
        revenue=int(row.revenue) if row.revenue is not None else selling - purchase,
        notes=row.notes,
        month=int(row.month),
        year=int(row.year),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def product_from_input(product_id: int, product: ProductInput, *, now: dt.datetime) -> Product:
    return Product(id=product_id, created_at=now, updated_at=now, **product_values(product))


def transaction_from_input(
    transaction_id: int, tx: TransactionInput, *, now: dt.datetime
) -> Transaction:
    return Transaction(
        id=transaction_id, created_at=now, updated_at=now, **transaction_values(tx)
    )


__all__ = [
    "product_from_input",
    "product_from_row",
    "product_values",
    "transaction_from_input",
    "transaction_from_row",
    "transaction_values",
]
