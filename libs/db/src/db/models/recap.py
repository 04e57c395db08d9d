from __future__ import annotations

import datetime as dt

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
_PK = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    pass


# ---------------------------
# Catalog: products
# ---------------------------


class ProductRow(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    # Unique key for catalog dedup; comparison is case-sensitive, matching the
    # bulk import's in-batch duplicate detection.
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Whole Rupiah; there is no fractional subunit.
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (CheckConstraint("price >= 0", name="ck_products_price"),)


# ---------------------------
# Core: transactions
# ---------------------------


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    item_purchased: Mapped[str] = mapped_column(Text, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    store_name: Mapped[str] = mapped_column(Text, nullable=False)
    payment_method: Mapped[str] = mapped_column(String, nullable=False)
    purchase_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    selling_price: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Stored rather than computed so period listings can aggregate without
    # re-deriving; kept equal to selling_price - purchase_price by the service
    # layer on every write.
    revenue: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("month >= 1 AND month <= 12", name="ck_transactions_month"),
        CheckConstraint("purchase_price >= 0", name="ck_transactions_purchase_price"),
        Index("ix_transactions_year_month", "year", "month"),
    )


# ---------------------------
# Reference: customers / stores
# ---------------------------


class CustomerRow(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class StoreRow(Base):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


__all__ = [
    "Base",
    "CustomerRow",
    "ProductRow",
    "StoreRow",
    "TransactionRow",
]
