"""Data models for ``monthly_recap``.

Three families live here:

- persisted records (``Product``, ``Transaction``) returned by a record store;
- persistence-ready inputs (``ProductInput``, ``TransactionInput``), validated
  with pydantic before they reach a store;
- ephemeral bulk-upload candidates (``ParsedProductCandidate``,
  ``ParsedTransactionCandidate``) and the results built from them.

All amounts are whole Indonesian Rupiah held as ``int``.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Product:
    """A catalog entry. ``name`` is the unique key."""

    id: int
    name: str
    type: str
    price: int
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A recorded sale.

    ``month``/``year`` mirror ``date`` and drive period listings; ``revenue``
    is ``selling_price - purchase_price`` and is negative while the selling
    price is still unknown (``0``).
    """

    id: int
    date: dt.date
    item_purchased: str
    customer_name: str
    store_name: str
    payment_method: str
    purchase_price: int
    selling_price: int
    revenue: int
    notes: str | None
    month: int
    year: int
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# ---------------------------------------------------------------------------
# Persistence-ready inputs
# ---------------------------------------------------------------------------


class ProductInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    price: int = Field(gt=0)


class TransactionInput(BaseModel):
    """A transaction ready to be written; derived fields are computed, not stored."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    date: dt.date
    item_purchased: str = Field(min_length=1)
    customer_name: str = Field(min_length=1)
    store_name: str = Field(min_length=1)
    payment_method: str = Field(min_length=1)
    purchase_price: int = Field(ge=0)
    selling_price: int = Field(default=0, ge=0)
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v or None

    @property
    def revenue(self) -> int:
        return self.selling_price - self.purchase_price

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def year(self) -> int:
        return self.date.year


# ---------------------------------------------------------------------------
# Bulk upload candidates
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReferenceCorpus:
    """Canonical names used as fuzzy-match targets for one upload session."""

    products: tuple[str, ...] = ()
    customers: tuple[str, ...] = ()
    stores: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParsedTransactionCandidate:
    """One parsed transaction row awaiting confirmation.

    ``*_original`` keep the text as uploaded; the plain fields hold the value
    after fuzzy correction. ``date`` is ``None`` when the source text did not
    parse. ``row_index`` is 0-based among data rows; messages in ``errors``
    use the 1-based row number.
    """

    row_index: int
    date: dt.date | None
    item_purchased: str
    item_purchased_original: str
    customer_name: str
    customer_name_original: str
    store_name: str
    store_name_original: str
    payment_method: str
    purchase_price: int
    notes: str = ""
    selling_price: int = 0
    errors: tuple[str, ...] = ()

    @property
    def revenue(self) -> int:
        return self.selling_price - self.purchase_price

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def corrected_fields(self) -> tuple[str, ...]:
        """Names of the fields whose value differs from the upload (case-insensitive)."""

        from .ingest.fuzzy import is_corrected

        pairs = (
            ("item_purchased", self.item_purchased_original, self.item_purchased),
            ("customer_name", self.customer_name_original, self.customer_name),
            ("store_name", self.store_name_original, self.store_name),
        )
        return tuple(name for name, orig, matched in pairs if is_corrected(orig, matched))


@dataclass(frozen=True, slots=True)
class ParsedProductCandidate:
    row_index: int
    name: str
    type: str
    price: int
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BulkInsertResult:
    """Outcome of a deduplicating product import.

    ``duplicates`` lists skipped names in discovery order: in-batch repeats
    first, then names already present in the store.
    """

    created: list[Product] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.duplicates)


@dataclass(frozen=True, slots=True)
class ImportReport:
    """User-facing summary of a confirmed upload.

    ``error`` is set when the store failed; counts then reflect what was
    known before the failure.
    """

    created: int = 0
    skipped: int = 0
    duplicates: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class MonthStats:
    total_transactions: int = 0
    total_revenue: int = 0
    total_sales: int = 0
    average_revenue: float = 0.0
    top_product: str = ""


__all__ = [
    "BulkInsertResult",
    "ImportReport",
    "MonthStats",
    "ParsedProductCandidate",
    "ParsedTransactionCandidate",
    "Product",
    "ProductInput",
    "ReferenceCorpus",
    "Transaction",
    "TransactionInput",
]
