"""Public API for ``monthly_recap``.

Every operation takes the :class:`~monthly_recap.store.base.RecordStore` it
works on; nothing here holds state. Bulk uploads are two-phase:

1. ``preview_*_upload`` parses the file text into candidates (never raises for
   bad rows; only an unusable file raises ``FormatError``);
2. ``confirm_*_upload`` writes the valid candidates and returns an
   :class:`~monthly_recap.models.ImportReport`. Storage failures are reported
   on the report rather than raised.

Single-record operations (``record_transaction``, ``add_product`` ...) raise
``InvalidRecordError`` for bad input and the ``StorageError`` family for
store failures.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from typing import Any

from .bulk import bulk_insert_products, bulk_insert_transactions
from .errors import DuplicateNameError, InvalidRecordError, StorageError
from .ingest import (
    DEFAULT_THRESHOLD,
    importable_products,
    importable_transactions,
    parse_date,
    parse_products_text,
    parse_transactions_text,
)
from .logging_setup import get_logger
from .models import (
    ImportReport,
    MonthStats,
    ParsedProductCandidate,
    ParsedTransactionCandidate,
    Product,
    ProductInput,
    ReferenceCorpus,
    Transaction,
    TransactionInput,
)
from .stats import compute_month_stats
from .store.base import RecordStore

_logger = get_logger("monthly_recap.api")


# ---------------------------------------------------------------------------
# Bulk upload
# ---------------------------------------------------------------------------


def load_reference_corpus(store: RecordStore) -> ReferenceCorpus:
    """Snapshot the product, customer and store names used for fuzzy correction."""

    return ReferenceCorpus(
        products=tuple(p.name for p in store.products.list_all()),
        customers=tuple(store.customer_names()),
        stores=tuple(store.store_names()),
    )


def preview_transactions_upload(
    store: RecordStore,
    raw_text: str,
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[ParsedTransactionCandidate]:
    """Parse a transaction upload against the store's current reference names."""

    return parse_transactions_text(
        raw_text, corpus=load_reference_corpus(store), threshold=threshold
    )


def preview_products_upload(raw_text: str) -> list[ParsedProductCandidate]:
    return parse_products_text(raw_text)


def confirm_transactions_upload(
    store: RecordStore, candidates: Sequence[ParsedTransactionCandidate]
) -> ImportReport:
    """Write the valid candidates; invalid ones are left out silently."""

    rows = importable_transactions(candidates)
    try:
        created = bulk_insert_transactions(store.transactions, rows)
    except StorageError as exc:
        _logger.error("transaction import failed: %s", exc)
        return ImportReport(error=str(exc))
    return ImportReport(created=len(created))


def confirm_products_upload(
    store: RecordStore, candidates: Sequence[ParsedProductCandidate]
) -> ImportReport:
    """Write the valid candidates, skipping names already in the batch or catalog."""

    rows = importable_products(candidates)
    try:
        result = bulk_insert_products(store.products, rows)
    except DuplicateNameError as exc:
        return ImportReport(
            skipped=len(exc.duplicates), duplicates=exc.duplicates, error=str(exc)
        )
    except StorageError as exc:
        _logger.error("product import failed: %s", exc)
        return ImportReport(error=str(exc))
    return ImportReport(
        created=len(result.created),
        skipped=result.skipped,
        duplicates=tuple(result.duplicates),
    )


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def _try_date(value: dt.date | str) -> dt.date | None:
    return value if isinstance(value, dt.date) else parse_date(value)


def _as_date(value: dt.date | str) -> dt.date:
    parsed = _try_date(value)
    if parsed is None:
        raise InvalidRecordError({"date": "Invalid date format"})
    return parsed


def _catalog_price(store: RecordStore, item: str) -> int:
    found = store.products.find_by_names([item])
    return found[0].price if found else 0


def record_transaction(
    store: RecordStore,
    *,
    date: dt.date | str,
    item_purchased: str,
    customer_name: str,
    store_name: str,
    payment_method: str,
    purchase_price: int,
    selling_price: int | None = None,
    notes: str | None = None,
) -> Transaction:
    """Validate and record one sale entered by hand.

    When ``selling_price`` is omitted it is taken from the catalog price of
    the product named ``item_purchased``.

    Raises
    ------
    InvalidRecordError
        With one message per offending field.
    """

    item_purchased = item_purchased.strip()
    if selling_price is None and item_purchased:
        selling_price = _catalog_price(store, item_purchased)
    selling = selling_price or 0

    day = _try_date(date)
    errors: dict[str, str] = {}
    if day is None:
        errors["date"] = "Invalid date format"
    if not item_purchased:
        errors["item_purchased"] = "Item purchased is required"
    if not customer_name.strip():
        errors["customer_name"] = "Customer name is required"
    if not store_name.strip():
        errors["store_name"] = "Store name is required"
    if not payment_method.strip():
        errors["payment_method"] = "Payment method is required"
    if purchase_price <= 0:
        errors["purchase_price"] = "Purchase price must be greater than 0"
    if selling <= 0:
        errors["selling_price"] = "Selling price must be greater than 0"
    elif selling < purchase_price:
        errors["selling_price"] = "Selling price should be higher than purchase price"
    if errors:
        raise InvalidRecordError(errors)

    tx = TransactionInput(
        date=day,
        item_purchased=item_purchased,
        customer_name=customer_name,
        store_name=store_name,
        payment_method=payment_method,
        purchase_price=purchase_price,
        selling_price=selling,
        notes=notes,
    )
    return store.transactions.insert_one(tx)


def update_transaction(
    store: RecordStore, transaction_id: int, changes: Mapping[str, Any]
) -> Transaction:
    """Apply a partial update, keeping the derived columns consistent.

    A ``date`` change moves the record to the new month/year; a change to
    either price recomputes ``revenue`` using the stored value of the other.
    Derived keys (``revenue``, ``month``, ``year``) in ``changes`` are ignored.
    """

    patch = {k: v for k, v in changes.items() if k not in {"revenue", "month", "year"}}
    if "date" in patch:
        new_date = _as_date(patch["date"])
        patch.update(date=new_date, month=new_date.month, year=new_date.year)
    if "purchase_price" in patch or "selling_price" in patch:
        current = store.transactions.get(transaction_id)
        purchase = patch.get("purchase_price", current.purchase_price)
        selling = patch.get("selling_price", current.selling_price)
        patch["revenue"] = selling - purchase
    return store.transactions.update(transaction_id, patch)


def delete_transaction(store: RecordStore, transaction_id: int) -> None:
    store.transactions.delete(transaction_id)


def delete_transactions(store: RecordStore, transaction_ids: Sequence[int]) -> None:
    store.transactions.delete_many(transaction_ids)


def list_transactions(store: RecordStore, month: int, year: int) -> list[Transaction]:
    """Transactions of one month, newest first."""

    return store.transactions.list_by_period(month, year)


def month_stats(store: RecordStore, month: int, year: int) -> MonthStats:
    return compute_month_stats(store.transactions.list_by_period(month, year))


def search_transactions(
    transactions: Sequence[Transaction],
    term: str = "",
    payment_method: str | None = None,
) -> list[Transaction]:
    """Filter by a case-insensitive substring of item, customer or store name.

    ``payment_method`` must match exactly when given.
    """

    needle = term.lower()
    return [
        t
        for t in transactions
        if (
            needle in t.item_purchased.lower()
            or needle in t.customer_name.lower()
            or needle in t.store_name.lower()
        )
        and (payment_method is None or t.payment_method == payment_method)
    ]


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def list_products(store: RecordStore) -> list[Product]:
    return store.products.list_all()


def search_products(
    products: Sequence[Product],
    term: str = "",
    product_type: str | None = None,
) -> list[Product]:
    """Filter by a case-insensitive substring of name or type; ``product_type`` is exact."""

    needle = term.lower()
    return [
        p
        for p in products
        if (needle in p.name.lower() or needle in p.type.lower())
        and (product_type is None or p.type == product_type)
    ]


def _product_errors(name: str | None, type_: str | None, price: int | None) -> dict[str, str]:
    errors: dict[str, str] = {}
    if name is not None and not name.strip():
        errors["name"] = "Product name is required"
    if type_ is not None and not type_.strip():
        errors["type"] = "Product type is required"
    if price is not None and price <= 0:
        errors["price"] = "Price must be greater than 0"
    return errors


def add_product(store: RecordStore, *, name: str, type: str, price: int) -> Product:
    """Add one catalog entry.

    Raises
    ------
    InvalidRecordError
        Blank name or type, or a non-positive price.
    DuplicateNameError
        The name is already in the catalog.
    """

    errors = _product_errors(name, type, price)
    if errors:
        raise InvalidRecordError(errors)
    return store.products.insert_one(ProductInput(name=name, type=type, price=price))


def update_product(store: RecordStore, product_id: int, changes: Mapping[str, Any]) -> Product:
    errors = _product_errors(changes.get("name"), changes.get("type"), changes.get("price"))
    if errors:
        raise InvalidRecordError(errors)
    patch = {k: v.strip() if isinstance(v, str) else v for k, v in changes.items()}
    return store.products.update(product_id, patch)


def delete_product(store: RecordStore, product_id: int) -> None:
    store.products.delete(product_id)


def delete_products(store: RecordStore, product_ids: Sequence[int]) -> None:
    store.products.delete_many(product_ids)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


def check_store(store: RecordStore) -> bool:
    """Return whether the store answers a trivial query."""

    try:
        store.ping()
    except StorageError as exc:
        _logger.warning("record store unreachable: %s", exc)
        return False
    return True


__all__ = [
    "add_product",
    "check_store",
    "confirm_products_upload",
    "confirm_transactions_upload",
    "delete_product",
    "delete_products",
    "delete_transaction",
    "delete_transactions",
    "list_products",
    "list_transactions",
    "load_reference_corpus",
    "month_stats",
    "preview_products_upload",
    "preview_transactions_upload",
    "record_transaction",
    "search_products",
    "search_transactions",
    "update_product",
    "update_transaction",
]
