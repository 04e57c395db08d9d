"""Row validators for the transaction and product upload formats.

Each validator takes one tokenized row and always returns a candidate; it
never raises. Every rule runs independently and contributes at most one
message, so a single row can carry several errors. Messages name the 1-based
row number (``row_index + 1``).

Transaction rows use the 7-column layout::

    Date, Item Purchase, Customer Name, Store Name, Payment Method, Purchase, Notes

There is no selling-price column: uploaded transactions start with
``selling_price = 0`` (so ``revenue = -purchase_price``) and get their selling
price later through :func:`monthly_recap.api.update_transaction`.

Product rows use ``Name, Type, Price``.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence

from ..models import ParsedProductCandidate, ParsedTransactionCandidate, ReferenceCorpus
from .amounts import try_parse_amount
from .fuzzy import DEFAULT_THRESHOLD, FuzzyMatcher
from .tokenizer import field_at

TRANSACTION_COLUMNS: tuple[str, ...] = (
    "Date",
    "Item Purchase",
    "Customer Name",
    "Store Name",
    "Payment Method",
    "Purchase",
    "Notes",
)
PRODUCT_COLUMNS: tuple[str, ...] = ("Name", "Type", "Price")

# Tried in order after ISO 8601.
_DATE_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
)


def parse_date(raw: str) -> dt.date | None:
    """Parse an upload date; ``None`` when the text is not a real calendar date.

    ISO ``YYYY-MM-DD`` is the documented format; ISO date-times and a few
    common spelled-out and slash forms are accepted too.
    """

    s = raw.strip()
    if not s:
        return None
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(s).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def validate_transaction_row(
    fields: Sequence[str],
    row_index: int,
    *,
    corpus: ReferenceCorpus | None = None,
    threshold: float = DEFAULT_THRESHOLD,
) -> ParsedTransactionCandidate:
    """Validate one transaction row, fuzzy-correcting item/customer/store names."""

    corpus = corpus or ReferenceCorpus()
    row = list(fields)
    label = f"Row {row_index + 1}"
    errors: list[str] = []

    date = parse_date(field_at(row, 0))
    if date is None:
        errors.append(f"{label}: Invalid date format")

    item_raw = field_at(row, 1)
    customer_raw = field_at(row, 2)
    store_raw = field_at(row, 3)

    item = FuzzyMatcher.over(corpus.products, threshold).best_match(item_raw)
    customer = FuzzyMatcher.over(corpus.customers, threshold).best_match(customer_raw)
    store = FuzzyMatcher.over(corpus.stores, threshold).best_match(store_raw)

    if not item:
        errors.append(f"{label}: Item purchase is required")
    if not customer:
        errors.append(f"{label}: Customer name is required")
    if not store:
        errors.append(f"{label}: Store name is required")

    payment_method = field_at(row, 4)
    if not payment_method:
        errors.append(f"{label}: Payment method is required")

    # An empty purchase cell means zero; text that holds no number is an error.
    purchase_raw = field_at(row, 5) or "0"
    purchase = try_parse_amount(purchase_raw)
    if purchase is None or purchase < 0:
        errors.append(f"{label}: Invalid purchase price")

    notes = field_at(row, 6)

    return ParsedTransactionCandidate(
        row_index=row_index,
        date=date,
        item_purchased=item,
        item_purchased_original=item_raw,
        customer_name=customer,
        customer_name_original=customer_raw,
        store_name=store,
        store_name_original=store_raw,
        payment_method=payment_method,
        purchase_price=purchase or 0,
        notes=notes,
        errors=tuple(errors),
    )


def validate_product_row(fields: Sequence[str], row_index: int) -> ParsedProductCandidate:
    """Validate one ``Name, Type, Price`` row."""

    row = list(fields)
    label = f"Row {row_index + 1}"
    errors: list[str] = []

    # Reported in addition to the per-field checks below.
    if len(row) < len(PRODUCT_COLUMNS):
        errors.append(f"{label}: Missing required columns")

    name = field_at(row, 0)
    if not name:
        errors.append(f"{label}: Product name is required")

    type_ = field_at(row, 1)
    if not type_:
        errors.append(f"{label}: Product type is required")

    price = try_parse_amount(field_at(row, 2) or "0")
    if price is None or price <= 0:
        errors.append(f"{label}: Invalid price (must be greater than 0)")

    return ParsedProductCandidate(
        row_index=row_index,
        name=name,
        type=type_,
        price=price or 0,
        errors=tuple(errors),
    )


__all__ = [
    "PRODUCT_COLUMNS",
    "TRANSACTION_COLUMNS",
    "parse_date",
    "validate_product_row",
    "validate_transaction_row",
]
