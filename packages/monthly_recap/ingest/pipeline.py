"""Bulk upload parsing: file text in, ordered candidates out.

The first non-blank line is a header and is skipped without inspection; every
following non-blank line becomes exactly one candidate, valid or not, in input
order. Only an unusable file (not a ``.csv``, not UTF-8, fewer than two
non-blank lines) raises, as :class:`~monthly_recap.errors.FormatError`.

Confirmation keeps the valid candidates and maps them to the inputs a record
store accepts (:func:`importable_transactions`, :func:`importable_products`).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from os import PathLike
from pathlib import Path
from typing import TypeVar

from ..errors import FormatError
from ..logging_setup import get_logger
from ..models import (
    ParsedProductCandidate,
    ParsedTransactionCandidate,
    ProductInput,
    ReferenceCorpus,
    TransactionInput,
)
from .fuzzy import DEFAULT_THRESHOLD
from .tokenizer import tokenize_line
from .validators import validate_product_row, validate_transaction_row

_logger = get_logger("monthly_recap.ingest.pipeline")

ACCEPTED_SUFFIXES: frozenset[str] = frozenset({".csv"})

C = TypeVar("C", ParsedTransactionCandidate, ParsedProductCandidate)


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8 (a leading BOM is tolerated)."""

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FormatError("File is not valid UTF-8 text") from exc


def read_upload(path: str | PathLike[str]) -> str:
    """Read an upload from disk, enforcing the ``.csv`` extension."""

    p = Path(path)
    if p.suffix.lower() not in ACCEPTED_SUFFIXES:
        raise FormatError("Please upload a CSV file (.csv)")
    return decode_upload(p.read_bytes())


def data_lines(raw_text: str) -> list[str]:
    """Return the non-blank lines after the header.

    Raises ``FormatError`` unless there is a header plus at least one data row.
    """

    lines = [line for line in raw_text.split("\n") if line.strip()]
    if len(lines) < 2:
        raise FormatError("File must contain at least a header row and one data row")
    return lines[1:]


def _parse(raw_text: str, validate: Callable[[list[str], int], C]) -> list[C]:
    return [validate(tokenize_line(line), i) for i, line in enumerate(data_lines(raw_text))]


def _log_summary(
    kind: str, candidates: Sequence[ParsedTransactionCandidate | ParsedProductCandidate]
) -> None:
    valid = sum(1 for c in candidates if c.is_valid)
    _logger.info(
        "parsed %s upload: rows=%d valid=%d invalid=%d",
        kind,
        len(candidates),
        valid,
        len(candidates) - valid,
    )


def parse_transactions_text(
    raw_text: str,
    *,
    corpus: ReferenceCorpus | None = None,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[ParsedTransactionCandidate]:
    """Parse a transaction upload into candidates (one per data row)."""

    ref = corpus or ReferenceCorpus()
    out = _parse(
        raw_text,
        lambda fields, i: validate_transaction_row(fields, i, corpus=ref, threshold=threshold),
    )
    _log_summary("transaction", out)
    return out


def parse_products_text(raw_text: str) -> list[ParsedProductCandidate]:
    """Parse a product upload into candidates (one per data row)."""

    out = _parse(raw_text, validate_product_row)
    _log_summary("product", out)
    return out


def importable_transactions(
    candidates: Sequence[ParsedTransactionCandidate],
) -> list[TransactionInput]:
    """Map the valid candidates to store inputs, dropping originals and errors."""

    out: list[TransactionInput] = []
    for c in candidates:
        if not c.is_valid or c.date is None:
            continue
        out.append(
            TransactionInput(
                date=c.date,
                item_purchased=c.item_purchased,
                customer_name=c.customer_name,
                store_name=c.store_name,
                payment_method=c.payment_method,
                purchase_price=c.purchase_price,
                selling_price=c.selling_price,
                notes=c.notes or None,
            )
        )
    return out


def importable_products(candidates: Sequence[ParsedProductCandidate]) -> list[ProductInput]:
    return [
        ProductInput(name=c.name, type=c.type, price=c.price) for c in candidates if c.is_valid
    ]


__all__ = [
    "ACCEPTED_SUFFIXES",
    "data_lines",
    "decode_upload",
    "importable_products",
    "importable_transactions",
    "parse_products_text",
    "parse_transactions_text",
    "read_upload",
]
