"""Bulk writes of confirmed upload rows.

Products are deduplicated by exact (case-sensitive) name, first against the
rest of the batch and then against the catalog, before a single insert. The
existence check and the insert are separate round trips; a concurrent writer
slipping a name in between surfaces as ``DuplicateNameError`` from the store
and is not retried.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import DuplicateNameError
from .logging_setup import get_logger
from .models import BulkInsertResult, Product, ProductInput, Transaction, TransactionInput
from .store.base import ProductRepository, TransactionRepository

_logger = get_logger("monthly_recap.bulk")


def split_batch_duplicates(
    products: Sequence[ProductInput],
) -> tuple[list[ProductInput], list[str]]:
    """Keep the first product per name; return ``(unique, repeated_names)``."""

    seen: set[str] = set()
    unique: list[ProductInput] = []
    repeated: list[str] = []
    for p in products:
        if p.name in seen:
            repeated.append(p.name)
        else:
            seen.add(p.name)
            unique.append(p)
    return unique, repeated


def bulk_insert_products(
    repo: ProductRepository, products: Sequence[ProductInput]
) -> BulkInsertResult:
    """Insert the products whose names are new to both the batch and the catalog.

    Returns
    -------
    BulkInsertResult
        ``created`` holds the written records; ``duplicates`` the skipped
        names, in-batch repeats first, then names already stored.

    Raises
    ------
    DuplicateNameError
        A name was taken between the lookup and the write. ``duplicates`` on
        the exception carries the names skipped before the write.
    StorageError
        Any other store failure.
    """

    unique, batch_dups = split_batch_duplicates(products)
    stored = {p.name for p in repo.find_by_names([p.name for p in unique])}
    fresh = [p for p in unique if p.name not in stored]
    store_dups = [p.name for p in unique if p.name in stored]
    duplicates = batch_dups + store_dups

    if not fresh:
        _logger.info("product import: nothing new, skipped=%d", len(duplicates))
        return BulkInsertResult(created=[], duplicates=duplicates)

    try:
        created: list[Product] = repo.insert_many(fresh)
    except DuplicateNameError as exc:
        _logger.warning("product import lost a race on names=%s", list(exc.names))
        raise DuplicateNameError(str(exc), names=exc.names, duplicates=duplicates) from exc

    _logger.info("product import: created=%d skipped=%d", len(created), len(duplicates))
    return BulkInsertResult(created=created, duplicates=duplicates)


def bulk_insert_transactions(
    repo: TransactionRepository, transactions: Sequence[TransactionInput]
) -> list[Transaction]:
    """Insert every transaction in one write; empty input writes nothing."""

    if not transactions:
        return []
    created = repo.insert_many(transactions)
    _logger.info("transaction import: created=%d", len(created))
    return created


__all__ = ["bulk_insert_products", "bulk_insert_transactions", "split_batch_duplicates"]
