from __future__ import annotations

from collections.abc import Iterable

import pytest

from monthly_recap.api import (
    confirm_products_upload,
    preview_products_upload,
    preview_transactions_upload,
)
from monthly_recap.bulk import bulk_insert_products, bulk_insert_transactions
from monthly_recap.errors import DuplicateNameError
from monthly_recap.ingest import importable_transactions
from monthly_recap.models import Product, ProductInput
from monthly_recap.store import InMemoryStore, RecordStore
from monthly_recap.store.memory import InMemoryProducts


def _p(name: str, price: int = 1000) -> ProductInput:
    return ProductInput(name=name, type="Misc", price=price)


def test_batch_repeats_are_skipped_and_first_wins(store: RecordStore) -> None:
    result = bulk_insert_products(store.products, [_p("A", 1), _p("B"), _p("A", 2)])

    assert [p.name for p in result.created] == ["A", "B"]
    assert result.duplicates == ["A"]
    assert result.skipped == 1
    assert store.products.find_by_names(["A"])[0].price == 1


def test_reimport_is_idempotent(store: RecordStore) -> None:
    batch = [_p("A"), _p("B"), _p("A")]
    bulk_insert_products(store.products, batch)
    again = bulk_insert_products(store.products, batch)

    assert again.created == []
    # In-batch repeats first, then names already stored.
    assert again.duplicates == ["A", "A", "B"]
    assert len(store.products.list_all()) == 2


def test_mixed_new_and_stored_names(store: RecordStore) -> None:
    store.products.insert_one(_p("Old"))
    result = bulk_insert_products(store.products, [_p("New"), _p("Old")])
    assert [p.name for p in result.created] == ["New"]
    assert result.duplicates == ["Old"]


def test_empty_batch_writes_nothing() -> None:
    class _NoWrites(InMemoryProducts):
        def insert_many(self, products):  # pragma: no cover - must not be called
            raise AssertionError("unexpected write")

    result = bulk_insert_products(_NoWrites(), [])
    assert result.created == [] and result.duplicates == []


class _StaleLookup:
    """Product repo whose existence check misses rows written concurrently."""

    def __init__(self, inner) -> None:
        self._inner = inner

    def find_by_names(self, names: Iterable[str]) -> list[Product]:
        return []

    def insert_many(self, products):
        return self._inner.insert_many(products)


def test_write_race_raises_duplicate_name_error(store: RecordStore) -> None:
    store.products.insert_one(_p("A"))
    repo = _StaleLookup(store.products)

    with pytest.raises(DuplicateNameError) as info:
        bulk_insert_products(repo, [_p("B"), _p("B"), _p("A")])
    assert str(info.value) == "A product with this name already exists"
    assert info.value.duplicates == ("B",)
    # Single write: nothing from the failed batch landed.
    assert [p.name for p in store.products.list_all()] == ["A"]


def test_confirm_products_upload_reports_skips(store: RecordStore) -> None:
    store.products.insert_one(_p("Coffee Mug"))
    candidates = preview_products_upload(
        "Name,Type,Price\n"
        "Coffee Mug,Kitchenware,Rp 194.850\n"
        "Notebook,Stationery,Rp 49.950\n"
        "Notebook,Stationery,Rp 49.950\n"
        ",,\n"
    )
    report = confirm_products_upload(store, candidates)

    assert report.ok
    assert report.created == 1
    assert report.skipped == 2
    assert report.duplicates == ("Notebook", "Coffee Mug")


def test_bulk_insert_transactions(demo_store: InMemoryStore) -> None:
    assert bulk_insert_transactions(demo_store.transactions, []) == []

    candidates = preview_transactions_upload(
        demo_store,
        "Date,Item Purchase,Customer Name,Store Name,Payment Method,Purchase,Notes\n"
        "2024-12-20,Notebook,Sarah Johnson,Home Goods Plus,Cash,30000,\n"
        "2024-12-21,Notebook,Sarah Johnson,Home Goods Plus,Cash,30000,\n",
    )
    created = bulk_insert_transactions(demo_store.transactions, importable_transactions(candidates))
    # Transactions carry no uniqueness rule.
    assert [t.item_purchased for t in created] == ["Notebook", "Notebook"]
    assert len(demo_store.transactions.list_by_period(12, 2024)) == 4
