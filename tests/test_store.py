"""Record store contract, run against both backends."""

from __future__ import annotations

import datetime as dt

import pytest

from monthly_recap.errors import DuplicateNameError, NotFoundError
from monthly_recap.models import ProductInput, TransactionInput
from monthly_recap.store import InMemoryStore, RecordStore


def _tx(day: int, item: str = "Coffee Mug", *, month: int = 12, purchase: int = 1000):
    return TransactionInput(
        date=dt.date(2024, month, day),
        item_purchased=item,
        customer_name="John Smith",
        store_name="Home Goods Plus",
        payment_method="Cash",
        purchase_price=purchase,
    )


# ---- Products ----------------------------------------------------------------


def test_products_insert_and_list_by_name(store: RecordStore) -> None:
    store.products.insert_many(
        [
            ProductInput(name="Notebook", type="Stationery", price=49950),
            ProductInput(name="Coffee Mug", type="Kitchenware", price=194850),
        ]
    )
    listed = store.products.list_all()
    assert [p.name for p in listed] == ["Coffee Mug", "Notebook"]
    assert all(p.id > 0 for p in listed)
    assert listed[0].price == 194850


def test_product_name_is_unique(store: RecordStore) -> None:
    store.products.insert_one(ProductInput(name="Mug", type="Kitchenware", price=1000))
    with pytest.raises(DuplicateNameError, match="A product with this name already exists"):
        store.products.insert_one(ProductInput(name="Mug", type="Other", price=2000))
    assert len(store.products.list_all()) == 1


def test_failed_insert_names_only_the_colliding_products(store: RecordStore) -> None:
    store.products.insert_one(ProductInput(name="Mug", type="Kitchenware", price=1000))
    with pytest.raises(DuplicateNameError) as info:
        store.products.insert_many(
            [
                ProductInput(name="Pen", type="Stationery", price=500),
                ProductInput(name="Mug", type="Kitchenware", price=1200),
                ProductInput(name="Lamp", type="Home", price=9000),
                ProductInput(name="Lamp", type="Home", price=9500),
            ]
        )
    assert info.value.names == ("Mug", "Lamp")
    assert [p.name for p in store.products.list_all()] == ["Mug"]


def test_product_names_are_case_sensitive(store: RecordStore) -> None:
    store.products.insert_many(
        [
            ProductInput(name="Mug", type="Kitchenware", price=1000),
            ProductInput(name="mug", type="Kitchenware", price=1000),
        ]
    )
    assert len(store.products.find_by_names(["Mug"])) == 1


def test_find_by_names(store: RecordStore) -> None:
    store.products.insert_one(ProductInput(name="Mug", type="Kitchenware", price=1000))
    assert [p.name for p in store.products.find_by_names(["Mug", "Nope"])] == ["Mug"]
    assert store.products.find_by_names([]) == []


def test_product_update_and_rename_collision(store: RecordStore) -> None:
    a, b = store.products.insert_many(
        [
            ProductInput(name="Mug", type="Kitchenware", price=1000),
            ProductInput(name="Pen", type="Stationery", price=500),
        ]
    )
    updated = store.products.update(a.id, {"price": 1500})
    assert updated.price == 1500
    assert updated.name == "Mug"

    with pytest.raises(DuplicateNameError):
        store.products.update(b.id, {"name": "Mug"})
    with pytest.raises(NotFoundError):
        store.products.update(9999, {"price": 1})
    with pytest.raises(ValueError, match="Unknown product field"):
        store.products.update(a.id, {"colour": "red"})


def test_product_delete(store: RecordStore) -> None:
    a, b, c = store.products.insert_many(
        [
            ProductInput(name="A", type="T", price=1),
            ProductInput(name="B", type="T", price=1),
            ProductInput(name="C", type="T", price=1),
        ]
    )
    store.products.delete(a.id)
    store.products.delete_many([b.id, 12345])
    store.products.delete(12345)
    assert [p.name for p in store.products.list_all()] == ["C"]


# ---- Transactions ------------------------------------------------------------


def test_transactions_derive_columns(store: RecordStore) -> None:
    (t,) = store.transactions.insert_many([_tx(15, purchase=127500)])
    assert (t.month, t.year) == (12, 2024)
    assert t.selling_price == 0
    assert t.revenue == -127500
    fetched = store.transactions.get(t.id)
    assert (fetched.id, fetched.revenue, fetched.date) == (t.id, -127500, dt.date(2024, 12, 15))


def test_list_by_period_newest_first(store: RecordStore) -> None:
    store.transactions.insert_many([_tx(1, "A"), _tx(20, "B"), _tx(5, "C"), _tx(5, "X", month=11)])
    assert [t.item_purchased for t in store.transactions.list_by_period(12, 2024)] == [
        "B",
        "C",
        "A",
    ]
    assert [t.item_purchased for t in store.transactions.list_by_period(11, 2024)] == ["X"]
    assert store.transactions.list_by_period(1, 2025) == []
    assert len(store.transactions.list_all()) == 4


def test_transaction_update_get_delete(store: RecordStore) -> None:
    t = store.transactions.insert_one(_tx(3))
    updated = store.transactions.update(t.id, {"notes": "paid later", "selling_price": 1500})
    assert updated.notes == "paid later"
    assert updated.selling_price == 1500

    with pytest.raises(NotFoundError):
        store.transactions.get(9999)
    with pytest.raises(NotFoundError):
        store.transactions.update(9999, {"notes": "x"})

    store.transactions.delete_many([t.id])
    assert store.transactions.list_all() == []


def test_reference_names(store: RecordStore) -> None:
    assert store.customer_names() == []
    store.add_customer("John Smith")
    store.add_customer("John Smith")
    store.add_store("Home Goods Plus")
    assert store.customer_names() == ["John Smith"]
    assert store.store_names() == ["Home Goods Plus"]
    store.ping()


def test_demo_store_contents() -> None:
    demo = InMemoryStore.with_demo_data()
    assert [p.name for p in demo.products.list_all()] == [
        "Coffee Mug",
        "Notebook",
        "Wireless Headphones",
    ]
    december = demo.transactions.list_by_period(12, 2024)
    assert [t.revenue for t in december] == [67350, 374850]
    assert demo.customer_names() == ["John Smith", "Sarah Johnson"]
