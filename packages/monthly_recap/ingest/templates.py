"""Downloadable CSV templates in the exact upload column order."""

from __future__ import annotations

from .amounts import format_rupiah
from .validators import PRODUCT_COLUMNS, TRANSACTION_COLUMNS

TRANSACTION_TEMPLATE_FILENAME = "transaction_template.csv"
PRODUCT_TEMPLATE_FILENAME = "product_template.csv"


def transaction_template() -> str:
    rows = [
        ",".join(TRANSACTION_COLUMNS),
        "2024-01-15,Wireless Headphones,John Smith,Tech Store Downtown,Credit Card,"
        f"{format_rupiah(1125000)},Customer was very satisfied",
        "2024-01-16,Coffee Mug,Sarah Johnson,Home Goods Plus,Cash,"
        f"{format_rupiah(127500)},Part of a bulk order",
    ]
    return "\n".join(rows)


def product_template() -> str:
    rows = [
        ",".join(PRODUCT_COLUMNS),
        f"Wireless Headphones,Electronics,{format_rupiah(1499850)}",
        f"Coffee Mug,Kitchenware,{format_rupiah(194850)}",
        f"Business Notebook,Stationery,{format_rupiah(125000)}",
    ]
    return "\n".join(rows)


__all__ = [
    "PRODUCT_TEMPLATE_FILENAME",
    "TRANSACTION_TEMPLATE_FILENAME",
    "product_template",
    "transaction_template",
]
