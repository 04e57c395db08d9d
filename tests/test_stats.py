from __future__ import annotations

import datetime as dt

from monthly_recap.models import MonthStats, Transaction
from monthly_recap.stats import compute_month_stats


def _t(item: str, purchase: int, selling: int) -> Transaction:
    return Transaction(
        id=0,
        date=dt.date(2024, 12, 1),
        item_purchased=item,
        customer_name="c",
        store_name="s",
        payment_method="Cash",
        purchase_price=purchase,
        selling_price=selling,
        revenue=selling - purchase,
        notes=None,
        month=12,
        year=2024,
    )


def test_empty_period_is_all_zero() -> None:
    assert compute_month_stats([]) == MonthStats()
    assert compute_month_stats([]).top_product == ""


def test_totals_average_and_top_product() -> None:
    stats = compute_month_stats(
        [_t("Mug", 100, 150), _t("Pen", 10, 30), _t("Mug", 100, 120), _t("Pen", 10, 0)]
    )
    assert stats.total_transactions == 4
    assert stats.total_sales == 300
    assert stats.total_revenue == 50 + 20 + 20 - 10
    assert stats.average_revenue == 20.0
    assert stats.top_product == "Mug"


def test_top_product_tie_goes_to_first_seen() -> None:
    stats = compute_month_stats([_t("Pen", 1, 2), _t("Mug", 1, 2)])
    assert stats.top_product == "Pen"
