"""Monthly summary figures."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .models import MonthStats, Transaction


def compute_month_stats(transactions: Sequence[Transaction]) -> MonthStats:
    """Summarize one period's transactions.

    ``top_product`` is the most frequent ``item_purchased``; ties go to the
    item seen first. An empty period yields all-zero stats.
    """

    if not transactions:
        return MonthStats()
    total_revenue = sum(t.revenue for t in transactions)
    # most_common() is stable, so equal counts keep first-seen order.
    top, _ = Counter(t.item_purchased for t in transactions).most_common(1)[0]
    return MonthStats(
        total_transactions=len(transactions),
        total_revenue=total_revenue,
        total_sales=sum(t.selling_price for t in transactions),
        average_revenue=total_revenue / len(transactions),
        top_product=top,
    )


__all__ = ["compute_month_stats"]
