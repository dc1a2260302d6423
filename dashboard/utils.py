"""Formatting helpers shared by the data layer and the HTTP surface."""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Union

from dashboard.models import Revenue

PageItem = Union[int, str]

ELLIPSIS = "..."


def format_currency(amount: int) -> str:
    """Format an amount in cents as US dollars, e.g. 123456 -> "$1,234.56"."""
    value = Decimal(amount) / 100
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_date_to_local(date_str: str) -> str:
    """Format an ISO date as e.g. "Oct 17, 2026"."""
    day = date.fromisoformat(date_str[:10])
    return f"{day:%b} {day.day}, {day.year}"


def generate_y_axis(revenue: Iterable[Revenue]) -> tuple[list[str], int]:
    """
    Build y-axis labels for the revenue chart.

    The top label is the highest revenue rounded up to the next thousand.
    Labels step down by 1000 to $0K.

    Returns:
        (labels, top_label)
    """
    highest = max((r.revenue for r in revenue), default=0)
    top_label = int(math.ceil(highest / 1000) * 1000)

    labels = [f"${step // 1000}K" for step in range(top_label, -1, -1000)]
    return labels, top_label


def generate_pagination(current_page: int, total_pages: int) -> list[PageItem]:
    """
    Page numbers for the pagination bar, with "..." for skipped ranges.

    Seven or fewer pages are listed in full. Otherwise the first and last
    pages stay visible together with the pages around the current one.
    """
    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    if current_page <= 3:
        return [1, 2, 3, ELLIPSIS, total_pages - 1, total_pages]

    if current_page >= total_pages - 2:
        return [1, 2, ELLIPSIS, total_pages - 2, total_pages - 1, total_pages]

    return [
        1,
        ELLIPSIS,
        current_page - 1,
        current_page,
        current_page + 1,
        ELLIPSIS,
        total_pages,
    ]
