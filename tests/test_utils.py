"""Tests for formatting and query-string helpers."""

import pytest

from dashboard.models import Revenue
from dashboard.search_params import append_params, delete_params, get_param_value, set_params
from dashboard.utils import (
    ELLIPSIS,
    format_currency,
    format_date_to_local,
    generate_pagination,
    generate_y_axis,
)


class TestFormatting:
    """Currency and date formatting."""

    @pytest.mark.parametrize(
        "cents,expected",
        [
            (0, "$0.00"),
            (5, "$0.05"),
            (15795, "$157.95"),
            (123456789, "$1,234,567.89"),
            (-1050, "-$10.50"),
        ],
    )
    def test_format_currency(self, cents: int, expected: str) -> None:
        assert format_currency(cents) == expected

    def test_format_date(self) -> None:
        assert format_date_to_local("2023-12-06") == "Dec 6, 2023"
        assert format_date_to_local("2026-10-17T09:30:00") == "Oct 17, 2026"


class TestYAxis:
    """Revenue chart labels."""

    def test_rounds_up_to_next_thousand(self) -> None:
        revenue = [Revenue(month="Jan", revenue=2000), Revenue(month="Dec", revenue=4800)]

        labels, top = generate_y_axis(revenue)

        assert top == 5000
        assert labels == ["$5K", "$4K", "$3K", "$2K", "$1K", "$0K"]

    def test_exact_thousand(self) -> None:
        labels, top = generate_y_axis([Revenue(month="Jan", revenue=3000)])

        assert top == 3000
        assert labels[0] == "$3K"

    def test_no_revenue(self) -> None:
        assert generate_y_axis([]) == (["$0K"], 0)


class TestPagination:
    """Pagination bar entries."""

    def test_few_pages(self) -> None:
        assert generate_pagination(1, 0) == []
        assert generate_pagination(2, 7) == [1, 2, 3, 4, 5, 6, 7]

    def test_near_start(self) -> None:
        assert generate_pagination(2, 10) == [1, 2, 3, ELLIPSIS, 9, 10]

    def test_near_end(self) -> None:
        assert generate_pagination(9, 10) == [1, 2, ELLIPSIS, 8, 9, 10]

    def test_middle(self) -> None:
        assert generate_pagination(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]


class TestSearchParams:
    """Query-string helpers."""

    def test_set_replaces_in_place(self) -> None:
        assert set_params("query=paid&page=3", {"page": 1}) == "query=paid&page=1"

    def test_set_adds_missing_key(self) -> None:
        assert set_params("?query=paid", {"page": 2}) == "query=paid&page=2"

    def test_set_drops_empty_values(self) -> None:
        assert set_params("query=paid&page=3", {"query": ""}) == "page=3"
        assert set_params("query=paid&page=3", {"page": None}) == "query=paid"

    def test_set_keeps_falsy_when_asked(self) -> None:
        assert set_params("", {"page": 0}, delete_false_values=False) == "page=0"

    def test_set_list_values(self) -> None:
        assert set_params("tag=a", {"tag": ["b", "c"]}) == "tag=b&tag=c"

    def test_append(self) -> None:
        assert append_params("tag=a", {"tag": "b"}) == "tag=a&tag=b"
        assert append_params("tag=a", {"tag": None}) == ""

    def test_delete(self) -> None:
        assert delete_params("a=1&b=2&c=3", ["a", "c"]) == "b=2"
        assert delete_params("a=1&b=2", "b") == "a=1"

    def test_get_value(self) -> None:
        assert get_param_value("?query=rabbit&query=other", "query") == "rabbit"
        assert get_param_value("query=rabbit", "page") is None

    def test_spaces_are_encoded(self) -> None:
        assert set_params("", {"query": "Evil Rabbit"}) == "query=Evil+Rabbit"
