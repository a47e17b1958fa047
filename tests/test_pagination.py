"""Tests for offset pagination."""

import pytest

from vidtube.exceptions import InvalidInput
from vidtube.services.views.pagination import paginate, validate_page_params


class TestPaginate:
    def test_middle_page(self):
        page = paginate(list(range(25)), page=2, limit=10)

        assert page.items == list(range(10, 20))
        assert page.total_count == 25
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_prev is True

    def test_last_partial_page(self):
        page = paginate(list(range(25)), page=3, limit=10)
        assert page.items == [20, 21, 22, 23, 24]
        assert page.has_next is False

    def test_page_past_the_end_is_empty(self):
        page = paginate(list(range(5)), page=4, limit=10)
        assert page.items == []
        assert page.total_count == 5
        assert page.total_pages == 1

    def test_empty_input(self):
        page = paginate([], page=1, limit=10)
        assert page.total_pages == 0
        assert page.has_next is False
        assert page.has_prev is False

    def test_pages_concatenate_to_whole(self):
        ordered = list(range(23))
        pages = [paginate(ordered, page=p, limit=5).items for p in range(1, 6)]
        assert [item for items in pages for item in items] == ordered


class TestValidatePageParams:
    def test_numeric_strings_are_accepted(self):
        assert validate_page_params("2", "15") == (2, 15)

    @pytest.mark.parametrize("page", [0, -1, "abc", None, True, 1.5])
    def test_invalid_page(self, page):
        with pytest.raises(InvalidInput, match="page must be a positive integer"):
            validate_page_params(page, 10)

    def test_limit_above_max_is_rejected(self):
        with pytest.raises(InvalidInput, match="limit cannot exceed 100"):
            validate_page_params(1, 101)

    def test_custom_max(self):
        with pytest.raises(InvalidInput, match="limit cannot exceed 5"):
            validate_page_params(1, 6, max_limit=5)
