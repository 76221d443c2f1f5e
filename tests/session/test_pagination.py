"""Tests for pagination state."""

import pytest

from queryly.session.pagination import DEFAULT_PAGE_SIZE, PaginationState


class TestPaginationState:
    """Test page arithmetic and navigation."""

    def test_defaults(self):
        state = PaginationState(120)
        assert state.page_size == DEFAULT_PAGE_SIZE
        assert state.page_number == 1
        assert state.total_pages == 3
        assert state.offset == 0

    @pytest.mark.parametrize("total_rows, page_size, expected", [
        (0, 50, 0),
        (1, 50, 1),
        (50, 50, 1),
        (51, 50, 2),
        (120, 50, 3),
        (7, 3, 3),
    ])
    def test_total_pages_is_ceiling(self, total_rows, page_size, expected):
        assert PaginationState(total_rows, page_size).total_pages == expected

    def test_next_and_previous(self):
        state = PaginationState(120, 50)
        assert state.has_next_page
        assert not state.has_previous_page

        state.next_page()
        assert state.page_number == 2
        assert state.offset == 50
        assert state.has_previous_page

        state.next_page()
        assert state.page_number == 3
        assert state.offset == 100
        assert not state.has_next_page

    def test_next_on_last_page_is_noop(self):
        state = PaginationState(120, 50, page_number=3)
        state.next_page()
        assert state.page_number == 3

    def test_previous_on_first_page_is_noop(self):
        state = PaginationState(120, 50)
        state.previous_page()
        assert state.page_number == 1

    def test_go_to_page(self):
        state = PaginationState(120, 50)
        state.go_to_page(3)
        assert state.page_number == 3
        state.go_to_page(1)
        assert state.page_number == 1

    @pytest.mark.parametrize("page", [0, -1, 4, 100])
    def test_go_to_invalid_page_keeps_state(self, page):
        state = PaginationState(120, 50, page_number=2)
        assert not state.is_valid_page(page)
        state.go_to_page(page)
        assert state.page_number == 2

    def test_row_range(self):
        state = PaginationState(120, 50, page_number=3)
        assert state.first_row == 101
        assert state.last_row == 120

    def test_empty_table(self):
        state = PaginationState(0, 50)
        assert state.total_pages == 0
        assert state.page_number == 1
        assert state.first_row == 0
        assert state.last_row == 0
        assert not state.has_next_page
        assert not state.has_previous_page
        assert state.last_page == 1
        assert state.is_valid_page(1)
        assert not state.is_valid_page(2)

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            PaginationState(10, 0)

    def test_negative_rows(self):
        with pytest.raises(ValueError):
            PaginationState(-1)

    def test_out_of_range_start_page_falls_back_to_first(self):
        assert PaginationState(10, 5, page_number=9).page_number == 1
