"""Page arithmetic for table browsing."""

import math

DEFAULT_PAGE_SIZE = 50


class PaginationState:
    """Current page over a known number of rows.

    Navigation never raises: moving past either end, or to a page outside
    ``[1, last_page]``, leaves the state unchanged. Callers that want to
    warn about a bad page number check :meth:`is_valid_page` first.
    """

    def __init__(self, total_rows: int, page_size: int = DEFAULT_PAGE_SIZE, page_number: int = 1) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be greater than 0")
        if total_rows < 0:
            raise ValueError("total_rows cannot be negative")
        self.page_size = page_size
        self.total_rows = total_rows
        self.total_pages = math.ceil(total_rows / page_size)
        self.page_number = page_number if self.is_valid_page(page_number) else 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def first_row(self) -> int:
        """1-based number of the first row on this page (0 when empty)."""
        return self.offset + 1 if self.total_rows else 0

    @property
    def last_row(self) -> int:
        """1-based number of the last row on this page (0 when empty)."""
        return min(self.page_number * self.page_size, self.total_rows)

    @property
    def last_page(self) -> int:
        """Highest reachable page; an empty table still has page 1."""
        return max(self.total_pages, 1)

    def is_valid_page(self, page_number: int) -> bool:
        return 1 <= page_number <= self.last_page

    def next_page(self) -> None:
        if self.has_next_page:
            self.page_number += 1

    def previous_page(self) -> None:
        if self.has_previous_page:
            self.page_number -= 1

    def go_to_page(self, page_number: int) -> None:
        if self.is_valid_page(page_number):
            self.page_number = page_number

    def __repr__(self) -> str:
        return (
            f"PaginationState(page={self.page_number}/{self.total_pages}, "
            f"size={self.page_size}, rows={self.total_rows})"
        )
