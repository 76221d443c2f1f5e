"""Interactive sessions: paginated browsing and the SQL prompt."""

from queryly.session.pagination import DEFAULT_PAGE_SIZE, PaginationState
from queryly.session.browse import BrowseSession, SessionState
from queryly.session.query import QuerySession

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PaginationState",
    "BrowseSession",
    "SessionState",
    "QuerySession",
]
