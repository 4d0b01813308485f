"""Pagination math for the history pager."""

from typing import Optional

from claimboard.schemas import Pagination


def is_consistent(pagination: Pagination) -> bool:
    """Check the page bounds and that the prev/next flags agree with them."""
    if pagination.total_pages > 0 and not (
        1 <= pagination.current_page <= pagination.total_pages
    ):
        return False
    if pagination.has_prev != (pagination.current_page > 1):
        return False
    return pagination.has_next == (pagination.current_page < pagination.total_pages)


def next_page_number(pagination: Optional[Pagination], current_page: int) -> Optional[int]:
    """Page to load for "next", or None when there is no next page."""
    if pagination is None or not pagination.has_next:
        return None
    return current_page + 1


def previous_page_number(pagination: Optional[Pagination], current_page: int) -> Optional[int]:
    """Page to load for "previous", or None when there is no previous page."""
    if pagination is None or not pagination.has_prev or current_page <= 1:
        return None
    return current_page - 1
