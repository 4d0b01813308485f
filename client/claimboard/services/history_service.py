"""Paginated claim history."""

import logging
from enum import Enum
from typing import Optional

from claimboard.api import LedgerClient, LedgerClientError
from claimboard.core.pagination import (
    is_consistent,
    next_page_number,
    previous_page_number,
)
from claimboard.schemas import HistoryPage, HistoryRecord, Pagination
from claimboard.services.events import EventBus

logger = logging.getLogger(__name__)


class HistoryStatus(str, Enum):
    """History pager states."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class HistoryService:
    """Holds one page of history at a time.

    Every load takes a fresh request token; a response whose token is older
    than the latest issued one is discarded, so a slow page can never
    overwrite a page requested after it. Failures keep the previous page and
    are only logged.
    """

    def __init__(self, client: LedgerClient, events: Optional[EventBus] = None):
        self.client = client
        self._events = events
        self.status = HistoryStatus.IDLE
        self.current_page = 1
        self.last_error: Optional[str] = None
        self._page: Optional[HistoryPage] = None
        self._latest_token = 0

    @property
    def page(self) -> Optional[HistoryPage]:
        return self._page

    @property
    def records(self) -> list[HistoryRecord]:
        return list(self._page.history) if self._page else []

    @property
    def pagination(self) -> Optional[Pagination]:
        return self._page.pagination if self._page else None

    async def load_page(self, page: int) -> bool:
        """
        Fetch a history page.

        Args:
            page: 1-based page number

        Returns:
            True if the page was applied, False on failure or if superseded

        Raises:
            ValueError: If page is less than 1
        """
        if page < 1:
            raise ValueError(f"Invalid page {page}. Pages start at 1")

        self._latest_token += 1
        token = self._latest_token
        self.status = HistoryStatus.LOADING

        try:
            result = await self.client.list_history(page)
        except LedgerClientError as e:
            if token != self._latest_token:
                logger.debug(f"Discarding stale failure for history page {page}")
                return False
            logger.error(f"Error fetching history page {page}: {e.message}")
            self.status = HistoryStatus.ERROR
            self.last_error = e.message
            return False

        if token != self._latest_token:
            logger.debug(f"Discarding stale response for history page {page}")
            return False

        if not is_consistent(result.pagination):
            logger.warning(f"Inconsistent pagination for history page {page}: {result.pagination}")

        self._page = result
        self.current_page = page
        self.status = HistoryStatus.LOADED
        self.last_error = None
        if self._events is not None:
            self._events.publish(
                "history_updated",
                page=page,
                total_pages=result.pagination.total_pages,
            )
        return True

    async def next_page(self) -> bool:
        """Load the following page; no-op when there is none."""
        target = next_page_number(self.pagination, self.current_page)
        if target is None:
            return False
        return await self.load_page(target)

    async def previous_page(self) -> bool:
        """Load the preceding page; no-op when there is none."""
        target = previous_page_number(self.pagination, self.current_page)
        if target is None:
            return False
        return await self.load_page(target)
