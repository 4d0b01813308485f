"""Coordinator owning every piece of client state."""

import asyncio
import logging
from typing import Optional

import httpx

from claimboard.api import LedgerClient
from claimboard.config import Settings, get_settings
from claimboard.core.view import DashboardView, compose_view
from claimboard.services.claim_service import ClaimService
from claimboard.services.events import EventBus
from claimboard.services.history_service import HistoryService
from claimboard.services.loading import LoadingFlag
from claimboard.services.notification_service import NotificationService
from claimboard.services.roster_service import RosterService

logger = logging.getLogger(__name__)


class Dashboard:
    """Wires the roster, claim, history and notification components together.

    Every user action is a method here and drives exactly one component.
    """

    def __init__(self, client: LedgerClient, notification_ttl: float = 3.0):
        self.client = client
        self.events = EventBus()
        self.loading = LoadingFlag(self.events)
        self.notifier = NotificationService(notification_ttl, self.events)
        self.roster = RosterService(client, self.notifier, self.loading, self.events)
        self.history = HistoryService(client, self.events)
        self.claims = ClaimService(
            client, self.roster, self.history, self.notifier, self.loading
        )

        # Panel state
        self.show_add_user = False
        self.show_history = False
        self.draft_name = ""

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Dashboard":
        """Build a dashboard and its ledger client from application settings."""
        settings = settings or get_settings()
        client = LedgerClient(
            settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            page_size=settings.history_page_size,
            transport=transport,
        )
        return cls(client, notification_ttl=settings.notification_ttl_seconds)

    async def start(self) -> None:
        """Fetch the roster and the first history page concurrently."""
        logger.info("Loading roster and history...")
        await asyncio.gather(
            self.roster.load_roster(),
            self.history.load_page(1),
        )

    # Actions

    def select_user(self, user_id: str) -> None:
        self.roster.select_user(user_id)

    async def claim_points(self) -> bool:
        return await self.claims.claim_points()

    async def add_user(self, name: Optional[str] = None) -> bool:
        """Add a user from ``name`` or, if omitted, from the draft field."""
        ok = await self.roster.add_user(self.draft_name if name is None else name)
        if ok:
            self.draft_name = ""
            self.show_add_user = False
        return ok

    async def load_history_page(self, page: int) -> bool:
        return await self.history.load_page(page)

    async def next_history_page(self) -> bool:
        return await self.history.next_page()

    async def previous_history_page(self) -> bool:
        return await self.history.previous_page()

    def toggle_add_user(self) -> bool:
        self.show_add_user = not self.show_add_user
        return self.show_add_user

    def toggle_history(self) -> bool:
        self.show_history = not self.show_history
        return self.show_history

    def set_draft_name(self, name: str) -> None:
        self.draft_name = name

    # Reads

    def view(self) -> DashboardView:
        """Compose the current view from live state."""
        return compose_view(
            users=self.roster.users,
            selected_id=self.roster.selected_id,
            history=self.history.page,
            notification=self.notifier.current,
            loading=self.loading.active,
            show_add_user=self.show_add_user,
            show_history=self.show_history,
            draft_name=self.draft_name,
        )

    async def wait_idle(self) -> None:
        """Wait for background work scheduled by earlier actions."""
        await self.claims.wait_idle()

    async def aclose(self) -> None:
        """Cancel background work and close the ledger client."""
        self.claims.cancel_pending()
        self.notifier.cancel()
        await self.client.aclose()
