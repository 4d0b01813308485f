"""Claim workflow: award points to the selected user."""

import asyncio
import logging
from typing import Coroutine

from claimboard.api import LedgerClient, LedgerClientError
from claimboard.services.history_service import HistoryService
from claimboard.services.loading import LoadingFlag
from claimboard.services.notification_service import NotificationService, Severity
from claimboard.services.roster_service import RosterService

logger = logging.getLogger(__name__)

NO_SELECTION = "Please select a user first"
CLAIM_FAILED = "Failed to claim points"
CLAIM_OK = "Points claimed successfully"


class ClaimService:
    """Orchestrates a claim and folds its result back into the roster.

    On success the roster is replaced from the response and history page 1 is
    reloaded in the background; the reload's outcome never affects the claim's.
    """

    def __init__(
        self,
        client: LedgerClient,
        roster: RosterService,
        history: HistoryService,
        notifier: NotificationService,
        loading: LoadingFlag,
    ):
        self.client = client
        self.roster = roster
        self.history = history
        self.notifier = notifier
        self.loading = loading
        self._background: set[asyncio.Task] = set()

    async def claim_points(self) -> bool:
        """
        Claim points for the currently selected user.

        Returns:
            True if the claim succeeded
        """
        user_id = self.roster.selected_id
        if not user_id:
            self.notifier.notify(NO_SELECTION, Severity.ERROR)
            return False

        if self.loading.active:
            logger.info("Claim ignored: another action is in flight")
            return False

        with self.loading.hold():
            try:
                result, message = await self.client.claim_points(user_id)
            except LedgerClientError as e:
                logger.error(f"Error claiming points for {user_id}: {e.message}")
                self.notifier.notify(e.server_message or CLAIM_FAILED, Severity.ERROR)
                return False

            self.roster.replace(result.all_users)
            self.notifier.notify(message or CLAIM_OK, Severity.SUCCESS)
            self._schedule(self.history.load_page(1))
            return True

    def _schedule(self, coro: Coroutine) -> asyncio.Task:
        """Run a follow-up without awaiting it, keeping a reference until done."""
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    @property
    def pending(self) -> int:
        """Number of follow-up tasks still running."""
        return len(self._background)

    async def wait_idle(self) -> None:
        """Wait for all scheduled follow-ups to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._background):
            task.cancel()
