"""Roster and leaderboard synchronisation."""

import logging
from typing import Optional

from claimboard.api import LedgerClient, LedgerClientError
from claimboard.schemas import User, is_rank_ordered
from claimboard.services.events import EventBus
from claimboard.services.loading import LoadingFlag
from claimboard.services.notification_service import NotificationService, Severity

logger = logging.getLogger(__name__)

FETCH_USERS_FAILED = "Failed to fetch users"
ADD_USER_FAILED = "Failed to add user"
ADD_USER_BLANK = "Please enter a user name"
ADD_USER_OK = "User added successfully"


class RosterService:
    """Owns the authoritative user list and the current selection.

    The roster is only ever replaced wholesale from a server response. Each
    write bumps a generation counter; a fetch result is dropped if a newer
    fetch was issued or any write landed while it was in flight, so a slow
    GET can never revert a claim or add-user roster.
    The selection is a bare id; it is resolved against the roster at read time.
    """

    def __init__(
        self,
        client: LedgerClient,
        notifier: NotificationService,
        loading: LoadingFlag,
        events: Optional[EventBus] = None,
    ):
        self.client = client
        self.notifier = notifier
        self.loading = loading
        self._events = events
        self._users: tuple[User, ...] = ()
        self._selected_id: str = ""
        self._generation = 0
        self._latest_fetch = 0

    @property
    def users(self) -> tuple[User, ...]:
        return self._users

    @property
    def selected_id(self) -> str:
        return self._selected_id

    def selected_user(self) -> Optional[User]:
        """The roster entry matching the selection, or None if absent or stale."""
        if not self._selected_id:
            return None
        return next((u for u in self._users if u.id == self._selected_id), None)

    def replace(self, users: list[User]) -> None:
        """Replace the roster atomically with a server snapshot."""
        if not is_rank_ordered(users):
            logger.warning("Roster snapshot is not ordered by rank; keeping server order")
        self._users = tuple(users)
        self._generation += 1
        if self._events is not None:
            self._events.publish("roster_updated", count=len(self._users))

    def select_user(self, user_id: str) -> None:
        """Set the selection without validating it against the roster."""
        if user_id == self._selected_id:
            return
        self._selected_id = user_id
        if self._events is not None:
            self._events.publish("selection_changed", user_id=user_id)

    async def load_roster(self) -> bool:
        """
        Fetch the full roster.

        Auto-selects the rank 1 user when nothing is selected yet.

        Returns:
            True if the roster was replaced, False on failure or if superseded
        """
        self._latest_fetch += 1
        token = self._latest_fetch
        generation = self._generation

        try:
            users = await self.client.list_users()
        except LedgerClientError as e:
            if token != self._latest_fetch:
                logger.debug("Discarding stale roster fetch failure")
                return False
            logger.error(f"Error fetching users: {e.message}")
            self.notifier.notify(FETCH_USERS_FAILED, Severity.ERROR)
            return False

        if token != self._latest_fetch or generation != self._generation:
            logger.debug("Discarding stale roster fetch: a newer roster has landed")
            return False

        self.replace(users)
        if not self._selected_id and self._users:
            self.select_user(self._users[0].id)
        return True

    async def add_user(self, name: str) -> bool:
        """
        Create a user and adopt the server's updated roster.

        Args:
            name: Display name; blank input is rejected without a call

        Returns:
            True if the user was created
        """
        name = (name or "").strip()
        if not name:
            self.notifier.notify(ADD_USER_BLANK, Severity.ERROR)
            return False

        if self.loading.active:
            logger.info("Add user ignored: another action is in flight")
            return False

        with self.loading.hold():
            try:
                users, message = await self.client.add_user(name)
            except LedgerClientError as e:
                logger.error(f"Error adding user: {e.message}")
                self.notifier.notify(e.server_message or ADD_USER_FAILED, Severity.ERROR)
                return False

            self.replace(users)
            self.notifier.notify(message or ADD_USER_OK, Severity.SUCCESS)
            return True
