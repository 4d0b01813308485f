"""
View composition.

Pure functions from client state to a render-ready view model. Nothing here
holds state; the selected-user detail is looked up from the roster on every
call.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Optional, Sequence

from claimboard.schemas import HistoryPage, User

if TYPE_CHECKING:
    from claimboard.services.notification_service import Notification

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


@dataclass(frozen=True)
class LeaderboardRow:
    """One leaderboard line."""
    user_id: str
    rank: int
    name: str
    points: int
    selected: bool = False
    top3: bool = False
    medal: Optional[str] = None


@dataclass(frozen=True)
class HistoryRow:
    """One history line."""
    record_id: str
    user_name: str
    points: int
    claimed_at: str


@dataclass(frozen=True)
class PaginationControls:
    """History pager controls; only shown when there is more than one page."""
    current_page: int
    total_pages: int
    prev_enabled: bool
    next_enabled: bool


@dataclass(frozen=True)
class NotificationView:
    text: str
    severity: str


@dataclass(frozen=True)
class DashboardView:
    """Everything a renderer needs for one frame."""
    leaderboard: list[LeaderboardRow] = field(default_factory=list)
    selected_user: Optional[User] = None
    claim_enabled: bool = False
    claim_label: str = "Claim Random Points"
    show_add_user: bool = False
    add_user_enabled: bool = False
    draft_name: str = ""
    show_history: bool = False
    history: list[HistoryRow] = field(default_factory=list)
    pagination: Optional[PaginationControls] = None
    notification: Optional[NotificationView] = None
    loading: bool = False


def format_claimed_at(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a claim timestamp, e.g. ``19 Oct 2026, 02:30 pm``."""
    if tz is not None:
        value = value.astimezone(tz)
    elif value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%d %b %Y, %I:%M %p").replace("AM", "am").replace("PM", "pm")


def compose_view(
    users: Sequence[User],
    selected_id: str,
    history: Optional[HistoryPage],
    notification: Optional["Notification"],
    loading: bool,
    show_add_user: bool = False,
    show_history: bool = False,
    draft_name: str = "",
    tz: Optional[tzinfo] = None,
) -> DashboardView:
    """Build the view model for the current state."""
    rows = [
        LeaderboardRow(
            user_id=user.id,
            rank=user.rank,
            name=user.name,
            points=user.total_points,
            selected=user.id == selected_id,
            top3=index < 3,
            medal=MEDALS.get(index + 1),
        )
        for index, user in enumerate(users)
    ]

    selected = None
    if selected_id:
        selected = next((u for u in users if u.id == selected_id), None)

    history_rows: list[HistoryRow] = []
    controls = None
    if history is not None:
        history_rows = [
            HistoryRow(
                record_id=record.id,
                user_name=record.user_name,
                points=record.points_awarded,
                claimed_at=format_claimed_at(record.claimed_at, tz),
            )
            for record in history.history
        ]
        pagination = history.pagination
        if pagination.total_pages > 1:
            controls = PaginationControls(
                current_page=pagination.current_page,
                total_pages=pagination.total_pages,
                prev_enabled=pagination.has_prev,
                next_enabled=pagination.has_next,
            )

    return DashboardView(
        leaderboard=rows,
        selected_user=selected,
        claim_enabled=not loading and bool(selected_id),
        claim_label="Claiming..." if loading else "Claim Random Points",
        show_add_user=show_add_user,
        add_user_enabled=not loading and bool(draft_name.strip()),
        draft_name=draft_name,
        show_history=show_history,
        history=history_rows,
        pagination=controls,
        notification=(
            NotificationView(notification.text, notification.severity.value)
            if notification is not None
            else None
        ),
        loading=loading,
    )


def render_text(view: DashboardView) -> str:
    """Render a view as plain text for the terminal."""
    lines = []

    if view.notification:
        marker = "!" if view.notification.severity == "error" else "*"
        lines.append(f"[{marker}] {view.notification.text}")
        lines.append("")

    if view.selected_user:
        user = view.selected_user
        lines.append(f"Selected: {user.name} - {user.total_points} Points - Rank #{user.rank}")
    else:
        lines.append("Selected: (none)")
    if view.loading:
        lines.append(view.claim_label)
    lines.append("")

    lines.append("Leaderboard")
    if not view.leaderboard:
        lines.append("  No users found")
    for row in view.leaderboard:
        pointer = ">" if row.selected else " "
        medal = f" {row.medal}" if row.medal else ""
        lines.append(f"{pointer} #{row.rank:<3} {row.name:<20} {row.points:>6} pts{medal}")

    if view.show_history:
        lines.append("")
        lines.append("Recent Activity")
        if not view.history:
            lines.append("  No history found")
        for item in view.history:
            lines.append(f"  {item.user_name:<20} +{item.points:<5} {item.claimed_at}")
        if view.pagination:
            p = view.pagination
            lines.append(f"  Page {p.current_page} of {p.total_pages}")

    return "\n".join(lines)
