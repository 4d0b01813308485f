"""Points Claiming System - terminal entry point."""

import argparse
import asyncio
import logging
from typing import Optional

from claimboard.config import get_settings
from claimboard.core.view import render_text
from claimboard.services.dashboard import Dashboard

logger = logging.getLogger("claimboard")

HELP = """Commands:
  select <rank|id>   choose a user
  claim              claim random points for the selected user
  add <name>         add a new user
  history            show/hide recent activity
  next / prev        page through recent activity
  show               redraw
  quit               exit"""


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def resolve_user_id(dashboard: Dashboard, token: str) -> str:
    """Accept either a leaderboard rank or a raw user id."""
    if token.isdigit():
        rank = int(token)
        for user in dashboard.roster.users:
            if user.rank == rank:
                return user.id
    return token


async def handle_command(dashboard: Dashboard, line: str) -> bool:
    """Run one command. Returns False when the loop should stop."""
    command, _, arg = line.strip().partition(" ")
    command = command.lower()
    arg = arg.strip()

    if command in ("quit", "exit", "q"):
        return False
    if command == "select" and arg:
        dashboard.select_user(resolve_user_id(dashboard, arg))
    elif command == "claim":
        await dashboard.claim_points()
        await dashboard.wait_idle()
    elif command == "add":
        await dashboard.add_user(arg)
    elif command == "history":
        dashboard.toggle_history()
    elif command == "next":
        await dashboard.next_history_page()
    elif command == "prev":
        await dashboard.previous_history_page()
    elif command in ("show", ""):
        pass
    else:
        print(HELP)
        return True

    print(render_text(dashboard.view()))
    return True


async def run(base_url: Optional[str] = None) -> None:
    settings = get_settings()
    if base_url:
        settings = settings.model_copy(update={"api_base_url": base_url.rstrip("/")})

    dashboard = Dashboard.from_settings(settings)
    logger.info(f"Starting {settings.app_name} against {settings.api_base_url}")

    try:
        await dashboard.start()
        print(render_text(dashboard.view()))
        print(HELP)

        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if not await handle_command(dashboard, line):
                break
    finally:
        await dashboard.aclose()
        logger.info("Stopped")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Points Claiming System client")
    parser.add_argument("--api-url", help="Ledger API base URL (overrides API_BASE_URL)")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    try:
        asyncio.run(run(args.api_url))
    except KeyboardInterrupt:
        pass
