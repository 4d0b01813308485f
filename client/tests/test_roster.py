"""Tests for roster synchronisation and selection."""

import asyncio

import pytest

from claimboard.api import LedgerResponseError, LedgerTransportError
from claimboard.services.notification_service import Severity
from claimboard.services.roster_service import RosterService

from tests.conftest import make_user


@pytest.fixture
def roster(mock_client, notifier, loading) -> RosterService:
    return RosterService(mock_client, notifier, loading)


@pytest.mark.asyncio
async def test_load_roster_replaces_and_autoselects(roster, mock_client):
    users = [make_user(1), make_user(2), make_user(3)]
    mock_client.list_users.return_value = users

    assert await roster.load_roster() is True

    assert list(roster.users) == users
    assert roster.selected_id == "user-1"
    assert roster.selected_user() == users[0]


@pytest.mark.asyncio
async def test_load_roster_keeps_existing_selection(roster, mock_client):
    mock_client.list_users.return_value = [make_user(1), make_user(2)]
    roster.select_user("user-2")

    await roster.load_roster()

    assert roster.selected_id == "user-2"


@pytest.mark.asyncio
async def test_load_empty_roster_leaves_selection_unset(roster, mock_client):
    mock_client.list_users.return_value = []

    assert await roster.load_roster() is True
    assert roster.selected_id == ""
    assert roster.selected_user() is None


@pytest.mark.asyncio
async def test_load_roster_failure_keeps_roster(roster, mock_client, notifier):
    mock_client.list_users.return_value = [make_user(1)]
    await roster.load_roster()

    mock_client.list_users.side_effect = LedgerTransportError("Connection refused")
    assert await roster.load_roster() is False

    assert [u.id for u in roster.users] == ["user-1"]
    assert notifier.current.text == "Failed to fetch users"
    assert notifier.current.severity is Severity.ERROR


@pytest.mark.asyncio
async def test_select_user_makes_no_call(roster, mock_client):
    roster.select_user("user-9")
    roster.select_user("user-9")

    assert roster.selected_id == "user-9"
    mock_client.list_users.assert_not_called()
    mock_client.add_user.assert_not_called()
    mock_client.claim_points.assert_not_called()


@pytest.mark.asyncio
async def test_stale_selection_resolves_to_nothing(roster, mock_client):
    """A selection missing from a refreshed roster is kept but resolves to None."""
    mock_client.list_users.return_value = [make_user(1), make_user(2)]
    await roster.load_roster()
    roster.select_user("user-2")

    mock_client.list_users.return_value = [make_user(1)]
    await roster.load_roster()

    assert roster.selected_id == "user-2"
    assert roster.selected_user() is None


@pytest.mark.asyncio
async def test_add_user_success(roster, mock_client, notifier, loading):
    seen = []

    async def fake_add(name):
        seen.append(loading.active)
        return [make_user(1, name="Ada", points=0)], "User Ada added successfully"

    mock_client.add_user.side_effect = fake_add

    assert await roster.add_user("  Ada  ") is True

    mock_client.add_user.assert_awaited_once_with("Ada")
    assert seen == [True]
    assert loading.active is False
    assert roster.users[0].name == "Ada"
    assert notifier.current.text == "User Ada added successfully"
    assert notifier.current.severity is Severity.SUCCESS


@pytest.mark.asyncio
async def test_add_user_blank_name(roster, mock_client, notifier, loading):
    assert await roster.add_user("   ") is False

    mock_client.add_user.assert_not_called()
    assert notifier.current.severity is Severity.ERROR
    assert loading.active is False


@pytest.mark.asyncio
async def test_add_user_server_message_surfaced(roster, mock_client, notifier, loading):
    mock_client.add_user.side_effect = LedgerResponseError(
        "API error: 400", status_code=400, server_message="User already exists"
    )

    assert await roster.add_user("Ada") is False

    assert notifier.current.text == "User already exists"
    assert loading.active is False
    assert roster.users == ()


@pytest.mark.asyncio
async def test_add_user_generic_fallback(roster, mock_client, notifier):
    mock_client.add_user.side_effect = LedgerTransportError("Request timed out")

    await roster.add_user("Ada")

    assert notifier.current.text == "Failed to add user"


@pytest.mark.asyncio
async def test_add_user_refused_while_loading(roster, mock_client, loading):
    with loading.hold():
        assert await roster.add_user("Ada") is False

    mock_client.add_user.assert_not_called()


@pytest.mark.asyncio
async def test_unordered_snapshot_is_still_adopted(roster, caplog):
    users = [make_user(2), make_user(1)]

    roster.replace(users)

    assert list(roster.users) == users
    assert "not ordered by rank" in caplog.text


@pytest.mark.asyncio
async def test_older_fetch_superseded_by_newer(roster, mock_client):
    """The fetch issued last wins, whatever order the responses arrive in."""
    gates = [asyncio.Event(), asyncio.Event()]
    snapshots = [[make_user(1, points=10)], [make_user(1, points=20)]]
    calls = []

    async def gated():
        index = len(calls)
        calls.append(index)
        await gates[index].wait()
        return snapshots[index]

    mock_client.list_users.side_effect = gated

    older = asyncio.create_task(roster.load_roster())
    await asyncio.sleep(0)
    newer = asyncio.create_task(roster.load_roster())
    await asyncio.sleep(0)

    gates[1].set()
    assert await newer is True
    gates[0].set()
    assert await older is False

    assert roster.users[0].total_points == 20


@pytest.mark.asyncio
async def test_fetch_dropped_when_add_user_lands_first(roster, mock_client):
    release = asyncio.Event()

    async def slow_list_users():
        await release.wait()
        return []

    mock_client.list_users.side_effect = slow_list_users
    mock_client.add_user.return_value = ([make_user(1, name="Ada", points=0)], "added")

    fetch = asyncio.create_task(roster.load_roster())
    await asyncio.sleep(0)
    assert await roster.add_user("Ada") is True

    release.set()
    assert await fetch is False
    assert [u.name for u in roster.users] == ["Ada"]
