"""Pytest configuration and fixtures."""

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import APIRouter, FastAPI, Query
from fastapi.responses import JSONResponse
from httpx import ASGITransport
from pydantic import BaseModel

from claimboard.api import LedgerClient
from claimboard.schemas import HistoryPage, Pagination, User
from claimboard.services.dashboard import Dashboard
from claimboard.services.loading import LoadingFlag
from claimboard.services.notification_service import NotificationService

TEST_BASE_URL = "http://test/api"


class FakeLedger:
    """In-memory stand-in for the points-ledger service."""

    def __init__(self, award: int = 7):
        self.award = award
        self.users: list[dict] = []
        self.history: list[dict] = []
        self.fail_next: Optional[tuple[int, str]] = None

    def ranked(self) -> list[dict]:
        ordered = sorted(
            enumerate(self.users), key=lambda pair: (-pair[1]["totalPoints"], pair[0])
        )
        return [{**user, "rank": i + 1} for i, (_, user) in enumerate(ordered)]

    def add(self, name: str, points: int = 0) -> dict:
        user = {"_id": uuid.uuid4().hex, "name": name, "totalPoints": points}
        self.users.append(user)
        return user

    def claim(self, user_id: str) -> Optional[dict]:
        user = next((u for u in self.users if u["_id"] == user_id), None)
        if user is None:
            return None
        user["totalPoints"] += self.award
        self.history.insert(0, {
            "_id": uuid.uuid4().hex,
            "userId": user_id,
            "userName": user["name"],
            "pointsAwarded": self.award,
            "claimedAt": datetime.now(timezone.utc).isoformat(),
        })
        return user


class _AddUserBody(BaseModel):
    name: str = ""


class _ClaimBody(BaseModel):
    userId: str = ""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_ledger_app(ledger: FakeLedger) -> FastAPI:
    router = APIRouter(prefix="/api")

    def injected_failure() -> Optional[JSONResponse]:
        if ledger.fail_next is None:
            return None
        status_code, message = ledger.fail_next
        ledger.fail_next = None
        return _error(status_code, message)

    @router.get("/users")
    async def list_users():
        failure = injected_failure()
        if failure:
            return failure
        return {"success": True, "data": ledger.ranked()}

    @router.post("/users", status_code=201)
    async def add_user(body: _AddUserBody):
        failure = injected_failure()
        if failure:
            return failure
        name = body.name.strip()
        if not name:
            return _error(400, "User name is required")
        if any(u["name"].lower() == name.lower() for u in ledger.users):
            return _error(400, "User already exists")
        ledger.add(name)
        return {"success": True, "data": ledger.ranked(), "message": f"User {name} added successfully"}

    @router.post("/claim-points")
    async def claim_points(body: _ClaimBody):
        failure = injected_failure()
        if failure:
            return failure
        user = ledger.claim(body.userId)
        if user is None:
            return _error(404, "User not found")
        return {
            "success": True,
            "data": {"allUsers": ledger.ranked(), "pointsAwarded": ledger.award},
            "message": f"{user['name']} claimed {ledger.award} points!",
        }

    @router.get("/history")
    async def list_history(page: int = Query(1, ge=1), limit: int = Query(5, ge=1)):
        failure = injected_failure()
        if failure:
            return failure
        total = len(ledger.history)
        total_pages = (total + limit - 1) // limit
        start = (page - 1) * limit
        return {
            "success": True,
            "data": {
                "history": ledger.history[start:start + limit],
                "pagination": {
                    "currentPage": page,
                    "totalPages": total_pages,
                    "totalRecords": total,
                    "hasPrev": page > 1,
                    "hasNext": page < total_pages,
                },
            },
        }

    app = FastAPI(title="Fake ledger")
    app.include_router(router)
    return app


def make_user(rank: int, name: Optional[str] = None, points: Optional[int] = None) -> User:
    """Build a user whose points fall as rank rises."""
    return User(
        id=f"user-{rank}",
        name=name or f"player{rank}",
        total_points=points if points is not None else 100 - rank * 10,
        rank=rank,
    )


def make_page(page: int, total_pages: int, count: int = 5) -> HistoryPage:
    return HistoryPage(
        history=[
            {
                "_id": f"rec-{page}-{i}",
                "userName": f"player{i}",
                "pointsAwarded": i + 1,
                "claimedAt": datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc),
            }
            for i in range(count)
        ],
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            has_prev=page > 1,
            has_next=page < total_pages,
        ),
    )


@pytest.fixture
def fake_ledger() -> FakeLedger:
    return FakeLedger()


@pytest_asyncio.fixture
async def ledger_client(fake_ledger) -> AsyncGenerator[LedgerClient, None]:
    """Ledger client talking to the in-memory ledger app."""
    client = LedgerClient(
        TEST_BASE_URL,
        transport=ASGITransport(app=create_ledger_app(fake_ledger)),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def dashboard(ledger_client) -> AsyncGenerator[Dashboard, None]:
    """Dashboard wired to the in-memory ledger app."""
    board = Dashboard(ledger_client, notification_ttl=3.0)
    yield board
    await board.aclose()


@pytest.fixture
def mock_client() -> AsyncMock:
    """Ledger client double with every endpoint mocked."""
    client = AsyncMock(spec=LedgerClient)
    client.list_users = AsyncMock(return_value=[])
    client.add_user = AsyncMock()
    client.claim_points = AsyncMock()
    client.list_history = AsyncMock(return_value=HistoryPage())
    return client


@pytest_asyncio.fixture
async def notifier() -> AsyncGenerator[NotificationService, None]:
    service = NotificationService(ttl_seconds=3.0)
    yield service
    service.cancel()


@pytest.fixture
def loading() -> LoadingFlag:
    return LoadingFlag()
