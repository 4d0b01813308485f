"""
Ledger Client

Async HTTP client for the points-ledger REST API. Every endpoint answers with
a ``{success, data, message}`` envelope; anything else (transport failure,
timeout, non-2xx status, ``success: false``, malformed data) is raised as a
LedgerClientError carrying the server's message when one was sent.
"""

import logging
import time
import uuid
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from claimboard.schemas import (
    AddUserRequest,
    ApiEnvelope,
    ClaimRequest,
    ClaimResult,
    HistoryPage,
    User,
)

logger = logging.getLogger(__name__)

_user_list = TypeAdapter(list[User])


class LedgerClientError(Exception):
    """Base exception for ledger client errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message


class LedgerTransportError(LedgerClientError):
    """Connection failure or timeout before a response arrived."""
    pass


class LedgerResponseError(LedgerClientError):
    """Non-2xx status, ``success: false`` or an unreadable body."""
    pass


class LedgerClient:
    """
    Client for the points-ledger API.

    Example:
        async with LedgerClient("http://localhost:4000/api") as client:
            users = await client.list_users()
            result, message = await client.claim_points(users[0].id)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        page_size: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the ledger client.

        Args:
            base_url: API base URL, including the ``/api`` prefix
            timeout: Connect/response timeout in seconds
            page_size: Number of history records requested per page
            transport: Optional httpx transport (used to mount an app in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs) -> ApiEnvelope:
        """Make an API request and unwrap the response envelope."""
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        logger.info(f"[{request_id}] --> {method} {endpoint}")

        try:
            response = await self._http.request(method, endpoint, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"[{request_id}] <-- TIMEOUT: {e!r}")
            raise LedgerTransportError(f"Request timed out: {method} {endpoint}") from e
        except httpx.RequestError as e:
            logger.error(f"[{request_id}] <-- ERROR: {type(e).__name__}: {e}")
            raise LedgerTransportError(f"Request failed: {e}") from e

        process_time = (time.time() - start_time) * 1000
        logger.info(f"[{request_id}] <-- {response.status_code} ({process_time:.2f}ms)")

        body = self._decode(response)

        if response.is_error:
            server_message = body.get("message") if isinstance(body, dict) else None
            raise LedgerResponseError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                server_message=server_message if isinstance(server_message, str) else None,
            )

        try:
            envelope = ApiEnvelope.model_validate(body)
        except ValidationError as e:
            raise LedgerResponseError(
                "Malformed response envelope", status_code=response.status_code
            ) from e

        if not envelope.success:
            raise LedgerResponseError(
                "Request was not successful",
                status_code=response.status_code,
                server_message=envelope.message,
            )

        return envelope

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON body, tolerating empty or non-JSON error bodies."""
        try:
            return response.json()
        except ValueError:
            if response.is_error:
                return None
            raise LedgerResponseError(
                "Response body is not JSON", status_code=response.status_code
            )

    @staticmethod
    def _parse(envelope: ApiEnvelope, adapter: Any) -> Any:
        try:
            return adapter(envelope.data)
        except ValidationError as e:
            raise LedgerResponseError(f"Malformed response data: {e.error_count()} errors") from e

    async def list_users(self) -> list[User]:
        """Fetch the full roster, ordered by rank."""
        envelope = await self._request("GET", "/users")
        return self._parse(envelope, _user_list.validate_python)

    async def add_user(self, name: str) -> tuple[list[User], Optional[str]]:
        """
        Create a user.

        Returns:
            Tuple of (updated roster, server message)
        """
        payload = AddUserRequest(name=name)
        envelope = await self._request("POST", "/users", json=payload.model_dump())
        return self._parse(envelope, _user_list.validate_python), envelope.message

    async def claim_points(self, user_id: str) -> tuple[ClaimResult, Optional[str]]:
        """
        Claim a points award for a user.

        Returns:
            Tuple of (claim result holding the updated roster, server message)
        """
        payload = ClaimRequest(user_id=user_id)
        envelope = await self._request(
            "POST", "/claim-points", json=payload.model_dump(by_alias=True)
        )
        return self._parse(envelope, ClaimResult.model_validate), envelope.message

    async def list_history(self, page: int) -> HistoryPage:
        """Fetch one page of claim history, newest first."""
        envelope = await self._request(
            "GET",
            "/history",
            params={"page": page, "limit": self.page_size},
        )
        return self._parse(envelope, HistoryPage.model_validate)
