# wildbook/client.py
"""Async HTTP client for the Wildbook v3 API."""

import logging
import os
from collections.abc import Mapping
from typing import Any, Self
from urllib.parse import quote

import httpx

from wildbook.errors import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    WildbookError,
)
from wildbook.query.builders import terms
from wildbook.query.combinators import Bool, Query
from wildbook.request import SortOrder, with_pagination

logger = logging.getLogger(__name__)

API_LOGIN = "/api/v3/login"
API_LOGOUT = "/api/v3/logout"
API_USER = "/api/v3/user"
API_HOME = "/api/v3/home"
API_SEARCH_ENCOUNTER = "/api/v3/search/encounter"
API_ENCOUNTERS_BASE = "/api/v3/encounters/"
API_SEARCH_INDIVIDUAL = "/api/v3/search/individual"
API_INDIVIDUALS_BASE = "/api/v3/individuals/"

QueryLike = Query | Mapping[str, Any]


class WildbookClient:
    """Session-authenticated client for a Wildbook instance.

    The session cookie set by ``login()`` lives in the underlying
    ``httpx.AsyncClient`` cookie jar and is sent with every later request.

    Example:
        async with WildbookClient("http://localhost:8080") as client:
            await client.login()
            result = await client.search_encounters(sex("female"), size=5)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = base_url or self._load_from_env()
        if not base_url:
            raise ConfigurationError(
                "base_url not provided and WILDBOOK_URL environment variable not set"
            )
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._user_info: dict[str, Any] | None = None

    @staticmethod
    def _load_from_env() -> str | None:
        return os.getenv("WILDBOOK_URL")

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        self._user_info = None

    @property
    def is_authenticated(self) -> bool:
        return self._user_info is not None

    @property
    def user_info(self) -> dict[str, Any] | None:
        return self._user_info

    async def login(self, username: str | None = None, password: str | None = None) -> dict[str, Any]:
        """Authenticate and start a session.

        Args:
            username: Username or email. Defaults to ``WILDBOOK_USERNAME``.
            password: Password. Defaults to ``WILDBOOK_PASSWORD``.

        Returns:
            The user information returned by the server.
        """
        if username is None:
            username = os.getenv("WILDBOOK_USERNAME")
            if not username:
                raise ConfigurationError(
                    "username not provided and WILDBOOK_USERNAME environment variable not set"
                )
        if password is None:
            password = os.getenv("WILDBOOK_PASSWORD")
            if not password:
                raise ConfigurationError(
                    "password not provided and WILDBOOK_PASSWORD environment variable not set"
                )

        data = await self._request("POST", API_LOGIN, json={"username": username, "password": password})
        if not isinstance(data, dict) or data.get("success") is not True:
            error = data.get("error") if isinstance(data, dict) else None
            raise AuthenticationError(f"Login failed: {error or 'Unknown error'}")

        self._user_info = data
        logger.info("Logged in successfully as: %s", data.get("username"))
        return data

    async def logout(self) -> bool:
        """End the session. Local session state is cleared even if the request fails."""
        try:
            await self._request("POST", API_LOGOUT)
        except (httpx.HTTPError, WildbookError) as e:
            logger.warning("Logout request failed but session cleared: %s", e)
            return False
        finally:
            self._clear_session()
        logger.info("Logged out successfully")
        return True

    async def get_current_user(self) -> Any:
        self._check_auth()
        return await self._request("GET", API_USER)

    async def get_user_home(self) -> Any:
        """Dashboard data for the current user (recent encounters, projects, ...)."""
        self._check_auth()
        return await self._request("GET", API_HOME)

    async def search_encounters(
        self,
        query: QueryLike,
        from_: int = 0,
        size: int = 10,
        sort: str | None = None,
        sort_order: SortOrder | None = None,
    ) -> Any:
        """Search encounters.

        Args:
            query: Query tree or raw body; wrapped under ``query`` if needed.
            from_: Pagination offset.
            size: Number of results to return.
            sort: Field to sort by.
            sort_order: "asc" or "desc".
        """
        return await self._search(API_SEARCH_ENCOUNTER, query, from_, size, sort, sort_order)

    async def search_individuals(
        self,
        query: QueryLike,
        from_: int = 0,
        size: int = 10,
        sort: str | None = None,
        sort_order: SortOrder | None = None,
    ) -> Any:
        """Search individuals. Arguments as in ``search_encounters``."""
        return await self._search(API_SEARCH_INDIVIDUAL, query, from_, size, sort, sort_order)

    async def get_encounter(self, encounter_id: str) -> Any:
        self._check_auth()
        return await self._request("GET", API_ENCOUNTERS_BASE + quote(encounter_id, safe=""))

    async def get_individual(self, individual_id: str) -> Any:
        self._check_auth()
        return await self._request("GET", API_INDIVIDUALS_BASE + quote(individual_id, safe=""))

    def filter_current_user(self) -> Bool:
        """Query restricting results to encounters assigned to the logged-in user."""
        self._check_auth()
        username = (self._user_info or {}).get("username")
        return Bool(filter=(terms("assignedUsername", [username]),))

    async def _search(
        self,
        path: str,
        query: QueryLike,
        from_: int,
        size: int,
        sort: str | None,
        sort_order: SortOrder | None,
    ) -> Any:
        self._check_auth()
        request = with_pagination(query, from_=from_, size=size, sort=sort, sort_order=sort_order)
        return await self._request("POST", path, json=request.body, params=request.params)

    def _check_auth(self) -> None:
        if not self.is_authenticated:
            raise NotAuthenticatedError()

    def _clear_session(self) -> None:
        self._user_info = None
        if self._client:
            self._client.cookies.clear()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with client:'")
        logger.debug("Requesting: %s %s params=%s", method, path, kwargs.get("params"))
        response = await self._client.request(method, path, **kwargs)
        logger.debug("Response status: %s", response.status_code)
        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        """Decode a response, raising the matching error for non-success statuses."""
        try:
            data = response.json()
        except ValueError:
            data = {}

        status = response.status_code
        if response.is_success:
            return data

        body = data if isinstance(data, dict) else {}
        if status == 401:
            raise AuthenticationError(
                f"Authentication error: {body.get('error') or 'Authentication failed'}",
                status_code=status,
            )
        if status == 403:
            raise ForbiddenError("Access forbidden", status_code=status)
        if status == 404:
            raise NotFoundError("Resource not found", status_code=status)
        if status == 400:
            messages = [
                (e.get("message") or "") if isinstance(e, dict) else str(e)
                for e in body.get("errors") or []
            ]
            detail = ", ".join(messages) if messages else "Bad request"
            raise BadRequestError(f"Bad request: {detail}", errors=messages)
        raise APIError(f"API error: {body.get('error') or f'HTTP {status}'}", status_code=status)
