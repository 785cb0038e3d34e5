"""HTTP client for the app's backend API, built on Playwright's request context."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from playwright.async_api import APIRequestContext, APIResponse, async_playwright

from rwaprobe.exceptions import ApiError, AuthenticationError, IndeterminateOutcomeError
from rwaprobe.outcome.poller import poll
from rwaprobe.outcome.types import Outcome, PollConfig, Probe
from rwaprobe.testdata import ENDPOINTS

logger = logging.getLogger(__name__)


class RwaApiClient:
    """Session-holding API client.

    Use as an async context manager, or pass an existing
    :class:`APIRequestContext` (the client then leaves its lifecycle alone).
    """

    def __init__(
        self,
        api_url: str,
        *,
        context: APIRequestContext | None = None,
        timeout_ms: float = 30_000,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout_ms = timeout_ms
        self._context = context
        self._owns_context = context is None
        self._pw: Any = None

    async def __aenter__(self) -> "RwaApiClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def open(self) -> None:
        if self._context is not None:
            return
        self._pw = await async_playwright().start()
        self._context = await self._pw.request.new_context(
            base_url=self._api_url, timeout=self._timeout_ms
        )
        logger.debug("API context opened for %s.", self._api_url)

    async def close(self) -> None:
        if self._owns_context and self._context is not None:
            await self._context.dispose()
            self._context = None
        if self._pw:
            await self._pw.stop()
            self._pw = None

    @property
    def context(self) -> APIRequestContext:
        assert self._context is not None, "API client not opened — call open() first."
        return self._context

    # ---- helpers ----

    @staticmethod
    async def _require_ok(response: APIResponse, method: str, path: str) -> APIResponse:
        if response.ok:
            return response
        body = await response.text()
        exc_cls = AuthenticationError if response.status == 401 else ApiError
        raise exc_cls(method, path, response.status, body)

    # ---- auth ----

    async def post_login(self, username: str | None = None, password: str | None = None, **extra: Any) -> APIResponse:
        """Send a raw login request; missing credentials are omitted from the body."""
        data: dict[str, Any] = dict(extra)
        if username is not None:
            data["username"] = username
        if password is not None:
            data["password"] = password
        return await self.context.post(ENDPOINTS["login"], data=data)

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Log in and return the ``user`` object of the response."""
        response = await self.post_login(username, password)
        if not response.ok:
            raise AuthenticationError("POST", ENDPOINTS["login"], response.status, await response.text())
        body = await response.json()
        user = body.get("user")
        if not isinstance(user, dict):
            raise ApiError("POST", ENDPOINTS["login"], response.status, "response has no 'user' object")
        logger.info("API login as %s.", user.get("username", username))
        return user

    async def logout(self) -> None:
        path = ENDPOINTS["logout"]
        await self._require_ok(await self.context.post(path), "POST", path)

    # ---- resources ----

    async def transactions(self, **params: Any) -> list[dict[str, Any]]:
        path = ENDPOINTS["transactions"]
        response = await self._require_ok(
            await self.context.get(path, params=params or None), "GET", path
        )
        return (await response.json()).get("results", [])

    async def search_users(self, query: str) -> list[dict[str, Any]]:
        path = f"{ENDPOINTS['users']}/search"
        response = await self._require_ok(
            await self.context.get(path, params={"q": query}), "GET", path
        )
        return (await response.json()).get("results", [])

    async def get_user(self, user_id: str) -> dict[str, Any]:
        path = f"{ENDPOINTS['users']}/{user_id}"
        response = await self._require_ok(await self.context.get(path), "GET", path)
        return (await response.json()).get("user", {})

    async def update_user(self, user_id: str, **fields: Any) -> int:
        path = f"{ENDPOINTS['users']}/{user_id}"
        response = await self._require_ok(await self.context.patch(path, data=fields), "PATCH", path)
        return response.status

    # ---- eventual consistency ----

    async def wait_for_transaction(
        self,
        description: str,
        config: PollConfig,
        *,
        cancel: asyncio.Event | None = None,
    ) -> dict[str, Any]:
        """Poll the transaction list until one with *description* shows up.

        A rejected session ends the wait with :class:`AuthenticationError`;
        other API errors count as "not listed yet".
        """
        found: list[dict[str, Any]] = []
        rejected: list[AuthenticationError] = []

        async def listed() -> bool:
            try:
                txns = await self.transactions()
            except AuthenticationError as exc:
                rejected.append(exc)
                return False
            for txn in txns:
                if txn.get("description") == description:
                    found.append(txn)
                    return True
            return False

        async def session_rejected() -> bool:
            return bool(rejected)

        probes = [
            Probe(f"transaction {description!r}", listed),
            Probe("session rejected", session_rejected, Outcome.ERROR),
        ]
        result = await poll(probes, config, cancel=cancel)
        if result.is_error:
            raise rejected[-1]
        if not result.is_success:
            raise IndeterminateOutcomeError(f"find transaction {description!r}", config.timeout_ms)
        return found[-1]
