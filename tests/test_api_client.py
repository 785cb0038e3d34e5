"""Tests for the backend API client with a mocked request context."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from rwaprobe.api.client import RwaApiClient
from rwaprobe.exceptions import ApiError, AuthenticationError, IndeterminateOutcomeError
from rwaprobe.outcome.types import PollConfig


def _response(status: int = 200, body: dict | None = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.ok = 200 <= status < 300
    response.json = AsyncMock(return_value=body or {})
    response.text = AsyncMock(return_value=text)
    return response


def _context() -> MagicMock:
    context = MagicMock()
    context.post = AsyncMock()
    context.get = AsyncMock()
    context.patch = AsyncMock()
    context.dispose = AsyncMock()
    return context


@pytest.mark.asyncio
async def test_login_returns_user():
    context = _context()
    context.post.return_value = _response(body={"user": {"id": "u1", "username": "Heath93"}})
    client = RwaApiClient("http://api.test/", context=context)
    user = await client.login("Heath93", "s3cret")
    assert user["id"] == "u1"
    context.post.assert_awaited_once_with(
        "/login", data={"username": "Heath93", "password": "s3cret"}
    )


@pytest.mark.asyncio
async def test_login_rejected_raises_authentication_error():
    context = _context()
    context.post.return_value = _response(status=401, text="Unauthorized")
    client = RwaApiClient("http://api.test", context=context)
    with pytest.raises(AuthenticationError) as info:
        await client.login("Heath93", "wrong")
    assert info.value.status == 401


@pytest.mark.asyncio
async def test_post_login_omits_missing_fields():
    context = _context()
    context.post.return_value = _response(status=400)
    client = RwaApiClient("http://api.test", context=context)
    response = await client.post_login(username="Heath93")
    assert response.status == 400
    context.post.assert_awaited_once_with("/login", data={"username": "Heath93"})


@pytest.mark.asyncio
async def test_transactions_returns_results():
    context = _context()
    context.get.return_value = _response(body={"results": [{"id": "t1"}]})
    client = RwaApiClient("http://api.test", context=context)
    assert await client.transactions() == [{"id": "t1"}]
    context.get.assert_awaited_once_with("/transactions", params=None)


@pytest.mark.asyncio
async def test_server_error_raises_api_error():
    context = _context()
    context.get.return_value = _response(status=500, text="boom")
    client = RwaApiClient("http://api.test", context=context)
    with pytest.raises(ApiError) as info:
        await client.get_user("u1")
    assert not isinstance(info.value, AuthenticationError)
    assert info.value.status == 500


@pytest.mark.asyncio
async def test_unauthenticated_request_raises_authentication_error():
    context = _context()
    context.get.return_value = _response(status=401)
    client = RwaApiClient("http://api.test", context=context)
    with pytest.raises(AuthenticationError):
        await client.search_users("Heath")


@pytest.mark.asyncio
async def test_update_user_returns_status():
    context = _context()
    context.patch.return_value = _response(status=204)
    client = RwaApiClient("http://api.test", context=context)
    assert await client.update_user("u1", firstName="Ted") == 204
    context.patch.assert_awaited_once_with("/users/u1", data={"firstName": "Ted"})


@pytest.mark.asyncio
async def test_wait_for_transaction_polls_until_listed():
    context = _context()
    context.get.side_effect = [
        _response(body={"results": []}),
        _response(body={"results": [{"id": "t9", "description": "other"}]}),
        _response(body={"results": [{"id": "t7", "description": "smoke note"}]}),
    ]
    client = RwaApiClient("http://api.test", context=context)
    txn = await client.wait_for_transaction("smoke note", PollConfig(timeout_ms=2_000, interval_ms=10))
    assert txn["id"] == "t7"
    assert context.get.await_count == 3


@pytest.mark.asyncio
async def test_wait_for_transaction_times_out():
    context = _context()
    context.get.return_value = _response(body={"results": []})
    client = RwaApiClient("http://api.test", context=context)
    with pytest.raises(IndeterminateOutcomeError):
        await client.wait_for_transaction("never", PollConfig(timeout_ms=50, interval_ms=10))


@pytest.mark.asyncio
async def test_injected_context_is_not_disposed():
    context = _context()
    async with RwaApiClient("http://api.test", context=context) as client:
        assert client.context is context
    context.dispose.assert_not_awaited()


@pytest.mark.asyncio
async def test_wait_for_transaction_rejected_session_is_a_failure():
    context = _context()
    context.get.return_value = _response(status=401, text="Unauthorized")
    client = RwaApiClient("http://api.test", context=context)
    with pytest.raises(AuthenticationError):
        await client.wait_for_transaction("smoke note", PollConfig(timeout_ms=2_000, interval_ms=10))
    assert context.get.await_count <= 2


@pytest.mark.asyncio
async def test_wait_for_transaction_retries_past_server_errors():
    context = _context()
    context.get.side_effect = [
        _response(status=503, text="busy"),
        _response(body={"results": [{"id": "t7", "description": "smoke note"}]}),
    ]
    client = RwaApiClient("http://api.test", context=context)
    txn = await client.wait_for_transaction("smoke note", PollConfig(timeout_ms=2_000, interval_ms=10))
    assert txn["id"] == "t7"
