from __future__ import annotations

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from command_hooks.core.common.exceptions import DispatchError
from command_hooks.core.services.webhook_dispatcher import HttpxWebhookDispatcher

HOOK_URL = "https://hooks.example.test/deploy?token=secret"


@pytest.mark.asyncio
async def test_invoke_posts_arguments_as_json(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=HOOK_URL, method="POST", status_code=201, text="queued")
    dispatcher = HttpxWebhookDispatcher()

    try:
        result = await dispatcher.invoke(HOOK_URL, {"dockerId": "42", "env": "prod"})
    finally:
        await dispatcher.aclose()

    assert result.status_code == 201
    assert result.body == "queued"
    assert result.ok is True

    request = httpx_mock.get_request()
    assert request is not None
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"dockerId": "42", "env": "prod"}


@pytest.mark.asyncio
async def test_empty_arguments_post_empty_object(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=HOOK_URL, method="POST")
    dispatcher = HttpxWebhookDispatcher()

    try:
        await dispatcher.invoke(HOOK_URL, {})
    finally:
        await dispatcher.aclose()

    request = httpx_mock.get_request()
    assert request is not None
    assert json.loads(request.content) == {}


@pytest.mark.asyncio
async def test_error_status_is_returned(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=HOOK_URL, method="POST", status_code=503, text="down")
    dispatcher = HttpxWebhookDispatcher()

    try:
        result = await dispatcher.invoke(HOOK_URL, {})
    finally:
        await dispatcher.aclose()

    assert result.status_code == 503
    assert result.ok is False
    assert result.preview(2) == "do"


@pytest.mark.asyncio
async def test_timeout_raises_dispatch_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("timed out"))
    dispatcher = HttpxWebhookDispatcher(timeout=2.5)

    try:
        with pytest.raises(DispatchError, match=r"Webhook timed out after 2\.5s") as exc:
            await dispatcher.invoke(HOOK_URL, {})
    finally:
        await dispatcher.aclose()

    assert exc.value.url == HOOK_URL
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_connection_failure_raises_dispatch_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))
    dispatcher = HttpxWebhookDispatcher()

    try:
        with pytest.raises(DispatchError, match="Could not reach webhook"):
            await dispatcher.invoke(HOOK_URL, {})
    finally:
        await dispatcher.aclose()


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=HOOK_URL, method="POST")
    async with httpx.AsyncClient() as client:
        dispatcher = HttpxWebhookDispatcher(client=client)
        await dispatcher.invoke(HOOK_URL, {"a": "b"})
        await dispatcher.aclose()
        assert client.is_closed is False
