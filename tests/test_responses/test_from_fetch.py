"""Tests for building http errors from responses."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from apperrors.constants import (
    DEFAULT_MESSAGE,
    DEFAULT_SUGGESTION,
    HTTP_SUGGESTIONS,
    ErrorKind,
)
from apperrors.responses import (
    from_fetch,
    from_fetch_response,
    read_response_body,
)


class _FetchResponse:
    """Minimal fetch-style response with an async text() reader."""

    def __init__(
        self,
        status: int,
        text: str | Exception = "",
        *,
        status_text: str = "",
        headers: dict[str, str] | None = None,
        body_used: bool = False,
    ) -> None:
        self.status = status
        self.statusText = status_text
        self.headers = headers or {}
        self.bodyUsed = body_used
        self._text = text
        self.reads = 0

    async def text(self) -> str:
        self.reads += 1
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class _AsyncBody(httpx.AsyncByteStream):
    def __init__(self, payload: bytes) -> None:
        self._payload = payload

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield self._payload


# ── from_fetch ───────────────────────────────────────────


def test_from_fetch_resolves_all_fields() -> None:
    response = {
        "status": 500,
        "statusText": "Internal Server Error",
        "headers": {"x-request-id": "r-1"},
    }
    body = {"message": "db down", "code": "DB"}
    err = from_fetch(response, body)
    assert err.kind == ErrorKind.HTTP
    assert err.status == 500
    assert err.message == "db down"
    assert err.code == "DB"
    assert err.request_id == "r-1"
    assert err.retryable is True
    assert err.suggestion == HTTP_SUGGESTIONS[500]
    assert err.details is body
    assert err.cause is response


def test_from_fetch_without_body_uses_status_text() -> None:
    err = from_fetch({"status": 401, "statusText": "Unauthorized"})
    assert err.message == "Unauthorized"
    assert err.details is None
    assert err.retryable is False
    assert err.suggestion == HTTP_SUGGESTIONS[401]


def test_from_fetch_empty_response() -> None:
    err = from_fetch({})
    assert err.kind == ErrorKind.HTTP
    assert err.status is None
    assert err.message == DEFAULT_MESSAGE
    assert err.suggestion == DEFAULT_SUGGESTION
    assert err.retryable is False


def test_from_fetch_is_always_http() -> None:
    """No dispatcher: a timeout-looking body does not change the kind."""
    err = from_fetch({"status": 504}, {"message": "gateway timeout"})
    assert err.kind == ErrorKind.HTTP
    assert err.message == "gateway timeout"


def test_from_fetch_httpx_response() -> None:
    response = httpx.Response(429, headers={"traceparent": "00-abc-01"})
    err = from_fetch(response)
    assert err.status == 429
    assert err.message == "Too Many Requests"
    assert err.request_id == "00-abc-01"
    assert err.suggestion == HTTP_SUGGESTIONS[429]
    assert err.cause is response


def test_from_fetch_custom_suggestion() -> None:
    policy = {
        "http": {
            "suggestion": lambda status, data, response: (
                f"Retry after {data['retry_after']}s"
            )
        }
    }
    err = from_fetch({"status": 429}, {"retry_after": 30}, policy)
    assert err.suggestion == "Retry after 30s"


def test_from_fetch_unmapped_status_gets_generic_suggestion() -> None:
    assert from_fetch({"status": 418}).suggestion == DEFAULT_SUGGESTION


def test_from_fetch_raising_policy() -> None:
    def _boom(*args: Any) -> Any:
        raise RuntimeError("nope")

    policy = {"http": {"message": _boom, "suggestion": _boom}}
    err = from_fetch({"status": 400}, {"message": "m"}, policy)
    assert err.message == DEFAULT_MESSAGE
    assert err.suggestion == DEFAULT_SUGGESTION


# ── read_response_body ───────────────────────────────────


@pytest.mark.asyncio
async def test_read_json_body() -> None:
    body = await read_response_body(_FetchResponse(400, '{"a": 1}'))
    assert body == {"a": 1}


@pytest.mark.asyncio
async def test_read_non_json_body_verbatim() -> None:
    body = await read_response_body(_FetchResponse(502, " <html>oops "))
    assert body == " <html>oops "


@pytest.mark.asyncio
async def test_read_blank_body_is_absent() -> None:
    assert await read_response_body(_FetchResponse(500, "  \n ")) is None


@pytest.mark.asyncio
async def test_consumed_body_not_read() -> None:
    response = _FetchResponse(500, '{"a": 1}', body_used=True)
    assert await read_response_body(response) is None
    assert response.reads == 0


@pytest.mark.asyncio
async def test_read_failure_is_absent() -> None:
    response = _FetchResponse(500, OSError("stream reset"))
    assert await read_response_body(response) is None


@pytest.mark.asyncio
async def test_sync_text_reader() -> None:
    class SyncResponse:
        status = 400

        def text(self) -> str:
            return '["first"]'

    assert await read_response_body(SyncResponse()) == ["first"]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, {}, object(), 5])
async def test_no_reader(response: Any) -> None:
    assert await read_response_body(response) is None


@pytest.mark.asyncio
async def test_read_unread_httpx_stream() -> None:
    response = httpx.Response(
        500, stream=_AsyncBody(b'{"message": "late body"}')
    )
    assert await read_response_body(response) == {"message": "late body"}


# ── from_fetch_response ──────────────────────────────────


@pytest.mark.asyncio
async def test_from_fetch_response_json() -> None:
    response = _FetchResponse(
        403,
        '{"error": {"message": "forbidden zone", "code": "NO"}}',
        status_text="Forbidden",
        headers={"X-Correlation-Id": "c-7"},
    )
    err = await from_fetch_response(response)
    assert err.kind == ErrorKind.HTTP
    assert err.message == "forbidden zone"
    assert err.code == "NO"
    assert err.request_id == "c-7"
    assert err.suggestion == HTTP_SUGGESTIONS[403]
    assert err.details == {"error": {"message": "forbidden zone", "code": "NO"}}
    assert err.cause is response
    assert response.reads == 1


@pytest.mark.asyncio
async def test_from_fetch_response_text() -> None:
    err = await from_fetch_response(_FetchResponse(500, "plain failure"))
    assert err.message == "plain failure"
    assert err.details == "plain failure"


@pytest.mark.asyncio
async def test_from_fetch_response_blank_body() -> None:
    err = await from_fetch_response(
        _FetchResponse(503, "   ", status_text="Service Unavailable")
    )
    assert err.details is None
    assert err.message == "Service Unavailable"
    assert err.retryable is True


@pytest.mark.asyncio
async def test_from_fetch_response_read_failure() -> None:
    err = await from_fetch_response(
        _FetchResponse(500, RuntimeError("boom"), status_text="Oops")
    )
    assert err.details is None
    assert err.message == "Oops"


@pytest.mark.asyncio
async def test_from_fetch_response_none() -> None:
    err = await from_fetch_response(None)
    assert err.kind == ErrorKind.HTTP
    assert err.message == DEFAULT_MESSAGE


@pytest.mark.asyncio
async def test_from_fetch_response_httpx() -> None:
    response = httpx.Response(422, json={"detail": "name too long"})
    err = await from_fetch_response(response)
    assert err.status == 422
    assert err.message == "name too long"
    assert err.details == {"detail": "name too long"}
    assert err.suggestion == HTTP_SUGGESTIONS[422]


@pytest.mark.asyncio
async def test_from_fetch_response_policy() -> None:
    policy = {"http": {"code": lambda data, response: data.get("kind")}}
    err = await from_fetch_response(
        _FetchResponse(400, '{"kind": "QUOTA"}'), policy
    )
    assert err.code == "QUOTA"


@pytest.mark.asyncio
async def test_deeply_nested_json_falls_back_to_text() -> None:
    text = "[" * 200_000 + "]" * 200_000
    assert await read_response_body(_FetchResponse(500, text)) == text

    err = await from_fetch_response(_FetchResponse(500, text))
    assert err.kind == ErrorKind.HTTP
    assert err.status == 500
    assert err.details == text


@pytest.mark.asyncio
async def test_from_fetch_response_unusable_body_flag() -> None:
    class _ExplodingFlag:
        status = 502
        statusText = "Bad Gateway"

        @property
        def bodyUsed(self) -> bool:
            raise RuntimeError("flag unavailable")

        async def text(self) -> str:
            raise RuntimeError("stream gone")

    err = await from_fetch_response(_ExplodingFlag())
    assert err.kind == ErrorKind.HTTP
    assert err.message == "Bad Gateway"
    assert err.details is None
