"""Detection of HTTP-client-library error shapes.

Recognizes errors raised by HTTP client libraries: httpx exceptions and
axios-style records (``isAxiosError`` marker, nested ``response`` with
status/statusText/data/headers, nested ``request``) that arrive from
JSON bridges or JavaScript-origin payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from apperrors.constants import (
    NETWORK_ERROR_CODES,
    NETWORK_MESSAGE_MARKER,
    TIMEOUT_ERROR_CODES,
    TIMEOUT_MESSAGE_MARKER,
)
from apperrors.models import HttpResponseLike
from apperrors.probe import (
    first_int,
    first_string,
    get_field,
    get_string,
    has_fields,
    safe_invoke,
)

STATUS_FIELDS = ("status", "status_code")
STATUS_TEXT_FIELDS = ("statusText", "status_text", "reason_phrase")


@dataclass(frozen=True)
class ClientResponse:
    """Response carried by a client-library error."""

    status: int | None = None
    status_text: str | None = None
    data: Any = None
    headers: Any = None

    def to_http_response(self) -> HttpResponseLike:
        return HttpResponseLike(
            status=self.status,
            status_text=self.status_text,
            headers=self.headers,
        )


@dataclass(frozen=True)
class ClientErrorInfo:
    """What a client-library error reveals about the failure."""

    is_timeout: bool
    is_network_error: bool
    response: ClientResponse | None = None
    code: str | None = None
    message: str | None = None


def response_body(response: Any) -> Any:
    """Body of a nested response: ``data``, else httpx json(), else text."""
    data = get_field(response, "data")
    if data is not None:
        return data
    if not isinstance(response, httpx.Response):
        return None
    parsed = safe_invoke(response.json)
    if parsed is not None:
        return parsed
    text = safe_invoke(lambda: response.text)
    return text if text else None


def get_response_like(value: Any) -> ClientResponse | None:
    if not has_fields(value):
        return None
    return ClientResponse(
        status=first_int(value, *STATUS_FIELDS),
        status_text=first_string(value, *STATUS_TEXT_FIELDS),
        data=response_body(value),
        headers=get_field(value, "headers"),
    )


def _message_of(error: Any) -> str | None:
    message = get_string(get_field(error, "message"))
    if message is None and isinstance(error, BaseException):
        message = safe_invoke(lambda: str(error))
    return message


def get_client_error_info(error: Any) -> ClientErrorInfo | None:
    """Inspect ``error`` for a client-library shape; None if it has none."""
    if not has_fields(error):
        return None

    has_marker = (
        isinstance(error, httpx.HTTPError)
        or get_field(error, "isAxiosError") is True
    )
    response = get_response_like(get_field(error, "response"))
    # httpx raises RuntimeError for an unset request; get_field absorbs it
    request = get_field(error, "request")

    if not (has_marker or response is not None or request is not None):
        return None
    # A response carrying its own status is the failure, not a client error
    if (
        not has_marker
        and response is None
        and first_int(error, *STATUS_FIELDS) is not None
    ):
        return None

    code = get_string(get_field(error, "code"))
    message = _message_of(error)
    lowered = message.lower() if message else ""

    is_timeout = (
        isinstance(error, httpx.TimeoutException)
        or (code is not None and code in TIMEOUT_ERROR_CODES)
        or TIMEOUT_MESSAGE_MARKER in lowered
    )
    is_network_error = response is None and (
        request is not None
        or isinstance(error, httpx.NetworkError)
        or (code is not None and code in NETWORK_ERROR_CODES)
        or NETWORK_MESSAGE_MARKER in lowered
    )

    return ClientErrorInfo(
        is_timeout=is_timeout,
        is_network_error=is_network_error,
        response=response,
        code=code,
        message=message,
    )


def is_client_library_error(error: Any) -> bool:
    return get_client_error_info(error) is not None
