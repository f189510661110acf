"""Turn transport responses into http-kind AppErrors.

from_fetch() is for callers that already hold a failed response (and
maybe its body); from_fetch_response() also reads the body. Neither
goes through the dispatcher: the value is known to be an HTTP failure.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any

from apperrors.adapters.client_library import (
    STATUS_FIELDS,
    STATUS_TEXT_FIELDS,
)
from apperrors.config import get_settings
from apperrors.constants import ErrorKind
from apperrors.models import AppError, HttpResponseLike
from apperrors.policy import (
    ErrorPolicy,
    ErrorPolicyConfig,
    default_retryable,
    define_error_policy,
)
from apperrors.probe import (
    first_int,
    first_string,
    get_field,
    normalize_string,
    safe_invoke,
)

logger = logging.getLogger(__name__)

_BODY_USED_FIELDS = ("bodyUsed", "body_used")


def resolve_retryable(policy: ErrorPolicy, status: int | None) -> bool:
    """Policy verdict, or the 5xx default when it fails or is not a bool."""
    verdict = safe_invoke(lambda: policy.http.retryable(status))
    if isinstance(verdict, bool):
        return verdict
    return default_retryable(status)


def build_http_error(
    policy: ErrorPolicy,
    response: HttpResponseLike,
    data: Any,
    *,
    details: Any = None,
    cause: Any = None,
) -> AppError:
    """Resolve every http field through ``policy`` against ``data``."""
    settings = get_settings()
    status = response.status
    http = policy.http

    message = normalize_string(safe_invoke(lambda: http.message(data, response)))
    code = normalize_string(safe_invoke(lambda: http.code(data, response)))
    request_id = normalize_string(
        safe_invoke(lambda: http.request_id(response.headers))
    )
    suggestion = normalize_string(
        safe_invoke(lambda: http.suggestion(status, data, response))
    )

    return AppError(
        kind=ErrorKind.HTTP,
        message=message or settings.default_message,
        suggestion=suggestion or settings.default_suggestion,
        status=status,
        code=code,
        retryable=resolve_retryable(policy, status),
        request_id=request_id,
        details=details,
        cause=cause,
    )


def to_http_response(response: Any) -> HttpResponseLike:
    """View of a fetch-style object, mapping, or httpx.Response."""
    return HttpResponseLike(
        status=first_int(response, *STATUS_FIELDS),
        status_text=first_string(response, *STATUS_TEXT_FIELDS),
        headers=get_field(response, "headers"),
    )


def from_fetch(
    response: Any,
    body: Any = None,
    policy: ErrorPolicyConfig | ErrorPolicy | None = None,
) -> AppError:
    """Build an http AppError from a failed response and its body."""
    http_response = to_http_response(response)
    return build_http_error(
        define_error_policy(policy),
        http_response,
        body,
        details=body,
        cause=response,
    )


async def _read_text(response: Any) -> str | None:
    reader = get_field(response, "text")
    if callable(reader):
        text = reader()
        if inspect.isawaitable(text):
            text = await text
        return text if isinstance(text, str) else None
    if isinstance(reader, str):
        return reader

    # Unread httpx stream: .text raised, aread() loads the content
    aread = get_field(response, "aread")
    if callable(aread):
        await aread()
        loaded = get_field(response, "text")
        return loaded if isinstance(loaded, str) else None
    return None


async def read_response_body(response: Any) -> Any:
    """Parsed body of ``response``, raw text if not JSON, None if empty.

    Already-consumed bodies and read failures yield None.
    """
    if any(get_field(response, name) is True for name in _BODY_USED_FIELDS):
        return None

    try:
        text = await _read_text(response)
    except Exception:
        logger.debug("Response body read failed", exc_info=True)
        return None

    if text is None or not text.strip():
        return None

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return text


async def from_fetch_response(
    response: Any,
    policy: ErrorPolicyConfig | ErrorPolicy | None = None,
) -> AppError:
    """Read the body of a failed response, then build its AppError."""
    safe_response = response if response is not None else {}
    try:
        body = await read_response_body(safe_response)
    except Exception:
        logger.debug("Response body could not be used", exc_info=True)
        body = None
    return from_fetch(safe_response, body, policy)
