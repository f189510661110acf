"""Classification dispatcher: arbitrary error value → AppError.

Detectors run in fixed precedence order; the first match decides the
kind:

1. already normalized (AppError or the minimal kind/message shape)
2. HTTP client library error (httpx, axios-style records)
3. native signals (timeout, network, parse, validation)
4. status-bearing object (``status`` >= 400)
5. unknown

to_app_error() never raises. Probes and policy calls are individually
guarded, and anything that still escapes degrades to the unknown
fallback.
"""

from __future__ import annotations

import logging
from typing import Any

from apperrors.adapters.client_library import get_client_error_info
from apperrors.config import get_settings
from apperrors.constants import (
    DEFAULT_MESSAGE,
    DEFAULT_SUGGESTION,
    HTTP_SUGGESTIONS,
    ErrorKind,
)
from apperrors.detectors import detect_native_kind, detect_status_object
from apperrors.models import AppError, is_app_error
from apperrors.policy import (
    ErrorPolicy,
    ErrorPolicyConfig,
    define_error_policy,
)
from apperrors.probe import (
    first_int,
    get_field,
    get_string,
    is_int,
    normalize_string,
)
from apperrors.responses import build_http_error

logger = logging.getLogger(__name__)

_RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK})


def kind_retryable(kind: ErrorKind, status: int | None = None) -> bool:
    """Retry eligibility implied by kind and status alone."""
    if kind in _RETRYABLE_KINDS:
        return True
    if kind == ErrorKind.HTTP and is_int(status):
        return 500 <= status <= 599
    return False


def _get_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _fallback_suggestion(kind: ErrorKind, status: int | None) -> str:
    if kind == ErrorKind.HTTP and is_int(status):
        suggestion = HTTP_SUGGESTIONS.get(status)
        if suggestion:
            return suggestion
    return get_settings().default_suggestion


def normalize_existing(error: Any) -> AppError:
    """Re-normalize an already classified value without reclassifying it.

    Only message, retryable and suggestion are filled in; every other
    field passes through.
    """
    if isinstance(error, AppError):
        source = error
    else:
        source = AppError(
            kind=ErrorKind(get_string(get_field(error, "kind"))),
            message=get_string(get_field(error, "message")) or "",
            suggestion=get_string(get_field(error, "suggestion")) or "",
            status=first_int(error, "status"),
            code=get_string(get_field(error, "code")),
            retryable=_get_bool(get_field(error, "retryable")),
            request_id=(
                get_string(get_field(error, "request_id"))
                or get_string(get_field(error, "requestId"))
            ),
            details=get_field(error, "details"),
            cause=get_field(error, "cause"),
        )

    retryable = source.retryable
    if not isinstance(retryable, bool):
        retryable = kind_retryable(source.kind, source.status)

    return source.model_copy(
        update={
            "message": (
                normalize_string(source.message)
                or get_settings().default_message
            ),
            "suggestion": (
                normalize_string(source.suggestion)
                or _fallback_suggestion(source.kind, source.status)
            ),
            "retryable": retryable,
        }
    )


def _simple_error(
    kind: ErrorKind, error: Any, *, retryable: bool, details: Any = None
) -> AppError:
    settings = get_settings()
    return AppError(
        kind=kind,
        message=settings.default_message,
        suggestion=settings.default_suggestion,
        retryable=retryable,
        details=details,
        cause=error,
    )


def _classify(error: Any, policy: ErrorPolicy) -> AppError | None:
    if is_app_error(error):
        return normalize_existing(error)

    client_info = get_client_error_info(error)
    if client_info is not None:
        if client_info.response is not None:
            response = client_info.response
            return build_http_error(
                policy,
                response.to_http_response(),
                response.data,
                details=response.data,
                cause=error,
            )
        if client_info.is_timeout:
            return _simple_error(ErrorKind.TIMEOUT, error, retryable=False)
        if client_info.is_network_error:
            return _simple_error(ErrorKind.NETWORK, error, retryable=True)

    native_kind = detect_native_kind(error)
    if native_kind is not None:
        return _simple_error(
            native_kind,
            error,
            retryable=kind_retryable(native_kind),
            details=error if native_kind is ErrorKind.VALIDATION else None,
        )

    status_match = detect_status_object(error)
    if status_match is not None:
        return build_http_error(
            policy,
            status_match.response,
            status_match.data,
            details=status_match.details,
            cause=error,
        )

    return None


def to_app_error(
    error: Any,
    policy: ErrorPolicyConfig | ErrorPolicy | None = None,
) -> AppError:
    """Classify any value into an AppError. Never raises."""
    try:
        classified = _classify(error, define_error_policy(policy))
    except Exception:
        logger.debug(
            "Classification failed, falling back to unknown", exc_info=True
        )
        classified = None

    if classified is not None:
        return classified
    try:
        return _simple_error(ErrorKind.UNKNOWN, error, retryable=False)
    except Exception:
        # Invalid APPERRORS_* settings; fall back to the built-in texts
        logger.warning("Error settings unavailable", exc_info=True)
        return AppError(
            kind=ErrorKind.UNKNOWN,
            message=DEFAULT_MESSAGE,
            suggestion=DEFAULT_SUGGESTION,
            retryable=False,
            cause=error,
        )
