"""Utilities built on classified errors: dedup keys, retry checks, attempt()."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from apperrors.classify import to_app_error
from apperrors.constants import ERROR_KEY_DELIMITER, ErrorKind
from apperrors.models import AppError, AttemptErr, AttemptOk, AttemptResult
from apperrors.policy import ErrorPolicy, ErrorPolicyConfig
from apperrors.probe import is_int, normalize_string


def _as_app_error(error: Any) -> AppError:
    return error if isinstance(error, AppError) else to_app_error(error)


def error_key(error: Any) -> str:
    """Stable deduplication key: kind|status|code|message, absent parts dropped."""
    normalized = _as_app_error(error)
    parts = [
        normalized.kind.value,
        str(normalized.status) if normalized.status is not None else None,
        normalize_string(normalized.code),
        normalize_string(normalized.message),
    ]
    return ERROR_KEY_DELIMITER.join(part for part in parts if part)


def is_retryable(error: Any) -> bool:
    """Explicit ``retryable``, else True for network and http status >= 500."""
    normalized = _as_app_error(error)
    if isinstance(normalized.retryable, bool):
        return normalized.retryable
    if normalized.kind == ErrorKind.NETWORK:
        return True
    return (
        normalized.kind == ErrorKind.HTTP
        and is_int(normalized.status)
        and normalized.status >= 500
    )


async def attempt[T](
    work: Callable[[], T | Awaitable[T]] | Awaitable[T],
    policy: ErrorPolicyConfig | ErrorPolicy | None = None,
) -> AttemptResult[T]:
    """Run ``work`` and wrap the outcome.

    ``work`` is a zero-argument callable (sync or async) or an
    awaitable. Any Exception it raises comes back as an AttemptErr
    holding the classified AppError; cancellation and other
    BaseExceptions propagate.
    """
    try:
        if inspect.isawaitable(work):
            result = await work
        else:
            result = work()
            if inspect.isawaitable(result):
                result = await result
    except Exception as exc:
        return AttemptErr(error=to_app_error(exc, policy))
    return AttemptOk(data=result)
