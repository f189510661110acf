"""Shape detectors run by the classification dispatcher.

Each detector takes the raw value and returns a match describing what
it recognized, or None. The dispatcher tries them in a fixed order and
stops at the first match.
"""

from __future__ import annotations

import errno
import socket
from dataclasses import dataclass
from typing import Any

import httpx

from apperrors.adapters.client_library import (
    STATUS_FIELDS,
    STATUS_TEXT_FIELDS,
    response_body,
)
from apperrors.constants import (
    ABORT_ERROR_NAMES,
    FETCH_FAILURE_PHRASES,
    NETWORK_ERROR_CODES,
    NETWORK_MESSAGE_MARKER,
    PARSE_ERROR_NAMES,
    TIMEOUT_ERROR_CODES,
    TIMEOUT_MESSAGE_MARKER,
    TYPE_ERROR_NAME,
    VALIDATION_NAME_MARKER,
    ErrorKind,
)
from apperrors.models import HttpResponseLike
from apperrors.probe import (
    first_int,
    first_string,
    get_field,
    get_string,
    has_fields,
    is_array,
    is_int,
    safe_invoke,
)

_BODY_FIELDS = ("data", "body", "details")


# ── Native signals ───────────────────────────────────────


@dataclass(frozen=True)
class ErrorSignals:
    """Identifying fields an error value exposes."""

    name: str | None = None
    message: str | None = None
    code: str | None = None


def _errno_symbol(error: BaseException) -> str | None:
    number = getattr(error, "errno", None)
    if not is_int(number):
        return None
    return errno.errorcode.get(number)


def get_error_signals(error: Any) -> ErrorSignals:
    """Read name/message/code from a mapping, object, or exception.

    Exceptions are named by their class; their message falls back to
    ``str(exc)`` and their code to the errno symbol of an OSError.
    """
    if not has_fields(error):
        return ErrorSignals()

    if isinstance(error, BaseException):
        name: str | None = type(error).__name__
    else:
        name = get_string(get_field(error, "name"))

    message = get_string(get_field(error, "message"))
    if message is None and isinstance(error, BaseException):
        message = safe_invoke(lambda: str(error))

    code = get_string(get_field(error, "code"))
    if code is None and isinstance(error, OSError):
        code = _errno_symbol(error)

    return ErrorSignals(name=name, message=message, code=code)


def is_timeout_signal(error: Any, signals: ErrorSignals) -> bool:
    if isinstance(error, TimeoutError):
        return True
    if signals.name in ABORT_ERROR_NAMES:
        return True
    if signals.code is not None and signals.code in TIMEOUT_ERROR_CODES:
        return True
    lowered = (signals.message or "").lower()
    return TIMEOUT_MESSAGE_MARKER in lowered


def is_network_signal(error: Any, signals: ErrorSignals) -> bool:
    if isinstance(error, (ConnectionError, socket.gaierror)):
        return True
    lowered = (signals.message or "").lower()
    if signals.name == TYPE_ERROR_NAME and any(
        phrase in lowered for phrase in FETCH_FAILURE_PHRASES
    ):
        return True
    if signals.code is not None and signals.code in NETWORK_ERROR_CODES:
        return True
    return NETWORK_MESSAGE_MARKER in lowered


def is_parse_signal(signals: ErrorSignals) -> bool:
    return signals.name in PARSE_ERROR_NAMES


def is_validation_signal(error: Any, signals: ErrorSignals) -> bool:
    if signals.name and VALIDATION_NAME_MARKER in signals.name.lower():
        return True
    return is_array(get_field(error, "issues")) or is_array(
        get_field(error, "errors")
    )


def detect_native_kind(error: Any) -> ErrorKind | None:
    """Kind implied by native exception signals, in precedence order."""
    signals = get_error_signals(error)
    if is_timeout_signal(error, signals):
        return ErrorKind.TIMEOUT
    if is_network_signal(error, signals):
        return ErrorKind.NETWORK
    if is_parse_signal(signals):
        return ErrorKind.PARSE
    if is_validation_signal(error, signals):
        return ErrorKind.VALIDATION
    return None


# ── Status-bearing objects ───────────────────────────────


@dataclass(frozen=True)
class StatusMatch:
    """An object carrying an HTTP failure status."""

    status: int
    response: HttpResponseLike
    details: Any
    # What the message/code extractors search
    data: Any


def detect_status_object(error: Any) -> StatusMatch | None:
    """Match values exposing an integer status of 400 or more.

    Details come from ``data``, ``body`` or ``details``. Without any of
    them (or an httpx response body) the object itself is searched for a
    message and code.
    """
    if not has_fields(error):
        return None
    status = first_int(error, *STATUS_FIELDS)
    if status is None or status < 400:
        return None

    response = HttpResponseLike(
        status=status,
        status_text=first_string(error, *STATUS_TEXT_FIELDS),
        headers=get_field(error, "headers"),
    )
    details = None
    for name in _BODY_FIELDS:
        details = get_field(error, name)
        if details is not None:
            break
    if details is None and isinstance(error, httpx.Response):
        details = response_body(error)

    return StatusMatch(
        status=status,
        response=response,
        details=details,
        data=details if details is not None else error,
    )
