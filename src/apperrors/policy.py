"""Pluggable extraction policy for HTTP failures.

A policy bundles five functions that turn a response body and headers
into message, code, request id, retry eligibility, and suggestion.
Callers layer partial overrides on the built-in defaults with
define_error_policy(); later overrides win per field.

Usage::

    policy = define_error_policy(
        {"http": {"message": lambda data, response: data.get("msg")}},
        {"http": {"retryable": lambda status: status in (429, 503)}},
    )
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any, TypedDict

from apperrors.config import get_settings
from apperrors.constants import HTTP_SUGGESTIONS
from apperrors.models import HttpResponseLike
from apperrors.probe import (
    get_field,
    has_fields,
    is_array,
    is_int,
    normalize_string,
    safe_invoke,
)

# ── Extractor signatures ─────────────────────────────────

type MessageExtractor = Callable[[Any, HttpResponseLike | None], str | None]
type CodeExtractor = Callable[[Any, HttpResponseLike | None], str | None]
type RequestIdExtractor = Callable[[Any], str | None]
type RetryablePredicate = Callable[[int | None], bool]
type SuggestionExtractor = Callable[
    [int | None, Any, HttpResponseLike | None], str | None
]


class HttpPolicyOverrides(TypedDict, total=False):
    message: MessageExtractor
    code: CodeExtractor
    request_id: RequestIdExtractor
    retryable: RetryablePredicate
    suggestion: SuggestionExtractor


class ErrorPolicyConfig(TypedDict, total=False):
    http: HttpPolicyOverrides


@dataclass(frozen=True)
class HttpPolicy:
    message: MessageExtractor
    code: CodeExtractor
    request_id: RequestIdExtractor
    retryable: RetryablePredicate
    suggestion: SuggestionExtractor


@dataclass(frozen=True)
class ErrorPolicy:
    """Fully resolved policy. Build with define_error_policy()."""

    http: HttpPolicy


# ── Header lookup ────────────────────────────────────────


def _header_text(value: Any) -> str | None:
    if is_int(value) or isinstance(value, float):
        return str(value)
    return normalize_string(value)


def get_header_value(headers: Any, name: str) -> str | None:
    """Case-insensitive header read.

    Tries a ``get(name)`` accessor with the given then lower-cased
    name, then scans mapping keys. List values use their first element.
    """
    if headers is None:
        return None
    lower_name = name.lower()

    getter = safe_invoke(lambda: getattr(headers, "get", None))
    if callable(getter):
        value = safe_invoke(lambda: getter(name))
        if value is None:
            value = safe_invoke(lambda: getter(lower_name))
        found = normalize_string(value)
        if found:
            return found

    if isinstance(headers, Mapping):
        keys = safe_invoke(lambda: list(headers.keys())) or []
        for key in keys:
            if not isinstance(key, str) or key.lower() != lower_name:
                continue
            raw = get_field(headers, key)
            if is_array(raw):
                raw = raw[0] if raw else None
            found = normalize_string(_header_text(raw))
            if found:
                return found

    return None


# ── Structured body search ───────────────────────────────

_MESSAGE_KEYS = ("message", "error", "detail", "title", "description")
_NESTED_MESSAGE_KEYS = ("message", "detail")
_CODE_KEYS = ("code", "errorCode", "error_code")
_NESTED_CODE_KEYS = ("code", "errorCode")


def _first_message(items: Any) -> str | None:
    for item in items:
        found = extract_message(item)
        if found:
            return found
    return None


def extract_message(data: Any) -> str | None:
    """Depth-first search of a body for a human-readable message."""
    direct = normalize_string(data)
    if direct:
        return direct
    if is_array(data):
        return _first_message(data)
    if not has_fields(data):
        return None

    for key in _MESSAGE_KEYS:
        found = normalize_string(get_field(data, key))
        if found:
            return found

    error_value = get_field(data, "error")
    if has_fields(error_value) and not is_array(error_value):
        for key in _NESTED_MESSAGE_KEYS:
            found = normalize_string(get_field(error_value, key))
            if found:
                return found

    errors_value = get_field(data, "errors")
    if is_array(errors_value):
        found = _first_message(errors_value)
        if found:
            return found
    elif isinstance(errors_value, Mapping):
        values = safe_invoke(lambda: list(errors_value.values())) or []
        for field_value in values:
            if is_array(field_value):
                found = _first_message(field_value)
            else:
                found = normalize_string(field_value)
            if found:
                return found

    return None


def extract_code(data: Any) -> str | None:
    """Search a body for a machine-readable error code."""
    if is_array(data):
        for item in data:
            found = extract_code(item)
            if found:
                return found
        return None
    if not has_fields(data):
        return None

    for key in _CODE_KEYS:
        found = normalize_string(get_field(data, key))
        if found:
            return found

    error_value = get_field(data, "error")
    if has_fields(error_value) and not is_array(error_value):
        for key in _NESTED_CODE_KEYS:
            found = normalize_string(get_field(error_value, key))
            if found:
                return found

    return None


# ── Built-in defaults ────────────────────────────────────


def default_message(
    data: Any, response: HttpResponseLike | None = None
) -> str | None:
    found = extract_message(data)
    if found:
        return found
    return normalize_string(get_field(response, "status_text"))


def default_code(
    data: Any, response: HttpResponseLike | None = None
) -> str | None:
    return extract_code(data)


def default_request_id(headers: Any = None) -> str | None:
    for header in get_settings().request_id_headers:
        found = get_header_value(headers, header)
        if found:
            return found
    return None


def default_retryable(status: int | None = None) -> bool:
    return is_int(status) and 500 <= status <= 599


def default_suggestion(
    status: int | None = None,
    data: Any = None,
    response: HttpResponseLike | None = None,
) -> str | None:
    if not is_int(status):
        return None
    return HTTP_SUGGESTIONS.get(status)


DEFAULT_HTTP_POLICY = HttpPolicy(
    message=default_message,
    code=default_code,
    request_id=default_request_id,
    retryable=default_retryable,
    suggestion=default_suggestion,
)

_HTTP_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(HttpPolicy))


# ── Merging ──────────────────────────────────────────────


def _http_overrides(config: Any) -> Mapping[str, Any]:
    """The ``http`` field set a single config contributes."""
    if isinstance(config, ErrorPolicy):
        http: Any = config.http
    elif isinstance(config, Mapping):
        http = config.get("http")
    else:
        return {}

    if isinstance(http, HttpPolicy):
        return {name: getattr(http, name) for name in _HTTP_FIELDS}
    if isinstance(http, Mapping):
        return http
    return {}


def _merge_step(
    merged: dict[str, Any], config: Any
) -> dict[str, Any]:
    overrides = _http_overrides(config)
    return merged | {
        name: overrides[name]
        for name in _HTTP_FIELDS
        if callable(overrides.get(name))
    }


def define_error_policy(
    *configs: ErrorPolicyConfig | ErrorPolicy | None,
) -> ErrorPolicy:
    """Layer partial configs over the defaults, rightmost winning per field.

    ``None``, malformed configs, and non-callable field values are
    skipped. Passing a resolved ErrorPolicy reuses all of its fields.
    """
    merged = functools.reduce(_merge_step, configs, {})
    resolved = {
        name: merged.get(name, getattr(DEFAULT_HTTP_POLICY, name))
        for name in _HTTP_FIELDS
    }
    return ErrorPolicy(http=HttpPolicy(**resolved))


merge_policies = define_error_policy
