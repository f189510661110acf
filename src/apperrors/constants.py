"""Error taxonomy, default texts, and detector signal tables.

ErrorKind is a StrEnum so classified records compare equal to the
plain strings ("http", "timeout", ...) used by JSON payloads.
"""

from __future__ import annotations

from enum import StrEnum

# ── Taxonomy ─────────────────────────────────────────────


class ErrorKind(StrEnum):
    """Closed set of categories a classified error can carry."""

    HTTP = "http"
    NETWORK = "network"
    TIMEOUT = "timeout"
    PARSE = "parse"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


ERROR_KINDS: frozenset[str] = frozenset(kind.value for kind in ErrorKind)

# ── Default texts ────────────────────────────────────────

DEFAULT_MESSAGE = "Something went wrong"
DEFAULT_SUGGESTION = (
    "An unexpected error occurred. Please try again or contact support."
)
ERROR_KEY_DELIMITER = "|"

# Checked in order; first non-empty header wins
REQUEST_ID_HEADERS: tuple[str, ...] = (
    "x-request-id",
    "x-correlation-id",
    "x-trace-id",
    "traceparent",
    "x-amzn-trace-id",
)

HTTP_SUGGESTIONS: dict[int, str] = {
    400: "Please review your request and ensure all fields are correct.",
    401: "Please ensure you have valid credentials and try again.",
    403: "You do not have permission to perform this action.",
    404: (
        "The requested resource could not be found. "
        "Please verify your request."
    ),
    408: "The request took too long. Please try again shortly.",
    409: "A conflict occurred. Please refresh and try again.",
    422: "Some of the provided data is invalid. Please review your input.",
    429: "Too many requests. Please wait a moment and try again.",
    500: (
        "An internal server error occurred. "
        "Please try again later or contact support."
    ),
    502: "The server received an invalid response. Please try again later.",
    503: "The service is temporarily unavailable. Please try again later.",
    504: "The server did not respond in time. Please try again later.",
}

# ── Detector signals ─────────────────────────────────────

# ETIMEDOUT sits in both sets; timeout is always checked first.
TIMEOUT_ERROR_CODES: frozenset[str] = frozenset({
    "ECONNABORTED",
    "ETIMEDOUT",
    "ESOCKETTIMEDOUT",
})

NETWORK_ERROR_CODES: frozenset[str] = frozenset({
    "ERR_NETWORK",
    "ENOTFOUND",
    "ECONNREFUSED",
    "ECONNRESET",
    "EAI_AGAIN",
    "ETIMEDOUT",
    "EHOSTUNREACH",
    "ENETUNREACH",
})

ABORT_ERROR_NAMES: frozenset[str] = frozenset({
    "AbortError",
    "TimeoutError",
    "CancelledError",
})

TYPE_ERROR_NAME = "TypeError"

# Phrases browsers and fetch polyfills put in a TypeError on network loss
FETCH_FAILURE_PHRASES: tuple[str, ...] = (
    "failed to fetch",
    "network request failed",
    "networkerror",
    "load failed",
)

PARSE_ERROR_NAMES: frozenset[str] = frozenset({
    "SyntaxError",
    "JSONDecodeError",
})

TIMEOUT_MESSAGE_MARKER = "timeout"
NETWORK_MESSAGE_MARKER = "network error"
VALIDATION_NAME_MARKER = "validation"
