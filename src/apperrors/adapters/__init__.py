"""Adapters for error shapes produced by third-party HTTP clients."""

from apperrors.adapters.client_library import (
    ClientErrorInfo,
    ClientResponse,
    get_client_error_info,
    is_client_library_error,
)

__all__ = [
    "ClientErrorInfo",
    "ClientResponse",
    "get_client_error_info",
    "is_client_library_error",
]
