"""Classify heterogeneous errors into one uniform AppError record."""

from apperrors.classify import to_app_error
from apperrors.constants import ErrorKind
from apperrors.helpers import attempt, error_key, is_retryable
from apperrors.models import (
    AppError,
    AttemptErr,
    AttemptOk,
    AttemptResult,
    HttpResponseLike,
    is_app_error,
)
from apperrors.policy import (
    CodeExtractor,
    ErrorPolicy,
    ErrorPolicyConfig,
    HttpPolicy,
    HttpPolicyOverrides,
    MessageExtractor,
    RequestIdExtractor,
    RetryablePredicate,
    SuggestionExtractor,
    define_error_policy,
    merge_policies,
)
from apperrors.responses import from_fetch, from_fetch_response

__all__ = [
    "AppError",
    "AttemptErr",
    "AttemptOk",
    "AttemptResult",
    "CodeExtractor",
    "ErrorKind",
    "ErrorPolicy",
    "ErrorPolicyConfig",
    "HttpPolicy",
    "HttpPolicyOverrides",
    "HttpResponseLike",
    "MessageExtractor",
    "RequestIdExtractor",
    "RetryablePredicate",
    "SuggestionExtractor",
    "attempt",
    "define_error_policy",
    "error_key",
    "from_fetch",
    "from_fetch_response",
    "is_app_error",
    "is_retryable",
    "merge_policies",
    "to_app_error",
]
