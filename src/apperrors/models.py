"""Normalized error record, response view, and attempt results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from apperrors.config import get_settings
from apperrors.constants import ERROR_KINDS, ErrorKind
from apperrors.probe import get_field, get_string


def _default_suggestion() -> str:
    return get_settings().default_suggestion


class AppError(BaseModel):
    """Uniform representation of a classified failure.

    ``kind``, ``message`` and ``suggestion`` are always present. Every
    other field is optional and None when absent. ``cause`` holds the
    original error or response and is only ever carried, never read.

    ``model_dump(by_alias=True)`` yields camelCase keys (``requestId``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    kind: ErrorKind
    message: str
    suggestion: str = Field(default_factory=_default_suggestion)
    status: int | None = None
    code: str | None = None
    retryable: bool | None = None
    request_id: str | None = None
    details: Any = None
    cause: Any = None


def is_app_error(value: Any) -> bool:
    """True when ``value`` has the minimal normalized shape.

    Any mapping or object whose ``kind`` is a known kind string and
    whose ``message`` is a string counts, not only AppError instances.
    """
    if isinstance(value, AppError):
        return True
    kind = get_string(get_field(value, "kind"))
    if kind is None or kind not in ERROR_KINDS:
        return False
    return isinstance(get_field(value, "message"), str)


@dataclass(frozen=True)
class HttpResponseLike:
    """Read-only view of a transport response handed to policy extractors."""

    status: int | None = None
    status_text: str | None = None
    headers: Any = None


@dataclass(frozen=True)
class AttemptOk[T]:
    data: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class AttemptErr:
    error: AppError
    ok: Literal[False] = False


type AttemptResult[T] = AttemptOk[T] | AttemptErr
