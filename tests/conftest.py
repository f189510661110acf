"""Shared fixtures: fresh settings per test, no APPERRORS_* leakage."""

import os
from collections.abc import Iterator

import httpx
import pytest

from apperrors.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[None]:
    """Drop APPERRORS_* env vars and the cached Settings around each test."""
    for key in list(os.environ):
        if key.startswith("APPERRORS_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def request_obj() -> httpx.Request:
    return httpx.Request("GET", "https://api.example.com/items")
