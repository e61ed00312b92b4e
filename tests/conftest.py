"""
Shared pytest fixtures for http-service tests.
"""

import logging
from typing import Any, Callable, List, Union
from unittest.mock import MagicMock

import httpx
import pytest

from http_service import HttpService, HttpServiceOptions

BASE_URL = "https://api.example.com/"

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class RecordingTransport:
    """Replays queued replies through httpx.MockTransport and records every request."""

    def __init__(self, *replies: Reply):
        self.replies: List[Reply] = list(replies)
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def queue(self, *replies: Reply) -> None:
        self.replies.extend(replies)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def base_url():
    """Base URL used by test clients."""
    return BASE_URL


@pytest.fixture
def recorder():
    """Empty recording transport; queue replies in the test."""
    return RecordingTransport()


@pytest.fixture
def mock_logger():
    """Logger double capturing debug/warning/error calls."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def make_service(recorder, mock_logger):
    """Factory building an HttpService wired to the recording transport."""

    def _make(get_auth_token=None, **options: Any) -> HttpService:
        options.setdefault("logger", mock_logger)
        return HttpService(
            BASE_URL,
            get_auth_token,
            HttpServiceOptions(transport=recorder.transport, **options),
        )

    return _make
