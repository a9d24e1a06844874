"""
Shared Test Fixtures for the Board Client

This module provides common fixtures used across all test modules.
Fixtures include fakes for the gateway, credential store and network
monitor, HTTP response mocks, log capture, and data factories for posts.
"""

import asyncio
import pytest
from unittest.mock import MagicMock
from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import ApiResponse, BasicResponse, Post, ReportResponse


# =============================================================================
# Fake Collaborators
# =============================================================================

class FakeGateway:
    """
    In-memory AuthGateway + PostGateway.

    Each method pops its next scripted outcome from a per-method queue. An
    outcome is an ApiResponse to return, an Exception to raise, or a
    (gate, outcome) tuple: the call waits for the asyncio.Event before
    producing the outcome. When a queue is empty the default outcome for
    that method is used. Every call is recorded in ``calls``.
    """

    def __init__(self):
        self.calls: List[Tuple[str, Any]] = []
        self.scripts: Dict[str, list] = {}
        self.defaults: Dict[str, Any] = {
            "login": ApiResponse(200, "OK", BasicResponse("success", "welcome")),
            "load_posts": ApiResponse(200, "OK", []),
            "load_post_by_id": ApiResponse(404, "Not Found"),
            "save_post": ApiResponse(200, "OK", BasicResponse("success", "Post saved")),
            "edit_post": ApiResponse(200, "OK", BasicResponse("success", "Post updated")),
            "delete_post": ApiResponse(200, "OK", BasicResponse("success", "Post deleted")),
            "like_post": ApiResponse(200, "OK", BasicResponse("success", "ok")),
            "report_post": ApiResponse(200, "OK", ReportResponse(True, "Report received")),
        }

    def script(self, method: str, *outcomes) -> None:
        self.scripts.setdefault(method, []).extend(outcomes)

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def _respond(self, method: str, arg: Any = None):
        self.calls.append((method, arg))
        queue = self.scripts.get(method)
        outcome = queue.pop(0) if queue else self.defaults[method]
        if isinstance(outcome, tuple):
            gate, outcome = outcome
            await gate.wait()
        else:
            # Always yield once so callers really suspend here
            await asyncio.sleep(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def login(self, request):
        return await self._respond("login", request)

    async def load_posts(self):
        return await self._respond("load_posts")

    async def load_post_by_id(self, post_id):
        return await self._respond("load_post_by_id", post_id)

    async def save_post(self, request):
        return await self._respond("save_post", request)

    async def edit_post(self, request):
        return await self._respond("edit_post", request)

    async def delete_post(self, request):
        return await self._respond("delete_post", request)

    async def like_post(self, request):
        return await self._respond("like_post", request)

    async def report_post(self, request):
        return await self._respond("report_post", request)


class FakeCredentialStore:
    """In-memory CredentialStore."""

    def __init__(self, phone_number: Optional[str] = None, password: Optional[str] = None,
                 auto_login: bool = False):
        self.phone_number = phone_number
        self.password = password
        self.auto_login = auto_login
        self.saved: List[Tuple[str, str, bool]] = []
        self.fail_on_save = False

    async def is_auto_login_enabled(self) -> bool:
        await asyncio.sleep(0)
        return self.auto_login

    async def get_saved_credentials(self):
        await asyncio.sleep(0)
        if not self.phone_number or not self.password:
            return None
        return self.phone_number, self.password

    async def save_login_info(self, phone_number, password, auto_login_enabled):
        if self.fail_on_save:
            raise OSError("disk full")
        self.saved.append((phone_number, password, auto_login_enabled))
        self.phone_number = phone_number
        self.password = password
        self.auto_login = auto_login_enabled

    async def clear(self):
        self.phone_number = None
        self.password = None
        self.auto_login = False


class FakeNetworkMonitor:
    """NetworkMonitor with a switchable answer."""

    def __init__(self, available: bool = True):
        self.available = available
        self.checks = 0

    def is_network_available(self) -> bool:
        self.checks += 1
        return self.available


@pytest.fixture
def gateway():
    """A fresh FakeGateway with default successful responses."""
    return FakeGateway()


@pytest.fixture
def credential_store():
    """An empty FakeCredentialStore."""
    return FakeCredentialStore()


@pytest.fixture
def network():
    """A FakeNetworkMonitor that reports the network as available."""
    return FakeNetworkMonitor()


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Attaches a handler to the application root logger so records from
    every module logger are collected.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging
    from utils.logger import get_logger

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = get_logger()
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock requests.Response objects.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'key': 'value'})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Optional[Any] = None,
        content: Optional[bytes] = None,
        reason: str = 'OK',
    ) -> MagicMock:
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.reason = reason
        mock_response.ok = 200 <= status_code < 300

        if content is None:
            content = json.dumps(json_data).encode('utf-8') if json_data is not None else b''
        mock_response.content = content

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        return mock_response

    return _create_response


# =============================================================================
# Data Model Factories
# =============================================================================

@pytest.fixture
def post_factory():
    """
    Factory fixture for creating Post test objects.

    Usage:
        def test_posts(post_factory):
            post = post_factory(id=3, like_count=5, is_liked=True)

    Returns:
        callable: A factory function for creating Post objects.
    """
    def _create_post(
        id: int = 1,
        title: str = 'Test Post',
        content: str = 'Test post content.',
        author_id: int = 1,
        industry: str = 'Bakery',
        like_count: int = 0,
        is_liked: bool = False,
        created_at: Optional[datetime] = None,
    ) -> Post:
        return Post(
            id=id,
            title=title,
            content=content,
            author_id=author_id,
            industry=industry,
            like_count=like_count,
            is_liked=is_liked,
            created_at=created_at or datetime(2024, 1, 15, 10, 0, 0),
        )

    return _create_post


@pytest.fixture
def ok():
    """Shortcut for building successful ApiResponse objects."""
    def _ok(body=None, status_code: int = 200):
        return ApiResponse(status_code, "OK", body)
    return _ok


@pytest.fixture
def failed():
    """Shortcut for building non-2xx ApiResponse objects."""
    def _failed(status_code: int = 500, reason: str = "Internal Server Error"):
        return ApiResponse(status_code, reason)
    return _failed
