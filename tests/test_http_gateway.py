"""
Tests for the HTTP Gateway

Tests cover request construction, response wrapping for success, failure
and empty bodies, payload parsing and transport error handling.
"""

import pytest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone
import requests
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import (
    BasicResponse, Post, ReportResponse,
    LoginRequest, PostRequest, EditPostRequest, DeleteRequest, LikePostRequest, ReportRequest,
)
from services.http_gateway import HttpBoardGateway
from services.network import RequestsNetworkMonitor
from utils.exceptions import GatewayError


POST_JSON = {
    "id": 3,
    "title": "Morning bread",
    "content": "Fresh at 7",
    "user_id": 11,
    "industry": "Bakery",
    "like_count": 4,
    "is_liked": True,
    "created_at": "2024-01-15T10:00:00Z",
}


@pytest.fixture
def session():
    mock_session = MagicMock()
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def gateway(session):
    return HttpBoardGateway(base_url="http://api.test/", timeout=5, session=session)


# =============================================================================
# Request Tests
# =============================================================================

class TestRequests:
    """Tests for how requests are built."""

    @pytest.mark.asyncio
    async def test_login_posts_credentials(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(json_data={"status": "success", "message": "hi"})

        response = await gateway.login(LoginRequest("0101234", "pw"))

        session.request.assert_called_once_with(
            "POST", "http://api.test/login",
            json={"phone_number": "0101234", "password": "pw"}, timeout=5,
        )
        assert response.is_successful
        assert response.body == BasicResponse("success", "hi")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call, method, url", [
        (lambda g: g.save_post(PostRequest("t", "c", 1, "Cafe")), "POST", "http://api.test/posts"),
        (lambda g: g.edit_post(EditPostRequest(5, "t", "c")), "PUT", "http://api.test/posts/5"),
        (lambda g: g.delete_post(DeleteRequest(5)), "DELETE", "http://api.test/posts/5"),
        (lambda g: g.like_post(LikePostRequest(5, 2)), "POST", "http://api.test/posts/5/like"),
    ])
    async def test_write_endpoints(self, gateway, session, mock_http_response, call, method, url):
        session.request.return_value = mock_http_response(json_data={"status": "success", "message": "done"})

        response = await call(gateway)

        args, kwargs = session.request.call_args
        assert args == (method, url)
        assert kwargs["timeout"] == 5
        assert response.body.message == "done"

    def test_accepts_json(self, gateway, session):
        assert session.headers["Accept"] == "application/json"


# =============================================================================
# Response Tests
# =============================================================================

class TestResponses:
    """Tests for response wrapping and parsing."""

    @pytest.mark.asyncio
    async def test_load_posts_parses_list(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(json_data={"data": [POST_JSON]})

        response = await gateway.load_posts()

        assert response.body == [Post(
            id=3, title="Morning bread", content="Fresh at 7", author_id=11, industry="Bakery",
            like_count=4, is_liked=True, created_at=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        )]

    @pytest.mark.asyncio
    async def test_load_post_by_id(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(json_data={"data": POST_JSON})

        response = await gateway.load_post_by_id(3)

        assert session.request.call_args[0] == ("GET", "http://api.test/posts/3")
        assert response.body.id == 3

    @pytest.mark.asyncio
    async def test_non_2xx_is_returned_not_raised(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(status_code=503, reason="Service Unavailable",
                                                          json_data={"error": "down"})

        response = await gateway.load_posts()

        assert response.is_successful is False
        assert response.status_code == 503
        assert response.reason == "Service Unavailable"
        assert response.body is None

    @pytest.mark.asyncio
    async def test_empty_body(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(status_code=200, content=b"")

        response = await gateway.report_post(ReportRequest(1, 2, "spam"))

        assert response.is_successful
        assert response.body is None

    @pytest.mark.asyncio
    async def test_report_payload(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(json_data={"success": False, "error": "duplicate"})

        response = await gateway.report_post(ReportRequest(1, 2, "spam"))

        assert session.request.call_args[0] == ("POST", "http://api.test/posts/1/report")
        assert response.body == ReportResponse(False, None, "duplicate")

    @pytest.mark.asyncio
    async def test_malformed_json_raises(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(content=b"<html>oops</html>")

        with pytest.raises(GatewayError):
            await gateway.load_posts()

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises(self, gateway, session, mock_http_response):
        session.request.return_value = mock_http_response(json_data={"items": []})

        with pytest.raises(GatewayError):
            await gateway.load_posts()

    @pytest.mark.asyncio
    async def test_transport_error_raises_gateway_error(self, gateway, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(GatewayError):
            await gateway.load_posts()


# =============================================================================
# Network Monitor Tests
# =============================================================================

class TestNetworkMonitor:
    """Tests for RequestsNetworkMonitor."""

    def test_reachable_host(self):
        with patch('services.network.requests.head') as mock_head:
            mock_head.return_value = MagicMock(status_code=404)
            monitor = RequestsNetworkMonitor("http://api.test", timeout=1)

            assert monitor.is_network_available() is True
            mock_head.assert_called_once_with("http://api.test", timeout=1, allow_redirects=False)

    def test_unreachable_host(self):
        with patch('services.network.requests.head', side_effect=requests.Timeout("slow")):
            monitor = RequestsNetworkMonitor("http://api.test", timeout=1)

            assert monitor.is_network_available() is False
