"""
HTTP Gateway Module

This module talks to the board backend over HTTP using requests. It
implements both the AuthGateway and PostGateway protocols. Blocking requests
calls run in a worker thread so the state machines only ever await them.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import requests

from config import settings
from data.models import (
    ApiResponse, BasicResponse, Post, ReportResponse,
    LoginRequest, PostRequest, EditPostRequest, DeleteRequest,
    LikePostRequest, ReportRequest,
)
from utils.exceptions import GatewayError
from utils.logger import get_logger

logger = get_logger(__name__)


class HttpBoardGateway:
    """Gateway for the board REST API."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the gateway.

        Args:
            base_url: API root. Defaults to settings.BOARD_API_BASE_URL.
            timeout: Per-request timeout in seconds. Defaults to settings.REQUEST_TIMEOUT.
            session: Optional pre-configured requests session.
        """
        self.base_url = (base_url or settings.BOARD_API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    def close(self) -> None:
        self.session.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            return self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _decode(response: requests.Response) -> Optional[Any]:
        """Decode a JSON body. An empty body decodes to None."""
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Malformed JSON from server (HTTP {response.status_code})") from e

    async def _call(self, method: str, path: str, parse: Callable[[Any], Any],
                    payload: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        Perform one request and wrap the outcome.

        Only a 2xx body is parsed; error bodies are not part of the contract.

        Raises:
            GatewayError: On transport failure or an unparseable success body.
        """
        response = await asyncio.to_thread(self._send, method, path, payload)
        body = None
        if 200 <= response.status_code < 300:
            raw = self._decode(response)
            if raw is not None:
                try:
                    body = parse(raw)
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    raise GatewayError(f"Unexpected payload from {path}: {e}") from e
        else:
            logger.warning(f"{method} {path} returned HTTP {response.status_code}")
        return ApiResponse(status_code=response.status_code, reason=response.reason or "", body=body)

    # -------------------------------------------------------------------------
    # AuthGateway
    # -------------------------------------------------------------------------

    async def login(self, request: LoginRequest) -> ApiResponse[BasicResponse]:
        return await self._call("POST", "/login", BasicResponse.from_dict, request.to_dict())

    # -------------------------------------------------------------------------
    # PostGateway
    # -------------------------------------------------------------------------

    async def load_posts(self) -> ApiResponse[List[Post]]:
        return await self._call("GET", "/posts", lambda raw: [Post.from_dict(p) for p in raw["data"]])

    async def load_post_by_id(self, post_id: int) -> ApiResponse[Post]:
        return await self._call("GET", f"/posts/{post_id}", lambda raw: Post.from_dict(raw["data"]))

    async def save_post(self, request: PostRequest) -> ApiResponse[BasicResponse]:
        return await self._call("POST", "/posts", BasicResponse.from_dict, request.to_dict())

    async def edit_post(self, request: EditPostRequest) -> ApiResponse[BasicResponse]:
        return await self._call("PUT", f"/posts/{request.post_id}", BasicResponse.from_dict, request.to_dict())

    async def delete_post(self, request: DeleteRequest) -> ApiResponse[BasicResponse]:
        return await self._call("DELETE", f"/posts/{request.post_id}", BasicResponse.from_dict, request.to_dict())

    async def like_post(self, request: LikePostRequest) -> ApiResponse[BasicResponse]:
        return await self._call("POST", f"/posts/{request.post_id}/like", BasicResponse.from_dict, request.to_dict())

    async def report_post(self, request: ReportRequest) -> ApiResponse[ReportResponse]:
        return await self._call("POST", f"/posts/{request.post_id}/report", ReportResponse.from_dict, request.to_dict())
