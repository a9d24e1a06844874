"""
Post Collection Synchronizer

Owns the board's in-memory post list and the selected post, runs the post
CRUD, like and report operations against the injected PostGateway, and
reconciles local state with what the server reports afterwards.

Operations are not serialized against each other: two overlapping calls
that write the same field resolve as last write wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, Tuple

from config import settings
from data.models import (
    ApiResponse, LikeResult, Post,
    PostRequest, EditPostRequest, DeleteRequest, LikePostRequest, ReportRequest,
)
from data.protocols import NetworkMonitor
from services.protocols import PostGateway
from state.observable import MutableState, TaskScope
from utils.exceptions import (
    NetworkUnavailableError, ResponseEmptyError, ScopeClosedError, ServerFailureError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

LikeCallback = Callable[[bool, bool, int], None]


@dataclass(frozen=True)
class PostCollectionState:
    posts: Tuple[Post, ...] = ()
    selected_post: Optional[Post] = None
    status_message: Optional[str] = None
    report_result: Optional[str] = None

    def find(self, post_id: int) -> Optional[Post]:
        for post in self.posts:
            if post.id == post_id:
                return post
        return None


def _raise_for_status(response: ApiResponse) -> None:
    if not response.is_successful:
        raise ServerFailureError(response.reason or f"HTTP {response.status_code}",
                                 status_code=response.status_code)


class PostCollectionSynchronizer:
    """State machine behind the board list and detail screens."""

    def __init__(self, post_gateway: PostGateway, network_monitor: Optional[NetworkMonitor] = None):
        """
        Initialize the synchronizer.

        Args:
            post_gateway: Performs the post operations.
            network_monitor: Optional pre-flight check. Without one every
                operation goes straight to the gateway.
        """
        self.post_gateway = post_gateway
        self.network_monitor = network_monitor
        self._state: MutableState[PostCollectionState] = MutableState(
            PostCollectionState(), name="post collection state"
        )
        self._scope = TaskScope("posts")

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PostCollectionState:
        return self._state.value

    def subscribe(self, callback: Callable[[PostCollectionState], None],
                  emit_current: bool = True) -> Callable[[], None]:
        return self._state.subscribe(callback, emit_current=emit_current)

    def set_status_message(self, message: Optional[str]) -> None:
        self._state.update(status_message=message)

    def clear_status_message(self) -> None:
        self._state.update(status_message=None)

    def clear_report_result(self) -> None:
        self._state.update(report_result=None)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _ensure_network(self) -> None:
        if self.network_monitor is not None and not self.network_monitor.is_network_available():
            raise NetworkUnavailableError("network unavailable")

    async def _run(self, coro):
        """Run an operation inside the synchronizer's scope."""
        try:
            return await self._scope.run(coro)
        except ScopeClosedError:
            logger.debug("Post operation ignored: synchronizer closed")
            return None

    def _last_known_like(self, post_id: int) -> Tuple[bool, int]:
        selected = self.state.selected_post
        post = selected if selected is not None and selected.id == post_id else self.state.find(post_id)
        if post is None:
            return False, 0
        return post.is_liked, post.like_count

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def _load_posts(self) -> None:
        try:
            self._ensure_network()
            response = await self.post_gateway.load_posts()
            _raise_for_status(response)
            if response.body is None:
                logger.warning("Post list response had no body; keeping current posts")
                return
            self._state.update(posts=tuple(response.body))
            logger.info(f"Loaded {len(response.body)} posts")
        except NetworkUnavailableError:
            self.set_status_message(settings.NETWORK_UNAVAILABLE_MESSAGE)
        except ServerFailureError as e:
            logger.warning(f"Loading posts failed: HTTP {e.status_code}")
            self.set_status_message(settings.LOAD_POSTS_FAILED.format(reason=e))
        except Exception as e:
            logger.error(f"Error loading posts: {e!r}")
            self.set_status_message(settings.LOAD_POSTS_ERROR.format(error=e))

    async def load_posts(self) -> None:
        """Replace the post list with the server's full list."""
        await self._run(self._load_posts())

    async def _load_post_by_id(self, post_id: int) -> Optional[Post]:
        try:
            self._ensure_network()
            response = await self.post_gateway.load_post_by_id(post_id)
            _raise_for_status(response)
            if response.body is None:
                logger.warning(f"Post {post_id} response had no body")
                return None
            self._state.update(selected_post=response.body)
            return response.body
        except NetworkUnavailableError:
            self.set_status_message(settings.NETWORK_UNAVAILABLE_MESSAGE)
        except ServerFailureError as e:
            logger.warning(f"Loading post {post_id} failed: HTTP {e.status_code}")
            self.set_status_message(settings.LOAD_POST_FAILED.format(reason=e))
        except Exception as e:
            logger.error(f"Error loading post {post_id}: {e!r}")
            self.set_status_message(settings.LOAD_POST_ERROR.format(error=e))
        return None

    async def load_post_by_id(self, post_id: int) -> Optional[Post]:
        """
        Fetch one post into selected_post.

        Returns:
            The fetched post, or None if the fetch failed.
        """
        return await self._run(self._load_post_by_id(post_id))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def _write(self, call: Callable[[], Awaitable[ApiResponse]], failed_template: str, label: str) -> bool:
        """
        Perform a write and publish the server's message.

        Returns:
            bool: True if the server accepted the write.
        """
        try:
            self._ensure_network()
            response = await call()
            _raise_for_status(response)
            self.set_status_message(response.body.message if response.body else None)
            logger.info(f"{label} succeeded")
            return True
        except NetworkUnavailableError:
            self.set_status_message(settings.NETWORK_UNAVAILABLE_MESSAGE)
        except ServerFailureError as e:
            logger.warning(f"{label} failed: HTTP {e.status_code}")
            self.set_status_message(failed_template.format(reason=e))
        except Exception as e:
            logger.error(f"{label} raised: {e!r}")
            self.set_status_message(settings.OPERATION_ERROR.format(error=e))
        return False

    async def _save_post(self, request: PostRequest) -> bool:
        if not await self._write(lambda: self.post_gateway.save_post(request), settings.SAVE_POST_FAILED, "Save post"):
            return False
        await self._load_posts()
        return True

    async def save_post(self, title: str, content: str, user_id: int, industry: str) -> bool:
        """
        Create a post, then reload the list. Nothing is inserted locally.

        Returns:
            bool: True if the server accepted the post.
        """
        return bool(await self._run(self._save_post(PostRequest(title, content, user_id, industry))))

    async def _edit_post(self, request: EditPostRequest) -> bool:
        if not await self._write(lambda: self.post_gateway.edit_post(request), settings.EDIT_POST_FAILED, "Edit post"):
            return False
        await self._load_post_by_id(request.post_id)
        return True

    async def edit_post(self, post_id: int, title: str, content: str) -> bool:
        """Update a post, then refresh it as the selected post."""
        return bool(await self._run(self._edit_post(EditPostRequest(post_id, title, content))))

    async def _delete_post(self, request: DeleteRequest) -> bool:
        if not await self._write(lambda: self.post_gateway.delete_post(request), settings.DELETE_POST_FAILED, "Delete post"):
            return False
        await self._load_posts()
        return True

    async def delete_post(self, post_id: int) -> bool:
        """Delete a post, then reload the list."""
        return bool(await self._run(self._delete_post(DeleteRequest(post_id))))

    # -------------------------------------------------------------------------
    # Likes
    # -------------------------------------------------------------------------

    def _adjust_like_count(self, post_id: int, delta: int) -> None:
        posts = tuple(
            replace(post, like_count=max(0, post.like_count + delta))
            if post.id == post_id else post
            for post in self.state.posts
        )
        self._state.update(posts=posts)

    def increment_like(self, post_id: int) -> None:
        """Optimistically bump a post's like count. Local only; no server call."""
        self._adjust_like_count(post_id, 1)

    def decrement_like(self, post_id: int) -> None:
        """Optimistically lower a post's like count, never below zero. Local only."""
        self._adjust_like_count(post_id, -1)

    async def _toggle_like(self, request: LikePostRequest) -> LikeResult:
        is_liked, like_count = self._last_known_like(request.post_id)
        try:
            self._ensure_network()
            response = await self.post_gateway.like_post(request)
            _raise_for_status(response)
        except Exception as e:
            logger.warning(f"Like toggle on post {request.post_id} failed: {e!r}")
            return LikeResult(False, is_liked, like_count)

        refreshed, _ = await asyncio.gather(
            self._load_post_by_id(request.post_id),
            self._load_posts(),
        )
        if refreshed is None:
            refreshed = self.state.find(request.post_id)
        if refreshed is None:
            return LikeResult(True, is_liked, like_count)
        return LikeResult(True, refreshed.is_liked, refreshed.like_count)

    async def toggle_like(self, post_id: int, user_id: int,
                          on_result: Optional[LikeCallback] = None) -> Optional[LikeResult]:
        """
        Toggle the user's like and reconcile with the server.

        On success the post and the list are re-fetched before the result is
        produced. On failure the result carries the last known like state.

        Args:
            post_id: Post to like or unlike.
            user_id: The acting user.
            on_result: Optional callback receiving (succeeded, is_liked, like_count).

        Returns:
            LikeResult, or None if the synchronizer was closed mid-flight.
        """
        result = await self._run(self._toggle_like(LikePostRequest(post_id=post_id, user_id=user_id)))
        if result is not None and on_result is not None:
            on_result(*result)
        return result

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    async def _report_post(self, request: ReportRequest) -> None:
        try:
            self._ensure_network()
            response = await self.post_gateway.report_post(request)
            _raise_for_status(response)
            report = response.body
            if report is None:
                raise ResponseEmptyError("report response was empty")
            if report.success:
                result = report.message or settings.REPORT_ACCEPTED
            else:
                result = report.error or settings.REPORT_REJECTED
            logger.info(f"Report on post {request.post_id}: success={report.success}")
        except NetworkUnavailableError:
            result = settings.NETWORK_UNAVAILABLE_MESSAGE
        except ResponseEmptyError:
            logger.warning(f"Empty response reporting post {request.post_id}")
            result = settings.REPORT_EMPTY_RESPONSE
        except ServerFailureError as e:
            logger.warning(f"Reporting post {request.post_id} failed: HTTP {e.status_code}")
            result = settings.REPORT_SERVER_ERROR.format(code=e.status_code)
        except Exception as e:
            logger.error(f"Error reporting post {request.post_id}: {e!r}")
            result = settings.REPORT_ERROR.format(error=e)
        self._state.update(report_result=result)

    async def report_post(self, post_id: int, user_id: int, reason: str) -> None:
        """Report a post; the outcome is published as report_result."""
        await self._run(self._report_post(ReportRequest(post_id, user_id, reason)))

    async def close(self) -> None:
        """Tear down: stop publishing and cancel in-flight work."""
        self._state.close()
        await self._scope.close()
