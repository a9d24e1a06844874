"""
Data Models for the Board Client

This module contains the data classes exchanged with the backend: the post
record itself, the per-call request envelopes, and the response wrappers the
gateway hands back to the state machines.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Generic, NamedTuple, Optional, TypeVar

T = TypeVar("T")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the server, tolerating a trailing Z."""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


@dataclass(frozen=True)
class Post:
    """A board post as the server last reported it."""
    id: int
    title: str
    content: str
    author_id: int
    industry: str
    like_count: int = 0
    is_liked: bool = False                 # Like state for the current user
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.like_count < 0:
            object.__setattr__(self, "like_count", 0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        """
        Build a Post from a server payload.

        Args:
            data: Decoded JSON object for one post.

        Returns:
            Post: The parsed post.

        Raises:
            KeyError: If the payload has no id.
        """
        author_id = data.get("author_id", data.get("user_id", 0))
        like_count = data.get("like_count", data.get("likeCount", 0)) or 0
        is_liked = data.get("is_liked", data.get("isLiked", False))
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            content=data.get("content") or "",
            author_id=int(author_id or 0),
            industry=data.get("industry") or "",
            like_count=int(like_count),
            is_liked=bool(is_liked),
            created_at=_parse_timestamp(data.get("created_at", data.get("createdAt"))),
        )


# =============================================================================
# Request Envelopes
# =============================================================================

class _Envelope:
    """Serialisation shared by the request envelopes."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LoginRequest(_Envelope):
    phone_number: str
    password: str


@dataclass(frozen=True)
class PostRequest(_Envelope):
    title: str
    content: str
    user_id: int
    industry: str


@dataclass(frozen=True)
class EditPostRequest(_Envelope):
    post_id: int
    title: str
    content: str


@dataclass(frozen=True)
class DeleteRequest(_Envelope):
    post_id: int


@dataclass(frozen=True)
class LikePostRequest(_Envelope):
    post_id: int
    user_id: int


@dataclass(frozen=True)
class ReportRequest(_Envelope):
    post_id: int
    user_id: int
    reason: str


# =============================================================================
# Responses
# =============================================================================

@dataclass(frozen=True)
class BasicResponse:
    """Status/message pair returned by most write endpoints and by login."""
    status: str
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BasicResponse":
        return cls(status=str(data.get("status", "")), message=data.get("message"))


@dataclass(frozen=True)
class ReportResponse:
    """Structured result of a report submission."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportResponse":
        return cls(
            success=bool(data.get("success", False)),
            message=data.get("message"),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """
    Outcome of one gateway call.

    A non-2xx status still produces an ApiResponse; only transport failures
    are raised. ``body`` is None when the server sent nothing back.
    """
    status_code: int
    reason: str = ""
    body: Optional[T] = None

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300


class LikeResult(NamedTuple):
    """Result of a like toggle: whether it went through and the resulting like state."""
    succeeded: bool
    is_liked: bool
    like_count: int
