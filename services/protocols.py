"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the backend gateway used
by the board client state machines. These protocols enable loose coupling,
dependency injection, and easier testing: a state machine receives its
gateway at construction time instead of reaching for a global client.

Protocols defined:
- AuthGateway: Interface for authenticating a user
- PostGateway: Interface for the post board operations

Every method is a coroutine. A non-2xx answer is returned as an ApiResponse
with is_successful False; transport failures are raised.
"""

from typing import Protocol, List

from data.models import (
    ApiResponse, BasicResponse, Post, ReportResponse,
    LoginRequest, PostRequest, EditPostRequest, DeleteRequest,
    LikePostRequest, ReportRequest,
)


class AuthGateway(Protocol):
    """Protocol defining the interface for authentication calls."""

    async def login(self, request: LoginRequest) -> ApiResponse[BasicResponse]:
        """Attempt a login.

        Args:
            request: Phone number and password.

        Returns:
            ApiResponse whose body status is "success" when the credentials were accepted.
        """
        ...


class PostGateway(Protocol):
    """Protocol defining the interface for post board calls.

    Implementations should provide methods for:
    - Listing posts and fetching a single post
    - Creating, editing and deleting posts
    - Toggling a like and reporting a post
    """

    async def load_posts(self) -> ApiResponse[List[Post]]:
        """Fetch every post, in server order."""
        ...

    async def load_post_by_id(self, post_id: int) -> ApiResponse[Post]:
        """Fetch one post."""
        ...

    async def save_post(self, request: PostRequest) -> ApiResponse[BasicResponse]:
        """Create a post."""
        ...

    async def edit_post(self, request: EditPostRequest) -> ApiResponse[BasicResponse]:
        """Update a post's title and content."""
        ...

    async def delete_post(self, request: DeleteRequest) -> ApiResponse[BasicResponse]:
        """Delete a post."""
        ...

    async def like_post(self, request: LikePostRequest) -> ApiResponse[BasicResponse]:
        """Toggle the current user's like on a post."""
        ...

    async def report_post(self, request: ReportRequest) -> ApiResponse[ReportResponse]:
        """Report a post to moderators.

        Returns:
            ApiResponse with a ReportResponse body, or no body if the server sent none.
        """
        ...
