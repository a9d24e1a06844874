"""
Board Client Command Line

This is the command-line entry point for the board client core. It wires
the HTTP gateway, the credential store and the network monitor into the
session and post state machines, forwards one user intent, and prints the
state they publish. It stands in for the mobile presentation layer.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from config import settings
from utils.logger import get_logger, setup_file_logging
from utils.exceptions import BoardClientError
from data.credential_store import FileCredentialStore
from services.http_gateway import HttpBoardGateway
from services.network import RequestsNetworkMonitor
from state.session import SessionStateMachine, SessionPhase
from state.posts import PostCollectionSynchronizer

# Set up logging
logger = get_logger(__name__)


def format_post(post, detail: bool = False) -> str:
    heart = "♥" if post.is_liked else "♡"
    line = f"#{post.id} [{post.industry}] {post.title} ({heart} {post.like_count})"
    if detail:
        created = post.created_at.isoformat() if post.created_at else "-"
        line += f"\n  by user {post.author_id} at {created}\n\n{post.content}"
    return line


class BoardClient:
    """
    Owns one session state machine and one post synchronizer.

    Collaborators can be injected; otherwise the concrete HTTP, file and
    network implementations are built from settings.
    """

    def __init__(self, gateway=None, credential_store=None, network_monitor=None, validate: bool = True):
        if validate:
            settings.validate_settings()
            logger.debug(f"Configuration: {settings.get_config_summary()}")
        self.gateway = gateway or HttpBoardGateway()
        self.credential_store = credential_store or FileCredentialStore()
        self.network_monitor = network_monitor or RequestsNetworkMonitor()
        self.session = SessionStateMachine(self.gateway, self.credential_store, self.network_monitor)
        self.posts = PostCollectionSynchronizer(self.gateway, self.network_monitor)

    async def close(self) -> None:
        await self.session.close()
        await self.posts.close()
        if hasattr(self.gateway, "close"):
            self.gateway.close()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def login(self, phone_number: str, password: str, auto_login: bool) -> bool:
        self.session.update_phone_number(phone_number)
        self.session.update_password(password)
        self.session.update_auto_login(auto_login)
        await self.session.login()
        return self._report_session()

    async def auto_login(self) -> bool:
        await self.session.check_auto_login()
        if self.session.state.phase is SessionPhase.IDLE:
            print("Auto-login is off or no credentials are saved.")
            return False
        return self._report_session()

    def _report_session(self) -> bool:
        state = self.session.state
        messages = {
            SessionPhase.SUCCESS: "Logged in.",
            SessionPhase.EMPTY_FIELDS_ERROR: "Enter both phone number and password.",
            SessionPhase.INVALID_CREDENTIALS_ERROR: "Phone number or password is incorrect.",
            SessionPhase.NETWORK_ERROR: "No network connection.",
        }
        print(messages.get(state.phase, state.phase.value))
        return state.phase is SessionPhase.SUCCESS

    def _flush_status(self) -> Optional[str]:
        """Print and consume the synchronizer's status message, if any."""
        message = self.posts.state.status_message
        if message:
            print(message)
            self.posts.clear_status_message()
        return message

    async def list_posts(self) -> bool:
        await self.posts.load_posts()
        ok = self._flush_status() is None
        for post in self.posts.state.posts:
            print(format_post(post))
        return ok

    async def show_post(self, post_id: int) -> bool:
        post = await self.posts.load_post_by_id(post_id)
        if post is None:
            self._flush_status()
            return False
        print(format_post(post, detail=True))
        return True

    async def write_post(self, title: str, content: str, user_id: int, industry: str) -> bool:
        accepted = await self.posts.save_post(title, content, user_id, industry)
        self._flush_status()
        return accepted

    async def edit_post(self, post_id: int, title: str, content: str) -> bool:
        accepted = await self.posts.edit_post(post_id, title, content)
        self._flush_status()
        if accepted and self.posts.state.selected_post is not None:
            print(format_post(self.posts.state.selected_post, detail=True))
        return accepted

    async def delete_post(self, post_id: int) -> bool:
        accepted = await self.posts.delete_post(post_id)
        self._flush_status()
        return accepted

    async def like(self, post_id: int, user_id: int) -> bool:
        result = await self.posts.toggle_like(post_id, user_id)
        if result is None:
            return False
        state = "liked" if result.is_liked else "not liked"
        verb = "Updated" if result.succeeded else "Could not update"
        print(f"{verb}: post #{post_id} is {state} ({result.like_count} likes)")
        return result.succeeded

    async def report(self, post_id: int, user_id: int, reason: str) -> bool:
        await self.posts.report_post(post_id, user_id, reason)
        print(self.posts.state.report_result)
        self.posts.clear_report_result()
        return True


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Board Client')
    parser.add_argument('--log-file', type=str, default=settings.LOG_FILE or None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    sub = parser.add_subparsers(dest='command', required=True)

    login = sub.add_parser('login', help='Log in with a phone number and password')
    login.add_argument('--phone', required=True)
    login.add_argument('--password', required=True)
    login.add_argument('--auto-login', action='store_true', help='Remember credentials for auto-login')

    sub.add_parser('auto-login', help='Log in with saved credentials')
    sub.add_parser('posts', help='List posts')

    show = sub.add_parser('show', help='Show one post')
    show.add_argument('post_id', type=int)

    write = sub.add_parser('write', help='Create a post')
    write.add_argument('--title', required=True)
    write.add_argument('--content', required=True)
    write.add_argument('--user-id', type=int, required=True)
    write.add_argument('--industry', required=True)

    edit = sub.add_parser('edit', help='Edit a post')
    edit.add_argument('post_id', type=int)
    edit.add_argument('--title', required=True)
    edit.add_argument('--content', required=True)

    delete = sub.add_parser('delete', help='Delete a post')
    delete.add_argument('post_id', type=int)

    like = sub.add_parser('like', help='Toggle your like on a post')
    like.add_argument('post_id', type=int)
    like.add_argument('--user-id', type=int, required=True)

    report = sub.add_parser('report', help='Report a post')
    report.add_argument('post_id', type=int)
    report.add_argument('--user-id', type=int, required=True)
    report.add_argument('--reason', required=True)

    return parser.parse_args(argv)


async def run_command(client: BoardClient, args) -> bool:
    """Dispatch one parsed command to the client."""
    if args.command == 'login':
        return await client.login(args.phone, args.password, args.auto_login)
    if args.command == 'auto-login':
        return await client.auto_login()
    if args.command == 'posts':
        return await client.list_posts()
    if args.command == 'show':
        return await client.show_post(args.post_id)
    if args.command == 'write':
        return await client.write_post(args.title, args.content, args.user_id, args.industry)
    if args.command == 'edit':
        return await client.edit_post(args.post_id, args.title, args.content)
    if args.command == 'delete':
        return await client.delete_post(args.post_id)
    if args.command == 'like':
        return await client.like(args.post_id, args.user_id)
    if args.command == 'report':
        return await client.report(args.post_id, args.user_id, args.reason)
    raise ValueError(f"Unknown command: {args.command}")


async def _run(args) -> bool:
    client = BoardClient()
    try:
        return await run_command(client, args)
    finally:
        await client.close()


def main(argv: Optional[List[str]] = None):
    """Main entry point for the application."""
    args = parse_arguments(argv)

    log_level = getattr(logging, args.log_level)
    get_logger().setLevel(log_level)
    if args.log_file:
        setup_file_logging(args.log_file, log_level)

    logger.info(f"Running command: {args.command}")

    try:
        success = asyncio.run(_run(args))
        exit_code = 0 if success else 1
    except BoardClientError as e:
        logger.error(f"Board client error: {e}")
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in board client: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Board client finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
