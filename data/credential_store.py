"""
Credential Store Module

This module persists saved login credentials and the auto-login flag in a
small JSON file. File I/O runs in a worker thread so the event loop is never
blocked by disk access.
"""

import asyncio
import json
import os
from typing import Optional, Tuple

from config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


class FileCredentialStore:
    """JSON-file backed implementation of the CredentialStore protocol."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            path: File to persist to. Defaults to settings.CREDENTIALS_FILE.
        """
        self.path = str(path or settings.CREDENTIALS_FILE)

    def _read(self) -> dict:
        """Read the stored record. A missing or unreadable file counts as empty."""
        try:
            if not os.path.exists(self.path):
                return {}
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                logger.warning(f"Ignoring malformed credentials file: {self.path}")
                return {}
            return data
        except (OSError, ValueError) as e:
            logger.error(f"Error reading credentials file: {e}")
            return {}

    def _write(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        # Owner-only: the record holds a plaintext password
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    async def is_auto_login_enabled(self) -> bool:
        data = await asyncio.to_thread(self._read)
        return bool(data.get("auto_login", False))

    async def get_saved_credentials(self) -> Optional[Tuple[str, str]]:
        data = await asyncio.to_thread(self._read)
        phone_number = data.get("phone_number")
        password = data.get("password")
        if not phone_number or not password:
            return None
        return str(phone_number), str(password)

    async def save_login_info(self, phone_number: str, password: str, auto_login_enabled: bool) -> None:
        record = {
            "phone_number": phone_number,
            "password": password,
            "auto_login": bool(auto_login_enabled),
        }
        await asyncio.to_thread(self._write, record)
        logger.info(f"Saved login info (auto-login {'on' if auto_login_enabled else 'off'})")

    async def clear(self) -> None:
        def _remove():
            if os.path.exists(self.path):
                os.remove(self.path)
        await asyncio.to_thread(_remove)
        logger.info("Cleared saved login info")
