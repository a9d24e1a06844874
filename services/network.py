"""
Network Availability Module

Pre-flight connectivity check consulted before the state machines attempt a
gateway call.
"""

from typing import Optional

import requests

from config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


class RequestsNetworkMonitor:
    """NetworkMonitor that probes the API host with a short HEAD request."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url or settings.NETWORK_CHECK_URL
        self.timeout = timeout if timeout is not None else settings.NETWORK_CHECK_TIMEOUT

    def is_network_available(self) -> bool:
        """
        Check whether the backend host answers at all.

        Any HTTP status counts as reachable; only transport failures
        (DNS, refused connection, timeout) mean the network is unavailable.

        Returns:
            bool: True if the host answered.
        """
        try:
            requests.head(self.url, timeout=self.timeout, allow_redirects=False)
            return True
        except requests.RequestException as e:
            logger.warning(f"Network check against {self.url} failed: {e}")
            return False
