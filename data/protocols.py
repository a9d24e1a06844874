"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for the local collaborators
the state machines depend on. These protocols enable dependency injection,
making the state machines testable without a real filesystem or network.

Protocols defined:
- CredentialStore: Interface for persisting saved login credentials
- NetworkMonitor: Interface for the pre-flight connectivity check
"""

from typing import Protocol, Optional, Tuple


class CredentialStore(Protocol):
    """Protocol defining the interface for saved login credentials.

    Implementations should provide methods for:
    - Reading the auto-login flag
    - Reading the saved phone number and password
    - Saving credentials together with the auto-login flag

    Every method is a coroutine; reads are suspension points for the
    session state machine.
    """

    async def is_auto_login_enabled(self) -> bool:
        """Return True if the user opted in to auto-login."""
        ...

    async def get_saved_credentials(self) -> Optional[Tuple[str, str]]:
        """Return the saved (phone_number, password) pair, or None if nothing is saved."""
        ...

    async def save_login_info(self, phone_number: str, password: str, auto_login_enabled: bool) -> None:
        """Persist credentials and the auto-login flag.

        Args:
            phone_number: Digits-only phone number.
            password: The password exactly as entered.
            auto_login_enabled: Whether the next start should log in automatically.
        """
        ...

    async def clear(self) -> None:
        """Forget saved credentials and disable auto-login."""
        ...


class NetworkMonitor(Protocol):
    """Protocol for the connectivity check consulted before every gateway call."""

    def is_network_available(self) -> bool:
        """Return True if the backend is believed to be reachable."""
        ...
