"""
Session State Machine

Owns the login screen state: the input fields, the loading flag and which
popup, if any, is showing. Drives manual login and auto-login against the
injected AuthGateway, CredentialStore and NetworkMonitor.

    IDLE -> SUBMITTING -> SUCCESS
                       -> INVALID_CREDENTIALS_ERROR
    IDLE -> EMPTY_FIELDS_ERROR | NETWORK_ERROR (no gateway call)

Error phases return to IDLE only when the popup is dismissed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from config import settings
from data.models import LoginRequest
from data.protocols import CredentialStore, NetworkMonitor
from services.protocols import AuthGateway
from state.observable import MutableState, TaskScope
from utils.exceptions import (
    AuthRejectedError, NetworkUnavailableError, ScopeClosedError, ValidationError,
)
from utils.helpers import digits_only, mask_phone_number
from utils.logger import get_logger

logger = get_logger(__name__)


class Popup(Enum):
    """The one modal message the login screen may show."""
    NONE = "none"
    EMPTY_FIELDS = "empty_fields"
    INVALID_CREDENTIALS = "invalid_credentials"
    NETWORK_ERROR = "network_error"


class SessionPhase(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    EMPTY_FIELDS_ERROR = "empty_fields_error"
    INVALID_CREDENTIALS_ERROR = "invalid_credentials_error"
    NETWORK_ERROR = "network_error"


_POPUP_PHASES = {
    Popup.EMPTY_FIELDS: SessionPhase.EMPTY_FIELDS_ERROR,
    Popup.INVALID_CREDENTIALS: SessionPhase.INVALID_CREDENTIALS_ERROR,
    Popup.NETWORK_ERROR: SessionPhase.NETWORK_ERROR,
}


@dataclass(frozen=True)
class SessionState:
    phone_number: str = ""
    password: str = ""
    auto_login_enabled: bool = False
    is_loading: bool = False
    active_popup: Popup = Popup.NONE
    authenticated: bool = False

    def __repr__(self) -> str:
        # Keep the password out of logs and tracebacks
        return (f"SessionState(phone_number={self.phone_number!r}, password='***', "
                f"auto_login_enabled={self.auto_login_enabled}, is_loading={self.is_loading}, "
                f"active_popup={self.active_popup.name}, authenticated={self.authenticated})")

    @property
    def phase(self) -> SessionPhase:
        if self.is_loading:
            return SessionPhase.SUBMITTING
        if self.active_popup is not Popup.NONE:
            return _POPUP_PHASES[self.active_popup]
        if self.authenticated:
            return SessionPhase.SUCCESS
        return SessionPhase.IDLE


class SessionStateMachine:
    """State machine behind the login screen."""

    def __init__(self, auth_gateway: AuthGateway, credential_store: CredentialStore,
                 network_monitor: NetworkMonitor):
        """
        Initialize the state machine with its collaborators.

        Args:
            auth_gateway: Performs the login call.
            credential_store: Persists and restores saved credentials.
            network_monitor: Pre-flight connectivity check.
        """
        self.auth_gateway = auth_gateway
        self.credential_store = credential_store
        self.network_monitor = network_monitor
        self._state: MutableState[SessionState] = MutableState(SessionState(), name="session state")
        self._scope = TaskScope("session")
        self._on_login_success: Optional[Callable[[bool], None]] = None

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state.value

    def subscribe(self, callback: Callable[[SessionState], None], emit_current: bool = True) -> Callable[[], None]:
        return self._state.subscribe(callback, emit_current=emit_current)

    def set_on_login_success(self, callback: Optional[Callable[[bool], None]]) -> None:
        """Register the callback invoked with True after each successful login."""
        self._on_login_success = callback

    # -------------------------------------------------------------------------
    # Field intents
    # -------------------------------------------------------------------------

    def update_phone_number(self, phone_number: str) -> None:
        self._state.update(phone_number=digits_only(phone_number))

    def update_password(self, password: str) -> None:
        self._state.update(password=password)

    def update_auto_login(self, enabled: bool) -> None:
        self._state.update(auto_login_enabled=bool(enabled))

    # -------------------------------------------------------------------------
    # Popups
    # -------------------------------------------------------------------------

    def _show_popup(self, popup: Popup, **changes) -> None:
        logger.info(f"Login popup: {popup.name}")
        self._state.update(active_popup=popup, **changes)

    def _dismiss(self, popup: Popup) -> None:
        if self.state.active_popup is popup:
            self._state.update(active_popup=Popup.NONE)

    def dismiss_empty_fields_popup(self) -> None:
        self._dismiss(Popup.EMPTY_FIELDS)

    def dismiss_invalid_credentials_popup(self) -> None:
        self._dismiss(Popup.INVALID_CREDENTIALS)

    def dismiss_network_error_popup(self) -> None:
        self._dismiss(Popup.NETWORK_ERROR)

    # -------------------------------------------------------------------------
    # Login flows
    # -------------------------------------------------------------------------

    def _ensure_network(self) -> None:
        if not self.network_monitor.is_network_available():
            raise NetworkUnavailableError("network unavailable")

    async def _authenticate(self, phone_number: str, password: str) -> None:
        """
        Call the gateway once.

        Raises:
            AuthRejectedError: If the server did not answer with a success status.
        """
        response = await self.auth_gateway.login(LoginRequest(phone_number, password))
        body = response.body
        if not response.is_successful:
            raise AuthRejectedError(f"login returned HTTP {response.status_code}")
        if body is None or body.status != settings.LOGIN_SUCCESS_STATUS:
            raise AuthRejectedError(body.message if body and body.message else "login rejected")

    def _complete_login(self) -> None:
        self._state.update(authenticated=True, is_loading=False)
        logger.info("Login succeeded")
        if self._on_login_success is not None:
            self._on_login_success(True)

    async def _submit(self, phone_number: str, password: str, persist: bool) -> None:
        """
        Run one attempt; the caller has already set is_loading.

        Each outcome clears is_loading in the same update that publishes it,
        so no subscriber ever sees a popup while loading.
        """
        settled = False
        try:
            await self._authenticate(phone_number, password)
            if persist:
                try:
                    await self.credential_store.save_login_info(
                        phone_number, password, self.state.auto_login_enabled
                    )
                except Exception as e:
                    logger.error(f"Failed to save login info: {e}")
            settled = True
            self._complete_login()
        except AuthRejectedError as e:
            logger.warning(f"Login rejected: {e}")
            settled = True
            self._show_popup(Popup.INVALID_CREDENTIALS, is_loading=False)
        except Exception as e:
            logger.error(f"Login failed with an error: {e!r}")
            settled = True
            self._show_popup(Popup.INVALID_CREDENTIALS, is_loading=False)
        finally:
            if not settled:
                self._state.update(is_loading=False)

    async def login(self, phone_number: Optional[str] = None, password: Optional[str] = None) -> None:
        """
        Attempt a manual login.

        Args:
            phone_number: Defaults to the current phone number field.
            password: Defaults to the current password field.

        Does nothing while another attempt is in flight. Validation, the
        network check and raising the loading flag happen before the first
        suspension point, so a second call can never slip past the guard.
        """
        if self.state.is_loading:
            logger.debug("Login ignored: an attempt is already in flight")
            return
        if self._scope.closed:
            logger.debug("Login ignored: session closed")
            return
        if phone_number is None:
            phone_number = self.state.phone_number
        if password is None:
            password = self.state.password

        try:
            if not phone_number or not password:
                raise ValidationError("phone number and password are required")
            self._ensure_network()
        except ValidationError:
            self._show_popup(Popup.EMPTY_FIELDS, authenticated=False)
            return
        except NetworkUnavailableError:
            self._show_popup(Popup.NETWORK_ERROR, authenticated=False)
            return

        self._state.update(is_loading=True, active_popup=Popup.NONE, authenticated=False)
        await self._scope.run(self._submit(phone_number, password, persist=True))

    async def _check_auto_login(self) -> None:
        try:
            self._ensure_network()
        except NetworkUnavailableError:
            self._show_popup(Popup.NETWORK_ERROR, authenticated=False)
            return

        try:
            enabled = await self.credential_store.is_auto_login_enabled()
            self._state.update(auto_login_enabled=enabled)
            if not enabled:
                return
            saved = await self.credential_store.get_saved_credentials()
        except Exception as e:
            logger.error(f"Could not read saved credentials: {e!r}")
            return

        if saved is None:
            logger.debug("Auto-login enabled but no saved credentials")
            return
        if self.state.is_loading:
            logger.debug("Auto-login skipped: a login is already in flight")
            return

        saved_phone, saved_password = saved
        self._state.update(
            phone_number=saved_phone,
            password=saved_password,
            is_loading=True,
            active_popup=Popup.NONE,
            authenticated=False,
        )
        logger.info(f"Attempting auto-login as {mask_phone_number(saved_phone)}")
        await self._submit(saved_phone, saved_password, persist=False)

    async def check_auto_login(self) -> None:
        """Log in with saved credentials if the user enabled auto-login."""
        if self.state.is_loading:
            return
        try:
            await self._scope.run(self._check_auto_login())
        except ScopeClosedError:
            logger.debug("Auto-login ignored: session closed")

    async def close(self) -> None:
        """Tear down: stop publishing and cancel in-flight work."""
        self._state.close()
        await self._scope.close()
