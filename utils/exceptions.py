"""
Custom Exception Classes for the Board Client

This module defines custom exceptions for better error handling and
categorization of failures across the client. None of them are meant to
reach the presentation layer: the state machines catch them and turn them
into a popup or a status message.
"""

from typing import Optional


class BoardClientError(Exception):
    """Base exception for all board client errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(BoardClientError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Client-side Errors
# =============================================================================

class ValidationError(BoardClientError):
    """Raised when a required field is empty. Never reaches the gateway."""
    pass


class NetworkUnavailableError(BoardClientError):
    """Raised when the pre-flight network check fails."""
    pass


class ScopeClosedError(BoardClientError):
    """Raised when work is started on a state machine that was already closed."""
    pass


# =============================================================================
# Gateway Errors
# =============================================================================

class GatewayError(BoardClientError):
    """Base exception for transport or protocol failures talking to the backend."""
    pass


class AuthRejectedError(GatewayError):
    """Raised when the backend rejects a login attempt."""
    pass


class ServerFailureError(GatewayError):
    """Raised when the backend answers a post operation with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseEmptyError(GatewayError):
    """Raised when the backend answers with a 2xx status but no body."""
    pass
