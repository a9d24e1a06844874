"""
Configuration Validation for the Board Client

This module contains configuration validation logic.
Extracted from settings.py for better separation of concerns.
"""

from utils.exceptions import ConfigurationError
from utils.helpers import is_valid_url


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    # Endpoints must be absolute http(s) URLs
    url_settings = [
        ("BOARD_API_BASE_URL", settings.BOARD_API_BASE_URL),
        ("NETWORK_CHECK_URL", settings.NETWORK_CHECK_URL),
    ]

    for name, value in url_settings:
        if not value:
            errors.append(f"Missing required setting: {name}")
        elif not is_valid_url(value):
            errors.append(f"{name} must be an http(s) URL, got {value!r}")

    # Validate timeout values are positive
    timeout_settings = [
        ("REQUEST_TIMEOUT", settings.REQUEST_TIMEOUT),
        ("NETWORK_CHECK_TIMEOUT", settings.NETWORK_CHECK_TIMEOUT),
    ]

    for name, value in timeout_settings:
        if value <= 0:
            errors.append(f"{name} must be positive, got {value}")

    if not settings.CREDENTIALS_FILE:
        errors.append("CREDENTIALS_FILE must not be empty")

    # Enabled tags must be a subset of the full tag list
    unknown_tags = [t for t in settings.DEFAULT_ENABLED_TAGS if t not in settings.DEFAULT_POST_TAGS]
    if unknown_tags:
        errors.append(f"DEFAULT_ENABLED_TAGS contains unknown tags: {', '.join(unknown_tags)}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "api": {
            "base_url": settings.BOARD_API_BASE_URL,
            "request_timeout": settings.REQUEST_TIMEOUT,
        },
        "network_check": {
            "url": settings.NETWORK_CHECK_URL,
            "timeout": settings.NETWORK_CHECK_TIMEOUT,
        },
        "credentials": {
            "file": str(settings.CREDENTIALS_FILE),
        },
        "tags": {
            "total": len(settings.DEFAULT_POST_TAGS),
            "enabled": len(settings.DEFAULT_ENABLED_TAGS),
        },
    }
