"""
Configuration Settings for the Board Client

This module centralizes all configuration settings for the board client,
including environment variables, API endpoints, user-facing messages and
application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))

# =============================================================================
# Backend API Settings
# =============================================================================

BOARD_API_BASE_URL = os.getenv("BOARD_API_BASE_URL", "http://localhost:8080/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))      # Seconds per gateway request

# Network availability probe
NETWORK_CHECK_URL = os.getenv("NETWORK_CHECK_URL", BOARD_API_BASE_URL)
NETWORK_CHECK_TIMEOUT = float(os.getenv("NETWORK_CHECK_TIMEOUT", "3"))

# =============================================================================
# Application Settings
# =============================================================================

CREDENTIALS_FILE = os.getenv("CREDENTIALS_FILE", os.path.join(APP_ROOT, "saved_login.json"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")

# Login status value the server returns on success
LOGIN_SUCCESS_STATUS = "success"

# =============================================================================
# User-facing Messages
# =============================================================================

LOAD_POSTS_FAILED = "Failed to load posts: {reason}"
LOAD_POSTS_ERROR = "Error: {error}"
LOAD_POST_FAILED = "Failed to load post: {reason}"
LOAD_POST_ERROR = "Error loading post: {error}"
SAVE_POST_FAILED = "Failed to save post: {reason}"
EDIT_POST_FAILED = "Failed to edit post: {reason}"
DELETE_POST_FAILED = "Failed to delete post: {reason}"
OPERATION_ERROR = "Error occurred: {error}"
NETWORK_UNAVAILABLE_MESSAGE = "No network connection. Check your connection and try again."

REPORT_ACCEPTED = "Your report has been received."
REPORT_REJECTED = "Report failed."
REPORT_EMPTY_RESPONSE = "The server returned an empty response."
REPORT_SERVER_ERROR = "Server error: {code}"
REPORT_ERROR = "Error while reporting: {error}"

# =============================================================================
# Post Composer Tags
# =============================================================================

DEFAULT_POST_TAGS = [
    "Aspiring Owner",
    "Part-timer/Staff",
    "Customer",
    "Concerns",
    "Info",
    "Questions/Advice",
    "Reviews",
    "New Owner",       # Requires a verified business
    "Veteran Owner",   # Requires a verified business
]

# Tags selectable without business verification
DEFAULT_ENABLED_TAGS = DEFAULT_POST_TAGS[:7]

# =============================================================================
# Configuration Validation
# =============================================================================

from config.validators import ConfigurationError, validate_settings, get_config_summary  # noqa: E402,F401
