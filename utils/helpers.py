"""
Helper Utility Module

This module provides various helper functions used throughout the board client.
"""

from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is an absolute http(s) URL.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.netloc)
    except Exception:
        return False


def digits_only(text: str) -> str:
    """
    Keep only the digit characters of a string, preserving their order.

    Args:
        text: Raw user input, e.g. "010-1234-5678"

    Returns:
        str: The digits, e.g. "01012345678"
    """
    return "".join(ch for ch in text if ch.isdecimal())


def mask_phone_number(phone_number: str, visible: int = 4) -> str:
    """
    Mask a phone number for log output, keeping only the last few digits.

    Args:
        phone_number: The phone number to mask
        visible: Number of trailing characters left readable

    Returns:
        str: The masked phone number
    """
    if len(phone_number) <= visible:
        return "*" * len(phone_number)
    return "*" * (len(phone_number) - visible) + phone_number[-visible:]
