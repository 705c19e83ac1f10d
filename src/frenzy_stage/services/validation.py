"""Pure input checks for the chat protocol."""

from __future__ import annotations

import re
from typing import Any, Final

ADDRESS_PATTERN: Final = re.compile(r"0x[a-fA-F0-9]{40}")
USERNAME_PATTERN: Final = re.compile(r"[a-zA-Z0-9_-]+")
USERNAME_MIN_LENGTH: Final[int] = 3
USERNAME_MAX_LENGTH: Final[int] = 20
MAX_MESSAGE_LENGTH: Final[int] = 500


def is_valid_address(value: Any) -> bool:
    """Return True if ``value`` is ``0x`` followed by exactly 40 hex digits.

    Hex digits are matched case-insensitively; no checksum is verified.
    """
    return isinstance(value, str) and ADDRESS_PATTERN.fullmatch(value) is not None


def is_valid_username(value: Any) -> bool:
    """Return True if the trimmed ``value`` is 3-20 characters of ``[A-Za-z0-9_-]``."""
    if not isinstance(value, str):
        return False
    trimmed = value.strip()
    if not USERNAME_MIN_LENGTH <= len(trimmed) <= USERNAME_MAX_LENGTH:
        return False
    return USERNAME_PATTERN.fullmatch(trimmed) is not None


def sanitize_message(value: str) -> str:
    """Trim surrounding whitespace and keep at most 500 characters."""
    return value.strip()[:MAX_MESSAGE_LENGTH]
