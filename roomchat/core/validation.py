# roomchat/core/validation.py

import re
from typing import Any

MAX_INPUT_LENGTH = 200

# Usernames and explicitly created rooms share the strict identifier pattern.
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]{2,20}$")

JOIN_ROOM_MIN_LENGTH = 1
JOIN_ROOM_MAX_LENGTH = 30


def sanitize_input(value: Any) -> str:
    """Trim and cap client input at MAX_INPUT_LENGTH; non-strings become ""."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:MAX_INPUT_LENGTH]


def is_valid_identifier(value: str) -> bool:
    return bool(IDENTIFIER_PATTERN.fullmatch(value))


def is_valid_join_room_name(value: str) -> bool:
    # Any characters are allowed here, only the length is bounded.
    return JOIN_ROOM_MIN_LENGTH <= len(value) <= JOIN_ROOM_MAX_LENGTH
