"""
Utility functions for Orpheus.
"""

import secrets
from typing import Iterable

_ID_ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"


def generate_id(size: int = 21) -> str:
    """
    URL-safe random identifier (nanoid alphabet).

    Args:
        size: Number of characters

    Returns:
        Random identifier string
    """
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(size))


def normalize_key(key: str) -> str:
    """Strip leading slashes from an object storage key."""
    return key.lstrip("/")


def encode_list(items: Iterable[str] | None) -> str | None:
    """
    Serialize a list of strings to comma-joined text.

    Items are stripped and empty items dropped. Backslashes and commas inside
    an item are escaped with a backslash so the list always round-trips
    through decode_list().

    Examples:
        ["winter", "mountains"] -> "winter,mountains"
        ["Smith, J.", "Doe, A."] -> "Smith\\, J.,Doe\\, A."
    """
    if items is None:
        return None
    encoded = []
    for item in items:
        value = str(item).strip()
        if not value:
            continue
        encoded.append(value.replace("\\", "\\\\").replace(",", "\\,"))
    return ",".join(encoded)


def decode_list(text: str | None) -> list[str]:
    """
    Parse comma-joined text produced by encode_list().

    Plain comma-joined text without escapes (older rows) decodes the same way.
    """
    if not text:
        return []
    items: list[str] = []
    current: list[str] = []
    chars = iter(text)
    for char in chars:
        if char == "\\":
            current.append(next(chars, ""))
        elif char == ",":
            items.append("".join(current))
            current = []
        else:
            current.append(char)
    items.append("".join(current))
    return [item.strip() for item in items if item.strip()]
