"""Content identifiers: 32 hex characters on the wire, 16 raw bytes in storage."""

import re
from typing import Optional

from .errors import InvalidIdentifier, MissingIdentifier

_HEX32 = re.compile(r"^[0-9A-F]{32}$")


def normalize_content_id(value: Optional[str]) -> str:
    """Upper-case, stripped 32-char hex id. Raises MissingIdentifier / InvalidIdentifier."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise MissingIdentifier("Missing content_id")
    hex_id = value.strip().upper()
    if not _HEX32.match(hex_id):
        raise InvalidIdentifier(f"Invalid content_id hex: {value!r}")
    return hex_id


def is_content_id(value) -> bool:
    """True if value is a usable content id (no exception)."""
    return isinstance(value, str) and bool(_HEX32.match(value.strip().upper()))


def content_id_bytes(hex_id: str) -> bytes:
    """16-byte binary form of a validated hex id (SQL UNHEX equivalent)."""
    return bytes.fromhex(normalize_content_id(hex_id))


def content_id_hex(raw: bytes) -> str:
    """Upper-case hex of a stored id (SQL HEX equivalent)."""
    return bytes(raw).hex().upper()
