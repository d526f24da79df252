"""Identifiers for records created by the engine."""

import secrets
import string

import arrow

_ALPHABET = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    """Base36 representation of a non-negative integer."""
    digits = ""
    while number:
        number, remainder = divmod(number, 36)
        digits = _ALPHABET[remainder] + digits
    return digits or "0"


def generate_record_id(prefix: str = "", random_length: int = 8) -> str:
    """Build a sortable, collision-resistant id.

    The id is ``prefix`` + epoch milliseconds in base36 + ``random_length``
    random base36 characters, so ids created later sort after earlier ones.

    Args:
        prefix: Short tag such as ``"srg_"`` naming the record type
        random_length: Number of random characters appended
    """
    timestamp = to_base36(int(arrow.utcnow().float_timestamp * 1000))
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(random_length))
    return f"{prefix}{timestamp}{random_part}"
