"""Wire grammar for signature header values.

Header format::

    t=<timestamp>,v<version>=<signature>[,v<version>=<signature>]...

Pairs are separated by commas; each pair splits on ``=`` into exactly two
parts. A value containing ``=`` is therefore not representable.
"""

from __future__ import annotations

import hmac
import re

from hooksig.errors import (
    InvalidTimestampError,
    InvalidVersionError,
    MalformedEntryError,
    MalformedPairError,
    SignatureParseError,
)

PAIR_SEPARATOR = ","
KEY_VALUE_SEPARATOR = "="
TIMESTAMP_KEY = "t"
VERSION_PREFIX = "v"

_DIGITS = re.compile(r"[0-9]+")


def split_pairs(text: str) -> list[str]:
    """Split a header value into its ``key=value`` chunks.

    Whitespace around each chunk is ignored.
    """
    return [chunk.strip() for chunk in text.split(PAIR_SEPARATOR)]


def split_pair(
    text: str,
    error: type[SignatureParseError] = MalformedPairError,
) -> tuple[str, str]:
    """Split one chunk into ``(key, value)``.

    Raises:
        error: If the chunk does not split into exactly two parts.
    """
    parts = text.split(KEY_VALUE_SEPARATOR)
    if len(parts) != 2:
        raise error(text)
    return parts[0], parts[1]


def _positive_int(text: str) -> int | None:
    """Return text as a positive integer, or None if it is not one."""
    if not _DIGITS.fullmatch(text):
        return None
    try:
        value = int(text)
    except ValueError:
        # Longer than the interpreter's int conversion limit
        return None
    return value if value > 0 else None


def parse_version(key: str) -> int:
    """Parse an entry key such as ``v1`` into its scheme version.

    Raises:
        MalformedEntryError: If the key does not start with ``v``.
        InvalidVersionError: If the suffix is not a positive integer.
    """
    if not key.startswith(VERSION_PREFIX):
        raise MalformedEntryError(key)

    suffix = key[len(VERSION_PREFIX) :]
    version = _positive_int(suffix)
    if version is None:
        raise InvalidVersionError(suffix)
    return version


def parse_timestamp(value: str) -> int:
    """Parse the value of a ``t`` pair.

    Raises:
        InvalidTimestampError: If the value is not a positive integer.
    """
    timestamp = _positive_int(value)
    if timestamp is None:
        raise InvalidTimestampError(value)
    return timestamp


def format_pair(key: str, value: object) -> str:
    return f"{key}{KEY_VALUE_SEPARATOR}{value}"


def join_pairs(pairs: list[str]) -> str:
    return PAIR_SEPARATOR.join(pairs)


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two strings in constant time.

    Never raises. Strings of different byte length compare unequal
    immediately, which leaks only the fact that the lengths differ.
    """
    try:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
    except (AttributeError, TypeError):
        return False
