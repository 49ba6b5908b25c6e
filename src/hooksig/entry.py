"""A single scheme signature inside a signature header."""

from __future__ import annotations

from hooksig.errors import MalformedEntryError, UnknownSchemeError
from hooksig.registry import SchemeRegistry, get_default_registry
from hooksig.schemes import SignatureScheme
from hooksig.wire import VERSION_PREFIX, constant_time_equals, format_pair, parse_version, split_pair


class SignatureEntry:
    """One scheme paired with one signature value, e.g. ``v1=5257a8...``."""

    __slots__ = ("scheme", "value")

    def __init__(self, scheme: SignatureScheme, value: str) -> None:
        self.scheme = scheme
        self.value = value

    @classmethod
    def create(
        cls,
        scheme: SignatureScheme,
        timestamp: int,
        payload: bytes,
        secret: str,
    ) -> SignatureEntry:
        """Sign a payload with a single scheme and secret."""
        return cls(scheme, scheme.sign(timestamp, payload, secret))

    @classmethod
    def parse(cls, text: str, registry: SchemeRegistry | None = None) -> SignatureEntry:
        """Parse a ``v<version>=<signature>`` pair.

        The signature value is kept verbatim; its shape is the scheme's
        concern and is only checked when verifying.

        Args:
            text: A single pair taken from a header value.
            registry: Registry to resolve the version against. Defaults to
                the process-wide registry.

        Raises:
            MalformedEntryError: If the text is not a ``v...=...`` pair.
            InvalidVersionError: If the version is not a positive integer.
            UnknownSchemeError: If no scheme is registered for the version.
        """
        key, value = split_pair(text, error=MalformedEntryError)
        version = parse_version(key)

        if registry is None:
            registry = get_default_registry()
        scheme = registry.find(version)
        if scheme is None:
            raise UnknownSchemeError(version)

        return cls(scheme, value)

    def verify(self, payload: bytes, secret: str, timestamp: int) -> bool:
        """Check whether this entry was produced from the given inputs."""
        fresh = SignatureEntry.create(self.scheme, timestamp, payload, secret)
        return self.equals(fresh)

    def equals(self, other: SignatureEntry) -> bool:
        """Timing-safe comparison of signature values."""
        return constant_time_equals(self.value, other.value)

    def to_text(self) -> str:
        return format_pair(f"{VERSION_PREFIX}{self.scheme.version}", self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignatureEntry):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"SignatureEntry(version={self.scheme.version})"
