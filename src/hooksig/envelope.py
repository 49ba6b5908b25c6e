"""Hooksig Signature Envelope.

The envelope is the full header value exchanged between sender and
receiver: a timestamp plus one signature entry per scheme and secret used
when signing.

Security Features:
- Timing-safe comparison of signature values
- Replay window enforced through the signed timestamp
- Multiple secrets per header for secret rotation
- Untrusted schemes for phasing out a signing algorithm

Usage:
    from hooksig.envelope import SignatureEnvelope, VerifyOptions

    # Sender
    envelope = SignatureEnvelope.create(
        timestamp=int(time.time() * 1000),
        payload=body,
        secrets=["current-secret", "previous-secret"],
    )
    headers["Webhook-Signature"] = envelope.to_text()

    # Receiver
    envelope = SignatureEnvelope.parse(headers["Webhook-Signature"])
    envelope.verify(body, "current-secret", VerifyOptions(tolerance=300))
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from hooksig.entry import SignatureEntry
from hooksig.errors import (
    DuplicateTimestampError,
    ExpiredSignatureError,
    InvalidTimestampError,
    MissingTimestampError,
    NoValidSignatureError,
    UnsignedPayloadError,
)
from hooksig.registry import SchemeRegistry, get_default_registry
from hooksig.schemes import SignatureScheme
from hooksig.wire import (
    TIMESTAMP_KEY,
    constant_time_equals,
    format_pair,
    join_pairs,
    parse_timestamp,
    split_pair,
    split_pairs,
)

DEFAULT_SIGNATURE_TOLERANCE = 300
"""Maximum signature age in seconds (5 minutes)."""


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class VerifyOptions:
    """Options controlling envelope verification."""

    tolerance: int = DEFAULT_SIGNATURE_TOLERANCE
    """Maximum allowed signature age in seconds."""

    ignore_tolerance: bool = False
    """Skip the signature age check entirely."""

    now: Callable[[], int] | None = None
    """Clock override returning the current time in milliseconds."""

    untrusted_schemes: Iterable[SignatureScheme | int] = ()
    """Schemes (or scheme versions) whose entries are never accepted."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "untrusted_schemes", tuple(self.untrusted_schemes))

    def untrusted_versions(self) -> frozenset[int]:
        return frozenset(
            s.version if isinstance(s, SignatureScheme) else int(s)
            for s in self.untrusted_schemes
        )


class SignatureEnvelope:
    """Timestamp plus ordered signature entries."""

    __slots__ = ("timestamp", "entries")

    def __init__(self, timestamp: int, entries: Sequence[SignatureEntry] = ()) -> None:
        self.timestamp = timestamp
        self.entries: list[SignatureEntry] = list(entries)

    @classmethod
    def create(
        cls,
        timestamp: int,
        payload: bytes,
        secrets: Iterable[str],
        schemes: Iterable[SignatureScheme] | None = None,
        registry: SchemeRegistry | None = None,
    ) -> SignatureEnvelope:
        """Sign a payload with every combination of scheme and secret.

        Entries are ordered scheme first, then secret, in the order given.

        Args:
            timestamp: Signing time in milliseconds.
            payload: Raw payload bytes.
            secrets: Secrets to sign with.
            schemes: Schemes to sign with. Defaults to every scheme in the
                registry.
            registry: Registry supplying the default schemes.

        Returns:
            The signed envelope. It has no entries if either secrets or
            schemes is empty, and will then fail verification.

        Raises:
            InvalidTimestampError: If timestamp is not a positive integer.
        """
        if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp <= 0:
            raise InvalidTimestampError(timestamp)

        if schemes is None:
            if registry is None:
                registry = get_default_registry()
            schemes = registry.schemes

        secrets = list(secrets)
        entries = [
            SignatureEntry.create(scheme, timestamp, payload, secret)
            for scheme in schemes
            for secret in secrets
        ]
        return cls(timestamp, entries)

    @classmethod
    def parse(cls, text: str, registry: SchemeRegistry | None = None) -> SignatureEnvelope:
        """Parse a header value.

        The timestamp is validated before any entry is resolved, so a header
        without a timestamp is reported as such even if its entries name
        unknown schemes.

        Raises:
            MalformedPairError: If a pair does not split into key and value.
            DuplicateTimestampError: If ``t`` appears more than once.
            InvalidTimestampError: If ``t`` is not a positive integer.
            MissingTimestampError: If there is no ``t`` pair.
            MalformedEntryError: If an entry key does not start with ``v``.
            InvalidVersionError: If an entry version is not a positive integer.
            UnknownSchemeError: If an entry version is not registered.
        """
        timestamp: int | None = None
        entry_pairs: list[str] = []

        for pair in split_pairs(text):
            key, value = split_pair(pair)
            if key == TIMESTAMP_KEY:
                if timestamp is not None:
                    raise DuplicateTimestampError()
                timestamp = parse_timestamp(value)
            else:
                entry_pairs.append(pair)

        if timestamp is None:
            raise MissingTimestampError()

        entries = [SignatureEntry.parse(pair, registry=registry) for pair in entry_pairs]
        return cls(timestamp, entries)

    def verify(
        self,
        payload: bytes,
        secret: str,
        options: VerifyOptions | None = None,
    ) -> None:
        """Verify the payload against this envelope.

        Passes if at least one trusted entry matches. Only stale timestamps
        are rejected; a timestamp in the future passes the age check.

        Raises:
            ExpiredSignatureError: If the signature is older than the tolerance.
            UnsignedPayloadError: If the envelope has no entries.
            NoValidSignatureError: If no trusted entry matches.
        """
        options = options or VerifyOptions()
        now = options.now() if options.now is not None else now_ms()

        if not options.ignore_tolerance:
            age = now - self.timestamp
            if age > options.tolerance * 1000:
                raise ExpiredSignatureError(age, options.tolerance)

        if not self.entries:
            raise UnsignedPayloadError()

        untrusted = options.untrusted_versions()
        for entry in self.entries:
            if entry.scheme.version in untrusted:
                continue
            if entry.verify(payload, secret, self.timestamp):
                return

        raise NoValidSignatureError()

    def to_text(self) -> str:
        pairs = [format_pair(TIMESTAMP_KEY, self.timestamp)]
        pairs.extend(entry.to_text() for entry in self.entries)
        return join_pairs(pairs)

    def equals(self, other: SignatureEnvelope) -> bool:
        """Timing-safe comparison of the full header values."""
        return constant_time_equals(self.to_text(), other.to_text())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignatureEnvelope):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        versions = [entry.scheme.version for entry in self.entries]
        return f"SignatureEnvelope(timestamp={self.timestamp}, versions={versions})"
