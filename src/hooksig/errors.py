"""Hooksig error types.

Every parse and verification failure is raised as a subclass of
SignatureError. Each class carries a VerificationStatus so callers that
prefer a result value (see WebhookVerifier.check) can map an exception onto
a status without string matching.
"""

from __future__ import annotations

from enum import Enum


class VerificationStatus(Enum):
    """Outcome of parsing or verifying a signature header."""

    VALID = "valid"
    MISSING_SIGNATURE = "missing_signature"
    MALFORMED_PAIR = "malformed_pair"
    MALFORMED_ENTRY = "malformed_entry"
    INVALID_VERSION = "invalid_version"
    UNKNOWN_SCHEME = "unknown_scheme"
    MISSING_TIMESTAMP = "missing_timestamp"
    DUPLICATE_TIMESTAMP = "duplicate_timestamp"
    INVALID_TIMESTAMP = "invalid_timestamp"
    EXPIRED = "expired"
    UNSIGNED = "unsigned"
    NO_VALID_SIGNATURE = "no_valid_signature"


class SignatureError(ValueError):
    """Base class for all signature failures."""

    status: VerificationStatus = VerificationStatus.NO_VALID_SIGNATURE


class SignatureParseError(SignatureError):
    """Raised when a signature header cannot be parsed."""


class MalformedPairError(SignatureParseError):
    status = VerificationStatus.MALFORMED_PAIR

    def __init__(self, pair: str) -> None:
        super().__init__("invalid signature")
        self.pair = pair


class MalformedEntryError(SignatureParseError):
    status = VerificationStatus.MALFORMED_ENTRY

    def __init__(self, text: str) -> None:
        super().__init__("invalid signature format")
        self.text = text


class InvalidVersionError(SignatureParseError):
    status = VerificationStatus.INVALID_VERSION

    def __init__(self, value: str) -> None:
        super().__init__("signature scheme version must be a positive integer")
        self.value = value


class UnknownSchemeError(SignatureParseError):
    status = VerificationStatus.UNKNOWN_SCHEME

    def __init__(self, version: int) -> None:
        super().__init__(f"invalid signature scheme version {version}")
        self.version = version


class MissingTimestampError(SignatureParseError):
    status = VerificationStatus.MISSING_TIMESTAMP

    def __init__(self) -> None:
        super().__init__("missing timestamp")


class DuplicateTimestampError(SignatureParseError):
    status = VerificationStatus.DUPLICATE_TIMESTAMP

    def __init__(self) -> None:
        super().__init__("timestamp cannot be specified multiple times")


class InvalidTimestampError(SignatureParseError):
    status = VerificationStatus.INVALID_TIMESTAMP

    def __init__(self, value: object) -> None:
        super().__init__("timestamp must be a positive integer")
        self.value = value


class ExpiredSignatureError(SignatureError):
    """Raised when the signature is older than the allowed tolerance."""

    status = VerificationStatus.EXPIRED

    def __init__(self, age_ms: int, tolerance: int) -> None:
        super().__init__("signature has expired")
        self.age_ms = age_ms
        self.tolerance = tolerance


class UnsignedPayloadError(SignatureError):
    """Raised when an envelope carries no signature entries."""

    status = VerificationStatus.UNSIGNED

    def __init__(self) -> None:
        super().__init__("payload not signed")


class NoValidSignatureError(SignatureError):
    """Raised when no trusted entry matches the payload and secret."""

    status = VerificationStatus.NO_VALID_SIGNATURE

    def __init__(self) -> None:
        super().__init__("no valid signature")
