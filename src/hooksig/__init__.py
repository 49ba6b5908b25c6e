"""Hooksig Webhook Signatures.

Versioned, multi-secret webhook signatures with replay protection.

Header format:
    t=<timestamp-ms>,v1=<hmac-sha256-hex>[,v<N>=<signature>]...

Security Features:
- Constant-time signature comparison
- Timestamp validation (replay window)
- Several secrets per header (secret rotation)
- Pluggable, versioned signature schemes

Usage:
    from hooksig import SignatureEnvelope

    envelope = SignatureEnvelope.create(
        timestamp=1492774577000,
        payload=b'{"event": "ping"}',
        secrets=["whsec_current"],
    )
    header = envelope.to_text()

    SignatureEnvelope.parse(header).verify(b'{"event": "ping"}', "whsec_current")
"""

from hooksig.entry import SignatureEntry
from hooksig.envelope import (
    DEFAULT_SIGNATURE_TOLERANCE,
    SignatureEnvelope,
    VerifyOptions,
)
from hooksig.errors import (
    DuplicateTimestampError,
    ExpiredSignatureError,
    InvalidTimestampError,
    InvalidVersionError,
    MalformedEntryError,
    MalformedPairError,
    MissingTimestampError,
    NoValidSignatureError,
    SignatureError,
    SignatureParseError,
    UnknownSchemeError,
    UnsignedPayloadError,
    VerificationStatus,
)
from hooksig.registry import SchemeRegistry, default_registry, get_default_registry
from hooksig.schemes import HmacSignatureScheme, SignatureScheme, SignatureSchemeV1
from hooksig.verifier import VerificationResult, WebhookSigner, WebhookVerifier

__version__ = "0.1.0"

__all__ = [
    # Core
    "SignatureEnvelope",
    "SignatureEntry",
    "VerifyOptions",
    "DEFAULT_SIGNATURE_TOLERANCE",
    # Schemes
    "SignatureScheme",
    "HmacSignatureScheme",
    "SignatureSchemeV1",
    # Registry
    "SchemeRegistry",
    "default_registry",
    "get_default_registry",
    # Signer / verifier
    "WebhookSigner",
    "WebhookVerifier",
    "VerificationResult",
    "VerificationStatus",
    # Errors
    "SignatureError",
    "SignatureParseError",
    "MalformedPairError",
    "MalformedEntryError",
    "InvalidVersionError",
    "UnknownSchemeError",
    "MissingTimestampError",
    "DuplicateTimestampError",
    "InvalidTimestampError",
    "ExpiredSignatureError",
    "UnsignedPayloadError",
    "NoValidSignatureError",
]
