"""Signature schemes.

A scheme is a versioned signing algorithm. The version number is what
appears on the wire (``v1=...``), so a scheme's version must never change
once signatures made with it are in circulation.

Usage:
    from hooksig.schemes import HmacSignatureScheme

    # A SHA-512 variant published as version 2
    scheme_v2 = HmacSignatureScheme(version=2, digestmod="sha512")
    registry.register(scheme_v2)
"""

from __future__ import annotations

import hashlib
import hmac
from abc import ABC, abstractmethod


class SignatureScheme(ABC):
    """Base class for signature schemes.

    Implementations must be deterministic: the same timestamp, payload and
    secret always produce the same signature string.
    """

    @property
    @abstractmethod
    def version(self) -> int:
        """Positive integer identifying the scheme on the wire."""
        ...

    @abstractmethod
    def sign(self, timestamp: int, payload: bytes, secret: str) -> str:
        """Compute the signature for a payload.

        Args:
            timestamp: Signing time in milliseconds.
            payload: Raw payload bytes, exactly as transmitted.
            secret: Shared secret.

        Returns:
            Signature string. Must not contain ``,`` or ``=``.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version})"


class HmacSignatureScheme(SignatureScheme):
    """HMAC over ``"{timestamp}.{payload}"`` rendered as lowercase hex."""

    def __init__(self, version: int, digestmod: str = "sha256") -> None:
        if version <= 0:
            raise ValueError(f"Scheme version must be positive, got {version}")
        # Fail on unknown digests at construction, not on first sign()
        hashlib.new(digestmod)
        self._version = version
        self.digestmod = digestmod

    @property
    def version(self) -> int:
        return self._version

    def sign(self, timestamp: int, payload: bytes, secret: str) -> str:
        signed_payload = f"{timestamp}.".encode() + bytes(payload)
        return hmac.new(
            secret.encode("utf-8"),
            signed_payload,
            self.digestmod,
        ).hexdigest()

    def __repr__(self) -> str:
        return f"HmacSignatureScheme(version={self._version}, digestmod={self.digestmod!r})"


SignatureSchemeV1 = HmacSignatureScheme(version=1, digestmod="sha256")
"""Default scheme: HMAC-SHA256, hex digest."""
