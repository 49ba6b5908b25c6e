"""Hooksig Webhook Signer and Verifier.

Thin, configurable wrappers around SignatureEnvelope for the two sides of a
webhook exchange.

Usage:
    from hooksig import WebhookSigner, WebhookVerifier

    # Sender: sign with the current and previous secret during rotation
    signer = WebhookSigner(secrets=["whsec_new", "whsec_old"])
    headers["Webhook-Signature"] = signer.sign(body)

    # Receiver
    verifier = WebhookVerifier(secret="whsec_new")
    result = verifier.check(headers.get("Webhook-Signature"), body)

    if result.valid:
        print("Webhook verified!")
    else:
        print(f"Verification failed: {result.error}")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import structlog

from hooksig.config import HooksigConfig, get_config
from hooksig.envelope import (
    DEFAULT_SIGNATURE_TOLERANCE,
    SignatureEnvelope,
    VerifyOptions,
    now_ms,
)
from hooksig.errors import SignatureError, VerificationStatus
from hooksig.registry import SchemeRegistry
from hooksig.schemes import SignatureScheme

logger = structlog.get_logger()


@dataclass
class VerificationResult:
    """Result of webhook signature verification."""

    valid: bool
    """Whether the signature is valid."""

    status: VerificationStatus
    """Detailed verification status."""

    error: str | None = None
    """Error message if verification failed."""

    timestamp: int | None = None
    """Signature timestamp if the header could be parsed."""

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid


class WebhookSigner:
    """Produces signature header values for outgoing webhooks."""

    def __init__(
        self,
        secrets: str | Sequence[str],
        schemes: Iterable[SignatureScheme] | None = None,
        registry: SchemeRegistry | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the signer.

        Args:
            secrets: Secret or secrets to sign with. Every secret produces
                one entry per scheme.
            schemes: Schemes to sign with. Defaults to all registered schemes.
            registry: Registry supplying the default schemes.
            clock: Clock returning the current time in milliseconds.
        """
        self.secrets = [secrets] if isinstance(secrets, str) else list(secrets)
        self.schemes = list(schemes) if schemes is not None else None
        self.registry = registry
        self.clock = clock or now_ms

    def create_envelope(self, payload: bytes, timestamp: int | None = None) -> SignatureEnvelope:
        return SignatureEnvelope.create(
            timestamp=timestamp if timestamp is not None else self.clock(),
            payload=payload,
            secrets=self.secrets,
            schemes=self.schemes,
            registry=self.registry,
        )

    def sign(self, payload: bytes, timestamp: int | None = None) -> str:
        """Sign a payload and return the header value.

        Args:
            payload: Raw payload bytes, exactly as they will be sent.
            timestamp: Signing time in milliseconds. Defaults to now.
        """
        envelope = self.create_envelope(payload, timestamp)
        logger.debug(
            "webhook_signed",
            timestamp=envelope.timestamp,
            signatures=len(envelope.entries),
        )
        return envelope.to_text()


class WebhookVerifier:
    """Verifies signature header values on incoming webhooks.

    Verification passes if any trusted entry in the header matches the
    payload under this verifier's secret.
    """

    def __init__(
        self,
        secret: str,
        tolerance: int = DEFAULT_SIGNATURE_TOLERANCE,
        ignore_tolerance: bool = False,
        untrusted_schemes: Iterable[SignatureScheme | int] = (),
        registry: SchemeRegistry | None = None,
        now: Callable[[], int] | None = None,
        options: VerifyOptions | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            secret: The shared secret.
            tolerance: Maximum signature age in seconds (default 5 min).
            ignore_tolerance: Accept signatures of any age.
            untrusted_schemes: Schemes or versions that never authorize a payload.
            registry: Registry used to resolve scheme versions.
            now: Clock override returning the current time in milliseconds.
            options: Prebuilt verification options. Replaces tolerance,
                ignore_tolerance, untrusted_schemes and now when given.
        """
        self.secret = secret
        self.registry = registry
        if options is None:
            options = VerifyOptions(
                tolerance=tolerance,
                ignore_tolerance=ignore_tolerance,
                now=now,
                untrusted_schemes=untrusted_schemes,
            )
        self.options = options

    @classmethod
    def from_config(
        cls,
        secret: str,
        config: HooksigConfig | None = None,
        registry: SchemeRegistry | None = None,
        now: Callable[[], int] | None = None,
    ) -> WebhookVerifier:
        """Create a verifier from configuration (the global config by default)."""
        if config is None:
            config = get_config()
        return cls(
            secret=secret,
            registry=registry,
            options=config.verify_options(now=now),
        )

    def parse(self, header_value: str) -> SignatureEnvelope:
        return SignatureEnvelope.parse(header_value, registry=self.registry)

    def verify(self, header_value: str, payload: bytes) -> SignatureEnvelope:
        """Parse and verify a header value.

        Returns:
            The verified envelope.

        Raises:
            SignatureError: Subclass describing why verification failed.
        """
        envelope = self.parse(header_value)
        envelope.verify(payload, self.secret, self.options)
        return envelope

    def check(self, header_value: str | None, payload: bytes) -> VerificationResult:
        """Verify a header value without raising.

        Args:
            header_value: The signature header value, or None if absent.
            payload: The raw request body bytes.

        Returns:
            VerificationResult with status and details.
        """
        if not header_value:
            return VerificationResult(
                valid=False,
                status=VerificationStatus.MISSING_SIGNATURE,
                error="No signature provided",
            )

        timestamp = None
        try:
            envelope = self.parse(header_value)
            timestamp = envelope.timestamp
            envelope.verify(payload, self.secret, self.options)
        except SignatureError as e:
            logger.warning(
                "webhook_verification_failed",
                status=e.status.value,
                error=str(e),
                timestamp=timestamp,
            )
            return VerificationResult(
                valid=False,
                status=e.status,
                error=str(e),
                timestamp=timestamp,
            )

        logger.debug("webhook_verified", timestamp=timestamp)
        return VerificationResult(
            valid=True,
            status=VerificationStatus.VALID,
            timestamp=timestamp,
        )
