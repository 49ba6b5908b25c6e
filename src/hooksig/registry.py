"""Scheme registry.

Maps scheme versions to schemes. Writers take a lock and publish a new
tuple; readers use whatever tuple is current, so a lookup never sees a
half-applied change.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator

import structlog

from hooksig.schemes import SignatureScheme, SignatureSchemeV1

logger = structlog.get_logger()


class SchemeRegistry:
    """Versioned set of signature schemes.

    At most one scheme is held per version. Registering a version that is
    already present is a no-op.
    """

    def __init__(self, schemes: Iterable[SignatureScheme] = ()) -> None:
        self._lock = threading.Lock()
        self._schemes: tuple[SignatureScheme, ...] = ()
        for scheme in schemes:
            self.register(scheme)

    @property
    def schemes(self) -> tuple[SignatureScheme, ...]:
        """Snapshot of registered schemes in registration order."""
        return self._schemes

    def find(self, version: int) -> SignatureScheme | None:
        for scheme in self._schemes:
            if scheme.version == version:
                return scheme
        return None

    def register(self, scheme: SignatureScheme) -> None:
        with self._lock:
            if any(s.version == scheme.version for s in self._schemes):
                return
            self._schemes = (*self._schemes, scheme)
        logger.debug("scheme_registered", version=scheme.version, scheme=repr(scheme))

    def unregister(self, version: int) -> None:
        with self._lock:
            remaining = tuple(s for s in self._schemes if s.version != version)
            removed = len(self._schemes) - len(remaining)
            self._schemes = remaining
        if removed:
            logger.debug("scheme_unregistered", version=version)

    def __iter__(self) -> Iterator[SignatureScheme]:
        return iter(self._schemes)

    def __len__(self) -> int:
        return len(self._schemes)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, SignatureScheme):
            item = item.version
        return self.find(item) is not None  # type: ignore[arg-type]

    def __repr__(self) -> str:
        versions = ", ".join(str(s.version) for s in self._schemes)
        return f"SchemeRegistry([{versions}])"


default_registry = SchemeRegistry([SignatureSchemeV1])
"""Process-wide registry used when no registry is passed explicitly."""


def get_default_registry() -> SchemeRegistry:
    return default_registry
