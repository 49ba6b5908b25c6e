"""Tests for the scheme registry."""

from __future__ import annotations

import threading

from hooksig.registry import SchemeRegistry, default_registry, get_default_registry
from hooksig.schemes import HmacSignatureScheme, SignatureSchemeV1


class TestSchemeRegistry:
    """Tests for SchemeRegistry."""

    def test_find_registered(self, registry) -> None:
        """Test lookup of a registered version."""
        assert registry.find(1) is SignatureSchemeV1

    def test_find_missing(self, registry) -> None:
        """Test lookup of an unknown version returns None."""
        assert registry.find(999) is None

    def test_register(self, registry, fake_scheme) -> None:
        """Test registering a new version."""
        registry.register(fake_scheme)
        assert registry.find(1337) is fake_scheme
        assert len(registry) == 2

    def test_register_first_wins(self, registry) -> None:
        """Test registering an existing version is a no-op."""
        other_v1 = HmacSignatureScheme(version=1, digestmod="sha512")
        registry.register(other_v1)
        assert registry.find(1) is SignatureSchemeV1
        assert len(registry) == 1

    def test_register_preserves_order(self, registry, fake_scheme) -> None:
        """Test schemes are kept in registration order."""
        v2 = HmacSignatureScheme(version=2, digestmod="sha512")
        registry.register(fake_scheme)
        registry.register(v2)
        assert [s.version for s in registry] == [1, 1337, 2]

    def test_unregister(self, fake_registry) -> None:
        """Test unregistering removes the version."""
        fake_registry.unregister(1337)
        assert fake_registry.find(1337) is None
        assert [s.version for s in fake_registry] == [1]

    def test_unregister_missing(self, registry) -> None:
        """Test unregistering an unknown version is not an error."""
        registry.unregister(42)
        assert len(registry) == 1

    def test_contains(self, fake_registry, fake_scheme) -> None:
        """Test membership by version and by scheme."""
        assert 1 in fake_registry
        assert fake_scheme in fake_registry
        assert 2 not in fake_registry

    def test_snapshot_unaffected_by_later_changes(self, registry, fake_scheme) -> None:
        """Test schemes snapshot is immutable."""
        snapshot = registry.schemes
        registry.register(fake_scheme)
        assert snapshot == (SignatureSchemeV1,)
        assert registry.schemes == (SignatureSchemeV1, fake_scheme)

    def test_empty_registry(self) -> None:
        """Test registry can start empty."""
        registry = SchemeRegistry()
        assert len(registry) == 0
        assert registry.find(1) is None

    def test_repr(self, fake_registry) -> None:
        """Test repr lists versions."""
        assert repr(fake_registry) == "SchemeRegistry([1, 1337])"


class TestDefaultRegistry:
    """Tests for the process-wide registry."""

    def test_contains_v1(self) -> None:
        """Test default registry is initialized with v1."""
        assert get_default_registry() is default_registry
        assert default_registry.find(1) is SignatureSchemeV1


class TestConcurrency:
    """Tests for concurrent registry mutation."""

    def test_concurrent_register_single_winner(self) -> None:
        """Test racing registrations of one version keep exactly one scheme."""
        registry = SchemeRegistry()
        candidates = [HmacSignatureScheme(version=5) for _ in range(20)]
        barrier = threading.Barrier(len(candidates))

        def register(scheme):
            barrier.wait()
            registry.register(scheme)

        threads = [threading.Thread(target=register, args=(s,)) for s in candidates]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 1
        assert registry.find(5) in candidates

    def test_concurrent_distinct_versions(self) -> None:
        """Test no registration is lost under contention."""
        registry = SchemeRegistry()
        threads = [
            threading.Thread(target=registry.register, args=(HmacSignatureScheme(version=v),))
            for v in range(1, 51)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(s.version for s in registry) == list(range(1, 51))
