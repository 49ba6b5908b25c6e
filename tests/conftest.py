"""Shared fixtures for hooksig tests."""

from __future__ import annotations

import pytest
import structlog
from vectors import TEST_TIMESTAMP, FakeSignatureScheme

from hooksig.config import clear_config
from hooksig.registry import SchemeRegistry
from hooksig.schemes import SignatureSchemeV1


@pytest.fixture
def fake_scheme():
    return FakeSignatureScheme()


@pytest.fixture
def registry():
    """Registry holding only the default v1 scheme."""
    return SchemeRegistry([SignatureSchemeV1])


@pytest.fixture
def fake_registry(fake_scheme):
    """Registry holding v1 and the fake v1337 scheme."""
    return SchemeRegistry([SignatureSchemeV1, fake_scheme])


@pytest.fixture
def within_tolerance():
    """Clock positioned inside the default tolerance window."""
    return lambda: TEST_TIMESTAMP + 300


@pytest.fixture(autouse=True)
def _fresh_config():
    clear_config()
    yield
    clear_config()


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI invocations point structlog at the runner's stderr
    yield
    structlog.reset_defaults()
