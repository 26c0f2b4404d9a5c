"""Test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from ldapbridge.config import Config
from ldapbridge.factory import Factory

from .support.config import configure
from .support.host import MockAuthorizationHost
from .support.ldap import MockLDAP, patch_ldap


@pytest.fixture
def config() -> Config:
    """Set up and return the default test configuration.

    The default configuration bypasses the phone code on sign-in and logs at
    debug level.
    """
    return configure("ldap")


@pytest.fixture
def factory(config: Config, mock_host: MockAuthorizationHost) -> Factory:
    """Return a component factory using the mock host."""
    return Factory(config, mock_host)


@pytest.fixture
def mock_host() -> MockAuthorizationHost:
    """Return a mock of the host protocol's authorization handlers."""
    return MockAuthorizationHost()


@pytest.fixture
def mock_ldap() -> Iterator[MockLDAP]:
    """Replace the bonsai LDAP API with a mock class."""
    yield from patch_ldap()
