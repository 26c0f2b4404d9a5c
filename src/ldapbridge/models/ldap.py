"""Data models for LDAP."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import SecretStr

__all__ = ["LDAPCredentials", "LDAPUserData"]


@dataclass(frozen=True)
class LDAPCredentials:
    """Credentials for a simple bind to LDAP as a user."""

    username: str
    """Value of the ``uid`` attribute of the user's entry."""

    password: SecretStr
    """Password of the user."""


@dataclass
class LDAPUserData:
    """Data for a user from LDAP.

    Every field is filled in independently from the corresponding attribute
    of the user's entry and is left empty if that attribute is missing.
    """

    phone_number: str = ""
    """Phone number, normalized by the host protocol's validity check."""

    first_name: str = ""
    """Given name."""

    last_name: str = ""
    """Surname."""
