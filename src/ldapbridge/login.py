"""Parsing of LDAP credentials disguised as a phone number."""

from __future__ import annotations

from pydantic import SecretStr

from .constants import LDAP_LOGIN_PREFIX
from .exceptions import MalformedLoginError
from .models.ldap import LDAPCredentials

__all__ = ["is_ldap_login", "parse_ldap_login"]


def is_ldap_login(login: str) -> bool:
    """Whether a phone number field holds LDAP credentials.

    Parameters
    ----------
    login
        Contents of the phone number field of a sign-in or sign-up request.

    Returns
    -------
    bool
        `True` if the field starts with the LDAP login prefix.
    """
    return login.startswith(LDAP_LOGIN_PREFIX)


def parse_ldap_login(login: str) -> LDAPCredentials:
    """Parse a login string of the form ``ldap <username> <password>``.

    The username and password are separated by a single space and may not
    contain spaces themselves.

    Parameters
    ----------
    login
        Contents of the phone number field of a sign-in or sign-up request.

    Returns
    -------
    LDAPCredentials
        The parsed credentials.

    Raises
    ------
    MalformedLoginError
        Raised if the prefix is missing or the remainder is not exactly two
        space-separated tokens.
    """
    if not is_ldap_login(login):
        raise MalformedLoginError("Login string does not start with ldap")
    tokens = login[len(LDAP_LOGIN_PREFIX) :].split(" ")
    if len(tokens) != 2:
        msg = f"Expected username and password, got {len(tokens)} tokens"
        raise MalformedLoginError(msg)
    password = SecretStr(tokens[1])
    return LDAPCredentials(username=tokens[0], password=password)
