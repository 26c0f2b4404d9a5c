"""Exceptions for the LDAP authentication bridge."""

from __future__ import annotations

from typing import ClassVar

__all__ = [
    "DirectoryAuthFailedError",
    "DirectoryUnavailableError",
    "HostProtocolError",
    "IdentityNotFoundError",
    "InvalidDirectoryAttributeError",
    "LDAPError",
    "MalformedLoginError",
    "PhoneCodeInvalidError",
    "PhoneNumberInvalidError",
    "SignInFailedError",
]


class MalformedLoginError(ValueError):
    """The login string is not of the form ``ldap <username> <password>``.

    The message never includes the login string, since it may contain a
    password.
    """


class LDAPError(Exception):
    """Retrieving user information from LDAP failed.

    This is the base class for all directory failures. The distinction
    between the subclasses is only for logging. Callers outside this package
    see a single sign-in failure regardless of the cause.

    Parameters
    ----------
    message
        Human-readable description of the failure.
    user
        Username whose lookup failed.
    """

    def __init__(self, message: str, user: str) -> None:
        super().__init__(message)
        self.user = user


class DirectoryUnavailableError(LDAPError):
    """Unable to connect to the LDAP server."""


class DirectoryAuthFailedError(LDAPError):
    """The LDAP server rejected the user's credentials or the search."""


class IdentityNotFoundError(LDAPError):
    """The user search returned no entries or more than one entry."""


class InvalidDirectoryAttributeError(LDAPError):
    """An attribute of the user's LDAP entry has an invalid value."""


class HostProtocolError(Exception):
    """An error returned to the client of the host protocol.

    Host protocol errors are identified on the wire by a numeric code and an
    error string. Anything raised by the bridge towards the client must be
    one of these so that the protocol itself appears unchanged.
    """

    error: ClassVar[str] = "INTERNAL"
    """The error string sent to the client."""

    code: ClassVar[int] = 500
    """The numeric error code sent to the client."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.error)


class PhoneNumberInvalidError(HostProtocolError):
    """The phone number is not valid."""

    error = "PHONE_NUMBER_INVALID"
    code = 400


class PhoneCodeInvalidError(HostProtocolError):
    """The phone code or its hash is not valid."""

    error = "PHONE_CODE_INVALID"
    code = 400


class SignInFailedError(HostProtocolError):
    """Sign-in failed for an unspecified reason."""

    error = "SIGN_IN_FAILED"
    code = 400
