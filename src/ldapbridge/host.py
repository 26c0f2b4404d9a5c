"""Interface to the host protocol's authorization handlers."""

from __future__ import annotations

from typing import Protocol

from .models.auth import (
    Authorization,
    SendCodeRequest,
    SentCode,
    SignInRequest,
    SignUpRequest,
)

__all__ = ["AuthorizationHost"]


class AuthorizationHost(Protocol):
    """The parts of the host protocol used by the LDAP bridge.

    The bridge does not issue sessions or send codes itself. After LDAP
    authentication it calls back into these handlers with the identity
    retrieved from LDAP, so all of the host's own checks still apply.
    Errors raised by these methods should be subclasses of
    `~ldapbridge.exceptions.HostProtocolError` and are passed through to the
    client unchanged.
    """

    def check_phone_number(self, phone_number: str) -> str:
        """Validate and normalize a phone number.

        Parameters
        ----------
        phone_number
            Phone number to check.

        Returns
        -------
        str
            Normalized form of the phone number.

        Raises
        ------
        PhoneNumberInvalidError
            Raised if the phone number is not valid.
        """

    async def send_code(self, request: SendCodeRequest) -> SentCode:
        """Handle an ``auth.sendCode`` request."""

    async def sign_in(self, request: SignInRequest) -> Authorization:
        """Handle an ``auth.signIn`` request."""

    async def sign_up(self, request: SignUpRequest) -> Authorization:
        """Handle an ``auth.signUp`` request."""
