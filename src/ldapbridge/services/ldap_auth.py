"""Sign-in and sign-up with LDAP credentials disguised as a phone number.

No part of the host protocol is altered. The client sends the LDAP
credentials as ``ldap <username> <password>`` in the phone number field of an
ordinary sign-in or sign-up request. After successful authentication, the
phone number and names stored in LDAP are passed on to the regular sign-in
and sign-up handlers of the host.
"""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from ..config import Config
from ..constants import (
    SEND_CODE_API_HASH,
    SEND_CODE_API_ID,
    SIGN_IN_PHONE_CODE,
)
from ..exceptions import (
    LDAPError,
    MalformedLoginError,
    PhoneNumberInvalidError,
    SignInFailedError,
)
from ..host import AuthorizationHost
from ..login import is_ldap_login, parse_ldap_login
from ..models.auth import (
    Authorization,
    SendCodeRequest,
    SignInRequest,
    SignUpRequest,
)
from ..models.ldap import LDAPUserData
from ..storage.ldap import LDAPStorage

__all__ = ["LDAPAuthService"]


class LDAPAuthService:
    """Authenticate users of the host protocol against LDAP.

    Parameters
    ----------
    config
        Bridge configuration.
    ldap
        LDAP storage layer used to authenticate users.
    host
        Authorization handlers of the host protocol.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        config: Config,
        ldap: LDAPStorage,
        host: AuthorizationHost,
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._ldap = ldap
        self._host = host
        self._logger = logger

    async def sign_in(self, request: SignInRequest) -> Authorization:
        """Handle a sign-in request.

        Requests with LDAP credentials in the phone number field are
        authenticated against LDAP. All other requests go to the host
        unchanged.
        """
        if is_ldap_login(request.phone_number):
            return await self.ldap_sign_in(request)
        return await self._host.sign_in(request)

    async def sign_up(self, request: SignUpRequest) -> Authorization:
        """Handle a sign-up request.

        Requests with LDAP credentials in the phone number field are
        authenticated against LDAP. All other requests go to the host
        unchanged.
        """
        if is_ldap_login(request.phone_number):
            return await self.ldap_sign_up(request)
        return await self._host.sign_up(request)

    async def get_user_data(self, login: str) -> LDAPUserData:
        """Authenticate against LDAP and retrieve the user's data.

        Parameters
        ----------
        login
            Login string of the form ``ldap <username> <password>``.

        Returns
        -------
        LDAPUserData
            Phone number and names of the user from LDAP.

        Raises
        ------
        PhoneNumberInvalidError
            Raised if the login string is malformed, so that it looks to the
            client like any other invalid phone number.
        SignInFailedError
            Raised if LDAP authentication or lookup failed for any reason.
            The reason is logged but not returned to the client.
        """
        try:
            credentials = parse_ldap_login(login)
        except MalformedLoginError as e:
            self._logger.warning("Malformed LDAP login string", error=str(e))
            raise PhoneNumberInvalidError from e

        logger = self._logger.bind(user=credentials.username)
        try:
            return await self._ldap.get_user_data(credentials)
        except LDAPError as e:
            logger.error(
                "LDAP authentication failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SignInFailedError from e

    async def ldap_sign_in(self, request: SignInRequest) -> Authorization:
        """Sign in a user authenticated by LDAP.

        Unless configured otherwise, the user does not have to provide a
        phone code. Instead, a code is requested from the host for the phone
        number from LDAP, and the sign-in is completed with that code hash
        and the fixed code the host accepts for it.

        Parameters
        ----------
        request
            Sign-in request with LDAP credentials in the phone number field.

        Returns
        -------
        Authorization
            Result of the host's sign-in handler.

        Raises
        ------
        PhoneNumberInvalidError
            Raised if the login string is malformed.
        SignInFailedError
            Raised if LDAP authentication failed.
        """
        data = await self.get_user_data(request.phone_number)
        logger = self._logger.bind(phone_number=data.phone_number)
        logger.debug("Got LDAP data for sign-in", ldap_data=data)

        if not self._config.bypass_phone_code:
            update = {"phone_number": data.phone_number}
            return await self._host.sign_in(request.model_copy(update=update))

        send_code = SendCodeRequest(
            api_id=SEND_CODE_API_ID,
            api_hash=SEND_CODE_API_HASH,
            phone_number=data.phone_number,
        )
        sent_code = await self._host.send_code(send_code)
        logger.debug("Requested phone code for LDAP user")

        sign_in = request.model_copy(
            update={
                "phone_number": data.phone_number,
                "phone_code": SIGN_IN_PHONE_CODE,
                "phone_code_hash": sent_code.phone_code_hash,
            }
        )
        return await self._host.sign_in(sign_in)

    async def ldap_sign_up(self, request: SignUpRequest) -> Authorization:
        """Register a user authenticated by LDAP.

        The phone number and names in the request are replaced with the ones
        from LDAP.

        Parameters
        ----------
        request
            Sign-up request with LDAP credentials in the phone number field.

        Returns
        -------
        Authorization
            Result of the host's sign-up handler.

        Raises
        ------
        PhoneNumberInvalidError
            Raised if the login string is malformed.
        SignInFailedError
            Raised if LDAP authentication failed.
        """
        data = await self.get_user_data(request.phone_number)
        sign_up = request.model_copy(
            update={
                "phone_number": data.phone_number,
                "first_name": data.first_name,
                "last_name": data.last_name,
            }
        )
        return await self._host.sign_up(sign_up)
