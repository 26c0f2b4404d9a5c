"""LDAP storage layer for the authentication bridge."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import bonsai
from bonsai import LDAPClient, LDAPSearchScope
from bonsai.asyncio import AIOLDAPConnection
from bonsai.utils import escape_attribute_value, escape_filter_exp
from structlog.stdlib import BoundLogger

from ..config import LDAPConfig
from ..constants import LDAP_ATTRIBUTES
from ..exceptions import (
    DirectoryAuthFailedError,
    DirectoryUnavailableError,
    HostProtocolError,
    IdentityNotFoundError,
    InvalidDirectoryAttributeError,
)
from ..models.ldap import LDAPCredentials, LDAPUserData

__all__ = ["LDAPStorage"]


@dataclass(frozen=True)
class _AttributeRule:
    """How to turn one LDAP attribute into a field of `LDAPUserData`.

    A missing attribute always leaves the field empty. If ``convert`` raises
    `~ldapbridge.exceptions.HostProtocolError`, the whole lookup fails.
    """

    attribute: str
    """Name of the LDAP attribute."""

    field: str
    """Name of the corresponding field of `LDAPUserData`."""

    convert: Callable[[str], str]
    """Conversion applied to the first value of the attribute."""


class LDAPStorage:
    """Authenticate users against LDAP and retrieve their identity.

    Every lookup opens a new connection bound as the user, so no connection
    or credentials are shared between requests.

    Parameters
    ----------
    config
        Configuration for LDAP.
    check_phone_number
        Host protocol's phone number check, which returns the normalized
        phone number or raises
        `~ldapbridge.exceptions.PhoneNumberInvalidError`.
    logger
        Logger for debug messages and errors.
    """

    def __init__(
        self,
        config: LDAPConfig,
        check_phone_number: Callable[[str], str],
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._logger = logger.bind(ldap_url=str(config.url))
        self._rules = (
            _AttributeRule(
                "telephoneNumber", "phone_number", check_phone_number
            ),
            _AttributeRule("givenName", "first_name", str.strip),
            _AttributeRule("sn", "last_name", str.strip),
        )

    async def get_user_data(
        self, credentials: LDAPCredentials
    ) -> LDAPUserData:
        """Authenticate as a user and get their data from LDAP.

        Parameters
        ----------
        credentials
            Username and password of the user.

        Returns
        -------
        LDAPUserData
            Phone number and names of the user. Fields whose attributes are
            missing from the user's entry are empty.

        Raises
        ------
        DirectoryUnavailableError
            Raised if the connection to the LDAP server failed or timed out.
        DirectoryAuthFailedError
            Raised if the bind as the user or the search failed.
        IdentityNotFoundError
            Raised if the search did not return exactly one entry.
        InvalidDirectoryAttributeError
            Raised if the phone number in the user's entry is not valid.
        """
        username = credentials.username
        logger = self._logger.bind(user=username)

        # A simple bind with an empty password is an anonymous bind and
        # would succeed without checking anything.
        password = credentials.password.get_secret_value()
        if not username or not password:
            logger.info("Refusing LDAP bind with empty username or password")
            msg = "Empty username or password"
            raise DirectoryAuthFailedError(msg, username)

        rdn = f"uid={escape_attribute_value(username)}"
        bind_dn = f"{rdn},{self._config.base_dn}"
        logger = logger.bind(ldap_bind_dn=bind_dn)

        client = LDAPClient(str(self._config.url))
        client.set_credentials("SIMPLE", user=bind_dn, password=password)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._config.timeout.total_seconds()
        conn = await self._connect(client, deadline, username, logger)
        try:
            entries = await self._search(conn, deadline, username, logger)
        finally:
            conn.close()

        if len(entries) != 1:
            logger.info("No unique LDAP entry for user", count=len(entries))
            msg = f"Found {len(entries)} LDAP entries for user"
            raise IdentityNotFoundError(msg, username)

        data = self._parse_entry(entries[0], username, logger)
        logger.debug("Retrieved LDAP user data", ldap_data=data)
        return data

    async def _connect(
        self,
        client: LDAPClient,
        deadline: float,
        username: str,
        logger: BoundLogger,
    ) -> AIOLDAPConnection:
        """Connect to the LDAP server and bind as the user.

        Parameters
        ----------
        client
            LDAP client with the user's credentials set.
        deadline
            Event loop time by which the connection must be established.
        username
            User being authenticated, for error reporting.
        logger
            Logger to use.

        Returns
        -------
        bonsai.asyncio.AIOLDAPConnection
            Open connection, which the caller must close.

        Raises
        ------
        DirectoryUnavailableError
            Raised if the connection failed or timed out.
        DirectoryAuthFailedError
            Raised if the bind was rejected.
        """
        # bonsai abandons and closes a connection that times out on its own
        # timeout, which leaves the deadline below as a backstop only.
        remaining = deadline - asyncio.get_running_loop().time()
        try:
            async with asyncio.timeout_at(deadline):
                return await client.connect(
                    is_async=True, timeout=max(remaining, 0.001)
                )
        except bonsai.AuthenticationError as e:
            logger.info("Cannot bind to LDAP server", error=str(e))
            msg = "Invalid credentials"
            raise DirectoryAuthFailedError(msg, username) from e
        except (bonsai.ConnectionError, bonsai.TimeoutError) as e:
            msg = "Cannot connect to LDAP server"
            logger.error(msg, error=str(e))
            raise DirectoryUnavailableError(msg, username) from e
        except TimeoutError as e:
            msg = "Timed out connecting to LDAP server"
            logger.error(msg)
            raise DirectoryUnavailableError(msg, username) from e
        except bonsai.LDAPError as e:
            logger.info("Cannot bind to LDAP server", error=str(e))
            raise DirectoryAuthFailedError("Bind failed", username) from e

    async def _search(
        self,
        conn: AIOLDAPConnection,
        deadline: float,
        username: str,
        logger: BoundLogger,
    ) -> list[dict[str, list[str]]]:
        """Search for the entry of a user.

        Parameters
        ----------
        conn
            Connection bound as the user.
        deadline
            Event loop time by which the search must finish.
        username
            User to search for.
        logger
            Logger to use.

        Returns
        -------
        list of dict
            Entries found, each a mapping of attribute name to values.

        Raises
        ------
        DirectoryAuthFailedError
            Raised if the search failed or timed out.
        """
        search = f"(uid={escape_filter_exp(username)})"
        base = self._config.base_dn
        logger = logger.bind(ldap_base=base, ldap_search=search)
        try:
            async with asyncio.timeout_at(deadline):
                logger.debug("Querying LDAP")
                return await conn.search(
                    base=base,
                    scope=LDAPSearchScope.SUB,
                    filter_exp=search,
                    attrlist=list(LDAP_ATTRIBUTES),
                    timeout=self._config.time_limit.total_seconds(),
                )
        except (bonsai.LDAPError, TimeoutError) as e:
            logger.info("Cannot query LDAP", error=str(e))
            msg = "LDAP search failed"
            raise DirectoryAuthFailedError(msg, username) from e

    def _parse_entry(
        self, entry: dict[str, list[str]], username: str, logger: BoundLogger
    ) -> LDAPUserData:
        """Convert the user's entry to `LDAPUserData`.

        Raises
        ------
        InvalidDirectoryAttributeError
            Raised if an attribute value was rejected.
        """
        data = LDAPUserData()
        for rule in self._rules:
            if rule.attribute not in entry or not entry[rule.attribute]:
                continue
            value = str(entry[rule.attribute][0])
            try:
                setattr(data, rule.field, rule.convert(value))
            except HostProtocolError as e:
                logger.warning(
                    "Invalid attribute in LDAP entry",
                    attribute=rule.attribute,
                    value=value,
                    error=str(e),
                )
                msg = f"Invalid {rule.attribute} in LDAP entry"
                raise InvalidDirectoryAttributeError(msg, username) from e
        return data
