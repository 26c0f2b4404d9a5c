"""Create LDAP bridge components."""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger

from .config import Config
from .host import AuthorizationHost
from .services.ldap_auth import LDAPAuthService
from .storage.ldap import LDAPStorage

__all__ = ["Factory"]


class Factory:
    """Build LDAP bridge components.

    Parameters
    ----------
    config
        Bridge configuration.
    host
        Authorization handlers of the host protocol.
    logger
        Logger to use for errors. Defaults to the ``ldapbridge`` logger.
    """

    def __init__(
        self,
        config: Config,
        host: AuthorizationHost,
        logger: BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._host = host
        self._logger = logger or structlog.get_logger("ldapbridge")

    def create_ldap_storage(self) -> LDAPStorage:
        """Create a new LDAP storage layer.

        Returns
        -------
        LDAPStorage
            Newly-created LDAP storage, which validates phone numbers with
            the host's phone number check.
        """
        return LDAPStorage(
            self._config.ldap, self._host.check_phone_number, self._logger
        )

    def create_ldap_auth_service(self) -> LDAPAuthService:
        """Create a new service for LDAP sign-in and sign-up.

        Returns
        -------
        LDAPAuthService
            Newly-created LDAP authentication service.
        """
        return LDAPAuthService(
            config=self._config,
            ldap=self.create_ldap_storage(),
            host=self._host,
            logger=self._logger,
        )

    def set_logger(self, logger: BoundLogger) -> None:
        """Replace the internal logger.

        Used by the host to bind request-specific context, such as the
        client's session, before creating services for a request.

        Parameters
        ----------
        logger
            New logger.
        """
        self._logger = logger
