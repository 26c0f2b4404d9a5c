"""Configuration for the LDAP authentication bridge.

The bridge is configured by a YAML file read by the host service. Settings
with explicit ``validation_alias`` settings may also be overridden by
environment variables, which take precedence over the file.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Annotated, Self

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    UrlConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import Url
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, configure_logging
from safir.pydantic import HumanTimedelta
from typing_extensions import override

from .constants import CONFIG_PATH, LDAP_SEARCH_TIME_LIMIT, LDAP_TIMEOUT

LdapDsn = Annotated[
    Url, UrlConstraints(allowed_schemes=["ldap", "ldaps"], host_required=True)
]
"""DSN for connecting to an LDAP server."""

__all__ = [
    "CamelCaseModel",
    "CamelCaseSettings",
    "Config",
    "EnvFirstSettings",
    "LDAPConfig",
    "LdapDsn",
]


class CamelCaseModel(BaseModel):
    """Base class for configuration models supporting camel-case.

    Models derived from this class are immutable, since configuration is
    shared by every request for the lifetime of the process.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )


class CamelCaseSettings(BaseSettings):
    """Base class for Pydantic settings supporting camel-case."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )


class EnvFirstSettings(CamelCaseSettings):
    """Base class for Pydantic settings with environment overrides.

    Classes that inherit from this base class will prioritize environment
    variables over arguments to the class constructor.
    """

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support. Allow environment
        variables to override init parameters, since init parameters come
        from the YAML configuration file.
        """
        return (env_settings, init_settings)


class LDAPConfig(CamelCaseModel):
    """Configuration for LDAP authentication.

    Users are always bound as ``uid=<username>,<baseDn>`` and searched for
    by ``uid`` in the subtree under ``baseDn``.
    """

    url: LdapDsn = Field(
        ...,
        title="LDAP server URL",
        description="URL of LDAP server to authenticate users against",
    )

    base_dn: str = Field(
        ...,
        title="Base DN for users",
        description=(
            "Base DN under which user entries are found. Also used to"
            " construct the DN of the user for the simple bind."
        ),
        examples=["ou=people,dc=example,dc=com"],
    )

    time_limit: HumanTimedelta = Field(
        LDAP_SEARCH_TIME_LIMIT,
        title="Search time limit",
        description="Time limit for the search for the user's entry",
    )

    timeout: HumanTimedelta = Field(
        LDAP_TIMEOUT,
        title="Overall timeout",
        description=(
            "Time limit for connecting, binding, and searching combined."
            " Exceeding it while connecting is reported as the LDAP server"
            " being unavailable."
        ),
    )

    @field_validator("base_dn")
    @classmethod
    def _validate_base_dn(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("baseDn must not be empty")
        return v

    @field_validator("time_limit", "timeout")
    @classmethod
    def _validate_positive(cls, v: timedelta) -> timedelta:
        if v <= timedelta(seconds=0):
            raise ValueError("must be positive")
        return v


class Config(EnvFirstSettings):
    """Configuration for the LDAP authentication bridge."""

    ldap: LDAPConfig = Field(
        ...,
        title="LDAP configuration",
        description="Settings for authenticating users against LDAP",
    )

    bypass_phone_code: bool = Field(
        True,
        title="Bypass phone code",
        description=(
            "If true, users authenticated by LDAP sign in without a phone"
            " code. The bridge requests a code hash from the host itself and"
            " signs in with the fixed code accepted for it. If false, the"
            " code and code hash from the client's request are used."
        ),
        validation_alias=AliasChoices(
            "LDAPBRIDGE_BYPASS_PHONE_CODE", "bypassPhoneCode"
        ),
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Logging level",
        description="Python logging level",
        validation_alias=AliasChoices("LDAPBRIDGE_LOG_LEVEL", "logLevel"),
    )

    @classmethod
    def from_file(cls, path: Path | None = None) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML. Defaults to
            ``/etc/ldapbridge/ldapbridge.yaml``.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        if not path:
            path = Path(CONFIG_PATH)
        with path.open("r") as f:
            return cls(**yaml.safe_load(f))

    def configure_logging(self) -> None:
        """Configure logging based on the configuration."""
        configure_logging(name="ldapbridge", log_level=self.log_level)
