"""Constants for the LDAP authentication bridge."""

from datetime import timedelta

__all__ = [
    "CONFIG_PATH",
    "LDAP_ATTRIBUTES",
    "LDAP_LOGIN_PREFIX",
    "LDAP_SEARCH_TIME_LIMIT",
    "LDAP_TIMEOUT",
    "SEND_CODE_API_HASH",
    "SEND_CODE_API_ID",
    "SIGN_IN_PHONE_CODE",
]

CONFIG_PATH = "/etc/ldapbridge/ldapbridge.yaml"
"""Default configuration path."""

LDAP_ATTRIBUTES = ("telephoneNumber", "givenName", "sn")
"""Attributes retrieved from the user's LDAP entry."""

LDAP_LOGIN_PREFIX = "ldap "
"""Prefix marking a phone number field that holds LDAP credentials.

Real phone numbers never contain a space, so this cannot collide with an
ordinary login.
"""

LDAP_SEARCH_TIME_LIMIT = timedelta(seconds=10)
"""Default time limit for the LDAP user search."""

LDAP_TIMEOUT = timedelta(seconds=30)
"""Default overall timeout for connecting, binding, and searching."""

SEND_CODE_API_ID = 4
"""Application ID used for the internal ``auth.sendCode`` call."""

SEND_CODE_API_HASH = "014b35b6184100b085b0d0572f9b5103"
"""Application hash used for the internal ``auth.sendCode`` call."""

SIGN_IN_PHONE_CODE = "12345"
"""Phone code accepted by the host for codes issued by the internal call.

Users authenticated by LDAP never receive an SMS, so the sign-in request is
completed with this fixed code and the code hash from the internal
``auth.sendCode`` call.
"""
