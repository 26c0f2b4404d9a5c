"""Models for the host protocol authorization requests and replies."""

from __future__ import annotations

from pydantic import BaseModel, Field

__all__ = [
    "Authorization",
    "SendCodeRequest",
    "SentCode",
    "SignInRequest",
    "SignUpRequest",
]


class SendCodeRequest(BaseModel):
    """Request to send a login code to a phone number."""

    api_id: int = Field(..., title="Application ID")

    api_hash: str = Field(..., title="Application hash")

    phone_number: str = Field(..., title="Phone number")


class SentCode(BaseModel):
    """Reply to a send code request."""

    phone_code_hash: str = Field(
        ...,
        title="Phone code hash",
        description="Opaque hash that must accompany the code on sign-in",
    )


class SignInRequest(BaseModel):
    """Request to sign in with a phone number and login code.

    For LDAP logins, ``phone_number`` holds ``ldap <username> <password>``
    rather than a phone number.
    """

    phone_number: str = Field(..., title="Phone number")

    phone_code: str = Field("", title="Login code")

    phone_code_hash: str = Field("", title="Phone code hash")


class SignUpRequest(BaseModel):
    """Request to register a new user for a phone number.

    For LDAP logins, ``phone_number`` holds ``ldap <username> <password>``
    and the names are replaced by the ones from LDAP.
    """

    phone_number: str = Field(..., title="Phone number")

    phone_code_hash: str = Field("", title="Phone code hash")

    first_name: str = Field("", title="First name")

    last_name: str = Field("", title="Last name")


class Authorization(BaseModel):
    """Successful authorization returned by the host protocol."""

    user_id: int = Field(..., title="User ID")

    phone_number: str = Field(..., title="Phone number")

    first_name: str = Field("", title="First name")

    last_name: str = Field("", title="Last name")
