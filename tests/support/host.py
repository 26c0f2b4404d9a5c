"""Mock host protocol for testing."""

from __future__ import annotations

import re
from secrets import token_hex

from ldapbridge.constants import SIGN_IN_PHONE_CODE
from ldapbridge.exceptions import (
    PhoneCodeInvalidError,
    PhoneNumberInvalidError,
)
from ldapbridge.models.auth import (
    Authorization,
    SendCodeRequest,
    SentCode,
    SignInRequest,
    SignUpRequest,
)

__all__ = ["MockAuthorizationHost"]


class MockAuthorizationHost:
    """Minimal host protocol that records every call.

    Phone numbers are valid if they consist of 7 to 15 digits, optionally
    with a leading ``+``. Codes are issued by `send_code` and a sign-in must
    present the hash of an issued code for the same phone number together
    with the fixed code.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.users: dict[str, Authorization] = {}
        self._codes: dict[str, str] = {}

    def add_user_for_test(
        self, phone_number: str, first_name: str = "", last_name: str = ""
    ) -> Authorization:
        """Register an existing user of the host."""
        user = Authorization(
            user_id=len(self.users) + 1,
            phone_number=phone_number,
            first_name=first_name,
            last_name=last_name,
        )
        self.users[phone_number] = user
        return user

    def check_phone_number(self, phone_number: str) -> str:
        if not re.fullmatch(r"\+?[0-9]{7,15}", phone_number):
            raise PhoneNumberInvalidError
        return phone_number

    async def send_code(self, request: SendCodeRequest) -> SentCode:
        self.calls.append(("send_code", request))
        phone_number = self.check_phone_number(request.phone_number)
        phone_code_hash = token_hex(8)
        self._codes[phone_code_hash] = phone_number
        return SentCode(phone_code_hash=phone_code_hash)

    async def sign_in(self, request: SignInRequest) -> Authorization:
        self.calls.append(("sign_in", request))
        phone_number = self.check_phone_number(request.phone_number)
        if self._codes.get(request.phone_code_hash) != phone_number:
            raise PhoneCodeInvalidError
        if request.phone_code != SIGN_IN_PHONE_CODE:
            raise PhoneCodeInvalidError
        return self.users[phone_number]

    async def sign_up(self, request: SignUpRequest) -> Authorization:
        self.calls.append(("sign_up", request))
        phone_number = self.check_phone_number(request.phone_number)
        return self.add_user_for_test(
            phone_number, request.first_name, request.last_name
        )
