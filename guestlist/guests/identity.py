"""Identifier and verification code generation for new guests."""

import secrets
from collections.abc import Collection

from guestlist.config.settings import settings
from guestlist.errors import CodeSpaceExhaustedError

IDENTIFIER_BYTES = 16
CODE_MIN = 1000
CODE_MAX = 9999
CODE_SPACE_SIZE = CODE_MAX - CODE_MIN + 1


class IdentityGenerator:
    """Draws identifiers and codes from a secure random source.

    Codes are only checked against the set the caller passes in; the insert
    itself still has to be guarded by the tenant-scoped unique constraint.
    """

    def __init__(self, max_attempts: int | None = None) -> None:
        self.max_attempts = max_attempts or settings.code_allocation_attempts

    def new_identifier(self) -> str:
        return secrets.token_hex(IDENTIFIER_BYTES)

    def draw_code(self) -> str:
        return str(CODE_MIN + secrets.randbelow(CODE_SPACE_SIZE))

    def new_code(self, existing_codes_in_tenant: Collection[str] = ()) -> str:
        if len(existing_codes_in_tenant) >= CODE_SPACE_SIZE:
            raise CodeSpaceExhaustedError(attempts=0)
        for _ in range(self.max_attempts):
            code = self.draw_code()
            if code not in existing_codes_in_tenant:
                return code
        raise CodeSpaceExhaustedError(attempts=self.max_attempts)


def is_well_formed_identifier(value: str) -> bool:
    if len(value) != IDENTIFIER_BYTES * 2:
        return False
    return all(char in "0123456789abcdef" for char in value)


def is_well_formed_code(value: str) -> bool:
    return len(value) == 4 and value.isascii() and value.isdigit()
