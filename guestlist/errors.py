"""Typed errors raised by the guest list core.

The HTTP layer maps each family to a status code in
``guestlist.exception_handlers``; nothing here knows about transports.
"""


class DomainError(Exception):
    """Base class for every expected, user-correctable failure."""

    code = "error"


class UnauthorizedError(DomainError):
    """Raised for a bad, missing or out-of-scope credential."""

    code = "unauthorized"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a guest, tag or tenant does not exist in the resolved scope.

    Used for records of other tenants too, so that their existence is never leaked.
    """

    code = "not_found"

    def __init__(self, resource: str, resource_id: object | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(DomainError):
    code = "conflict"


class DuplicatePhoneError(ConflictError):
    """Raised when a phone number is already used by another guest of the tenant."""

    code = "duplicate_phone"

    def __init__(self, phone_number: str) -> None:
        self.phone_number = phone_number
        super().__init__(f"Guest with phone number '{phone_number}' already exists")


class DuplicateTagNameError(ConflictError):
    """Raised when the tenant already has a tag with this name."""

    code = "duplicate_tag_name"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tag '{name}' already exists")


class DuplicateUsernameError(ConflictError):
    code = "duplicate_username"

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already taken")


class CodeSpaceExhaustedError(ConflictError):
    """Raised when no free verification code could be allocated for a tenant."""

    code = "code_space_exhausted"

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not allocate a free guest code after {attempts} attempts")


class InvalidInputError(DomainError):
    code = "invalid_input"


class InvalidTagError(InvalidInputError):
    """Raised when a tag reference does not resolve to a tag of the guest's tenant."""

    code = "invalid_tag"

    def __init__(self, tag_ids: list) -> None:
        self.tag_ids = tag_ids
        super().__init__(f"Unknown tags for this tenant: {', '.join(str(t) for t in tag_ids)}")


class GuestNotFoundError(DomainError):
    """Raised when a check-in or RSVP token does not resolve to a guest."""

    code = "guest_not_found"

    def __init__(self, message: str = "Guest not found") -> None:
        super().__init__(message)
