"""Resolves who is calling and which tenant they may act within.

Every guest and tag operation takes the ``TenantScope`` produced here instead
of looking at roles itself.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from guestlist.errors import InvalidInputError, UnauthorizedError


class Role(str, Enum):
    OPERATOR = "operator"
    TENANT_OWNER = "tenant_owner"


@dataclass(frozen=True)
class Caller:
    """Credentials as parsed by the request boundary."""

    role: str
    subject: str
    tenant_id_claim: str | None = None


@dataclass(frozen=True)
class TenantScope:
    """The tenant a call is restricted to.

    ``tenant_id`` is None only for an operator reading across all tenants, and
    that case is always built through ``all_tenants()``.
    """

    role: Role
    tenant_id: UUID | None

    @classmethod
    def for_tenant(cls, tenant_id: UUID, role: Role = Role.OPERATOR) -> "TenantScope":
        return cls(role=role, tenant_id=tenant_id)

    @classmethod
    def all_tenants(cls) -> "TenantScope":
        return cls(role=Role.OPERATOR, tenant_id=None)

    @property
    def is_unrestricted(self) -> bool:
        return self.tenant_id is None

    def require_tenant(self) -> UUID:
        if self.tenant_id is None:
            raise InvalidInputError("tenant_id is required for this operation")
        return self.tenant_id

    def allows(self, tenant_id: UUID) -> bool:
        return self.tenant_id is None or self.tenant_id == tenant_id


def parse_tenant_id(value: str | UUID) -> UUID:
    """Parse a tenant id, raising ValueError when it is not a well-formed UUID."""
    if isinstance(value, UUID):
        return value
    return UUID(str(value))


class TenantAuthorizer:
    def authorize(self, caller: Caller, requested_tenant: str | UUID | None = None) -> TenantScope:
        if caller.role == Role.OPERATOR.value:
            if requested_tenant is None or requested_tenant == "":
                return TenantScope.all_tenants()
            try:
                return TenantScope.for_tenant(parse_tenant_id(requested_tenant))
            except ValueError:
                raise InvalidInputError(f"Malformed tenant id '{requested_tenant}'")

        if caller.role == Role.TENANT_OWNER.value:
            # The caller's own tenant always wins over anything requested.
            if not caller.tenant_id_claim:
                raise UnauthorizedError("Token is not bound to a tenant")
            try:
                tenant_id = parse_tenant_id(caller.tenant_id_claim)
            except ValueError:
                raise UnauthorizedError("Token carries a malformed tenant id")
            return TenantScope.for_tenant(tenant_id, role=Role.TENANT_OWNER)

        raise UnauthorizedError()

    def authorize_operator(self, caller: Caller) -> None:
        if caller.role != Role.OPERATOR.value:
            raise UnauthorizedError("Operator privileges required")


tenant_authorizer = TenantAuthorizer()
