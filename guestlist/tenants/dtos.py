from dataclasses import dataclass, fields
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from guestlist.tenants.repository.orm_models import Operator, Tenant


@dataclass(frozen=True)
class EventSettingsDTO:
    event_title: str = "Wedding Invitation"
    couple_names: str | None = None
    event_date: date | None = None
    event_time: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    color_of_day: str | None = None

    @classmethod
    def from_tenant(cls, tenant: "Tenant") -> "EventSettingsDTO":
        return cls(**{field.name: getattr(tenant, field.name) for field in fields(cls)})


@dataclass(frozen=True)
class EventSettingsUpdateDTO:
    """Allow-listed event settings a tenant may change.

    A field left as None keeps its stored value; an empty string clears an
    optional text field.
    """

    event_title: str | None = None
    couple_names: str | None = None
    event_date: date | None = None
    event_time: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    color_of_day: str | None = None

    def changes(self) -> dict:
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not None
        }


@dataclass(frozen=True)
class TenantDTO:
    id: UUID
    name: str
    username: str
    email: str | None = None
    event_title: str = "Wedding Invitation"
    event: EventSettingsDTO | None = None

    @classmethod
    def from_tenant(cls, tenant: "Tenant") -> "TenantDTO":
        return cls(
            id=tenant.uuid,
            name=tenant.name,
            username=tenant.username,
            email=tenant.email,
            event_title=tenant.event_title,
            event=EventSettingsDTO.from_tenant(tenant),
        )


@dataclass(frozen=True)
class TenantCredentialsDTO:
    """Plain credentials, returned once when a tenant is created."""

    username: str
    password: str


@dataclass(frozen=True)
class CreatedTenantDTO:
    tenant: TenantDTO
    credentials: TenantCredentialsDTO


@dataclass(frozen=True)
class TenantUpdateDTO:
    name: str
    email: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class OperatorDTO:
    id: UUID
    username: str
    is_active: bool = True
    token_version: int = 0

    @classmethod
    def from_operator(cls, operator: "Operator") -> "OperatorDTO":
        return cls(
            id=operator.uuid,
            username=operator.username,
            is_active=operator.is_active,
            token_version=operator.token_version,
        )

