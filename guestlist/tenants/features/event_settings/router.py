from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from guestlist.tenants.authorizer import TenantScope
from guestlist.tenants.dependencies import get_tenant_scope
from guestlist.tenants.dtos import EventSettingsDTO, EventSettingsUpdateDTO
from guestlist.tenants.features.event_settings.write_model import (
    EventSettingsWriteModel,
    SqlEventSettingsWriteModel,
)
from guestlist.tenants.urls import EVENT_SETTINGS_URL

router = APIRouter()


class EventSettingsRequest(BaseModel):
    """Only these fields can be changed; anything else in the body is rejected."""

    model_config = ConfigDict(extra="forbid")

    event_title: str | None = Field(default=None, max_length=255)
    couple_names: str | None = Field(default=None, max_length=255)
    event_date: date | None = None
    event_time: str | None = Field(default=None, max_length=50)
    venue_name: str | None = Field(default=None, max_length=255)
    venue_address: str | None = Field(default=None, max_length=500)
    color_of_day: str | None = Field(default=None, max_length=50)


class EventSettingsResponse(BaseModel):
    event_title: str
    couple_names: str | None = None
    event_date: date | None = None
    event_time: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    color_of_day: str | None = None

    @classmethod
    def from_dto(cls, event: EventSettingsDTO) -> "EventSettingsResponse":
        return cls(
            event_title=event.event_title,
            couple_names=event.couple_names,
            event_date=event.event_date,
            event_time=event.event_time,
            venue_name=event.venue_name,
            venue_address=event.venue_address,
            color_of_day=event.color_of_day,
        )


def get_event_settings_write_model() -> EventSettingsWriteModel:
    """Dependency to get event settings write model instance."""
    return SqlEventSettingsWriteModel()


@router.get(EVENT_SETTINGS_URL, response_model=EventSettingsResponse)
async def get_event_settings(
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: EventSettingsWriteModel = Depends(get_event_settings_write_model),
) -> EventSettingsResponse:
    event = await write_model.get_event_settings(scope)
    return EventSettingsResponse.from_dto(event)


@router.put(EVENT_SETTINGS_URL, response_model=EventSettingsResponse)
async def update_event_settings(
    request: EventSettingsRequest,
    scope: TenantScope = Depends(get_tenant_scope),
    write_model: EventSettingsWriteModel = Depends(get_event_settings_write_model),
) -> EventSettingsResponse:
    """
    Change the event details shown on the tenant's RSVP pages.

    Omitted fields keep their value; an empty string clears an optional field.
    Operators must pass tenant_id.
    """
    event = await write_model.update_event_settings(
        scope,
        EventSettingsUpdateDTO(
            event_title=request.event_title,
            couple_names=request.couple_names,
            event_date=request.event_date,
            event_time=request.event_time,
            venue_name=request.venue_name,
            venue_address=request.venue_address,
            color_of_day=request.color_of_day,
        ),
    )
    return EventSettingsResponse.from_dto(event)
