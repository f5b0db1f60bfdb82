"""
Domain events for the guest list service.

Write models publish these after their transaction commits so that
connected dashboards can refresh. Delivery is best effort:
- a publisher failure is logged and never fails the write that caused it
- events carry ids and a small snapshot, never credentials
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

import httpx

from guestlist.config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base domain event."""

    tenant_id: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    event_type: str = ""

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        return payload


@dataclass
class GuestCreatedEvent(DomainEvent):
    """Event fired when a new guest is created."""

    guest_id: str = ""
    guest_name: str = ""

    def __post_init__(self):
        self.event_type = "guest.created"


@dataclass
class GuestUpdatedEvent(DomainEvent):
    """Event fired when a guest's details, tags or RSVP change."""

    guest_id: str = ""
    rsvp_confirmed: bool = False

    def __post_init__(self):
        self.event_type = "guest.updated"


@dataclass
class GuestDeletedEvent(DomainEvent):
    guest_id: str = ""

    def __post_init__(self):
        self.event_type = "guest.deleted"


@dataclass
class GuestVerifiedEvent(DomainEvent):
    """Event fired once, on the first successful check-in of a guest."""

    guest_id: str = ""
    guest_name: str = ""

    def __post_init__(self):
        self.event_type = "guest.verified"


class EventPublisher(ABC):
    """Outbound side channel for domain events."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError


class LoggingEventPublisher(EventPublisher):
    """Publisher used when no broadcast collaborator is configured."""

    async def publish(self, event: DomainEvent) -> None:
        logger.info(f"Event {event.event_type} for tenant {event.tenant_id}: {event.to_payload()}")


class WebhookEventPublisher(EventPublisher):
    """Forwards events as JSON to the real-time broadcast service."""

    def __init__(
        self,
        url: str,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 2.0,
    ):
        self._url = url
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def publish(self, event: DomainEvent) -> None:
        async with self._http_client_class(timeout=self._timeout) as client:
            response = await client.post(self._url, json=event.to_payload())
            response.raise_for_status()


async def publish_safely(publisher: EventPublisher | None, event: DomainEvent) -> None:
    """Publish an event, logging and dropping any delivery failure."""
    if publisher is None:
        return
    try:
        await publisher.publish(event)
    except Exception as e:
        logger.warning(f"Failed to publish {event.event_type} for tenant {event.tenant_id}: {e}")


def get_event_publisher() -> EventPublisher:
    if settings.notification_webhook_url:
        return WebhookEventPublisher(
            url=settings.notification_webhook_url,
            timeout=settings.notification_timeout_seconds,
        )
    return LoggingEventPublisher()
