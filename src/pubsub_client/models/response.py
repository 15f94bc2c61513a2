"""Response models for Pub/Sub REST operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import Field

from pubsub_client.models.base import CamelCaseModel


@dataclass(frozen=True)
class HttpResponse:
    """Status and raw body of an HTTP response."""

    status_code: int
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class ReceivedPubsubMessage(CamelCaseModel):
    """Message payload inside a pull response; ``data`` is base64 text."""

    message_id: str
    data: Optional[str] = None
    attributes: dict[str, str] = Field(default_factory=dict)
    publish_time: datetime
    ordering_key: Optional[str] = None


class ReceivedMessage(CamelCaseModel):
    """One delivery in a pull response."""

    ack_id: str
    message: ReceivedPubsubMessage
    # The emulator does not send deliveryAttempt.
    delivery_attempt: Optional[int] = None


class PullResponse(CamelCaseModel):
    """Pull response; the service omits ``receivedMessages`` when empty."""

    received_messages: list[ReceivedMessage] = Field(default_factory=list)


class PublishResponse(CamelCaseModel):
    """Publish response with service-assigned IDs in request order."""

    message_ids: list[str]
