"""Request models for Pub/Sub REST operations."""

from typing import Optional

from pydantic import Field

from pubsub_client.models.base import CamelCaseModel


class PubsubMessage(CamelCaseModel):
    """A message as sent in a publish request; ``data`` is base64 text."""

    data: str
    attributes: Optional[dict[str, str]] = None
    ordering_key: Optional[str] = None


class PublishRequest(CamelCaseModel):
    """Request for publishing a batch of messages to a topic."""

    messages: list[PubsubMessage]


class PullRequest(CamelCaseModel):
    """Request for pulling messages from a subscription."""

    max_messages: int = Field(gt=0)


class AcknowledgeRequest(CamelCaseModel):
    """Request for acknowledging messages."""

    ack_ids: list[str]
