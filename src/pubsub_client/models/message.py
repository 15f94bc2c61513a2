"""Typed message containers handed to and returned from the client."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from pubsub_client.errors import DecodeError
from pubsub_client.models.response import ReceivedMessage

M = TypeVar("M")

JsonValue = Any
TransformFn = Callable[[JsonValue], JsonValue]
MessageTransformFn = Callable[[ReceivedMessage, JsonValue], JsonValue]


@dataclass(frozen=True)
class OutgoingMessage(Generic[M]):
    """Domain value to publish, with optional attributes and ordering key."""

    data: M
    attributes: Optional[dict[str, str]] = None
    ordering_key: Optional[str] = None


@dataclass(frozen=True)
class PulledEnvelope(Generic[M]):
    """
    Metadata and decode outcome of one pulled message.

    ``message`` holds either the decoded value or the DecodeError explaining
    why decoding failed. ``ack_id`` is valid in both cases, so a poison
    message can still be acknowledged, or deliberately left for redelivery.
    """

    id: str
    ack_id: str
    publish_time: datetime
    message: Union[M, DecodeError]
    attributes: dict[str, str] = field(default_factory=dict)
    ordering_key: Optional[str] = None
    delivery_attempt: Optional[int] = None

    @property
    def ok(self) -> bool:
        """True when the message decoded successfully."""
        return not isinstance(self.message, DecodeError)

    @property
    def error(self) -> Optional[DecodeError]:
        if isinstance(self.message, DecodeError):
            return self.message
        return None

    def unwrap(self) -> M:
        """Return the decoded value, raising the DecodeError if decoding failed."""
        if isinstance(self.message, DecodeError):
            raise self.message
        return self.message
