"""Typed client for the Google Cloud Pub/Sub REST API."""

from pubsub_client.client import PubSubClient
from pubsub_client.codec import transforms
from pubsub_client.config import PubSubSettings, get_settings
from pubsub_client.consumer.async_message_consumer import AsyncMessageConsumer
from pubsub_client.errors import (
    AuthError,
    AuthenticationError,
    DecodeError,
    DispatchError,
    EncodeError,
    InvalidEncodingError,
    InvalidJsonError,
    KeyLoadError,
    MissingDataError,
    PubSubError,
    RequestTimeoutError,
    TokenExchangeError,
    TransformError,
    TransportError,
    TypeMismatchError,
    UnexpectedResponseError,
    UnexpectedStatusError,
)
from pubsub_client.models.message import OutgoingMessage, PulledEnvelope
from pubsub_client.models.request import PubsubMessage
from pubsub_client.models.response import ReceivedMessage

__all__ = [
    "AsyncMessageConsumer",
    "AuthError",
    "AuthenticationError",
    "DecodeError",
    "DispatchError",
    "EncodeError",
    "InvalidEncodingError",
    "InvalidJsonError",
    "KeyLoadError",
    "MissingDataError",
    "OutgoingMessage",
    "PubSubClient",
    "PubSubError",
    "PubSubSettings",
    "PubsubMessage",
    "PulledEnvelope",
    "ReceivedMessage",
    "RequestTimeoutError",
    "TokenExchangeError",
    "TransformError",
    "TransportError",
    "TypeMismatchError",
    "UnexpectedResponseError",
    "UnexpectedStatusError",
    "get_settings",
    "transforms",
]
