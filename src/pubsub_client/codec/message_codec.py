"""Conversion between domain values and Pub/Sub wire messages."""

import base64
import binascii
import json
import logging
from functools import lru_cache
from typing import Any, Iterable, Optional

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from pubsub_client.errors import (
    DecodeError,
    EncodeError,
    InvalidEncodingError,
    InvalidJsonError,
    MissingDataError,
    TransformError,
    TypeMismatchError,
)
from pubsub_client.models.message import (
    M,
    MessageTransformFn,
    OutgoingMessage,
    PulledEnvelope,
    TransformFn,
)
from pubsub_client.models.request import PubsubMessage
from pubsub_client.models.response import ReceivedMessage

logger = logging.getLogger(__name__)


@lru_cache(maxsize=128)
def _adapter_for(message_type: Any) -> TypeAdapter:
    return TypeAdapter(message_type)


class MessageCodec:
    """
    Encodes outgoing domain values and decodes pulled messages.

    Decoding never raises: every failure is captured as a DecodeError in the
    envelope's ``message`` field, so one bad payload cannot abort a batch.
    """

    def encode(self, message: OutgoingMessage[Any]) -> PubsubMessage:
        """
        Serialize a domain value to base64 JSON.

        Raises:
            EncodeError: if the value has no JSON representation
        """
        try:
            value = to_jsonable_python(message.data, by_alias=True)
            raw = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            raise EncodeError(f"serializing message to be published failed: {exc}") from exc

        return PubsubMessage(
            data=base64.b64encode(raw.encode("utf-8")).decode("ascii"),
            attributes=message.attributes,
            ordering_key=message.ordering_key,
        )

    def decode_value(
        self,
        received: ReceivedMessage,
        message_type: type[M],
        transform: Optional[TransformFn] = None,
        message_transform: Optional[MessageTransformFn] = None,
    ) -> Any:
        """
        Return the decoded value or the DecodeError that stopped decoding.

        ``message_transform`` sees the received message as well as the parsed
        value, so it can rewrite based on attributes. It runs before
        ``transform``.
        """
        data = received.message.data
        if data is None:
            return MissingDataError("message contains no data")

        try:
            decoded = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            return _chained(InvalidEncodingError(f"data is not valid base64: {exc}"), exc)

        try:
            value = json.loads(decoded)
        except (ValueError, RecursionError) as exc:
            return _chained(InvalidJsonError(f"data is not valid JSON: {exc}"), exc)

        try:
            if message_transform is not None:
                value = message_transform(received, value)
            if transform is not None:
                value = transform(value)
        except Exception as exc:  # caller code; isolate to this message
            return _chained(TransformError(f"failed to transform JSON value: {exc}"), exc)

        try:
            return _adapter_for(message_type).validate_python(value)
        except (ValidationError, RecursionError) as exc:
            return _chained(TypeMismatchError(str(exc)), exc)

    def decode(
        self,
        received: ReceivedMessage,
        message_type: type[M],
        transform: Optional[TransformFn] = None,
        message_transform: Optional[MessageTransformFn] = None,
    ) -> PulledEnvelope[M]:
        """Decode one received message into an envelope."""
        raw = received.message
        return PulledEnvelope(
            id=raw.message_id,
            ack_id=received.ack_id,
            publish_time=raw.publish_time,
            message=self.decode_value(received, message_type, transform, message_transform),
            attributes=dict(raw.attributes),
            ordering_key=raw.ordering_key,
            delivery_attempt=received.delivery_attempt,
        )

    def decode_all(
        self,
        received_messages: Iterable[ReceivedMessage],
        message_type: type[M],
        transform: Optional[TransformFn] = None,
        message_transform: Optional[MessageTransformFn] = None,
    ) -> list[PulledEnvelope[M]]:
        envelopes = [
            self.decode(r, message_type, transform, message_transform) for r in received_messages
        ]
        failed = sum(1 for envelope in envelopes if not envelope.ok)
        if failed:
            logger.debug("%d of %d pulled messages failed to decode", failed, len(envelopes))
        return envelopes


def _chained(error: DecodeError, cause: BaseException) -> DecodeError:
    error.__cause__ = cause
    return error
