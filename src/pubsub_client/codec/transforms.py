"""
Reusable JSON transforms for ``pull_with_transform``.

A transform receives the parsed JSON value of one message and returns the
value to decode. A message transform additionally receives the received
message, so it can read attributes. Raising inside either marks only that
message as failed.
"""

from pubsub_client.models.message import JsonValue, MessageTransformFn, TransformFn
from pubsub_client.models.response import ReceivedMessage


def identity(value: JsonValue) -> JsonValue:
    return value


def rename_field(old_name: str, new_name: str) -> TransformFn:
    """
    Rename a top-level object field.

    Lets a consumer expecting ``new_name`` read data from producers still
    writing ``old_name``. Objects without ``old_name`` pass through.
    """

    def transform(value: JsonValue) -> JsonValue:
        if not isinstance(value, dict) or old_name not in value:
            return value
        renamed = {k: v for k, v in value.items() if k != old_name}
        renamed[new_name] = value[old_name]
        return renamed

    return transform


def wrap_in(key: str) -> TransformFn:
    """Wrap the value as ``{key: value}``, e.g. to tag an untagged union variant."""

    def transform(value: JsonValue) -> JsonValue:
        return {key: value}

    return transform


def compose(*transforms: TransformFn) -> TransformFn:
    """Apply transforms left to right."""

    def transform(value: JsonValue) -> JsonValue:
        for fn in transforms:
            value = fn(value)
        return value

    return transform


def insert_attribute(key: str) -> MessageTransformFn:
    """
    Copy the message attribute ``key`` into the JSON object under ``key``.

    Useful when producers put a discriminator such as ``type`` in the
    attributes instead of the payload.

    Raises:
        ValueError: if the attribute is missing or the value is not an object
    """

    def transform(received: ReceivedMessage, value: JsonValue) -> JsonValue:
        attributes = received.message.attributes
        if key not in attributes:
            raise ValueError(f"missing attribute `{key}`")
        if not isinstance(value, dict):
            raise ValueError(f"unexpected JSON value `{value!r}`")
        return {**value, key: attributes[key]}

    return transform
