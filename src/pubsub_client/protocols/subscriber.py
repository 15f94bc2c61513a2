"""Subscriber protocol definitions."""

from typing import Optional, Protocol, Sequence, runtime_checkable

from pubsub_client.models.message import M, PulledEnvelope, TransformFn


@runtime_checkable
class AsyncPubSubSubscriber(Protocol):
    """Async protocol for pulling and acknowledging typed Pub/Sub messages."""

    async def pull_with_transform(
        self,
        subscription: str,
        max_messages: int,
        message_type: type[M],
        transform: Optional[TransformFn],
        timeout: Optional[float] = None,
    ) -> list[PulledEnvelope[M]]:
        """
        Pull messages from a subscription and decode them.

        Args:
            subscription: Subscription ID or full subscription path
            max_messages: Upper bound of messages to return
            message_type: Target type for decoding
            transform: Optional JSON rewrite applied before decoding
            timeout: Timeout in seconds

        Returns:
            One envelope per received message
        """
        ...

    async def acknowledge(
        self,
        subscription: str,
        ack_ids: Sequence[str],
        timeout: Optional[float] = None,
    ) -> None:
        """
        Acknowledge messages.

        Args:
            subscription: Subscription ID or full subscription path
            ack_ids: Ack IDs of the deliveries to acknowledge
            timeout: Timeout in seconds
        """
        ...
