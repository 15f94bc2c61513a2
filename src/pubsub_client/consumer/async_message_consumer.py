"""Generic async message consumer for Pub/Sub."""

import logging
from typing import Generic, Optional

from pubsub_client.models.message import M, TransformFn
from pubsub_client.protocols.handler import AsyncMessageHandler
from pubsub_client.protocols.subscriber import AsyncPubSubSubscriber

logger = logging.getLogger(__name__)


class AsyncMessageConsumer(Generic[M]):
    """
    Generic asynchronous message consumer for Pub/Sub.

    Responsibilities:
    - Pull messages from subscription asynchronously
    - Decode them into ``message_type`` (optionally via a transform)
    - Route decoded messages to the async handler
    - Acknowledge handled messages

    Messages that fail to decode are logged and left for redelivery, or
    acknowledged when ``ack_undecodable`` is set.

    The handler is responsible for:
    - Domain processing logic
    - Publishing results
    - Error handling
    """

    def __init__(
        self,
        subscription: str,
        handler: AsyncMessageHandler,
        message_type: type[M],
        subscriber: AsyncPubSubSubscriber,
        *,
        max_messages: int = 1,
        timeout: Optional[float] = 30,
        transform: Optional[TransformFn] = None,
        ack_undecodable: bool = False,
    ):
        """
        Initialize async message consumer.

        Args:
            subscription: Pub/Sub subscription ID or path
            handler: Async message handler implementing AsyncMessageHandler protocol
            message_type: Target type for decoding messages
            subscriber: Async subscriber for pulling and acknowledging, e.g. PubSubClient
            max_messages: Messages requested per pull
            timeout: Timeout in seconds for each pull
            transform: Optional JSON rewrite applied before decoding
            ack_undecodable: Acknowledge messages that fail to decode
        """
        self.subscription = subscription
        self.handler = handler
        self.message_type = message_type
        self.subscriber = subscriber
        self.max_messages = max_messages
        self.timeout = timeout
        self.transform = transform
        self.ack_undecodable = ack_undecodable
        self._running = False

    def start(self) -> None:
        """Start the message consumer."""
        self._running = True

    def stop(self) -> None:
        """Stop the message consumer."""
        self._running = False

    async def process_batch(self) -> int:
        """
        Process one pulled batch.

        This method:
        1. Pulls up to ``max_messages`` from the subscription
        2. Routes each decoded message to the handler
        3. Acknowledges handled (and optionally undecodable) messages

        If the handler raises, messages handled before it are still
        acknowledged and the exception propagates.

        Returns:
            Number of messages pulled
        """
        envelopes = await self.subscriber.pull_with_transform(
            self.subscription,
            self.max_messages,
            self.message_type,
            self.transform,
            timeout=self.timeout,
        )

        ack_ids: list[str] = []
        try:
            for envelope in envelopes:
                if not envelope.ok:
                    logger.warning(
                        "Message %s on %s failed to decode: %s",
                        envelope.id,
                        self.subscription,
                        envelope.error,
                    )
                    if self.ack_undecodable:
                        ack_ids.append(envelope.ack_id)
                    continue

                await self.handler.handle(envelope.message)
                ack_ids.append(envelope.ack_id)
        finally:
            if ack_ids:
                await self.subscriber.acknowledge(self.subscription, ack_ids, timeout=self.timeout)

        return len(envelopes)

    async def run(self) -> None:
        """
        Run the async message consumer loop.

        Continuously processes batches from the subscription while running.
        Call start() before run(), and stop() to exit the loop.
        """
        while self._running:
            await self.process_batch()
