"""Message handler protocol definitions."""

from typing import Protocol, Any, runtime_checkable


@runtime_checkable
class AsyncMessageHandler(Protocol):
    """
    Async protocol for message handlers.

    Handlers receive decoded message objects and are responsible for:
    - Processing the message asynchronously
    - Publishing results (via their own publisher)
    - Handling domain errors internally
    """

    async def handle(self, message: Any) -> None:
        """
        Process a decoded message asynchronously.

        Args:
            message: Decoded message object (type depends on the consumer)

        Note:
            If the handler raises, the message is not acknowledged and
            Pub/Sub will redeliver it once its ack deadline expires.
        """
        ...
