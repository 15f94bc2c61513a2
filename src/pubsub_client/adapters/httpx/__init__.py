"""httpx adapter for pubsub_client transport protocols."""

from pubsub_client.adapters.httpx.transport import HttpxTransport

__all__ = ["HttpxTransport"]
