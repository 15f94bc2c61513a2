"""Public entry point for typed Pub/Sub access."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from pubsub_client.adapters.httpx import HttpxTransport
from pubsub_client.auth.credential_manager import CredentialManager
from pubsub_client.auth.exchange import JwtBearerTokenExchanger
from pubsub_client.auth.key import load_service_account_key
from pubsub_client.codec.message_codec import MessageCodec
from pubsub_client.config import PubSubSettings, get_settings
from pubsub_client.dispatch.request_dispatcher import RequestDispatcher
from pubsub_client.models.message import (
    M,
    MessageTransformFn,
    OutgoingMessage,
    PulledEnvelope,
    TransformFn,
)
from pubsub_client.models.request import PubsubMessage
from pubsub_client.models.response import ReceivedMessage
from pubsub_client.protocols.token_exchange import TokenExchanger

logger = logging.getLogger(__name__)


class PubSubClient:
    """
    Typed client for publishing, pulling and acknowledging Pub/Sub messages.

    Create instances with ``PubSubClient.new``. The key is validated eagerly,
    the first access token is fetched lazily by the first operation.
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize client.

        Args:
            dispatcher: Dispatcher performing the authorized requests
            http_client: AsyncClient owned by this instance, closed by aclose()
        """
        self._dispatcher = dispatcher
        self._http_client = http_client

    @classmethod
    def new(
        cls,
        key_path: Union[str, Path],
        refresh_margin: Optional[timedelta] = None,
        *,
        settings: Optional[PubSubSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        exchanger: Optional[TokenExchanger] = None,
    ) -> "PubSubClient":
        """
        Build a client from a service account key file.

        Args:
            key_path: Path to the service account JSON key
            refresh_margin: Refresh tokens this long before expiry;
                defaults to ``settings.refresh_margin``
            settings: Overrides environment-derived settings
            http_client: Shared AsyncClient; the client creates and owns
                one when omitted
            exchanger: Overrides the JWT-bearer token exchange

        Raises:
            KeyLoadError: if the key is missing or malformed
        """
        settings = settings or get_settings()
        key = load_service_account_key(key_path)

        owned_client = None
        if http_client is None:
            http_client = owned_client = httpx.AsyncClient(timeout=settings.default_timeout)

        if exchanger is None:
            exchanger = JwtBearerTokenExchanger(
                http_client, scope=settings.scope, timeout=settings.token_timeout
            )
        credentials = CredentialManager(
            key,
            exchanger,
            refresh_margin if refresh_margin is not None else settings.refresh_margin,
        )
        dispatcher = RequestDispatcher(
            credentials, HttpxTransport(http_client), MessageCodec(), settings.base_url
        )
        logger.info("Created Pub/Sub client for project %s at %s", key.project_id, settings.base_url)
        return cls(dispatcher, owned_client)

    async def publish(
        self,
        topic: str,
        messages: Sequence[Any],
        attributes: Optional[Mapping[str, str]] = None,
        ordering_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> list[str]:
        """
        Publish domain values to a topic.

        Args:
            topic: Topic ID or full topic path
            messages: Domain values, or OutgoingMessage items carrying their
                own attributes and ordering key
            attributes: Attributes for plain values
            ordering_key: Ordering key for plain values
            timeout: Timeout in seconds; a timed-out publish has unknown outcome

        Returns:
            Message IDs in input order
        """
        shared_attributes = dict(attributes) if attributes is not None else None
        outgoing = [
            m if isinstance(m, OutgoingMessage) else OutgoingMessage(m, shared_attributes, ordering_key)
            for m in messages
        ]
        return await self._dispatcher.publish(topic, outgoing, timeout)

    async def publish_raw(
        self,
        topic: str,
        messages: Sequence[PubsubMessage],
        timeout: Optional[float] = None,
    ) -> list[str]:
        return await self._dispatcher.publish_raw(topic, messages, timeout)

    async def pull(
        self,
        subscription: str,
        max_messages: int,
        message_type: type[M],
        timeout: Optional[float] = None,
    ) -> list[PulledEnvelope[M]]:
        """
        Pull and decode messages.

        Decode failures are reported per envelope; only a failed request
        raises.
        """
        return await self._dispatcher.pull(subscription, max_messages, message_type, None, timeout)

    async def pull_with_transform(
        self,
        subscription: str,
        max_messages: int,
        message_type: type[M],
        transform: Optional[TransformFn],
        timeout: Optional[float] = None,
        *,
        message_transform: Optional[MessageTransformFn] = None,
    ) -> list[PulledEnvelope[M]]:
        """
        Pull messages, rewriting each parsed JSON value before decoding.

        Args:
            transform: Rewrites the JSON value alone
            message_transform: Rewrites the JSON value given the received
                message, e.g. to migrate payloads by their ``version``
                attribute; applied before ``transform``
        """
        return await self._dispatcher.pull(
            subscription,
            max_messages,
            message_type,
            transform,
            timeout,
            message_transform=message_transform,
        )

    async def pull_raw(
        self,
        subscription: str,
        max_messages: int,
        timeout: Optional[float] = None,
    ) -> list[ReceivedMessage]:
        return await self._dispatcher.pull_raw(subscription, max_messages, timeout)

    async def acknowledge(
        self,
        subscription: str,
        ack_ids: Sequence[str],
        timeout: Optional[float] = None,
    ) -> None:
        """Acknowledge deliveries; an empty ``ack_ids`` sends nothing."""
        await self._dispatcher.acknowledge(subscription, ack_ids, timeout)

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()

    async def __aenter__(self) -> "PubSubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
