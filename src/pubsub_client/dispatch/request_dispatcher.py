"""Authorized publish, pull and acknowledge requests."""

import logging
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from pubsub_client.auth.credential_manager import CredentialManager
from pubsub_client.codec.message_codec import MessageCodec
from pubsub_client.errors import (
    AuthError,
    AuthenticationError,
    UnexpectedResponseError,
    UnexpectedStatusError,
)
from pubsub_client.models.base import CamelCaseModel
from pubsub_client.models.error import ErrorResponse
from pubsub_client.models.message import (
    M,
    MessageTransformFn,
    OutgoingMessage,
    PulledEnvelope,
    TransformFn,
)
from pubsub_client.models.request import (
    AcknowledgeRequest,
    PublishRequest,
    PubsubMessage,
    PullRequest,
)
from pubsub_client.models.response import PublishResponse, PullResponse, ReceivedMessage
from pubsub_client.protocols.transport import AsyncHttpTransport

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """
    Sends the three Pub/Sub data-plane requests with a bearer token.

    Holds no per-call state; any number of calls may run concurrently.
    """

    def __init__(
        self,
        credentials: CredentialManager,
        transport: AsyncHttpTransport,
        codec: MessageCodec,
        base_url: str,
    ):
        """
        Initialize request dispatcher.

        Args:
            credentials: Source of valid access tokens
            transport: HTTP transport used for every request
            codec: Encoder/decoder for message payloads
            base_url: Service root, e.g. "https://pubsub.googleapis.com"
        """
        self._credentials = credentials
        self._transport = transport
        self._codec = codec
        self._base_url = base_url.rstrip("/")
        self._project_id = credentials.key.project_id

    def topic_url(self, topic: str) -> str:
        return f"{self._base_url}/v1/{self._resource_path('topics', topic)}:publish"

    def subscription_url(self, subscription: str, action: str) -> str:
        return f"{self._base_url}/v1/{self._resource_path('subscriptions', subscription)}:{action}"

    def _resource_path(self, kind: str, name: str) -> str:
        if name.startswith("projects/"):
            return name
        return f"projects/{self._project_id}/{kind}/{name}"

    async def publish(
        self,
        topic: str,
        messages: Sequence[OutgoingMessage[Any]],
        timeout: Optional[float] = None,
    ) -> list[str]:
        """
        Encode and publish a batch of messages.

        Returns:
            Service-assigned message IDs in input order

        Raises:
            EncodeError: if a message cannot be serialized; nothing is sent
            DispatchError: if the request failed; the batch is all-or-nothing
        """
        wire_messages = [self._codec.encode(message) for message in messages]
        return await self.publish_raw(topic, wire_messages, timeout)

    async def publish_raw(
        self,
        topic: str,
        messages: Sequence[PubsubMessage],
        timeout: Optional[float] = None,
    ) -> list[str]:
        """Publish already encoded wire messages."""
        if not messages:
            return []

        url = self.topic_url(topic)
        body = await self._post(url, PublishRequest(messages=list(messages)), timeout)
        message_ids = self._parse(PublishResponse, body, url).message_ids
        if len(message_ids) != len(messages):
            raise UnexpectedResponseError(
                f"{url} returned {len(message_ids)} message ID(s) for {len(messages)} message(s)"
            )
        logger.debug("Published %d message(s) to %s", len(message_ids), topic)
        return message_ids

    async def pull(
        self,
        subscription: str,
        max_messages: int,
        message_type: type[M],
        transform: Optional[TransformFn] = None,
        timeout: Optional[float] = None,
        *,
        message_transform: Optional[MessageTransformFn] = None,
    ) -> list[PulledEnvelope[M]]:
        """
        Pull up to ``max_messages`` and decode each one independently.

        Returns:
            One envelope per received message, empty if none were available

        Raises:
            DispatchError: if the request itself failed
        """
        received_messages = await self.pull_raw(subscription, max_messages, timeout)
        return self._codec.decode_all(
            received_messages, message_type, transform, message_transform
        )

    async def pull_raw(
        self,
        subscription: str,
        max_messages: int,
        timeout: Optional[float] = None,
    ) -> list[ReceivedMessage]:
        """Pull messages without decoding their data."""
        if max_messages < 1:
            raise ValueError(f"max_messages must be positive, got {max_messages}")

        url = self.subscription_url(subscription, "pull")
        body = await self._post(url, PullRequest(max_messages=max_messages), timeout)
        received_messages = self._parse(PullResponse, body, url).received_messages
        logger.debug("Pulled %d message(s) from %s", len(received_messages), subscription)
        return received_messages

    async def acknowledge(
        self,
        subscription: str,
        ack_ids: Sequence[str],
        timeout: Optional[float] = None,
    ) -> None:
        """
        Acknowledge deliveries by ack ID.

        Pub/Sub rejects the whole request with 400 if any ack ID is invalid.
        """
        if not ack_ids:
            return

        url = self.subscription_url(subscription, "acknowledge")
        await self._post(url, AcknowledgeRequest(ack_ids=list(ack_ids)), timeout)
        logger.debug("Acknowledged %d message(s) on %s", len(ack_ids), subscription)

    async def _post(self, url: str, request: CamelCaseModel, timeout: Optional[float]) -> bytes:
        try:
            token = await self._credentials.ensure_valid_token()
        except AuthError as exc:
            raise AuthenticationError(exc) from exc

        headers = {
            "Authorization": f"Bearer {token.token}",
            "Content-Type": "application/json",
        }
        logger.debug("Sending request to %s", url)
        response = await self._transport.send("POST", url, headers, request.to_wire(), timeout)

        if not response.is_success:
            raise UnexpectedStatusError(
                response.status_code,
                response.body,
                ErrorResponse.message_from(response.body),
            )
        return response.body

    @staticmethod
    def _parse(model: type[CamelCaseModel], body: bytes, url: str) -> Any:
        try:
            return model.model_validate_json(body)
        except ValidationError as exc:
            raise UnexpectedResponseError(f"unexpected HTTP response from {url}: {exc}") from exc
