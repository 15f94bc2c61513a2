"""In-memory fakes for exercising the client without Google endpoints.

``FakePubSubService`` speaks the publish / pull / acknowledge REST shapes
through ``httpx.MockTransport``. Pulled messages move to an outstanding set
until acknowledged; redelivery after the ack deadline is not modelled.
"""

import asyncio
import base64
import itertools
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from pubsub_client.errors import TokenExchangeError
from pubsub_client.models.response import ReceivedMessage
from pubsub_client.models.token import AccessToken, Clock

PUBLISH_TIME = "2024-05-01T12:00:00.123456Z"


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class StaticTokenExchanger:
    """Issues numbered tokens valid for ``lifetime`` seconds and counts calls."""

    def __init__(self, clock: Clock, lifetime: float = 3600, error: Optional[Exception] = None):
        self.clock = clock
        self.lifetime = lifetime
        self.error = error
        self.calls = 0

    async def exchange(self, key: Any) -> AccessToken:
        self.calls += 1
        call = self.calls
        # Yield so concurrent callers can interleave.
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return AccessToken(
            token=f"token-{call}",
            expires_at=self.clock() + timedelta(seconds=self.lifetime),
        )


def failing_exchanger(clock: Clock) -> StaticTokenExchanger:
    return StaticTokenExchanger(clock, error=TokenExchangeError("invalid_grant", status_code=400))


def b64(value: Any) -> str:
    return base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")


def make_received(
    data: Optional[str],
    ack_id: str = "ack-1",
    message_id: str = "msg-1",
    attributes: Optional[dict[str, str]] = None,
    delivery_attempt: Optional[int] = None,
) -> ReceivedMessage:
    """Build a ReceivedMessage from wire-format fields."""
    message: dict[str, Any] = {"messageId": message_id, "publishTime": PUBLISH_TIME}
    if data is not None:
        message["data"] = data
    if attributes is not None:
        message["attributes"] = attributes
    payload: dict[str, Any] = {"ackId": ack_id, "message": message}
    if delivery_attempt is not None:
        payload["deliveryAttempt"] = delivery_attempt
    return ReceivedMessage.model_validate(payload)


def error_body(code: int, message: str, status: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "status": status}}


class FakePubSubService:
    """Minimal Pub/Sub REST emulation for one project."""

    def __init__(self, project_id: str = "test-project"):
        self.project_id = project_id
        self.requests: list[httpx.Request] = []
        self._bindings: dict[str, list[str]] = {}
        self._queues: dict[str, list[dict[str, Any]]] = {}
        self._outstanding: dict[str, str] = {}
        self._message_ids = itertools.count(1)
        self._ack_ids = itertools.count(1)

    def bind(self, topic: str, subscription: str) -> None:
        self._bindings.setdefault(topic, []).append(subscription)
        self._queues.setdefault(subscription, [])

    def enqueue(self, subscription: str, data: str, **fields: Any) -> None:
        """Put a raw wire message directly on a subscription."""
        message = {"messageId": str(next(self._message_ids)), "data": data, "publishTime": PUBLISH_TIME}
        message.update(fields)
        self._queues.setdefault(subscription, []).append(message)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resource, _, action = request.url.path.removeprefix("/v1/").rpartition(":")
        parts = resource.split("/")
        if len(parts) != 4 or parts[0] != "projects" or parts[1] != self.project_id:
            return httpx.Response(404, json=error_body(404, "Resource not found", "NOT_FOUND"))
        name = parts[3]
        body = json.loads(request.content)

        if parts[2] == "topics" and action == "publish":
            return self._publish(name, body)
        if parts[2] == "subscriptions" and action == "pull":
            return self._pull(name, body)
        if parts[2] == "subscriptions" and action == "acknowledge":
            return self._acknowledge(name, body)
        return httpx.Response(404, json=error_body(404, "Unknown method", "NOT_FOUND"))

    def _publish(self, topic: str, body: dict[str, Any]) -> httpx.Response:
        if topic not in self._bindings:
            return httpx.Response(404, json=error_body(404, "Topic not found", "NOT_FOUND"))
        message_ids = []
        for wire in body["messages"]:
            message_id = str(next(self._message_ids))
            message_ids.append(message_id)
            message = {"messageId": message_id, "data": wire["data"], "publishTime": PUBLISH_TIME}
            if "attributes" in wire:
                message["attributes"] = wire["attributes"]
            if "orderingKey" in wire:
                message["orderingKey"] = wire["orderingKey"]
            for subscription in self._bindings[topic]:
                self._queues[subscription].append(dict(message))
        return httpx.Response(200, json={"messageIds": message_ids})

    def _pull(self, subscription: str, body: dict[str, Any]) -> httpx.Response:
        if subscription not in self._queues:
            return httpx.Response(404, json=error_body(404, "Subscription not found", "NOT_FOUND"))
        queue = self._queues[subscription]
        batch, self._queues[subscription] = queue[: body["maxMessages"]], queue[body["maxMessages"] :]
        if not batch:
            return httpx.Response(200, json={})
        received = []
        for message in batch:
            ack_id = f"ack-{next(self._ack_ids)}"
            self._outstanding[ack_id] = subscription
            received.append({"ackId": ack_id, "message": message})
        return httpx.Response(200, json={"receivedMessages": received})

    def _acknowledge(self, subscription: str, body: dict[str, Any]) -> httpx.Response:
        ack_ids = body["ackIds"]
        if any(self._outstanding.get(ack_id) != subscription for ack_id in ack_ids):
            return httpx.Response(
                400, json=error_body(400, "Invalid ack ID", "INVALID_ARGUMENT")
            )
        for ack_id in ack_ids:
            del self._outstanding[ack_id]
        return httpx.Response(200, json={})
