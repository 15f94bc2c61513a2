"""httpx transport implementing AsyncHttpTransport protocol."""

from typing import Mapping, Optional

import httpx

from pubsub_client.errors import RequestTimeoutError, TransportError
from pubsub_client.models.response import HttpResponse


class HttpxTransport:
    """
    httpx transport implementing AsyncHttpTransport protocol.

    Connection pooling and TLS belong to the wrapped AsyncClient; this
    adapter only maps httpx failures onto the library's error types.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
    ) -> HttpResponse:
        """
        Send a request through the wrapped AsyncClient.

        Args:
            method: HTTP method
            url: Absolute request URL
            headers: Request headers
            body: Raw request body, if any
            timeout: Timeout in seconds; None keeps the client's default

        Returns:
            HttpResponse with status code and raw body
        """
        try:
            response = await self._client.request(
                method,
                url,
                headers=dict(headers),
                content=body,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"{method} {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP communication with Pub/Sub service failed: {exc}") from exc

        return HttpResponse(status_code=response.status_code, body=response.content)
