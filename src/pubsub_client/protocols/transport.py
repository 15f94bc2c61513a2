"""HTTP transport protocol definitions."""

from typing import Mapping, Optional, Protocol, runtime_checkable

from pubsub_client.models.response import HttpResponse


@runtime_checkable
class AsyncHttpTransport(Protocol):
    """Async protocol for sending a single HTTP request."""

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
    ) -> HttpResponse:
        """
        Send a request and return its status and body.

        Args:
            method: HTTP method, e.g. "POST"
            url: Absolute request URL
            headers: Request headers
            body: Raw request body, if any
            timeout: Timeout in seconds, or None for the transport default

        Returns:
            HttpResponse with status code and raw body

        Raises:
            RequestTimeoutError: if the timeout elapsed
            TransportError: for any other communication failure
        """
        ...
