"""Token exchange protocol definitions."""

from typing import Protocol, runtime_checkable

from pubsub_client.auth.key import ServiceAccountKey
from pubsub_client.models.token import AccessToken


@runtime_checkable
class TokenExchanger(Protocol):
    """Async protocol for trading a service account key for an access token."""

    async def exchange(self, key: ServiceAccountKey) -> AccessToken:
        """
        Sign an assertion with the key and exchange it for a bearer token.

        Args:
            key: Loaded service account key

        Returns:
            AccessToken with its absolute expiry

        Raises:
            TokenExchangeError: on network failure, rejected grant or an
                incomplete token payload
        """
        ...
