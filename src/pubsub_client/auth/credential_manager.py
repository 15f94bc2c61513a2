"""Access token lifecycle for a service account."""

import logging
from datetime import timedelta
from typing import Optional

from pubsub_client.auth.key import ServiceAccountKey
from pubsub_client.auth.token_store import TokenStore
from pubsub_client.models.token import AccessToken, Clock, utc_now
from pubsub_client.protocols.token_exchange import TokenExchanger

logger = logging.getLogger(__name__)


class CredentialManager:
    """
    Hands out access tokens that are valid for at least ``refresh_margin``.

    Refresh is checked on every call rather than on a timer. Concurrent
    callers that all see an expiring token each run an exchange; the last
    one to finish wins the TokenStore, and every token handed out is fresh.
    """

    def __init__(
        self,
        key: ServiceAccountKey,
        exchanger: TokenExchanger,
        refresh_margin: timedelta,
        token_store: Optional[TokenStore] = None,
        clock: Clock = utc_now,
    ):
        if refresh_margin < timedelta(0):
            raise ValueError(f"invalid refresh_margin `{refresh_margin}`")
        self._key = key
        self._exchanger = exchanger
        self._refresh_margin = refresh_margin
        self._store = token_store if token_store is not None else TokenStore()
        self._clock = clock

    @property
    def key(self) -> ServiceAccountKey:
        return self._key

    @property
    def refresh_margin(self) -> timedelta:
        return self._refresh_margin

    def needs_refresh(self, token: Optional[AccessToken]) -> bool:
        if token is None:
            return True
        return self._clock() + self._refresh_margin >= token.expires_at

    async def ensure_valid_token(self) -> AccessToken:
        """
        Return a token that will not expire within the refresh margin.

        Raises:
            TokenExchangeError: if a needed refresh failed; nothing is retried
        """
        token = self._store.current()
        if not self.needs_refresh(token):
            return token

        logger.debug("Refreshing access token for %s", self._key.client_email)
        token = await self._exchanger.exchange(self._key)
        self._store.set(token)
        logger.debug("Access token refreshed, expires at %s", token.expires_at.isoformat())
        return token
