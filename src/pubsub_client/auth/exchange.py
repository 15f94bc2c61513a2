"""
OAuth 2.0 JWT-bearer token exchange for service accounts.

Signs a short-lived assertion with the service account key and trades it at
the key's token endpoint for an access token.
"""

import logging
from datetime import timedelta
from typing import Optional

import httpx
from google.auth import jwt

from pubsub_client.auth.key import ServiceAccountKey
from pubsub_client.errors import TokenExchangeError
from pubsub_client.models.token import AccessToken, Clock, utc_now

logger = logging.getLogger(__name__)

PUBSUB_SCOPE = "https://www.googleapis.com/auth/pubsub"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class JwtBearerTokenExchanger:
    """Exchange a signed JWT assertion for a Pub/Sub access token."""

    _ASSERTION_LIFETIME = timedelta(hours=1)

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        scope: str = PUBSUB_SCOPE,
        timeout: Optional[float] = 10.0,
        clock: Clock = utc_now,
    ) -> None:
        self._http = http_client
        self._scope = scope
        self._timeout = timeout
        self._clock = clock

    def build_assertion(self, key: ServiceAccountKey) -> str:
        """Return the signed JWT assertion for the token request."""
        issued_at = self._clock()
        claims = {
            "iss": key.client_email,
            "scope": self._scope,
            "aud": key.token_uri,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ASSERTION_LIFETIME).timestamp()),
        }
        return jwt.encode(key.signer, claims, key_id=key.private_key_id).decode("utf-8")

    async def exchange(self, key: ServiceAccountKey) -> AccessToken:
        """Request a fresh access token; expiry is measured from request start."""
        requested_at = self._clock()
        payload = {
            "grant_type": JWT_BEARER_GRANT_TYPE,
            "assertion": self.build_assertion(key),
        }

        logger.debug("Requesting access token for %s from %s", key.client_email, key.token_uri)
        try:
            response = await self._http.post(key.token_uri, data=payload, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise TokenExchangeError(f"token endpoint unreachable: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise TokenExchangeError(response.text, status_code=response.status_code)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise TokenExchangeError("token endpoint returned invalid JSON") from exc

        access_token = token_payload.get("access_token") if isinstance(token_payload, dict) else None
        expires_in = token_payload.get("expires_in") if isinstance(token_payload, dict) else None
        if not access_token or not expires_in:
            raise TokenExchangeError("incomplete token payload returned from token endpoint")

        try:
            lifetime = timedelta(seconds=int(expires_in))
        except (TypeError, ValueError, OverflowError) as exc:
            raise TokenExchangeError(
                f"incomplete token payload returned from token endpoint: expires_in={expires_in!r}"
            ) from exc

        return AccessToken(token=access_token, expires_at=requested_at + lifetime)
