"""Holder of the current access token."""

from typing import Optional

from pubsub_client.models.token import AccessToken


class TokenStore:
    """
    Keeps the most recently issued AccessToken.

    Pure state: refresh policy lives in CredentialManager. Replacing the
    reference is atomic, so concurrent tasks never observe a torn token.
    """

    def __init__(self, token: Optional[AccessToken] = None):
        self._token = token

    def current(self) -> Optional[AccessToken]:
        return self._token

    def set(self, token: AccessToken) -> None:
        self._token = token
