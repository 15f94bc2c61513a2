"""Exception hierarchy for the Pub/Sub client.

AuthError, EncodeError and DispatchError are raised and abort the call.
DecodeError subclasses are never raised by pull; they are stored in the
``message`` field of a PulledEnvelope so a batch always decodes completely.
"""

from typing import Optional


class PubSubError(Exception):
    """Base class for all errors raised or reported by this library."""


class AuthError(PubSubError):
    """Obtaining credentials or an access token failed."""


class KeyLoadError(AuthError):
    """The service account key is missing or malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{reason} at `{path}`")
        self.path = path
        self.reason = reason


class TokenExchangeError(AuthError):
    """The token endpoint could not be reached or rejected the assertion."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        message = f"getting access token failed: {detail}"
        if status_code is not None:
            message = f"getting access token failed with HTTP {status_code}: {detail}"
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code


class EncodeError(PubSubError):
    """Serializing a message to be published failed."""


class DispatchError(PubSubError):
    """A publish, pull or acknowledge call failed as a whole."""


class AuthenticationError(DispatchError):
    """No valid access token could be attached to the request."""

    def __init__(self, auth_error: AuthError):
        super().__init__(str(auth_error))
        self.auth_error = auth_error


class TransportError(DispatchError):
    """HTTP communication with the Pub/Sub service failed."""


class RequestTimeoutError(TransportError):
    """The request did not complete within the caller's timeout.

    The remote side may or may not have applied the request.
    """


class UnexpectedStatusError(DispatchError):
    """The Pub/Sub service answered with a non-2xx status code."""

    def __init__(self, status_code: int, body: bytes, message: Optional[str] = None):
        detail = message if message is not None else body.decode("utf-8", errors="replace")
        super().__init__(f"unexpected HTTP status code `{status_code}` from Pub/Sub service: {detail}")
        self.status_code = status_code
        self.body = body
        self.message = message


class UnexpectedResponseError(DispatchError):
    """A 2xx response body did not match the expected wire shape."""


class DecodeError(PubSubError):
    """A single pulled message could not be decoded into the target type."""


class MissingDataError(DecodeError):
    """The pulled message carries no data."""


class InvalidEncodingError(DecodeError):
    """The message data is not valid base64."""


class InvalidJsonError(DecodeError):
    """The decoded message data is not valid JSON."""


class TransformError(DecodeError):
    """The caller supplied transform raised."""


class TypeMismatchError(DecodeError):
    """The JSON value does not match the target type."""

    def __init__(self, detail: str):
        super().__init__(f"message does not match target type: {detail}")
        self.detail = detail
