"""Models for error bodies returned by the Pub/Sub service."""

from typing import Optional

from pydantic import ValidationError

from pubsub_client.models.base import CamelCaseModel


class ErrorInfo(CamelCaseModel):
    """Structured error information."""

    code: Optional[int] = None
    message: Optional[str] = None
    status: Optional[str] = None  # gRPC status name, e.g. NOT_FOUND


class ErrorResponse(CamelCaseModel):
    """Envelope of a Google API error response."""

    error: ErrorInfo

    @classmethod
    def message_from(cls, body: bytes) -> Optional[str]:
        """Return ``error.message`` from a response body, or None if absent."""
        try:
            return cls.model_validate_json(body).error.message
        except ValidationError:
            return None
