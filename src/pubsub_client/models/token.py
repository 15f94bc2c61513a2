"""Access token value object."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token and the instant it stops being accepted.

    Never mutated; a refresh produces a new instance.
    """

    token: str = field(repr=False)
    expires_at: datetime
