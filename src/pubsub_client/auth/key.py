"""Service account key loading."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from google.auth import crypt

from pubsub_client.errors import KeyLoadError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

_REQUIRED_FIELDS = ("client_email", "private_key", "project_id")


@dataclass(frozen=True)
class ServiceAccountKey:
    """Identity and signing material of a service account."""

    client_email: str
    project_id: str
    token_uri: str
    private_key_id: Optional[str]
    signer: crypt.Signer = field(repr=False, compare=False)


def load_service_account_key(path: Union[str, Path]) -> ServiceAccountKey:
    """
    Read and validate a service account key file.

    Args:
        path: Path to the JSON key file downloaded from the Cloud console

    Returns:
        ServiceAccountKey with a ready-to-use RSA signer

    Raises:
        KeyLoadError: if the file is missing, not JSON, lacks required
            fields, or holds an unparsable private key
    """
    path_str = str(path)
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise KeyLoadError(path_str, "missing service account key") from exc

    try:
        info = json.loads(raw)
    except ValueError as exc:
        raise KeyLoadError(path_str, "malformed service account key") from exc
    if not isinstance(info, dict):
        raise KeyLoadError(path_str, "malformed service account key")

    missing = [name for name in _REQUIRED_FIELDS if not info.get(name)]
    if missing:
        raise KeyLoadError(
            path_str, f"service account key lacks {', '.join(missing)}"
        )

    try:
        signer = crypt.RSASigner.from_service_account_info(info)
    except (ValueError, TypeError) as exc:
        raise KeyLoadError(path_str, "malformed private key in service account key") from exc

    key = ServiceAccountKey(
        client_email=info["client_email"],
        project_id=info["project_id"],
        token_uri=info.get("token_uri") or DEFAULT_TOKEN_URI,
        private_key_id=info.get("private_key_id"),
        signer=signer,
    )
    logger.debug("Loaded service account key for %s", key.client_email)
    return key
