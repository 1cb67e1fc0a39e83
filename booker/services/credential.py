"""
API key generation.

Keys are `<prefix><base64url>`: 32 bytes from the OS secure random source,
URL-safe base64 without padding, behind a fixed prefix (default `booker_`).
"""

import base64
import logging
import secrets

from booker.config import settings
from booker.models.failure import CredentialUnavailableError

logger = logging.getLogger(__name__)


def generate_api_key(
    prefix: str = settings.api_key_prefix,
    num_bytes: int = settings.api_key_bytes,
) -> str:
    """
    Generate a new high-entropy API key.

    Raises:
        CredentialUnavailableError: If the platform has no secure randomness source
    """
    try:
        raw = secrets.token_bytes(num_bytes)
    except NotImplementedError as e:
        logger.error("secure_random_unavailable", extra={"error": str(e)})
        raise CredentialUnavailableError(detail=str(e) or None) from e

    token = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return f"{prefix}{token}"
