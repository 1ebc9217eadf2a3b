from __future__ import annotations
from typing import Optional

from .errors import (
    CONFIGURATION_ERROR,
    INVALID_CREDENTIAL,
    MISSING_CREDENTIAL,
    Failure,
)


def authenticate(configured_secret: Optional[str], provided_secret: Optional[str]) -> Optional[Failure]:
    """
    Check the caller's key against the configured one.
    Returns None when accepted, otherwise the Failure to report.
    """
    # configuration problems win over anything the caller sent
    if not configured_secret:
        return Failure(CONFIGURATION_ERROR, "Server configuration error: API_KEY not set")
    if not provided_secret:
        return Failure(MISSING_CREDENTIAL, "Unauthorized: API key required")
    if provided_secret != configured_secret:
        return Failure(INVALID_CREDENTIAL, "Unauthorized: Invalid API key")
    return None
