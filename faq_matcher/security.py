"""Access key check for the invocation surfaces."""

import hmac
from typing import Optional


def is_authorized(key: Optional[str], expected: str) -> bool:
    """Return True when ``key`` matches the configured access key.

    An empty configured key rejects every caller.
    """
    if not expected or not key:
        return False
    return hmac.compare_digest(key.encode("utf-8"), expected.encode("utf-8"))
