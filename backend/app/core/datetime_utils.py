"""
Timezone-aware time helpers.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as an aware UTC datetime.

    Patch this in tests instead of datetime itself.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)
