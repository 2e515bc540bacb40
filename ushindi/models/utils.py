from datetime import datetime
from typing import Optional


def format_timestamp(dt: Optional[datetime]) -> str:
    """Render a timestamp in local time for display, or ``""`` when missing.

    Naive values are assumed to already be local.
    """
    if dt is None:
        return ""
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%Y-%m-%d %H:%M:%S")
