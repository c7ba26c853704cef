from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from ..errors import ValidationFailure


def utcnow() -> datetime:
    # Naive UTC; SQLite drops tzinfo anyway and every column stores UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def require_int(data: Optional[dict], key: str) -> int:
    """Read ``key`` from a socket payload as a positive integer id."""
    value: Any = (data or {}).get(key) if isinstance(data, dict) else None
    if value is None or isinstance(value, bool):
        raise ValidationFailure(f"{key} is required")
    # 1.0 is fine, 1.7 is not silently truncated to 1
    if isinstance(value, float) and not value.is_integer():
        raise ValidationFailure(f"{key} must be an integer id")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationFailure(f"{key} must be an integer id") from None
    if parsed <= 0:
        raise ValidationFailure(f"{key} must be an integer id")
    return parsed
