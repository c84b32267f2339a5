"""ISO-8601 UTC timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from trainlog.errors import InvalidInputError


def isoformat_utc(value: datetime | None = None) -> str:
    """Render a datetime (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    moment = value or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string (date or datetime) into an aware UTC datetime."""

    cleaned = value.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
