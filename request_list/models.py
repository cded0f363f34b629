"""Provider-agnostic representation of an open change request."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DecodeError


@dataclass(frozen=True)
class Request:
    """A normalized merge/pull request.

    `repository` is not part of the provider payload; providers stamp it after
    decoding, so a Request handed to sorting or formatting always carries it.
    """

    name: str
    repository: str
    state: str
    url: str
    created: dt.datetime
    updated: dt.datetime
    wip: bool = False


def parse_timestamp(value: Any, field: str) -> dt.datetime:
    """Parse an ISO-8601 API timestamp into an aware datetime (UTC if naive)."""
    if not isinstance(value, str) or not value:
        raise DecodeError(f"missing or invalid timestamp field '{field}': {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError as exc:
        raise DecodeError(f"invalid timestamp field '{field}': {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def optional_str(payload: dict, key: str, default: str = "") -> str:
    value: Optional[Any] = payload.get(key)
    return default if value is None else str(value)


__all__ = ["Request", "parse_timestamp", "optional_str"]
