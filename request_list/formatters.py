"""Render an ordered request listing as a text table or JSON."""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import ConfigError
from .models import Request

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
COLUMNS = (
    ("REPOSITORY", "repository"),
    ("NAME", "name"),
    ("STATE", "state"),
    ("URL", "url"),
    ("CREATED", "created"),
    ("UPDATED", "updated"),
)


def localize(value: dt.datetime, timezone: Optional[dt.tzinfo]) -> dt.datetime:
    """Convert to the configured zone; None means the machine's local zone."""
    return value.astimezone(timezone)


def _cell(request: Request, attribute: str, timezone: Optional[dt.tzinfo]) -> str:
    value = getattr(request, attribute)
    if isinstance(value, dt.datetime):
        return localize(value, timezone).strftime(TIMESTAMP_FORMAT)
    return str(value)


def render_table(requests: Sequence[Request], timezone: Optional[dt.tzinfo] = None) -> str:
    rows: List[List[str]] = [[title for title, _ in COLUMNS]]
    for request in requests:
        rows.append([_cell(request, attribute, timezone) for _, attribute in COLUMNS])

    widths = [max(len(row[i]) for row in rows) for i in range(len(COLUMNS))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    return "\n".join(lines)


def render_json(requests: Sequence[Request], timezone: Optional[dt.tzinfo] = None) -> str:
    docs = [
        {
            "name": request.name,
            "repository": request.repository,
            "state": request.state,
            "url": request.url,
            "created": localize(request.created, timezone).isoformat(),
            "updated": localize(request.updated, timezone).isoformat(),
        }
        for request in requests
    ]
    return json.dumps(docs, indent=2, ensure_ascii=False)


RENDERERS: Dict[str, Callable[[Sequence[Request], Optional[dt.tzinfo]], str]] = {
    "table": render_table,
    "json": render_json,
}
DEFAULT_FORMAT = "table"


def parse_format(value: Any) -> str:
    """Validate a configured output format; empty selects the table."""
    if value is None:
        return DEFAULT_FORMAT
    if not isinstance(value, str):
        raise ConfigError(f"format must be a string, got {value!r}")
    text = value.strip().lower()
    if not text:
        return DEFAULT_FORMAT
    if text not in RENDERERS:
        raise ConfigError(f"unsupported format '{value}'; expected one of {', '.join(sorted(RENDERERS))}")
    return text


def render(requests: Sequence[Request], fmt: str, timezone: Optional[dt.tzinfo] = None) -> str:
    return RENDERERS[parse_format(fmt)](requests, timezone)


__all__ = [
    "COLUMNS",
    "DEFAULT_FORMAT",
    "RENDERERS",
    "TIMESTAMP_FORMAT",
    "parse_format",
    "render",
    "render_json",
    "render_table",
]
