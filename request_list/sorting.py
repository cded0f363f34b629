"""Sort keys for the aggregated request listing."""

from __future__ import annotations

from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Iterable, List, Optional

from .errors import ConfigError
from .models import Request


class SortKey(str, Enum):
    """The Request fields a listing can be ordered by."""

    REPOSITORY = "repository"
    NAME = "name"
    STATE = "state"
    URL = "url"
    CREATED = "created"
    UPDATED = "updated"

    @classmethod
    def parse(cls, value: Any) -> "SortKey":
        """Validate a configured sort key, ignoring case and surrounding blanks."""
        text = str(value).strip().lower()
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(key.value for key in cls)
            raise ConfigError(f"unsupported sort key '{value}'; expected one of {choices}") from None

    def key_func(self) -> Callable[[Request], Any]:
        return attrgetter(self.value)


def sort_requests(requests: Iterable[Request], key: Optional[SortKey]) -> List[Request]:
    """Order requests by `key`; equal keys keep their merge order.

    With no key the merge order (source, then repository, then page) is kept.
    """
    if key is None:
        return list(requests)
    return sorted(requests, key=key.key_func())


__all__ = ["SortKey", "sort_requests"]
