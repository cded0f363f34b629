"""Aggregate open merge/pull requests from several hosting providers."""

from .aggregator import collect_requests, collect_requests_by_source
from .models import Request
from .sorting import SortKey, sort_requests

__all__ = ["Request", "SortKey", "collect_requests", "collect_requests_by_source", "sort_requests"]
