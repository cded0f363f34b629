"""Drive one provider per configured source and merge their requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from .errors import CancelledError, RequestListError
from .models import Request
from .providers import build_provider
from .providers.base import Provider
from .providers.pagination import Cancellation

ProviderFactory = Callable[..., Provider]


@dataclass(frozen=True)
class SourceResult:
    """Outcome for one source in partial mode: its requests or its error."""

    source: Any
    requests: List[Request]
    error: Optional[RequestListError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fetch_source(
    source: Any,
    *,
    skip_wip: bool = False,
    verbose: bool = False,
    cancellation: Optional[Cancellation] = None,
    factory: ProviderFactory = build_provider,
) -> List[Request]:
    """Fetch the accepted requests of a single source, closing its session afterwards."""
    provider = factory(source, skip_wip=skip_wip, verbose=verbose, cancellation=cancellation)
    try:
        return provider.get_requests(source.repositories)
    finally:
        provider.close()


def collect_requests(
    config: Any,
    *,
    skip_wip: bool = False,
    verbose: bool = False,
    cancellation: Optional[Cancellation] = None,
    factory: ProviderFactory = build_provider,
) -> List[Request]:
    """Concatenate every source's requests in declaration order.

    The first failing source aborts the run; nothing is returned for sources
    that already succeeded.
    """
    result: List[Request] = []
    for source in config.sources:
        result.extend(
            fetch_source(
                source,
                skip_wip=skip_wip,
                verbose=verbose,
                cancellation=cancellation,
                factory=factory,
            )
        )
    return result


def collect_requests_by_source(
    config: Any,
    *,
    skip_wip: bool = False,
    verbose: bool = False,
    cancellation: Optional[Cancellation] = None,
    factory: ProviderFactory = build_provider,
) -> List[SourceResult]:
    """Fetch every source, recording each failure next to its source.

    Cancellation still aborts the whole run.
    """
    results: List[SourceResult] = []
    for source in config.sources:
        try:
            requests = fetch_source(
                source,
                skip_wip=skip_wip,
                verbose=verbose,
                cancellation=cancellation,
                factory=factory,
            )
        except CancelledError:
            raise
        except RequestListError as exc:
            results.append(SourceResult(source=source, requests=[], error=exc))
            continue
        results.append(SourceResult(source=source, requests=requests))
    return results


def merge_results(results: Iterable[SourceResult]) -> List[Request]:
    merged: List[Request] = []
    for result in results:
        merged.extend(result.requests)
    return merged


__all__ = [
    "SourceResult",
    "collect_requests",
    "collect_requests_by_source",
    "fetch_source",
    "merge_results",
]
