"""Entry point wiring configuration, aggregation, sorting, and rendering."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .aggregator import collect_requests, collect_requests_by_source, merge_results
from .config import RunSettings, parse_args, resolve_settings
from .errors import RequestListError
from .formatters import render
from .providers.pagination import Cancellation
from .sorting import sort_requests


def run(settings: RunSettings, out: Optional[TextIO] = None) -> int:
    """Fetch, order and print the listing; return the process exit code."""
    out = out or sys.stdout
    config = settings.config
    cancellation = Cancellation(settings.timeout)
    failed = 0

    if settings.keep_going:
        results = collect_requests_by_source(
            config,
            skip_wip=settings.skip_wip,
            verbose=settings.verbose,
            cancellation=cancellation,
        )
        for result in results:
            if not result.ok:
                failed += 1
                print(f"[warn] {result.source.api} {result.source.host}: {result.error}", file=sys.stderr)
        requests = merge_results(results)
    else:
        requests = collect_requests(
            config,
            skip_wip=settings.skip_wip,
            verbose=settings.verbose,
            cancellation=cancellation,
        )

    ordered = sort_requests(requests, config.sort_by)
    print(render(ordered, config.format, config.timezone), file=out)
    return 1 if failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point listing open requests of every configured source."""

    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
        return run(settings)
    except RequestListError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1


__all__ = ["main", "run"]
