"""Provider implementations and the api-name registry used to build them."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

import requests

from ..errors import ConfigError
from .base import Provider, Repository, repository_filter
from .github import GitHubProvider
from .gitlab import GitLabProvider
from .pagination import Cancellation, PageSequence

PROVIDERS: Dict[str, Type[Provider]] = {
    GitLabProvider.api: GitLabProvider,
    GitHubProvider.api: GitHubProvider,
}


def available_providers() -> List[str]:
    return sorted(PROVIDERS)


def build_provider(
    source: Any,
    *,
    skip_wip: bool = False,
    verbose: bool = False,
    cancellation: Optional[Cancellation] = None,
    session: Optional[requests.Session] = None,
) -> Provider:
    """Construct the provider registered for `source.api`."""
    try:
        factory = PROVIDERS[source.api]
    except KeyError:
        raise ConfigError(
            f"unsupported api '{source.api}'; expected one of {', '.join(available_providers())}"
        ) from None
    return factory(
        source.host,
        source.token,
        skip_wip=skip_wip,
        verbose=verbose,
        cancellation=cancellation,
        session=session,
    )


__all__ = [
    "PROVIDERS",
    "Cancellation",
    "GitHubProvider",
    "GitLabProvider",
    "PageSequence",
    "Provider",
    "Repository",
    "available_providers",
    "build_provider",
    "repository_filter",
]
