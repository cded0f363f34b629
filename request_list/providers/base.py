"""Provider interface and the shared discover-filter-fetch loop."""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple, Union

import requests

from ..errors import DecodeError
from ..models import Request
from .http_client import ApiClient
from .pagination import Cancellation, PageSequence, check_cancelled

RepositoryFilter = Callable[[str], bool]
AcceptedRepositories = Union[None, Pattern[str], str, Iterable[str]]
Endpoint = Tuple[str, Dict[str, Any]]


@dataclass(frozen=True)
class Repository:
    """A repository visible to a provider; `ref` identifies it in API paths."""

    name: str
    ref: Union[int, str]


def repository_filter(accepted: AcceptedRepositories) -> RepositoryFilter:
    """Build the predicate deciding which repositories get their requests fetched.

    None or an empty collection accepts everything, a compiled pattern must match
    the whole repository name, and any other collection is an exact-name whitelist.
    """
    if accepted is None:
        return lambda name: True
    if isinstance(accepted, re.Pattern):
        return lambda name: accepted.fullmatch(name) is not None
    if isinstance(accepted, str):
        accepted = [accepted]
    whitelist = set(accepted)
    if not whitelist:
        return lambda name: True
    return lambda name: name in whitelist


class Provider(abc.ABC):
    """One hosting API able to list open change requests.

    Subclasses describe endpoints, authentication and payload decoding; the
    pagination and filtering loop is shared. Every failure aborts the whole
    `get_requests` call.
    """

    api = ""

    def __init__(
        self,
        host: str,
        token: Optional[str] = None,
        skip_wip: bool = False,
        verbose: bool = False,
        cancellation: Optional[Cancellation] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.host = host
        self.token = token or ""
        self.skip_wip = skip_wip
        self.verbose = verbose
        self.cancellation = cancellation
        self.client = ApiClient(
            self.api_base(host),
            headers=self.auth_headers(self.token),
            verbose=verbose,
            session=session,
        )

    @abc.abstractmethod
    def api_base(self, host: str) -> str:
        """Return the URL every endpoint path is appended to."""

    @abc.abstractmethod
    def auth_headers(self, token: str) -> Dict[str, str]:
        ...

    @abc.abstractmethod
    def read_page_count(self, resp: requests.Response) -> int:
        """Read the total page count from a probe response."""

    @abc.abstractmethod
    def repositories_endpoint(self) -> Endpoint:
        ...

    @abc.abstractmethod
    def requests_endpoint(self, repository: Repository) -> Endpoint:
        ...

    @abc.abstractmethod
    def decode_repository(self, payload: Mapping[str, Any]) -> Repository:
        ...

    @abc.abstractmethod
    def decode_request(self, payload: Mapping[str, Any]) -> Request:
        """Decode one request record; `repository` is left empty for stamping."""

    def pages(self, endpoint: Endpoint) -> PageSequence:
        path, params = endpoint
        return PageSequence(
            self.client,
            path,
            params,
            page_count=self.read_page_count,
            cancellation=self.cancellation,
        )

    def get_requests(self, accepted_repositories: AcceptedRepositories = None) -> List[Request]:
        """Return the open requests of every accepted repository, stamped with its name."""
        accept = repository_filter(accepted_repositories)
        result: List[Request] = []

        for repository in self.get_repositories():
            if not accept(repository.name):
                continue
            check_cancelled(self.cancellation, f"fetching requests of {repository.name}")
            for request in self.get_repository_requests(repository):
                result.append(replace(request, repository=repository.name))

        return result

    def get_repositories(self) -> List[Repository]:
        result: List[Repository] = []
        for page in self.pages(self.repositories_endpoint()):
            result.extend(self._decode(entry, self.decode_repository) for entry in page)
        return result

    def get_repository_requests(self, repository: Repository) -> List[Request]:
        result: List[Request] = []
        for page in self.pages(self.requests_endpoint(repository)):
            for entry in page:
                request = self._decode(entry, self.decode_request)
                if self.skip_wip and request.wip:
                    continue
                result.append(request)
        return result

    def _decode(self, entry: Mapping[str, Any], decoder: Callable[[Mapping[str, Any]], Any]) -> Any:
        try:
            return decoder(entry)
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"{self.api}: cannot decode {entry!r}: {exc}") from exc

    def close(self) -> None:
        self.client.close()


__all__ = ["Provider", "Repository", "RepositoryFilter", "repository_filter"]
