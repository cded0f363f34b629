"""GitHub (REST v3) pull-request provider."""

from __future__ import annotations

from typing import Any, Dict, Mapping

import requests

from ..models import Request, optional_str, parse_timestamp
from .base import Endpoint, Provider, Repository
from .config import GITHUB_DEFAULT_HOST, GITHUB_PER_PAGE
from .pagination import link_last_page


class GitHubProvider(Provider):
    """Lists open pull requests of every repository the token can access."""

    api = "github"

    def api_base(self, host: str) -> str:
        return (host or GITHUB_DEFAULT_HOST).rstrip("/")

    def auth_headers(self, token: str) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def read_page_count(self, resp: requests.Response) -> int:
        return link_last_page(resp)

    def repositories_endpoint(self) -> Endpoint:
        return "/user/repos", {"per_page": GITHUB_PER_PAGE}

    def requests_endpoint(self, repository: Repository) -> Endpoint:
        return f"/repos/{repository.ref}/pulls", {"state": "open", "per_page": GITHUB_PER_PAGE}

    def decode_repository(self, payload: Mapping[str, Any]) -> Repository:
        full_name = str(payload["full_name"])
        return Repository(name=full_name, ref=full_name)

    def decode_request(self, payload: Mapping[str, Any]) -> Request:
        return Request(
            name=optional_str(payload, "title"),
            repository="",
            state=optional_str(payload, "state"),
            url=optional_str(payload, "html_url"),
            created=parse_timestamp(payload.get("created_at"), "created_at"),
            updated=parse_timestamp(payload.get("updated_at"), "updated_at"),
            wip=bool(payload.get("draft", False)),
        )


__all__ = ["GitHubProvider"]
