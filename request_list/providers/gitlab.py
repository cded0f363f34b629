"""GitLab (API v4) merge-request provider."""

from __future__ import annotations

from typing import Any, Dict, Mapping

import requests

from ..models import Request, optional_str, parse_timestamp
from .base import Endpoint, Provider, Repository
from .config import GITLAB_API_PATH, GITLAB_PAGE_HEADER
from .pagination import total_pages_header

_read_total_pages = total_pages_header(GITLAB_PAGE_HEADER)


class GitLabProvider(Provider):
    """Lists opened merge requests of every project visible to the token."""

    api = "gitlab"

    def api_base(self, host: str) -> str:
        return f"{host.rstrip('/')}{GITLAB_API_PATH}"

    def auth_headers(self, token: str) -> Dict[str, str]:
        return {"PRIVATE-TOKEN": token} if token else {}

    def read_page_count(self, resp: requests.Response) -> int:
        return _read_total_pages(resp)

    def repositories_endpoint(self) -> Endpoint:
        return "/projects", {"simple": 1, "with_merge_requests_enabled": 1}

    def requests_endpoint(self, repository: Repository) -> Endpoint:
        return f"/projects/{repository.ref}/merge_requests", {"state": "opened"}

    def decode_repository(self, payload: Mapping[str, Any]) -> Repository:
        return Repository(name=str(payload["path_with_namespace"]), ref=int(payload["id"]))

    def decode_request(self, payload: Mapping[str, Any]) -> Request:
        # older instances only report work_in_progress, newer ones also draft
        wip = payload.get("work_in_progress")
        if wip is None:
            wip = payload.get("draft", False)
        return Request(
            name=optional_str(payload, "title"),
            repository="",
            state=optional_str(payload, "state"),
            url=optional_str(payload, "web_url"),
            created=parse_timestamp(payload.get("created_at"), "created_at"),
            updated=parse_timestamp(payload.get("updated_at"), "updated_at"),
            wip=bool(wip),
        )


__all__ = ["GitLabProvider"]
