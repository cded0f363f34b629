"""Central HTTP constants for the provider clients."""

from __future__ import annotations

import os

USER_AGENT = "git-request-list/1.0"
REQUEST_TIMEOUT = float(os.getenv("REQUEST_LIST_TIMEOUT", "30"))
GITLAB_API_PATH = "/api/v4"
GITLAB_PAGE_HEADER = "X-Total-Pages"
GITHUB_DEFAULT_HOST = "https://api.github.com"
GITHUB_PER_PAGE = int(os.getenv("REQUEST_LIST_GITHUB_PER_PAGE", "100"))

__all__ = [
    "USER_AGENT",
    "REQUEST_TIMEOUT",
    "GITLAB_API_PATH",
    "GITLAB_PAGE_HEADER",
    "GITHUB_DEFAULT_HOST",
    "GITHUB_PER_PAGE",
]
