"""HTTP helpers shared by the provider implementations."""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

import requests

from ..errors import DecodeError, ProviderAPIError, TransportError
from .config import REQUEST_TIMEOUT, USER_AGENT


def error_message(resp: requests.Response) -> Optional[str]:
    """Extract a short, human-readable message from an error response."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        return str(body)[:300]
    msg = body.get("message") or body.get("error") or body.get("text")
    return str(msg) if msg else None


def decode_json_list(resp: requests.Response, url: str) -> List[Dict[str, Any]]:
    """Decode a response body that must be a JSON array of objects."""
    try:
        payload = resp.json()
    except ValueError as exc:
        raise DecodeError(f"invalid JSON body from {url}: {exc}") from exc
    if not isinstance(payload, list):
        raise DecodeError(f"expected a JSON array from {url}, got {type(payload).__name__}")
    for entry in payload:
        if not isinstance(entry, dict):
            raise DecodeError(f"expected JSON objects in array from {url}, got {type(entry).__name__}")
    return payload


class ApiClient:
    """Thin wrapper around one provider's REST API, reusing a single session."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        verbose: bool = False,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        if headers:
            self.session.headers.update(dict(headers))
        self.verbose = verbose
        self.timeout = timeout

    def url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        path = path if path.startswith("/") else f"/{path}"
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urlencode(list(params.items()))}"
        return url

    def request(
        self, method: str, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> requests.Response:
        """Perform one call; non-2xx statuses and transport failures raise."""
        url = self.url(path, params)
        if self.verbose:
            print(f"[http] {method} {url}", file=sys.stderr)

        try:
            resp = self.session.request(method, url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise ProviderAPIError(resp.status_code, url, error_message(resp))
        return resp

    def get_json_list(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        resp = self.request("GET", path, params)
        return decode_json_list(resp, self.url(path, params))

    def close(self) -> None:
        self.session.close()


__all__ = ["ApiClient", "error_message", "decode_json_list"]
