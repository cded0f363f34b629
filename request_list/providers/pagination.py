"""Page-count discovery, cancellation, and lazy page iteration."""

from __future__ import annotations

import re
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional
from urllib.parse import parse_qs, urlparse

import requests

from ..errors import CancelledError, DecodeError
from .config import GITLAB_PAGE_HEADER
from .http_client import ApiClient

PageCountReader = Callable[[requests.Response], int]

LINK_LAST_RE = re.compile(r'<([^>]+)>\s*;\s*rel="last"')


class Cancellation:
    """Cooperative cancellation signal with an optional deadline.

    Providers check it before every probe, page fetch and per-repository
    fetch; it never interrupts a call already in flight.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self, before: str) -> None:
        if self._event.is_set():
            raise CancelledError(f"cancelled before {before}")
        if self.expired:
            raise CancelledError(f"deadline exceeded before {before}")


def check_cancelled(cancellation: Optional[Cancellation], before: str) -> None:
    if cancellation is not None:
        cancellation.raise_if_cancelled(before)


def total_pages_header(header: str = GITLAB_PAGE_HEADER) -> PageCountReader:
    """Return a reader taking the page count from a numeric response header."""

    def read(resp: requests.Response) -> int:
        raw = (resp.headers or {}).get(header)
        if raw is None or not str(raw).strip():
            raise DecodeError(f"missing {header} header")
        try:
            count = int(str(raw).strip())
        except ValueError as exc:
            raise DecodeError(f"non-numeric {header} header: {raw!r}") from exc
        if count < 0:
            raise DecodeError(f"negative {header} header: {raw!r}")
        return count

    return read


def link_last_page(resp: requests.Response) -> int:
    """Read the page count from a `Link: <...page=N>; rel="last"` header.

    A response without a Link header, or without a `last` relation, fits on a
    single page.
    """
    link = (resp.headers or {}).get("Link")
    if not link:
        return 1
    match = LINK_LAST_RE.search(link)
    if not match:
        return 1
    pages = parse_qs(urlparse(match.group(1)).query).get("page")
    if not pages:
        raise DecodeError(f"last link without page parameter: {match.group(1)}")
    try:
        count = int(pages[0])
    except ValueError as exc:
        raise DecodeError(f"non-numeric page in last link: {match.group(1)}") from exc
    if count < 1:
        raise DecodeError(f"invalid page in last link: {match.group(1)}")
    return count


class PageSequence:
    """Finite, single-use sequence of decoded JSON pages.

    Nothing is requested until iteration starts: the first step issues a HEAD
    probe to learn the page count, then each page is fetched on demand.
    """

    def __init__(
        self,
        client: ApiClient,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        page_count: PageCountReader = total_pages_header(),
        cancellation: Optional[Cancellation] = None,
    ) -> None:
        self.client = client
        self.path = path
        self.params = dict(params or {})
        self.page_count = page_count
        self.cancellation = cancellation
        self._consumed = False

    def __iter__(self) -> Iterator[List[Dict[str, Any]]]:
        if self._consumed:
            raise RuntimeError(f"page sequence for {self.path} was already consumed")
        self._consumed = True
        return self._pages()

    def _pages(self) -> Iterator[List[Dict[str, Any]]]:
        check_cancelled(self.cancellation, f"probing {self.path}")
        probe = self.client.request("HEAD", self.path, self.params)
        total = self.page_count(probe)

        for page in range(1, total + 1):
            check_cancelled(self.cancellation, f"page {page}/{total} of {self.path}")
            yield self.client.get_json_list(self.path, {**self.params, "page": page})


__all__ = [
    "Cancellation",
    "PageCountReader",
    "PageSequence",
    "check_cancelled",
    "link_last_page",
    "total_pages_header",
]
