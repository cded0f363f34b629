"""Error hierarchy shared by configuration loading, providers, and the runner."""

from __future__ import annotations

from typing import Optional


class RequestListError(Exception):
    """Base class for every error raised while building the request listing."""


class ConfigError(RequestListError):
    """Malformed configuration file, timezone, repository pattern, or option."""


class TransportError(RequestListError):
    """Connection, DNS, TLS, or timeout failure talking to a provider."""


class DecodeError(RequestListError):
    """Response body or pagination header could not be decoded."""


class ProviderAPIError(RequestListError):
    """A provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        self.message = message
        text = f"HTTP {status_code} for {url}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class CancelledError(RequestListError):
    """The fetch was cancelled or ran past its deadline."""


__all__ = [
    "RequestListError",
    "ConfigError",
    "TransportError",
    "DecodeError",
    "ProviderAPIError",
    "CancelledError",
]
