"""Configuration file loading and command-line settings for the request listing."""

from __future__ import annotations

import argparse
import datetime as dt
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Pattern, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .errors import ConfigError
from .formatters import parse_format
from .providers import available_providers
from .sorting import SortKey

DEFAULT_CONFIG_PATH = os.getenv("GIT_REQUEST_LIST_CONFIG", "~/.git-request-list.yml")


@dataclass(frozen=True)
class SourceConfig:
    """One configured provider, host, token, and repository scope."""

    api: str
    host: str
    token: str
    repositories: Optional[Pattern[str]]
    repository_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Config:
    """A fully parsed configuration file; `timezone` None means local time."""

    sort_by: Optional[SortKey]
    format: str
    timezone: Optional[dt.tzinfo]
    sources: Tuple[SourceConfig, ...]


@dataclass(frozen=True)
class RunSettings:
    """Resolved runtime settings: the config plus command-line toggles."""

    config: Config
    skip_wip: bool
    verbose: bool
    timeout: Optional[float]
    keep_going: bool


def compile_repositories(names: Sequence[str]) -> Optional[Pattern[str]]:
    """Join repository patterns into one alternation matched against whole names.

    No patterns means every repository is in scope, represented as None.
    """
    names = [name for name in names if name]
    if not names:
        return None
    joined = "|".join(names)
    try:
        return re.compile(f"(?:{joined})")
    except re.error as exc:
        raise ConfigError(f"invalid repository pattern '{joined}': {exc}") from exc


def load_timezone(name: Optional[str]) -> Optional[dt.tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"unknown timezone '{name}'") from exc


def _repository_names(raw: Any, index: int) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, list):
        raise ConfigError(f"sources[{index}].repositories must be a list of strings")
    return tuple(str(entry) for entry in raw if entry is not None)


def parse_source(raw: Any, index: int) -> SourceConfig:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"sources[{index}] must be a mapping")

    api = str(raw.get("api") or "").strip().lower()
    if not api:
        raise ConfigError(f"sources[{index}].api is required")
    if api not in available_providers():
        raise ConfigError(
            f"sources[{index}].api '{api}' is not supported; expected one of {', '.join(available_providers())}"
        )

    host = str(raw.get("host") or "").strip()
    if not host and api != "github":
        raise ConfigError(f"sources[{index}].host is required for {api}")

    names = _repository_names(raw.get("repositories"), index)
    return SourceConfig(
        api=api,
        host=host,
        token=str(raw.get("token") or ""),
        repositories=compile_repositories(names),
        repository_names=names,
    )


def parse_config(data: Any) -> Config:
    """Validate a decoded configuration document and build an immutable Config."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a mapping at the top level")

    sort_by = data.get("sort_by")
    timezone = data.get("timezone", data.get("Timezone"))
    sources = data.get("sources") or []
    if not isinstance(sources, list):
        raise ConfigError("sources must be a list")

    return Config(
        sort_by=None if sort_by is None or sort_by == "" else SortKey.parse(sort_by),
        format=parse_format(data.get("format")),
        timezone=load_timezone(None if timezone is None or timezone == "" else str(timezone)),
        sources=tuple(parse_source(raw, i) for i, raw in enumerate(sources)),
    )


def load_config(path: str | Path) -> Config:
    """Read and validate the YAML configuration file at `path`."""
    config_path = Path(path).expanduser()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read configuration file {config_path}: {exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigError(f"malformed configuration file {config_path}: {exc}") from exc
    return parse_config(data)


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the request-list entry point."""

    parser = argparse.ArgumentParser(
        prog="git-request-list",
        description="List open merge and pull requests across GitLab and GitHub sources.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="path to the YAML configuration file")
    parser.add_argument("--sort-by", default=None, help="override the configured sort key")
    parser.add_argument("--format", default=None, help="override the configured output format")
    parser.add_argument("--skip-wip", action="store_true", help="leave out work-in-progress/draft requests")
    parser.add_argument("-v", "--verbose", action="store_true", help="print every API call to stderr")
    parser.add_argument("--timeout", type=float, default=None, help="abort the whole run after this many seconds")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="report failing sources and keep listing the others",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> RunSettings:
    """Load the configuration file and apply command-line overrides."""

    config = load_config(args.config)
    if args.sort_by:
        config = replace(config, sort_by=SortKey.parse(args.sort_by))
    if args.format:
        config = replace(config, format=parse_format(args.format))
    if args.timeout is not None and args.timeout <= 0:
        raise ConfigError(f"--timeout must be positive, got {args.timeout}")

    return RunSettings(
        config=config,
        skip_wip=bool(args.skip_wip),
        verbose=bool(args.verbose),
        timeout=args.timeout,
        keep_going=bool(args.keep_going),
    )


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "Config",
    "RunSettings",
    "SourceConfig",
    "build_arg_parser",
    "compile_repositories",
    "load_config",
    "load_timezone",
    "parse_args",
    "parse_config",
    "parse_source",
    "resolve_settings",
]
