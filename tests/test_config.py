"""Tests for request_list.config ensuring YAML parsing, validation, and CLI overrides work.

Run with coverage to validate configuration handling:
    pytest tests/test_config.py --maxfail=1 -v --cov=request_list.config --cov-report=term-missing
"""

import textwrap
from zoneinfo import ZoneInfo

import pytest

from request_list import config
from request_list.errors import ConfigError
from request_list.sorting import SortKey

SAMPLE = textwrap.dedent(
    """
    sort_by: Updated
    format: JSON
    Timezone: Europe/Copenhagen
    sources:
      - api: GitLab
        host: https://gitlab.example.com
        token: secret
        repositories:
          - group/foo
          - tools/.*-cli
      - api: github
        token: ghp
    """
)


def _write(tmp_path, text):
    path = tmp_path / "git-request-list.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_parses_every_field(tmp_path):
    cfg = config.load_config(_write(tmp_path, SAMPLE))

    assert cfg.sort_by is SortKey.UPDATED
    assert cfg.format == "json"
    assert cfg.timezone == ZoneInfo("Europe/Copenhagen")
    assert len(cfg.sources) == 2

    gitlab, github = cfg.sources
    assert gitlab.api == "gitlab"
    assert gitlab.host == "https://gitlab.example.com"
    assert gitlab.token == "secret"
    assert gitlab.repository_names == ("group/foo", "tools/.*-cli")
    assert github.api == "github"
    assert github.host == ""
    assert github.repositories is None


def test_repository_pattern_matches_whole_names(tmp_path):
    cfg = config.load_config(_write(tmp_path, SAMPLE))
    pattern = cfg.sources[0].repositories
    assert pattern.fullmatch("group/foo")
    assert pattern.fullmatch("tools/deploy-cli")
    assert not pattern.fullmatch("group/foobar")
    assert not pattern.fullmatch("other/group/foo")


def test_defaults_for_minimal_file():
    cfg = config.parse_config({"sources": [{"api": "gitlab", "host": "https://gl"}]})
    assert cfg.sort_by is None
    assert cfg.format == "table"
    assert cfg.timezone is None
    assert cfg.sources[0].token == ""
    assert cfg.sources[0].repositories is None


def test_empty_document_has_no_sources():
    assert config.parse_config(None).sources == ()


def test_config_is_immutable():
    cfg = config.parse_config({})
    with pytest.raises(AttributeError):
        cfg.format = "json"  # type: ignore[misc]


@pytest.mark.parametrize("data,fragment", [
    (["not", "a", "mapping"], "top level"),
    ({"sort_by": "author"}, "sort key"),
    ({"format": "xml"}, "format"),
    ({"format": 5}, "format must be a string"),
    ({"format": True}, "format must be a string"),
    ({"sort_by": False}, "sort key"),
    ({"sort_by": 0}, "sort key"),
    ({"timezone": 0}, "timezone"),
    ({"timezone": "Mars/Olympus_Mons"}, "timezone"),
    ({"sources": {"api": "gitlab"}}, "sources must be a list"),
    ({"sources": ["gitlab"]}, "sources[0] must be a mapping"),
    ({"sources": [{"host": "https://gl"}]}, "api is required"),
    ({"sources": [{"api": "bitbucket", "host": "https://bb"}]}, "not supported"),
    ({"sources": [{"api": "gitlab"}]}, "host is required"),
    ({"sources": [{"api": "gitlab", "host": "h", "repositories": ["group/(foo"]}]}, "invalid repository pattern"),
    ({"sources": [{"api": "gitlab", "host": "h", "repositories": {"a": 1}}]}, "list of strings"),
])
def test_parse_config_rejects_invalid_documents(data, fragment):
    with pytest.raises(ConfigError) as excinfo:
        config.parse_config(data)
    assert fragment in str(excinfo.value)


def test_single_repository_string_is_accepted():
    cfg = config.parse_config({"sources": [{"api": "gitlab", "host": "h", "repositories": "group/foo"}]})
    assert cfg.sources[0].repository_names == ("group/foo",)


def test_compile_repositories_ignores_blank_entries():
    assert config.compile_repositories([]) is None
    assert config.compile_repositories(["", ""]) is None
    assert config.compile_repositories(["a", "", "b"]).pattern == "(?:a|b)"


def test_load_config_reports_unreadable_and_malformed_files(tmp_path):
    with pytest.raises(ConfigError):
        config.load_config(tmp_path / "missing.yml")

    with pytest.raises(ConfigError) as excinfo:
        config.load_config(_write(tmp_path, "sources: [unbalanced"))
    assert "malformed" in str(excinfo.value)


def test_load_config_reports_non_utf8_files(tmp_path):
    path = tmp_path / "binary.yml"
    path.write_bytes(b"sort_by: name\n# \xff\xfe\n")
    with pytest.raises(ConfigError) as excinfo:
        config.load_config(path)
    assert "malformed" in str(excinfo.value)


def test_resolve_settings_applies_cli_overrides(tmp_path):
    path = _write(tmp_path, SAMPLE)
    args = config.parse_args([
        "--config", str(path),
        "--sort-by", "CREATED",
        "--format", "table",
        "--skip-wip",
        "--verbose",
        "--timeout", "12.5",
        "--keep-going",
    ])
    settings = config.resolve_settings(args)
    assert settings.config.sort_by is SortKey.CREATED
    assert settings.config.format == "table"
    assert settings.skip_wip is True
    assert settings.verbose is True
    assert settings.timeout == 12.5
    assert settings.keep_going is True


def test_resolve_settings_defaults(tmp_path):
    args = config.parse_args(["--config", str(_write(tmp_path, SAMPLE))])
    settings = config.resolve_settings(args)
    assert settings.config.sort_by is SortKey.UPDATED
    assert settings.skip_wip is False
    assert settings.verbose is False
    assert settings.timeout is None
    assert settings.keep_going is False


@pytest.mark.parametrize("flag,value", [("--sort-by", "author"), ("--format", "xml"), ("--timeout", "0")])
def test_resolve_settings_rejects_bad_overrides(tmp_path, flag, value):
    args = config.parse_args(["--config", str(_write(tmp_path, SAMPLE)), flag, value])
    with pytest.raises(ConfigError):
        config.resolve_settings(args)
