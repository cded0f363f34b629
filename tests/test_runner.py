"""Tests for request_list.runner ensuring orchestration flows through its dependencies.

Run with:
    pytest tests/test_runner.py --maxfail=1 -v --cov=request_list.runner --cov-report=term-missing
"""

import datetime as dt
import io
import json
from types import SimpleNamespace
from unittest.mock import patch

from request_list import runner
from request_list.aggregator import SourceResult
from request_list.config import Config, RunSettings
from request_list.errors import DecodeError, ProviderAPIError
from request_list.models import Request
from request_list.sorting import SortKey

UTC = dt.timezone.utc


def _request(name, repository, day):
    stamp = dt.datetime(2024, 1, day, tzinfo=UTC)
    return Request(name, repository, "opened", f"https://x/{name}", stamp, stamp)


def _settings(**overrides):
    cfg = Config(sort_by=SortKey.NAME, format="json", timezone=UTC, sources=())
    values = dict(config=cfg, skip_wip=False, verbose=False, timeout=None, keep_going=False)
    values.update(overrides)
    return RunSettings(**values)


@patch("request_list.runner.collect_requests")
def test_run_sorts_and_renders(mock_collect):
    mock_collect.return_value = [_request("b", "r1", 1), _request("a", "r2", 2)]
    out = io.StringIO()

    code = runner.run(_settings(skip_wip=True, verbose=True), out=out)

    assert code == 0
    assert [doc["name"] for doc in json.loads(out.getvalue())] == ["a", "b"]
    kwargs = mock_collect.call_args.kwargs
    assert kwargs["skip_wip"] is True
    assert kwargs["verbose"] is True
    assert kwargs["cancellation"] is not None


@patch("request_list.runner.collect_requests_by_source")
def test_run_keep_going_reports_failed_sources(mock_collect, capsys):
    failing = SimpleNamespace(api="gitlab", host="https://down.example.com")
    working = SimpleNamespace(api="github", host="")
    mock_collect.return_value = [
        SourceResult(source=failing, requests=[], error=ProviderAPIError(503, "https://down.example.com/api/v4/projects")),
        SourceResult(source=working, requests=[_request("a", "me/app", 1)]),
    ]
    out = io.StringIO()

    code = runner.run(_settings(keep_going=True), out=out)

    assert code == 1
    assert [doc["repository"] for doc in json.loads(out.getvalue())] == ["me/app"]
    assert "[warn] gitlab https://down.example.com: HTTP 503" in capsys.readouterr().err


def test_main_reports_errors_and_exits_non_zero(monkeypatch, capsys):
    monkeypatch.setattr(runner, "resolve_settings", lambda args: _settings())

    def fail(*args, **kwargs):
        raise DecodeError("missing X-Total-Pages header")

    monkeypatch.setattr(runner, "collect_requests", fail)
    assert runner.main([]) == 1
    captured = capsys.readouterr()
    assert "[error] missing X-Total-Pages header" in captured.err
    assert captured.out == ""


def test_main_reports_config_errors(tmp_path, capsys):
    assert runner.main(["--config", str(tmp_path / "absent.yml")]) == 1
    assert "[error] cannot read configuration file" in capsys.readouterr().err


def test_main_end_to_end_with_config_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.yml"
    path.write_text("format: table\nsort_by: repository\nsources: []\n", encoding="utf-8")
    assert runner.main(["--config", str(path)]) == 0
    assert capsys.readouterr().out.split() == ["REPOSITORY", "NAME", "STATE", "URL", "CREATED", "UPDATED"]


def test_main_reports_undecodable_config_file(tmp_path, capsys):
    path = tmp_path / "config.yml"
    path.write_bytes(b"format: table\n# \xff\xfe\n")
    assert runner.main(["--config", str(path)]) == 1
    assert "[error] malformed configuration file" in capsys.readouterr().err
