from __future__ import annotations

import json
import logging
import textwrap
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from flywarm import __version__
from flywarm.cli import ExitCode, app, configure_logging
from flywarm.transport import build_default_client

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging_state() -> None:
    """Ensure each test runs with a clean logging configuration."""

    configure_logging._configured = False  # type: ignore[attr-defined]
    configure_logging._level = logging.INFO  # type: ignore[attr-defined]
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    yield
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    configure_logging._configured = False  # type: ignore[attr-defined]
    configure_logging._level = logging.INFO  # type: ignore[attr-defined]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("FLYWARM_BASE_URL", raising=False)


@pytest.fixture
def requests_seen(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route the default transport through an in-memory handler."""

    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/broken":
            return httpx.Response(500)
        return httpx.Response(200)

    def _fake_build_default_client(**_: object):
        return build_default_client(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(
        "flywarm.orchestration.warmup.build_default_client", _fake_build_default_client
    )
    return seen


def _normalize(output: str) -> str:
    """Collapse whitespace to simplify assertions across Rich formatting."""

    return " ".join(output.split())


def _config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "warmup.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    normalized = _normalize(result.output)
    assert "run" in normalized
    assert "check" in normalized
    assert "--quiet" in normalized


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    assert __version__ in result.output


def test_run_reports_steps(tmp_path: Path, requests_seen: list[httpx.Request]) -> None:
    config = _config(
        tmp_path,
        """
        port: 4000
        endpoints:
          - path: /health
            repeat_count: 2
            required: true
          - path: /broken
        """,
    )

    result = runner.invoke(app, ["run", "--config", str(config)])

    assert result.exit_code == int(ExitCode.SUCCESS)
    normalized = _normalize(result.output)
    assert "endpoint:/health PASS" in normalized
    assert "endpoint:/broken PASS" in normalized
    assert "Overall status: PASS" in normalized
    assert len(requests_seen) == 3
    assert requests_seen[0].url.port == 4000


def test_run_json_output(tmp_path: Path, requests_seen: list[httpx.Request]) -> None:
    config = _config(tmp_path, "endpoints: [/health]\n")

    result = runner.invoke(
        app,
        ["--quiet", "run", "--config", str(config), "--json", "--base-url", "http://svc.local"],
    )

    assert result.exit_code == int(ExitCode.SUCCESS)
    payload = json.loads(result.output)
    assert payload["success"] is True
    assert payload["steps"][0]["name"] == "endpoint:/health"
    assert set(payload["steps"][0]) == {"name", "success", "durationMs"}
    assert requests_seen[0].url == httpx.URL("http://svc.local/health")


def test_run_strict_fails_on_required_step(
    tmp_path: Path, requests_seen: list[httpx.Request]
) -> None:
    config = _config(
        tmp_path,
        """
        endpoints:
          - path: /broken
            required: true
        """,
    )

    lenient = runner.invoke(app, ["run", "--config", str(config)])
    strict = runner.invoke(app, ["run", "--config", str(config), "--strict"])

    assert lenient.exit_code == int(ExitCode.SUCCESS)
    assert "Overall status: FAIL" in _normalize(lenient.output)
    assert strict.exit_code == int(ExitCode.WARMUP_FAILED)
    assert "endpoint:/broken" in _normalize(strict.output)


def test_run_quiet_summary(tmp_path: Path, requests_seen: list[httpx.Request]) -> None:
    config = _config(tmp_path, "endpoints: [/health]\n")

    result = runner.invoke(app, ["--quiet", "run", "--config", str(config)])

    assert result.exit_code == int(ExitCode.SUCCESS)
    normalized = _normalize(result.output)
    assert "Warm-up PASS" in normalized
    assert "[PASS] endpoint:/health" in normalized
    assert getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


def test_run_rejects_invalid_config(tmp_path: Path) -> None:
    config = _config(tmp_path, "endpoints:\n  - path: /x\n    method: PATCH\n")

    result = runner.invoke(app, ["run", "--config", str(config)], catch_exceptions=False)

    assert result.exit_code == int(ExitCode.INVALID_INPUT)
    normalized = _normalize(result.output)
    assert "Unsupported method" in normalized
    assert "Remediation" in normalized


def test_run_requires_config_option() -> None:
    result = runner.invoke(app, ["run"])

    assert result.exit_code == int(ExitCode.INVALID_INPUT)


def test_check_summarizes_without_requests(
    tmp_path: Path, requests_seen: list[httpx.Request]
) -> None:
    config = _config(
        tmp_path,
        """
        base_url: https://app.internal
        endpoints:
          - path: /items
            method: PUT
            repeat_count: 5
            required: true
        """,
    )

    result = runner.invoke(app, ["check", "--config", str(config)])

    assert result.exit_code == int(ExitCode.SUCCESS)
    normalized = _normalize(result.output)
    assert "Base URL: https://app.internal" in normalized
    assert "PUT /items x5 [required]" in normalized
    assert "Custom steps (0): (none)" in normalized
    assert requests_seen == []
