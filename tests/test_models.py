from __future__ import annotations

import pytest

from flywarm.errors import ConfigurationError, WarmupFailedError
from flywarm.orchestration import CustomStepSpec, EndpointSpec, RunResult, StepResult, WarmupConfig


async def _noop() -> None:
    return None


def test_endpoint_defaults() -> None:
    spec = EndpointSpec(path="/health")

    assert spec.method == "GET"
    assert spec.repeat_count == 1
    assert spec.required is False
    assert spec.step_name == "endpoint:/health"


@pytest.mark.parametrize("count", [0, -3])
def test_endpoint_clamps_repeat_count(count: int) -> None:
    spec = EndpointSpec(path="/health", repeat_count=count)

    assert spec.repeat_count == 1


def test_endpoint_normalizes_method_case() -> None:
    assert EndpointSpec(path="/items", method="post").method == "POST"


def test_endpoint_rejects_unknown_method() -> None:
    with pytest.raises(ConfigurationError) as exc:
        EndpointSpec(path="/items", method="PATCH")

    assert "PATCH" in exc.value.message
    assert exc.value.remediation


def test_endpoint_rejects_empty_path() -> None:
    with pytest.raises(ConfigurationError):
        EndpointSpec(path="")


@pytest.mark.parametrize(
    ("method", "body", "expected"),
    [
        ("POST", {"ping": True}, True),
        ("PUT", [1, 2], True),
        ("POST", None, False),
        ("PUT", "", False),
        ("GET", {"ping": True}, False),
        ("DELETE", {"ping": True}, False),
    ],
)
def test_endpoint_has_body(method: str, body: object, expected: bool) -> None:
    assert EndpointSpec(path="/x", method=method, body=body).has_body is expected


def test_custom_step_requires_name_and_callable() -> None:
    with pytest.raises(ConfigurationError):
        CustomStepSpec(name="", action=_noop)

    with pytest.raises(ConfigurationError):
        CustomStepSpec(name="db", action="not callable")  # type: ignore[arg-type]


def test_config_rejects_duplicate_custom_names() -> None:
    with pytest.raises(ConfigurationError) as exc:
        WarmupConfig(
            custom=(
                CustomStepSpec(name="db", action=_noop),
                CustomStepSpec(name="db", action=_noop),
            )
        )

    assert "db" in exc.value.message


def test_config_base_url_resolution() -> None:
    assert WarmupConfig().resolved_base_url == "http://localhost:3000"
    assert WarmupConfig(port=8080).resolved_base_url == "http://localhost:8080"
    assert (
        WarmupConfig(base_url="https://app.internal/", port=8080).resolved_base_url
        == "https://app.internal"
    )


def test_config_freezes_step_sequences() -> None:
    config = WarmupConfig(endpoints=[EndpointSpec(path="/a"), EndpointSpec(path="/b")])

    assert isinstance(config.endpoints, tuple)
    assert [spec.path for spec in config.endpoints] == ["/a", "/b"]


def test_run_result_wire_shape() -> None:
    result = RunResult(
        success=False,
        duration_ms=42,
        steps=(
            StepResult(name="endpoint:/health", success=True, duration_ms=12),
            StepResult(name="database", success=False, duration_ms=30, error="refused"),
        ),
    )

    assert result.to_dict() == {
        "success": False,
        "durationMs": 42,
        "steps": [
            {"name": "endpoint:/health", "success": True, "durationMs": 12},
            {"name": "database", "success": False, "durationMs": 30, "error": "refused"},
        ],
    }
    assert [step.name for step in result.failed_steps] == ["database"]


def test_raise_for_status() -> None:
    RunResult(success=True, duration_ms=0).raise_for_status()

    failed = RunResult(
        success=False,
        duration_ms=5,
        steps=(StepResult(name="cache", success=False, duration_ms=5, error="boom"),),
    )
    with pytest.raises(WarmupFailedError) as exc:
        failed.raise_for_status()

    assert "cache" in exc.value.message
