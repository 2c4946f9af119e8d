"""Warmup configuration loading from YAML files."""
from __future__ import annotations

import importlib
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml

from flywarm.errors import ConfigurationError, FlywarmError
from flywarm.orchestration import CustomStepSpec, EndpointSpec, WarmupConfig, WarmupLogger
from flywarm.orchestration.models import DEFAULT_PORT, WarmupAction
from flywarm.transport import HttpClient

BASE_URL_ENV = "FLYWARM_BASE_URL"
PORT_ENV = "PORT"

_ENDPOINT_KEYS = frozenset(
    {"path", "method", "body", "headers", "repeat_count", "count", "required"}
)
_CUSTOM_KEYS = frozenset({"name", "action", "required"})


def load_warmup_config(
    path: Path,
    *,
    base_url: str | None = None,
    port: int | None = None,
    verbose: bool | None = None,
    logger: WarmupLogger | None = None,
    http_client: HttpClient | None = None,
) -> WarmupConfig:
    """Load a warmup configuration file.

    Explicit arguments take precedence over values in the file, which take
    precedence over ``FLYWARM_BASE_URL``/``PORT`` from the environment.
    """

    resolved = _resolve_path(path)
    payload = _load_yaml(resolved)

    endpoints = tuple(
        _parse_endpoint(item, resolved)
        for item in _as_list(payload.get("endpoints"), "endpoints", resolved)
    )
    custom = tuple(
        _parse_custom(item, resolved)
        for item in _as_list(payload.get("custom"), "custom", resolved)
    )

    resolved_base_url = base_url or payload.get("base_url") or os.getenv(BASE_URL_ENV) or None
    if resolved_base_url is not None and not isinstance(resolved_base_url, str):
        raise ConfigurationError(
            message=f"base_url in {resolved} must be a string.",
            remediation="Quote the URL, e.g. base_url: 'http://localhost:8080'.",
        )

    if port is not None:
        resolved_port = port
    elif payload.get("port") is not None:
        resolved_port = _parse_port(payload.get("port"), f"port in {resolved}")
    elif os.getenv(PORT_ENV):
        resolved_port = _parse_port(os.getenv(PORT_ENV), f"the {PORT_ENV} environment variable")
    else:
        resolved_port = DEFAULT_PORT

    if verbose is None:
        verbose = bool(payload.get("verbose", False))

    try:
        return WarmupConfig(
            base_url=resolved_base_url,
            port=resolved_port,
            endpoints=endpoints,
            custom=custom,
            logger=logger,
            verbose=verbose,
            http_client=http_client,
        )
    except ConfigurationError as exc:
        raise ConfigurationError(
            message=f"{exc.message} (in {resolved})",
            remediation=exc.remediation,
        ) from exc


def import_action(reference: str) -> WarmupAction:
    """Resolve a ``module:attribute`` reference to a callable."""

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            message=f"Action reference '{reference}' is not of the form 'module:attribute'.",
            remediation="Reference the warmup function as e.g. 'myapp.db:connect'.",
        )

    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(
            message=f"Unable to import module '{module_name}' for action '{reference}'.",
            remediation="Check that the module is importable from the working directory.",
        ) from exc

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigurationError(
                message=f"Action '{reference}' does not exist.",
                remediation=f"Define '{attribute}' in module '{module_name}'.",
            ) from exc

    if not callable(target):
        raise ConfigurationError(
            message=f"Action '{reference}' is not callable.",
            remediation="Point the action at a zero-argument async function.",
        )
    return target


def _resolve_path(path: Path) -> Path:
    candidate = path.expanduser()
    try:
        resolved = candidate.resolve()
    except OSError:
        resolved = candidate

    if not resolved.exists() or not resolved.is_file():
        raise ConfigurationError(
            message=f"Warmup config file {resolved} does not exist or is not a file.",
            remediation="Verify the --config path.",
        )
    return resolved


def _load_yaml(path: Path) -> dict:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            message=f"Unable to read warmup config file {path}.",
            remediation="Check file permissions and retry.",
        ) from exc

    try:
        loaded = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            message=f"Warmup config file {path} contains invalid YAML.",
            remediation="Ensure the file follows the documented schema.",
        ) from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            message=f"Warmup config file {path} must define a mapping at the root level.",
            remediation="Provide 'endpoints' and/or 'custom' lists at the top level.",
        )
    return loaded


def _as_list(data: object, key: str, source: Path) -> Sequence[object]:
    if data is None:
        return ()
    if not isinstance(data, Sequence) or isinstance(data, str | bytes):
        raise ConfigurationError(
            message=f"'{key}' in {source} must be a list.",
            remediation=f"Use a YAML list under '{key}', e.g. '- path: /health'.",
        )
    return data


def _parse_endpoint(item: object, source: Path) -> EndpointSpec:
    if isinstance(item, str):
        item = {"path": item}
    if not isinstance(item, Mapping):
        raise ConfigurationError(
            message=f"Endpoint entries in {source} must be mappings or paths.",
            remediation="Write each endpoint as '- path: /health' or '- /health'.",
        )
    _reject_unknown_keys(item, _ENDPOINT_KEYS, "endpoint", source)

    path = item.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ConfigurationError(
            message=f"Endpoint entry in {source} is missing a path.",
            remediation="Give every endpoint a path such as '/health'.",
        )

    headers = item.get("headers") or {}
    if not isinstance(headers, Mapping):
        raise ConfigurationError(
            message=f"Headers for endpoint {path} in {source} must be a mapping.",
            remediation="Example: headers: { X-Warmup: '1' }.",
        )

    repeat_raw = item.get("repeat_count", item.get("count", 1))
    if isinstance(repeat_raw, bool) or not isinstance(repeat_raw, int):
        raise ConfigurationError(
            message=f"repeat_count for endpoint {path} in {source} must be an integer.",
            remediation="Use a whole number such as 'repeat_count: 3'.",
        )

    try:
        return EndpointSpec(
            path=path.strip(),
            method=str(item.get("method", "GET")),
            body=item.get("body"),
            headers={str(name): str(value) for name, value in headers.items()},
            repeat_count=repeat_raw,
            required=bool(item.get("required", False)),
        )
    except FlywarmError as exc:
        raise ConfigurationError(
            message=f"{exc.message} (in {source})",
            remediation=exc.remediation,
        ) from exc


def _parse_custom(item: object, source: Path) -> CustomStepSpec:
    if not isinstance(item, Mapping):
        raise ConfigurationError(
            message=f"Custom step entries in {source} must be mappings.",
            remediation="Write each custom step as '- name: database' with an 'action'.",
        )
    _reject_unknown_keys(item, _CUSTOM_KEYS, "custom step", source)

    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(
            message=f"Custom step entry in {source} is missing a name.",
            remediation="Set a unique 'name' for every custom step.",
        )

    reference = item.get("action")
    if not isinstance(reference, str) or not reference.strip():
        raise ConfigurationError(
            message=f"Custom step '{name}' in {source} is missing an action.",
            remediation="Reference the warmup function as 'module:attribute'.",
        )

    return CustomStepSpec(
        name=name.strip(),
        action=import_action(reference.strip()),
        required=bool(item.get("required", False)),
    )


def _reject_unknown_keys(
    item: Mapping[object, object],
    allowed: frozenset[str],
    label: str,
    source: Path,
) -> None:
    unknown = sorted(str(key) for key in item if key not in allowed)
    if unknown:
        raise ConfigurationError(
            message=f"Unknown {label} keys in {source}: {', '.join(unknown)}.",
            remediation=f"Supported keys: {', '.join(sorted(allowed))}.",
        )


def _parse_port(value: object, origin: str) -> int:
    try:
        port = int(str(value))
    except ValueError as exc:
        raise ConfigurationError(
            message=f"Invalid port '{value}' from {origin}.",
            remediation="Use an integer port such as 3000.",
        ) from exc
    if not 0 < port < 65536:
        raise ConfigurationError(
            message=f"Port {port} from {origin} is out of range.",
            remediation="Use a port between 1 and 65535.",
        )
    return port


__all__ = [
    "BASE_URL_ENV",
    "PORT_ENV",
    "import_action",
    "load_warmup_config",
]
