"""Client configuration for boundflow."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from boundflow._constants import BASE_URL, NETWORK_TIMEOUT, TESTING_CACHE_DELAY, TESTING_NETWORK_DELAY
from boundflow.exceptions import BoundflowConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise BoundflowConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class BoundflowConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL, ending with a slash. Endpoint paths are appended to it.
    network_timeout : float
        Total per-request timeout in seconds. A request exceeding it
        is reported as a transport failure.
    testing_network_delay : float
        Artificial delay (seconds) awaited before every network call.
        Only useful to observe loading states while testing.
    testing_cache_delay : float
        Artificial delay (seconds) awaited before every cache read.
    connectivity_host : str or None
        Host probed by :class:`~boundflow.connectivity.SocketConnectivityProbe`.
        Defaults to the host of ``base_url``.
    connectivity_port : int
        TCP port probed for reachability.
    connectivity_timeout : float
        Seconds to wait for the reachability probe connection.
    api_trace_enabled : bool
        Log redacted request/response payloads at DEBUG level.
    """

    base_url: str = BASE_URL
    network_timeout: float = NETWORK_TIMEOUT
    testing_network_delay: float = TESTING_NETWORK_DELAY
    testing_cache_delay: float = TESTING_CACHE_DELAY
    connectivity_host: str | None = None
    connectivity_port: int = 443
    connectivity_timeout: float = 1.5
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url:
            raise BoundflowConfigError("base_url must be non-empty")
        if self.network_timeout <= 0:
            raise BoundflowConfigError(f"network_timeout must be positive, got {self.network_timeout}")
        if self.testing_network_delay < 0 or self.testing_cache_delay < 0:
            raise BoundflowConfigError("testing delays must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> BoundflowConfig:
        """Create configuration from environment variables.

        Reads optional ``BOUNDFLOW_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        BoundflowConfig
            Populated configuration.

        Raises
        ------
        BoundflowConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        for env_key, field_name in (("BOUNDFLOW_BASE_URL", "base_url"), ("BOUNDFLOW_CONNECTIVITY_HOST", "connectivity_host")):
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "BOUNDFLOW_NETWORK_TIMEOUT": "network_timeout",
            "BOUNDFLOW_TESTING_NETWORK_DELAY": "testing_network_delay",
            "BOUNDFLOW_TESTING_CACHE_DELAY": "testing_cache_delay",
            "BOUNDFLOW_CONNECTIVITY_TIMEOUT": "connectivity_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        port_env = env.get("BOUNDFLOW_CONNECTIVITY_PORT")
        if port_env is not None and "connectivity_port" not in overrides:
            config_kwargs["connectivity_port"] = int(_env_float("BOUNDFLOW_CONNECTIVITY_PORT", port_env))

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(env.get("BOUNDFLOW_API_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
