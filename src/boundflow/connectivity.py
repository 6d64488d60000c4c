"""Network reachability probes."""

from __future__ import annotations

import logging
import socket
from typing import Protocol
from urllib.parse import urlsplit

from boundflow.config import BoundflowConfig

_logger = logging.getLogger(__name__)


class ConnectivityProbe(Protocol):
    """Reports whether the network is reachable right now.

    Synchronous and side-effect free from the caller's point of view.
    """

    def is_reachable(self) -> bool:
        ...


class StaticConnectivityProbe:
    """Probe with a fixed answer, switchable at runtime (offline mode, tests)."""

    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable

    def is_reachable(self) -> bool:
        return self.reachable


class SocketConnectivityProbe:
    """Probe that opens (and immediately closes) a TCP connection to the API host."""

    def __init__(self, host: str, port: int = 443, *, timeout: float = 1.5) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: BoundflowConfig) -> SocketConnectivityProbe:
        host = config.connectivity_host or urlsplit(config.base_url).hostname
        if not host:
            host = "open-api.xyz"
        return cls(host, config.connectivity_port, timeout=config.connectivity_timeout)

    def is_reachable(self) -> bool:
        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout):
                return True
        except OSError as exc:
            _logger.debug("Connectivity probe to %s:%s failed: %s", self._host, self._port, exc)
            return False
