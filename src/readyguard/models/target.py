# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe target model and the ``host:port/path`` notation."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from ..errors import ConfigurationError

DEFAULT_HEALTH_PATH = "/health"


@dataclass(frozen=True)
class ProbeTarget:
    """What one verification run checks. Immutable for the duration of the run."""

    host: str
    port: int
    path: str = DEFAULT_HEALTH_PATH
    container_name: str | None = None
    scheme: str = "http"
    container_port: int | None = None

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError("target host must not be empty")
        if not 0 < int(self.port) < 65536:
            raise ConfigurationError(f"target port out of range: {self.port}")
        if self.container_port is not None and not 0 < int(self.container_port) < 65536:
            raise ConfigurationError(f"container port out of range: {self.container_port}")
        if not self.path.startswith("/"):
            object.__setattr__(self, "path", "/" + self.path)

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self._netloc(self.host, self.port)}{self.path}"

    @property
    def internal_url(self) -> str:
        """The same endpoint as seen from inside the container's network namespace."""
        port = self.container_port if self.container_port is not None else self.port
        return f"{self.scheme}://{self._netloc('localhost', port)}{self.path}"

    @property
    def label(self) -> str:
        return self.container_name or f"{self.host}:{self.port}"

    @staticmethod
    def _netloc(host: str, port: int) -> str:
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{host}:{port}"

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "container_name": self.container_name,
            "container_port": self.container_port,
        }


def parse_target(
    raw: str,
    *,
    container_name: str | None = None,
    container_port: int | None = None,
) -> ProbeTarget:
    """
    Parse ``host:port[/path]`` (an ``http://`` or ``https://`` prefix is accepted).

    A missing path means ``/health``; a missing or malformed port is an error.
    """
    text = (raw or "").strip()
    if not text:
        raise ConfigurationError("empty target")
    if "://" not in text:
        text = "http://" + text
    parts = urlsplit(text)
    if parts.scheme not in {"http", "https"}:
        raise ConfigurationError(f"unsupported scheme in target: {parts.scheme}")
    try:
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"invalid port in target {raw!r}") from exc
    if port is None:
        raise ConfigurationError(f"target {raw!r} must include a port (host:port/path)")
    if not parts.hostname:
        raise ConfigurationError(f"target {raw!r} has no host")
    path = parts.path or DEFAULT_HEALTH_PATH
    if parts.query:
        path = f"{path}?{parts.query}"
    return ProbeTarget(
        host=parts.hostname,
        port=port,
        path=path,
        container_name=container_name,
        scheme=parts.scheme,
        container_port=container_port,
    )
