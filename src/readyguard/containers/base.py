# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Typed container runtime interface."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class ContainerState:
    """Structured view of a container inspection document."""

    name: str
    exists: bool
    status: str = "missing"
    running: bool = False
    exit_code: int | None = None
    oom_killed: bool = False
    error: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    restart_count: int = 0
    health: str | None = None
    networks: dict[str, str] = field(default_factory=dict)
    ports: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def missing(cls, name: str) -> "ContainerState":
        return cls(name=name, exists=False)

    @classmethod
    def from_inspect(cls, name: str, attrs: Mapping[str, Any]) -> "ContainerState":
        """Build a state from a ``docker inspect`` style mapping."""
        state = attrs.get("State") or {}
        health = state.get("Health") or {}
        network_settings = attrs.get("NetworkSettings") or {}
        networks_raw = network_settings.get("Networks") or {}
        networks = {
            str(net_name): str((conf or {}).get("IPAddress") or "")
            for net_name, conf in networks_raw.items()
        }
        # Exposed but unpublished ports map to None.
        ports = {
            str(container_port): [
                f"{binding.get('HostIp') or '0.0.0.0'}:{binding.get('HostPort')}"
                for binding in (bindings or [])
                if binding.get("HostPort")
            ]
            for container_port, bindings in (network_settings.get("Ports") or {}).items()
        }
        return cls(
            name=str(attrs.get("Name") or name).lstrip("/"),
            exists=True,
            status=str(state.get("Status") or "unknown"),
            running=bool(state.get("Running")),
            exit_code=state.get("ExitCode"),
            oom_killed=bool(state.get("OOMKilled")),
            error=state.get("Error") or None,
            started_at=state.get("StartedAt") or None,
            finished_at=state.get("FinishedAt") or None,
            restart_count=int(attrs.get("RestartCount") or 0),
            health=health.get("Status") or None,
            networks=networks,
            ports=ports,
        )


@dataclass(frozen=True)
class ExecResult:
    exit_code: int | None
    output: str


class ContainerRuntime(Protocol):
    """
    Read-only queries against a container runtime.

    ``inspect`` returns ``ContainerState.missing`` for unknown containers and raises
    ``RuntimeQueryError`` only when the runtime itself cannot be queried.
    """

    def inspect(self, name: str) -> ContainerState: ...

    def logs(self, name: str, tail: int) -> str: ...

    def exec(self, name: str, command: Sequence[str]) -> ExecResult: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...
