# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable ContainerRuntime double for tests and dry runs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..errors import RuntimeQueryError
from .base import ContainerRuntime, ContainerState, ExecResult


class StubContainerRuntime(ContainerRuntime):
    """
    In-memory runtime.

    ``states`` maps a container name to a state, an exception, or a sequence of
    those served one per ``inspect`` call (the last entry repeats). Unknown names
    inspect as missing containers. ``exec_results`` entries may be sequences too.
    """

    def __init__(
        self,
        states: dict[str, ContainerState | Exception | Iterable[ContainerState | Exception]] | None = None,
        logs: dict[str, str | Exception] | None = None,
        exec_results: dict[str, ExecResult | Exception | Sequence[ExecResult | Exception]] | None = None,
    ):
        self._states: dict[str, list[ContainerState | Exception]] = {}
        for name, value in (states or {}).items():
            self.set_state(name, value)
        self._logs = dict(logs or {})
        self._exec_results = {
            name: [value] if isinstance(value, (ExecResult, Exception)) else list(value)
            for name, value in (exec_results or {}).items()
        }
        self.inspect_calls: list[str] = []
        self.log_calls: list[tuple[str, int]] = []
        self.exec_calls: list[tuple[str, tuple[str, ...]]] = []
        self.closed = False

    def set_state(
        self, name: str, value: ContainerState | Exception | Iterable[ContainerState | Exception]
    ) -> None:
        if isinstance(value, (ContainerState, Exception)):
            self._states[name] = [value]
        else:
            self._states[name] = list(value)

    def inspect(self, name: str) -> ContainerState:
        self.inspect_calls.append(name)
        queue = self._states.get(name)
        if not queue:
            return ContainerState.missing(name)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def logs(self, name: str, tail: int) -> str:
        self.log_calls.append((name, tail))
        value = self._logs.get(name)
        if value is None:
            raise RuntimeQueryError(f"container {name!r} does not exist")
        if isinstance(value, Exception):
            raise value
        lines = value.splitlines()
        return "\n".join(lines[-tail:])

    def exec(self, name: str, command: Sequence[str]) -> ExecResult:
        self.exec_calls.append((name, tuple(command)))
        queue = self._exec_results.get(name)
        if not queue:
            raise RuntimeQueryError(f"container {name!r} does not exist")
        value = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(value, Exception):
            raise value
        return value

    def close(self) -> None:
        self.closed = True


def running_state(name: str, **overrides) -> ContainerState:
    """A running container attached to one network."""
    values = {
        "exists": True,
        "status": "running",
        "running": True,
        "exit_code": 0,
        "started_at": "2025-01-01T00:00:00Z",
        "networks": {"bridge": "172.17.0.2"},
    }
    values.update(overrides)
    return ContainerState(name=name, **values)


def exited_state(name: str, exit_code: int = 1, **overrides) -> ContainerState:
    values = {
        "exists": True,
        "status": "exited",
        "running": False,
        "exit_code": exit_code,
        "finished_at": "2025-01-01T00:00:05Z",
    }
    values.update(overrides)
    return ContainerState(name=name, **values)
