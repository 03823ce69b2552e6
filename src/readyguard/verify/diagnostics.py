# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Failure evidence bundle.

Collected only after the attempt budget is exhausted. The bundle always holds
exactly one LOG_TAIL, one PROCESS_STATUS and one NETWORK_PROBE entry, in that
order; a step that cannot be completed is recorded as ``unavailable: <reason>``
instead of aborting the collection.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence

from ..config import DiagnosticSettings
from ..containers.base import ContainerRuntime, ContainerState
from ..models import AttemptRecord, DiagnosticEntry, DiagnosticKind, ProbeTarget

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "[truncated]"


def network_probe_command(url: str, timeout: float) -> list[str]:
    """Shell command fetching ``url`` from inside a container (wget, then curl)."""
    seconds = max(1, int(round(timeout)))
    quoted = shlex.quote(url)
    script = (
        f"wget -q -O- -T {seconds} {quoted} 2>&1 "
        f"|| curl -fsS -m {seconds} {quoted} 2>&1"
    )
    return ["sh", "-c", script]


def listening_sockets_command() -> list[str]:
    """Shell command listing TCP listeners inside a container (netstat, then ss)."""
    return ["sh", "-c", "netstat -tln 2>/dev/null || ss -tln 2>&1"]


def _format_state(state: ContainerState) -> list[str]:
    if not state.exists:
        return [f"container: {state.name}", "state: not running (container does not exist)"]
    lines = [
        f"container: {state.name}",
        f"state: {state.status}" + ("" if state.running else " (not running)"),
    ]
    if state.exit_code is not None:
        lines.append(f"exit_code: {state.exit_code}")
    if state.oom_killed:
        lines.append("oom_killed: true")
    lines.append(f"restart_count: {state.restart_count}")
    if state.health:
        lines.append(f"healthcheck: {state.health}")
    if state.started_at:
        lines.append(f"started_at: {state.started_at}")
    if state.finished_at and not state.running:
        lines.append(f"finished_at: {state.finished_at}")
    if state.error:
        lines.append(f"error: {state.error}")
    return lines


def _format_ports(state: ContainerState) -> str:
    if not state.ports:
        return "published ports: none"
    mappings = []
    for container_port, bindings in sorted(state.ports.items()):
        mappings.append(f"{container_port} -> {', '.join(bindings) if bindings else '(not published)'}")
    return "published ports: " + "; ".join(mappings)


def _format_attempts(attempts: Sequence[AttemptRecord], total: int | None) -> list[str]:
    if not attempts:
        return ["attempts: none recorded"]
    suffix = f"/{total}" if total else ""
    lines = ["attempts:"]
    for record in attempts:
        lines.append(f"  attempt {record.number}{suffix} (+{record.elapsed:.1f}s): {record.outcome.describe()}")
    return lines


class DiagnosticCollector:
    def __init__(self, runtime: ContainerRuntime, settings: DiagnosticSettings | None = None):
        self.runtime = runtime
        self.settings = settings or DiagnosticSettings()

    def collect(
        self,
        target: ProbeTarget,
        attempts: Sequence[AttemptRecord] = (),
        max_attempts: int | None = None,
    ) -> list[DiagnosticEntry]:
        return [
            self._bounded(self._log_tail(target)),
            self._process_status(target, attempts, max_attempts),
            self._bounded(self._network_probe(target)),
        ]

    def _bounded(self, entry: DiagnosticEntry) -> DiagnosticEntry:
        limit = self.settings.max_diagnostic_chars
        if limit <= 0 or len(entry.content) <= limit:
            return entry
        # Keep the tail: the most recent output is the most relevant.
        content = f"{TRUNCATION_MARKER}\n{entry.content[-limit:]}"
        return DiagnosticEntry(kind=entry.kind, content=content, available=entry.available)

    def _bounded_history(self, head: list[str], history: list[str]) -> str:
        """Bound the content by dropping the oldest history lines; ``head`` always survives."""
        limit = self.settings.max_diagnostic_chars
        content = "\n".join([*head, *history])
        if limit <= 0 or len(content) <= limit:
            return content
        head_text = "\n".join(head)
        room = limit - len(head_text) - len(TRUNCATION_MARKER) - 1
        if room < 0:
            return f"{head_text[:limit]}\n{TRUNCATION_MARKER}"
        kept: list[str] = []
        for line in reversed(history):
            if len(line) + 1 > room:
                break
            kept.append(line)
            room -= len(line) + 1
        return "\n".join([*head, TRUNCATION_MARKER, *reversed(kept)])

    def _log_tail(self, target: ProbeTarget) -> DiagnosticEntry:
        kind = DiagnosticKind.LOG_TAIL
        if not target.container_name:
            return DiagnosticEntry.unavailable(kind, "no container name given")
        tail = self.settings.effective_log_tail
        try:
            logs = self.runtime.logs(target.container_name, tail)
        except Exception as exc:  # noqa: BLE001
            logger.debug("log tail for %s failed", target.container_name, exc_info=True)
            return DiagnosticEntry.unavailable(kind, str(exc) or type(exc).__name__)
        # Re-apply the line bound in case the runtime ignored ``tail``.
        lines = logs.splitlines()[-tail:]
        if not lines:
            return DiagnosticEntry(kind=kind, content=f"(no output in the last {tail} lines)")
        return DiagnosticEntry(kind=kind, content="\n".join(lines))

    def _process_status(
        self,
        target: ProbeTarget,
        attempts: Sequence[AttemptRecord],
        max_attempts: int | None,
    ) -> DiagnosticEntry:
        kind = DiagnosticKind.PROCESS_STATUS
        history = _format_attempts(attempts, max_attempts)
        if not target.container_name:
            reason = "no container name given"
            content = self._bounded_history([f"unavailable: {reason}"], history)
            return DiagnosticEntry(kind=kind, content=content, available=False)
        try:
            state = self.runtime.inspect(target.container_name)
        except Exception as exc:  # noqa: BLE001
            logger.debug("inspect %s failed", target.container_name, exc_info=True)
            reason = f"runtime query failed: {exc}"
            content = self._bounded_history([f"unavailable: {reason}"], history)
            return DiagnosticEntry(kind=kind, content=content, available=False)
        return DiagnosticEntry(kind=kind, content=self._bounded_history(_format_state(state), history))

    def _network_probe(self, target: ProbeTarget) -> DiagnosticEntry:
        kind = DiagnosticKind.NETWORK_PROBE
        name = target.container_name
        if not name:
            return DiagnosticEntry.unavailable(kind, "no container name given")
        lines: list[str] = []
        try:
            state = self.runtime.inspect(name)
        except Exception as exc:  # noqa: BLE001
            return DiagnosticEntry.unavailable(kind, f"runtime query failed: {exc}")
        if not state.exists:
            return DiagnosticEntry.unavailable(kind, f"container {name} does not exist")
        if state.networks:
            attached = ", ".join(f"{net} ({ip or 'no ip'})" for net, ip in sorted(state.networks.items()))
            lines.append(f"networks: {attached}")
        else:
            lines.append("networks: none")
        lines.append(_format_ports(state))
        if not state.running:
            reason = f"unavailable: container {name} is not running, cannot probe from inside"
            return DiagnosticEntry(kind=kind, content="\n".join([reason, *lines]), available=False)

        url = target.internal_url
        command = network_probe_command(url, self.settings.network_probe_timeout)
        try:
            result = self.runtime.exec(name, command)
        except Exception as exc:  # noqa: BLE001
            logger.debug("network probe in %s failed", name, exc_info=True)
            return DiagnosticEntry(kind=kind, content="\n".join([f"unavailable: {exc}", *lines]), available=False)

        verdict = "reachable" if result.exit_code == 0 else "not reachable"
        lines.append(f"in-container GET {url}: {verdict} (exit_code={result.exit_code})")
        output = result.output.strip()
        if output:
            lines.append(output)
        if result.exit_code != 0:
            lines.extend(self._listening_sockets(name))
        return DiagnosticEntry(kind=kind, content="\n".join(lines))

    def _listening_sockets(self, name: str) -> list[str]:
        try:
            result = self.runtime.exec(name, listening_sockets_command())
        except Exception as exc:  # noqa: BLE001
            logger.debug("listing sockets in %s failed", name, exc_info=True)
            return [f"listening sockets: unavailable: {exc}"]
        output = result.output.strip()
        if result.exit_code != 0:
            detail = f": {output}" if output else ""
            return [f"listening sockets: unavailable: exit_code={result.exit_code}{detail}"]
        return ["listening sockets:", output or "(none)"]
