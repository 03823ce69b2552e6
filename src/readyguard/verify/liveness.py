# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Liveness: is the container present and running, regardless of application health."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..containers.base import ContainerRuntime, ContainerState
from ..models import ProbeTarget

logger = logging.getLogger(__name__)


class LivenessState(str, Enum):
    RUNNING = "RUNNING"
    NOT_RUNNING = "NOT_RUNNING"
    QUERY_FAILED = "QUERY_FAILED"


@dataclass(frozen=True)
class LivenessResult:
    state: LivenessState
    container: ContainerState | None = None
    error: str | None = None

    @property
    def running(self) -> bool:
        return self.state == LivenessState.RUNNING

    def describe(self) -> str:
        if self.state == LivenessState.QUERY_FAILED:
            return self.error or "runtime query failed"
        if self.container is None:
            return "liveness not checked"
        if not self.container.exists:
            return f"container {self.container.name} does not exist"
        if self.container.exit_code is not None and not self.container.running:
            return f"status={self.container.status} exit_code={self.container.exit_code}"
        return f"status={self.container.status}"


class LivenessCheck:
    def __init__(self, runtime: ContainerRuntime):
        self.runtime = runtime

    def check(self, target: ProbeTarget) -> LivenessResult:
        if not target.container_name:
            return LivenessResult(state=LivenessState.RUNNING)
        try:
            container = self.runtime.inspect(target.container_name)
        except Exception as exc:  # noqa: BLE001
            logger.debug("inspect %s failed", target.container_name, exc_info=True)
            return LivenessResult(state=LivenessState.QUERY_FAILED, error=f"{type(exc).__name__}: {exc}")
        if container.exists and container.running:
            return LivenessResult(state=LivenessState.RUNNING, container=container)
        return LivenessResult(state=LivenessState.NOT_RUNNING, container=container)
