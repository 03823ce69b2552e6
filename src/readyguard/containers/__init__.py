# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Container runtime exports."""

from .adapters import StubContainerRuntime, exited_state, running_state
from .base import ContainerRuntime, ContainerState, ExecResult
from .docker_runtime import DockerRuntime

__all__ = [
    "ContainerRuntime",
    "ContainerState",
    "DockerRuntime",
    "ExecResult",
    "StubContainerRuntime",
    "exited_state",
    "running_state",
]
