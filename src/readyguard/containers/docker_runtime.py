# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Docker SDK backed ContainerRuntime."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import docker
from docker import errors as docker_errors

from ..config import RuntimeSettings
from ..errors import RuntimeQueryError
from .base import ContainerRuntime, ContainerState, ExecResult

logger = logging.getLogger(__name__)


def _decode(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


class DockerRuntime(ContainerRuntime):
    """
    Queries the Docker daemon through the typed SDK.

    The daemon connection is opened on first use so that constructing the runtime
    never fails; connection errors surface as ``RuntimeQueryError`` from the query.
    """

    def __init__(self, settings: RuntimeSettings | None = None, client: Any | None = None):
        self.settings = settings or RuntimeSettings()
        self._client = client

    def _docker(self) -> Any:
        if self._client is None:
            try:
                if self.settings.docker_host:
                    self._client = docker.DockerClient(
                        base_url=self.settings.docker_host,
                        timeout=int(self.settings.docker_timeout),
                    )
                else:
                    self._client = docker.from_env(timeout=int(self.settings.docker_timeout))
            except docker_errors.DockerException as exc:
                raise RuntimeQueryError(f"cannot connect to docker daemon: {exc}") from exc
        return self._client

    def _container(self, name: str) -> Any:
        try:
            return self._docker().containers.get(name)
        except docker_errors.NotFound:
            return None
        except docker_errors.DockerException as exc:
            raise RuntimeQueryError(f"docker query for {name!r} failed: {exc}") from exc

    def inspect(self, name: str) -> ContainerState:
        container = self._container(name)
        if container is None:
            return ContainerState.missing(name)
        return ContainerState.from_inspect(name, container.attrs or {})

    def logs(self, name: str, tail: int) -> str:
        container = self._container(name)
        if container is None:
            raise RuntimeQueryError(f"container {name!r} does not exist")
        try:
            raw = container.logs(stdout=True, stderr=True, tail=tail, timestamps=False)
        except docker_errors.DockerException as exc:
            raise RuntimeQueryError(f"cannot read logs for {name!r}: {exc}") from exc
        return _decode(raw)

    def exec(self, name: str, command: Sequence[str]) -> ExecResult:
        container = self._container(name)
        if container is None:
            raise RuntimeQueryError(f"container {name!r} does not exist")
        try:
            result = container.exec_run(list(command), stdout=True, stderr=True, demux=False)
        except docker_errors.DockerException as exc:
            raise RuntimeQueryError(f"exec in {name!r} failed: {exc}") from exc
        exit_code = getattr(result, "exit_code", None)
        output = getattr(result, "output", b"")
        return ExecResult(exit_code=exit_code, output=_decode(output))

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            except Exception:  # noqa: BLE001
                logger.debug("docker client close failed", exc_info=True)
            self._client = None
