# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Known application services and where their health endpoints live."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnknownServiceError
from .models import DEFAULT_HEALTH_PATH, ProbeTarget

DEFAULT_PREFIX = "letzgo"
DEFAULT_HOST = "localhost"
# Every service image listens on PORT=3000 inside its container.
CONTAINER_PORT = 3000


@dataclass(frozen=True)
class ServiceSpec:
    name: str
    host_port: int
    path: str = DEFAULT_HEALTH_PATH

    def container_name(self, prefix: str = DEFAULT_PREFIX) -> str:
        return f"{prefix}-{self.name}" if prefix else self.name


SERVICES: dict[str, ServiceSpec] = {
    service.name: service
    for service in (
        ServiceSpec("auth-service", 3000),
        ServiceSpec("user-service", 3001),
        ServiceSpec("chat-service", 3002),
        ServiceSpec("event-service", 3003),
        ServiceSpec("shared-service", 3004),
        ServiceSpec("splitz-service", 3005),
    )
}


def _normalize(name: str) -> str:
    key = name.strip().lower()
    if key in SERVICES:
        return key
    if f"{key}-service" in SERVICES:
        return f"{key}-service"
    raise UnknownServiceError(name)


def get_service(name: str, *, host: str = DEFAULT_HOST, prefix: str = DEFAULT_PREFIX) -> ProbeTarget:
    """Build the probe target for a catalog service (``auth`` and ``auth-service`` both work)."""
    service = SERVICES[_normalize(name)]
    return ProbeTarget(
        host=host,
        port=service.host_port,
        path=service.path,
        container_name=service.container_name(prefix),
        container_port=CONTAINER_PORT,
    )


def all_services(*, host: str = DEFAULT_HOST, prefix: str = DEFAULT_PREFIX) -> list[ProbeTarget]:
    return [get_service(name, host=host, prefix=prefix) for name in SERVICES]
