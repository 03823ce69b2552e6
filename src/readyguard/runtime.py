# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level ReadyGuard facade wiring the HTTP client and container runtime."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import suppress

from .config import VerifierSettings
from .containers.base import ContainerRuntime
from .containers.docker_runtime import DockerRuntime
from .http.client import HttpClient, create_default_http_client
from .models import AttemptBudget, ProbeTarget, VerificationResult
from .verify.batch import BatchSummary, verify_many
from .verify.cancellation import CancellationToken
from .verify.loop import ReadinessVerifier


class ReadyGuard:
    """
    Convenience wrapper that owns one HTTP client and one container runtime.

    Both collaborators are shared across verifications; each verification still
    keeps its own attempt counter and diagnostic buffer.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        container_runtime: ContainerRuntime | None = None,
        settings: VerifierSettings | None = None,
    ):
        self.settings = settings or VerifierSettings()
        self.http_client = http_client or create_default_http_client(self.settings.probe)
        self.container_runtime = container_runtime or DockerRuntime(self.settings.runtime)
        self.verifier = ReadinessVerifier(self.http_client, self.container_runtime, self.settings)

    def verify(
        self,
        target: ProbeTarget,
        budget: AttemptBudget | None = None,
        cancellation: CancellationToken | None = None,
    ) -> VerificationResult:
        return self.verifier.verify(target, budget, cancellation)

    def verify_many(
        self,
        targets: Sequence[ProbeTarget],
        budget: AttemptBudget | None = None,
        cancellation: CancellationToken | None = None,
    ) -> BatchSummary:
        return verify_many(self.verifier, targets, budget, cancellation)

    def close(self) -> None:
        for resource in (self.http_client, self.container_runtime):
            with suppress(Exception):
                if hasattr(resource, "close"):
                    resource.close()

    def __enter__(self) -> "ReadyGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
