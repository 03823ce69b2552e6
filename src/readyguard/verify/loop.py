# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bounded attempt loop deciding whether a deployed unit became ready."""

from __future__ import annotations

import logging
import time

from ..config import VerifierSettings
from ..containers.base import ContainerRuntime
from ..errors import ConfigurationError
from ..http.client import HttpClient
from ..models import (
    AttemptBudget,
    AttemptOutcome,
    AttemptRecord,
    DiagnosticEntry,
    DiagnosticKind,
    ProbeTarget,
    VerificationResult,
)
from .cancellation import CancellationToken
from .diagnostics import DiagnosticCollector
from .liveness import LivenessCheck, LivenessState
from .readiness import ReadinessCheck

logger = logging.getLogger(__name__)


class ReadinessVerifier:
    """
    Poll liveness then readiness up to ``budget.max_attempts`` times.

    Liveness and readiness failures share one attempt counter. A healthy probe
    returns immediately; exhausting the budget collects diagnostics once and
    returns a failure; cancellation returns ``CANCELLED`` without diagnostics.
    The verifier holds no per-run state, so one instance may serve concurrent
    runs for different targets.
    """

    def __init__(
        self,
        http_client: HttpClient,
        container_runtime: ContainerRuntime,
        settings: VerifierSettings | None = None,
    ):
        self.settings = settings or VerifierSettings()
        self.liveness = LivenessCheck(container_runtime)
        self.readiness = ReadinessCheck(http_client, self.settings.probe)
        self.diagnostics = DiagnosticCollector(container_runtime, self.settings.diagnostics)

    def default_budget(self) -> AttemptBudget:
        return AttemptBudget(
            max_attempts=self.settings.budget.max_attempts,
            delay=self.settings.budget.delay,
        )

    def check_budget(self, budget: AttemptBudget) -> None:
        """A probe must time out before the next attempt is due."""
        timeout = self.settings.probe.timeout
        if timeout <= 0:
            raise ConfigurationError(f"probe timeout must be > 0, got {timeout}")
        if budget.max_attempts > 1 and timeout >= budget.delay:
            raise ConfigurationError(
                f"probe timeout ({timeout}s) must be shorter than the delay between attempts ({budget.delay}s)"
            )

    def run_attempt(self, target: ProbeTarget) -> AttemptOutcome:
        liveness = self.liveness.check(target)
        if liveness.running:
            return self.readiness.probe(target)
        if liveness.state == LivenessState.QUERY_FAILED:
            return AttemptOutcome.runtime_query_failed(liveness.describe())
        return AttemptOutcome.not_running(liveness.describe())

    def verify(
        self,
        target: ProbeTarget,
        budget: AttemptBudget | None = None,
        cancellation: CancellationToken | None = None,
    ) -> VerificationResult:
        budget = budget or self.default_budget()
        self.check_budget(budget)
        token = cancellation or CancellationToken()
        started = time.monotonic()
        attempts: list[AttemptRecord] = []
        logger.info(
            "%s: verifying %s, up to %d attempts and %.1fs of delays",
            target.label,
            target.url,
            budget.max_attempts,
            budget.max_total_delay,
        )

        attempt = 1
        while attempt <= budget.max_attempts:
            if token.cancelled:
                logger.warning("%s: cancelled before attempt %d/%d", target.label, attempt, budget.max_attempts)
                return VerificationResult.cancelled(target, attempts, time.monotonic() - started)

            outcome = self.run_attempt(target)
            attempts.append(AttemptRecord(number=attempt, outcome=outcome, elapsed=time.monotonic() - started))

            if outcome.is_healthy:
                logger.info("%s: healthy on attempt %d/%d", target.label, attempt, budget.max_attempts)
                return VerificationResult.success(target, attempts, time.monotonic() - started)

            logger.info("%s: attempt %d/%d: %s", target.label, attempt, budget.max_attempts, outcome.describe())
            if attempt == budget.max_attempts:
                break
            if token.wait(budget.delay):
                logger.warning("%s: cancelled after attempt %d/%d", target.label, attempt, budget.max_attempts)
                return VerificationResult.cancelled(target, attempts, time.monotonic() - started)
            attempt += 1

        if token.cancelled:
            logger.warning("%s: cancelled during the last attempt", target.label)
            return VerificationResult.cancelled(target, attempts, time.monotonic() - started)

        logger.warning("%s: not ready after %d attempts, collecting diagnostics", target.label, budget.max_attempts)
        try:
            diagnostics = self.diagnostics.collect(target, attempts, budget.max_attempts)
        except Exception as exc:  # noqa: BLE001
            logger.exception("diagnostic collection for %s failed", target.label)
            diagnostics = _fallback_diagnostics(exc)
        return VerificationResult.failure(target, attempts, diagnostics, time.monotonic() - started)


def _fallback_diagnostics(exc: Exception) -> list[DiagnosticEntry]:
    reason = f"diagnostic collection failed: {exc}"
    return [DiagnosticEntry.unavailable(kind, reason) for kind in DiagnosticKind]
