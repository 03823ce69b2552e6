# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Verify several targets concurrently, one independent run per target."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ..models import AttemptBudget, ProbeTarget, VerificationResult, VerificationStatus
from .cancellation import CancellationToken
from .loop import ReadinessVerifier

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 2


@dataclass
class BatchSummary:
    results: list[VerificationResult]

    def _count(self, status: VerificationStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(VerificationStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return self._count(VerificationStatus.FAILURE)

    @property
    def cancelled(self) -> int:
        return self._count(VerificationStatus.CANCELLED)

    @property
    def exit_code(self) -> int:
        # A verified failure outranks a cancellation.
        if self.failed:
            return EXIT_FAILURE
        if self.cancelled:
            return EXIT_CANCELLED
        return EXIT_SUCCESS


def verify_many(
    verifier: ReadinessVerifier,
    targets: Sequence[ProbeTarget],
    budget: AttemptBudget | None = None,
    cancellation: CancellationToken | None = None,
    max_workers: int | None = None,
) -> BatchSummary:
    """
    Run one verification per target on its own worker thread.

    Runs share nothing but the optional cancellation token; results come back in
    the order of ``targets``.
    """
    if not targets:
        return BatchSummary(results=[])
    budget = budget or verifier.default_budget()
    verifier.check_budget(budget)
    workers = max_workers or len(targets)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="readyguard") as pool:
        futures = [pool.submit(verifier.verify, target, budget, cancellation) for target in targets]
        return BatchSummary(results=[future.result() for future in futures])
