# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for ReadyGuard."""

from .target import DEFAULT_HEALTH_PATH, ProbeTarget, parse_target
from .verification import (
    AttemptBudget,
    AttemptOutcome,
    AttemptRecord,
    DiagnosticEntry,
    DiagnosticKind,
    OutcomeKind,
    VerificationResult,
    VerificationStatus,
)

__all__ = [
    "DEFAULT_HEALTH_PATH",
    "AttemptBudget",
    "AttemptOutcome",
    "AttemptRecord",
    "DiagnosticEntry",
    "DiagnosticKind",
    "OutcomeKind",
    "ProbeTarget",
    "VerificationResult",
    "VerificationStatus",
    "parse_target",
]
