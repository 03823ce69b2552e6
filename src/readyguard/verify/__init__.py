# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Readiness verification: attempt loop, checks, diagnostics and cancellation."""

from .batch import EXIT_CANCELLED, EXIT_FAILURE, EXIT_SUCCESS, BatchSummary, verify_many
from .cancellation import CancellationToken
from .diagnostics import DiagnosticCollector, listening_sockets_command, network_probe_command
from .liveness import LivenessCheck, LivenessResult, LivenessState
from .loop import ReadinessVerifier
from .readiness import ReadinessCheck

__all__ = [
    "EXIT_CANCELLED",
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "BatchSummary",
    "CancellationToken",
    "DiagnosticCollector",
    "LivenessCheck",
    "LivenessResult",
    "LivenessState",
    "ReadinessCheck",
    "ReadinessVerifier",
    "listening_sockets_command",
    "network_probe_command",
    "verify_many",
]
