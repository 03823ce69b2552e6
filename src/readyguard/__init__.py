# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
ReadyGuard package entrypoint.

ReadyGuard decides whether a freshly deployed container is ready to receive
traffic: it polls container liveness and an HTTP health endpoint within a
bounded attempt budget and, when the budget runs out, gathers a bounded
diagnostic bundle (log tail, process status, in-container network probe).
HTTP and container runtime access sit behind injectable interfaces, and
domain objects are typed dataclasses.
"""

from .catalog import SERVICES, all_services, get_service
from .config import VerifierSettings, load_settings
from .containers import ContainerRuntime, ContainerState, DockerRuntime, StubContainerRuntime
from .errors import ConfigurationError, ErrorCategory, ReadyGuardError, RuntimeQueryError, UnknownServiceError
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, StubHttpClient, create_default_http_client
from .log import setup_logging
from .models import (
    AttemptBudget,
    AttemptOutcome,
    DiagnosticEntry,
    DiagnosticKind,
    OutcomeKind,
    ProbeTarget,
    VerificationResult,
    VerificationStatus,
    parse_target,
)
from .runtime import ReadyGuard
from .verify import BatchSummary, CancellationToken, ReadinessVerifier, verify_many
from .version import __version__

__all__ = [
    "SERVICES",
    "AttemptBudget",
    "AttemptOutcome",
    "BatchSummary",
    "CancellationToken",
    "ConfigurationError",
    "ContainerRuntime",
    "ContainerState",
    "DiagnosticEntry",
    "DiagnosticKind",
    "DockerRuntime",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "OutcomeKind",
    "ProbeTarget",
    "ReadinessVerifier",
    "ReadyGuard",
    "ReadyGuardError",
    "RuntimeQueryError",
    "StubContainerRuntime",
    "StubHttpClient",
    "UnknownServiceError",
    "VerificationResult",
    "VerificationStatus",
    "VerifierSettings",
    "__version__",
    "all_services",
    "create_default_http_client",
    "get_service",
    "load_settings",
    "parse_target",
    "setup_logging",
    "verify_many",
]
