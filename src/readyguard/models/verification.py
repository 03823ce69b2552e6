# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Attempt budget, per-attempt outcomes and the terminal verification result."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import ConfigurationError
from .target import ProbeTarget


@dataclass(frozen=True)
class AttemptBudget:
    max_attempts: int = 5
    delay: float = 5.0

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ConfigurationError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be > 0, got {self.max_attempts}")
        if self.delay < 0:
            raise ConfigurationError(f"delay must be >= 0, got {self.delay}")

    @property
    def max_total_delay(self) -> float:
        """Upper bound on time spent sleeping between attempts."""
        return (self.max_attempts - 1) * self.delay


class OutcomeKind(str, Enum):
    NOT_RUNNING = "NOT_RUNNING"
    RUNTIME_QUERY_FAILED = "RUNTIME_QUERY_FAILED"
    UNREACHABLE = "UNREACHABLE"
    UNHEALTHY = "UNHEALTHY"
    HEALTHY = "HEALTHY"


@dataclass(frozen=True)
class AttemptOutcome:
    kind: OutcomeKind
    status_code: int | None = None
    body: str = ""
    error_category: str | None = None
    detail: str = ""

    @classmethod
    def not_running(cls, detail: str = "") -> "AttemptOutcome":
        return cls(kind=OutcomeKind.NOT_RUNNING, detail=detail)

    @classmethod
    def runtime_query_failed(cls, detail: str) -> "AttemptOutcome":
        return cls(kind=OutcomeKind.RUNTIME_QUERY_FAILED, error_category="RUNTIME_QUERY_FAILED", detail=detail)

    @classmethod
    def unreachable(cls, error_category: str | None, detail: str = "") -> "AttemptOutcome":
        return cls(kind=OutcomeKind.UNREACHABLE, error_category=error_category, detail=detail)

    @classmethod
    def unhealthy(cls, status_code: int, body: str = "") -> "AttemptOutcome":
        return cls(kind=OutcomeKind.UNHEALTHY, status_code=status_code, body=body, error_category="HTTP_STATUS")

    @classmethod
    def healthy(cls, status_code: int = 200, body: str = "") -> "AttemptOutcome":
        return cls(kind=OutcomeKind.HEALTHY, status_code=status_code, body=body)

    @property
    def is_healthy(self) -> bool:
        return self.kind == OutcomeKind.HEALTHY

    def describe(self) -> str:
        if self.kind == OutcomeKind.HEALTHY:
            return f"healthy (HTTP {self.status_code})"
        if self.kind == OutcomeKind.UNHEALTHY:
            return f"unhealthy (HTTP {self.status_code})"
        if self.kind == OutcomeKind.UNREACHABLE:
            reason = self.error_category or "no response"
            return f"unreachable ({reason}: {self.detail})" if self.detail else f"unreachable ({reason})"
        if self.kind == OutcomeKind.RUNTIME_QUERY_FAILED:
            return f"runtime query failed ({self.detail})"
        return f"not running ({self.detail})" if self.detail else "not running"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "status_code": self.status_code,
            "error_category": self.error_category,
            "detail": self.detail,
            "body": self.body,
        }


@dataclass(frozen=True)
class AttemptRecord:
    number: int
    outcome: AttemptOutcome
    elapsed: float

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "elapsed": round(self.elapsed, 3), **self.outcome.to_dict()}


class DiagnosticKind(str, Enum):
    LOG_TAIL = "LOG_TAIL"
    PROCESS_STATUS = "PROCESS_STATUS"
    NETWORK_PROBE = "NETWORK_PROBE"


@dataclass(frozen=True)
class DiagnosticEntry:
    kind: DiagnosticKind
    content: str
    available: bool = True

    @classmethod
    def unavailable(cls, kind: DiagnosticKind, reason: str) -> "DiagnosticEntry":
        return cls(kind=kind, content=f"unavailable: {reason}", available=False)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "available": self.available, "content": self.content}


class VerificationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    CANCELLED = "CANCELLED"


@dataclass
class VerificationResult:
    """Terminal output of one verification run. The caller owns it once returned."""

    status: VerificationStatus
    target: ProbeTarget
    attempts: list[AttemptRecord] = field(default_factory=list)
    diagnostics: list[DiagnosticEntry] = field(default_factory=list)
    elapsed: float = 0.0

    @classmethod
    def success(cls, target: ProbeTarget, attempts: list[AttemptRecord], elapsed: float) -> "VerificationResult":
        return cls(status=VerificationStatus.SUCCESS, target=target, attempts=attempts, elapsed=elapsed)

    @classmethod
    def failure(
        cls,
        target: ProbeTarget,
        attempts: list[AttemptRecord],
        diagnostics: list[DiagnosticEntry],
        elapsed: float,
    ) -> "VerificationResult":
        return cls(
            status=VerificationStatus.FAILURE,
            target=target,
            attempts=attempts,
            diagnostics=diagnostics,
            elapsed=elapsed,
        )

    @classmethod
    def cancelled(cls, target: ProbeTarget, attempts: list[AttemptRecord], elapsed: float) -> "VerificationResult":
        return cls(status=VerificationStatus.CANCELLED, target=target, attempts=attempts, elapsed=elapsed)

    @property
    def ok(self) -> bool:
        return self.status == VerificationStatus.SUCCESS

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def last_outcome(self) -> AttemptOutcome | None:
        return self.attempts[-1].outcome if self.attempts else None

    def diagnostic(self, kind: DiagnosticKind) -> DiagnosticEntry | None:
        for entry in self.diagnostics:
            if entry.kind == kind:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "target": self.target.to_dict(),
            "elapsed": round(self.elapsed, 3),
            "attempts": [record.to_dict() for record in self.attempts],
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
        }
