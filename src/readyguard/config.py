# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for ReadyGuard.

Settings are plain dataclasses. Only ``from_env``/``load_settings`` look at the
process environment; everything below the CLI receives an explicit settings
object.
"""

import os
from dataclasses import dataclass, field

from .version import __version__

DEFAULT_USER_AGENT = f"ReadyGuard/{__version__} (readiness probe)"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class ProbeSettings:
    """HTTP readiness probe defaults."""

    timeout: float = 3.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    allow_redirects: bool = False
    max_body_chars: int = 4096

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        max_body_chars = _int_env("READYGUARD_MAX_BODY_CHARS", cls.max_body_chars)
        if max_body_chars <= 0:
            max_body_chars = cls.max_body_chars
        return cls(
            timeout=_float_env("READYGUARD_PROBE_TIMEOUT", cls.timeout),
            user_agent=os.getenv("READYGUARD_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("READYGUARD_VERIFY_SSL", cls.verify_ssl),
            allow_redirects=_bool_env("READYGUARD_HTTP_REDIRECTS", cls.allow_redirects),
            max_body_chars=max_body_chars,
        )


@dataclass
class BudgetSettings:
    """Default attempt budget: five attempts, five seconds apart."""

    max_attempts: int = 5
    delay: float = 5.0

    @classmethod
    def from_env(cls) -> "BudgetSettings":
        return cls(
            max_attempts=_int_env("READYGUARD_MAX_ATTEMPTS", cls.max_attempts),
            delay=_float_env("READYGUARD_DELAY", cls.delay),
        )


# Hard ceiling for log tails; an unbounded tail is never requested.
MAX_LOG_TAIL_LINES = 500


@dataclass
class DiagnosticSettings:
    """Bounds for the failure evidence bundle."""

    log_tail_lines: int = 40
    max_diagnostic_chars: int = 8192
    network_probe_timeout: float = 5.0

    @property
    def effective_log_tail(self) -> int:
        return max(1, min(self.log_tail_lines, MAX_LOG_TAIL_LINES))

    @classmethod
    def from_env(cls) -> "DiagnosticSettings":
        return cls(
            log_tail_lines=_int_env("READYGUARD_LOG_TAIL_LINES", cls.log_tail_lines),
            max_diagnostic_chars=_int_env("READYGUARD_MAX_DIAGNOSTIC_CHARS", cls.max_diagnostic_chars),
            network_probe_timeout=_float_env("READYGUARD_NETWORK_PROBE_TIMEOUT", cls.network_probe_timeout),
        )


@dataclass
class RuntimeSettings:
    """Docker daemon connection settings. ``docker_host=None`` means ``docker.from_env()``."""

    docker_host: str | None = None
    docker_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        return cls(
            docker_host=_optional_str_env("READYGUARD_DOCKER_HOST", cls.docker_host),
            docker_timeout=_float_env("READYGUARD_DOCKER_TIMEOUT", cls.docker_timeout),
        )


@dataclass
class VerifierSettings:
    probe: ProbeSettings = field(default_factory=ProbeSettings)
    budget: BudgetSettings = field(default_factory=BudgetSettings)
    diagnostics: DiagnosticSettings = field(default_factory=DiagnosticSettings)
    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)

    @classmethod
    def from_env(cls) -> "VerifierSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            probe=ProbeSettings.from_env(),
            budget=BudgetSettings.from_env(),
            diagnostics=DiagnosticSettings.from_env(),
            runtime=RuntimeSettings.from_env(),
        )


def load_settings() -> VerifierSettings:
    """Load verifier settings from environment with sensible defaults."""
    return VerifierSettings.from_env()
