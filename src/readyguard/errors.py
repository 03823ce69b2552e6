# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from enum import Enum


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    SSL_ERROR = "SSL_ERROR"
    HTTP_STATUS = "HTTP_STATUS"
    RUNTIME_QUERY_FAILED = "RUNTIME_QUERY_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class ReadyGuardError(Exception):
    """Base class for errors raised to ReadyGuard callers."""


class ConfigurationError(ReadyGuardError, ValueError):
    """Invalid target, budget or settings supplied by the caller."""


class RuntimeQueryError(ReadyGuardError):
    """The container runtime could not be queried (daemon down, permission denied, ...)."""


class UnknownServiceError(ReadyGuardError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown service: {self.name}"


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx/docker exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx
    from docker import errors as docker_errors

    if isinstance(exc, RuntimeQueryError) or isinstance(exc, docker_errors.DockerException):
        return ErrorCategory.RUNTIME_QUERY_FAILED

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ConnectError):
        cause = exc.__cause__ or exc.__context__
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | str | None) -> str:
    """User-facing reason string."""
    if isinstance(category, str) and not isinstance(category, ErrorCategory):
        try:
            category = ErrorCategory(category)
        except ValueError:
            return "Probe failed due to network error"
    mapping = {
        ErrorCategory.TIMEOUT: "Timed out waiting for the health endpoint",
        ErrorCategory.CONNECTION_ERROR: "Connection to the health endpoint failed",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.HTTP_STATUS: "Health endpoint returned a non-2xx status",
        ErrorCategory.RUNTIME_QUERY_FAILED: "Container runtime could not be queried",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")
