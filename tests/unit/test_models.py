# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from readyguard.errors import ConfigurationError
from readyguard.models import (
    AttemptBudget,
    AttemptOutcome,
    AttemptRecord,
    DiagnosticEntry,
    DiagnosticKind,
    OutcomeKind,
    ProbeTarget,
    VerificationResult,
    VerificationStatus,
    parse_target,
)


def test_parse_target_defaults_to_health_path():
    target = parse_target("localhost:3000")
    assert target.host == "localhost"
    assert target.port == 3000
    assert target.path == "/health"
    assert target.url == "http://localhost:3000/health"


def test_parse_target_keeps_path_scheme_and_name():
    target = parse_target("https://api.example.com:8443/v1/health", container_name="letzgo-auth-service")
    assert target.scheme == "https"
    assert target.path == "/v1/health"
    assert target.container_name == "letzgo-auth-service"
    assert target.url == "https://api.example.com:8443/v1/health"
    assert target.label == "letzgo-auth-service"


@pytest.mark.parametrize("raw", ["", "localhost", "localhost:notaport/health", "ftp://host:21/", "localhost:70000"])
def test_parse_target_rejects_bad_input(raw):
    with pytest.raises(ConfigurationError):
        parse_target(raw)


def test_internal_url_uses_container_port():
    target = ProbeTarget(host="vps.example", port=3001, container_name="letzgo-user-service", container_port=3000)
    assert target.url == "http://vps.example:3001/health"
    assert target.internal_url == "http://localhost:3000/health"
    assert ProbeTarget(host="h", port=8080).internal_url == "http://localhost:8080/health"


def test_probe_target_normalizes_path_and_ipv6():
    target = ProbeTarget(host="::1", port=3000, path="ready")
    assert target.path == "/ready"
    assert target.url == "http://[::1]:3000/ready"


def test_attempt_budget_validation():
    assert AttemptBudget(max_attempts=1, delay=0).max_total_delay == 0
    assert AttemptBudget(max_attempts=5, delay=5).max_total_delay == 20
    with pytest.raises(ConfigurationError):
        AttemptBudget(max_attempts=0)
    with pytest.raises(ConfigurationError):
        AttemptBudget(max_attempts=3, delay=-1)
    with pytest.raises(ConfigurationError):
        AttemptBudget(max_attempts=2.5)


def test_outcome_descriptions_distinguish_no_response_from_error_response():
    assert AttemptOutcome.unreachable("CONNECTION_ERROR", "refused").describe() == (
        "unreachable (CONNECTION_ERROR: refused)"
    )
    assert AttemptOutcome.unhealthy(503).describe() == "unhealthy (HTTP 503)"
    assert AttemptOutcome.not_running().describe() == "not running"
    assert AttemptOutcome.runtime_query_failed("daemon down").kind == OutcomeKind.RUNTIME_QUERY_FAILED


def test_verification_result_to_dict_is_json_serializable():
    target = ProbeTarget(host="localhost", port=3000, container_name="letzgo-auth-service")
    attempts = [AttemptRecord(number=1, outcome=AttemptOutcome.unhealthy(500, "oops"), elapsed=0.01)]
    diagnostics = [DiagnosticEntry.unavailable(DiagnosticKind.LOG_TAIL, "no logs")]
    result = VerificationResult.failure(target, attempts, diagnostics, elapsed=0.5)

    payload = json.loads(json.dumps(result.to_dict()))
    assert payload["status"] == "FAILURE"
    assert payload["target"]["url"] == "http://localhost:3000/health"
    assert payload["attempts"][0]["kind"] == "UNHEALTHY"
    assert payload["attempts"][0]["status_code"] == 500
    assert payload["diagnostics"][0] == {"kind": "LOG_TAIL", "available": False, "content": "unavailable: no logs"}
    assert result.diagnostic(DiagnosticKind.LOG_TAIL) is diagnostics[0]
    assert result.diagnostic(DiagnosticKind.NETWORK_PROBE) is None


def test_result_constructors():
    target = ProbeTarget(host="localhost", port=3000)
    ok = VerificationResult.success(target, [AttemptRecord(1, AttemptOutcome.healthy(), 0.0)], 0.1)
    assert ok.ok and ok.status == VerificationStatus.SUCCESS
    assert ok.diagnostics == []
    cancelled = VerificationResult.cancelled(target, [], 1.0)
    assert cancelled.status == VerificationStatus.CANCELLED
    assert cancelled.last_outcome is None
