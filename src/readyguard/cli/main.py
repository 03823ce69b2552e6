# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""ReadyGuard CLI."""

from __future__ import annotations

import argparse
import json
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..catalog import DEFAULT_HOST, DEFAULT_PREFIX, SERVICES, all_services, get_service
from ..config import VerifierSettings, load_settings
from ..errors import ConfigurationError, UnknownServiceError, error_category_to_reason
from ..log import setup_logging
from ..models import AttemptBudget, ProbeTarget, VerificationResult, VerificationStatus, parse_target
from ..runtime import ReadyGuard
from ..verify.batch import EXIT_CANCELLED, EXIT_FAILURE, EXIT_SUCCESS, BatchSummary
from ..verify.cancellation import CancellationToken

EXIT_CONFIG_ERROR = 3

_STATUS_EXIT_CODES = {
    VerificationStatus.SUCCESS: EXIT_SUCCESS,
    VerificationStatus.FAILURE: EXIT_FAILURE,
    VerificationStatus.CANCELLED: EXIT_CANCELLED,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wait for a freshly deployed container to pass its HTTP health check",
    )
    parser.add_argument("target", nargs="?", help="Health endpoint as host:port/path (path defaults to /health)")
    parser.add_argument("--name", help="Container name used for liveness checks and diagnostics")
    parser.add_argument("--container-port", type=int, help="Port the service listens on inside the container")
    parser.add_argument("--max-attempts", type=int, help="Number of poll cycles (default: 5)")
    parser.add_argument("--delay", type=float, help="Seconds between attempts (default: 5)")
    parser.add_argument("--timeout", type=float, help="HTTP probe timeout in seconds (default: 3)")
    parser.add_argument("--deadline", type=float, help="Overall wall-clock limit in seconds; exceeding it cancels")
    parser.add_argument("--log-tail", type=int, help="Container log lines to include on failure (default: 40)")
    parser.add_argument(
        "--service",
        action="append",
        default=[],
        metavar="NAME",
        help=f"Verify a known service (repeatable): {', '.join(SERVICES)}",
    )
    parser.add_argument("--all-services", action="store_true", help="Verify every known service concurrently")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host for --service/--all-services targets")
    parser.add_argument("--prefix", default=DEFAULT_PREFIX, help="Container name prefix for known services")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly text")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification for https targets",
    )
    parser.add_argument("--log-level", help="Logging level (default: READYGUARD_LOG_LEVEL or WARNING)")
    return parser


def _apply_overrides(settings: VerifierSettings, args: argparse.Namespace) -> VerifierSettings:
    if args.max_attempts is not None:
        settings.budget.max_attempts = args.max_attempts
    if args.delay is not None:
        settings.budget.delay = args.delay
    if args.timeout is not None:
        settings.probe.timeout = args.timeout
    if args.log_tail is not None:
        settings.diagnostics.log_tail_lines = args.log_tail
    if args.ignore_ssl_errors:
        settings.probe.verify_ssl = False
    return settings


def _build_targets(parser: argparse.ArgumentParser, args: argparse.Namespace) -> list[ProbeTarget]:
    if args.target and (args.service or args.all_services):
        parser.error("give either a target or --service/--all-services, not both")
    if args.all_services:
        return all_services(host=args.host, prefix=args.prefix)
    if args.service:
        return [get_service(name, host=args.host, prefix=args.prefix) for name in args.service]
    if not args.target:
        parser.error("a target (host:port/path) or --service/--all-services is required")
    return [parse_target(args.target, container_name=args.name, container_port=args.container_port)]


@contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    """Turn Ctrl-C into a cancellation so the run ends with CANCELLED, not a traceback."""

    def _handler(signum, frame):  # noqa: ARG001
        token.cancel()

    try:
        previous = signal.signal(signal.SIGINT, _handler)
    except ValueError:
        # Not on the main thread; leave signal handling alone.
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _print_json(data: Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _success_line(result: VerificationResult) -> str:
    outcome = result.last_outcome
    status = f"HTTP {outcome.status_code}" if outcome is not None else "no probe"
    return (
        f"[ReadyGuard] {result.target.label} ready at {result.target.url} "
        f"after {result.attempt_count} attempt(s) in {result.elapsed:.1f}s ({status})"
    )


def _report_problem(result: VerificationResult) -> None:
    err = sys.stderr
    if result.status == VerificationStatus.CANCELLED:
        err.write(
            f"[ReadyGuard] {result.target.label}: cancelled after {result.attempt_count} attempt(s) "
            f"in {result.elapsed:.1f}s\n"
        )
    else:
        err.write(
            f"[ReadyGuard] {result.target.label}: not ready at {result.target.url} "
            f"after {result.attempt_count} attempt(s) in {result.elapsed:.1f}s\n"
        )
    for record in result.attempts:
        line = f"  attempt {record.number}: {record.outcome.describe()}"
        reason = error_category_to_reason(record.outcome.error_category)
        if reason:
            line += f" [{reason}]"
        err.write(line + "\n")
    last = result.last_outcome
    if last is not None and last.body:
        err.write(f"  last response body: {last.body}\n")
    for entry in result.diagnostics:
        err.write(f"--- {entry.kind.value} ---\n{entry.content}\n")


def _report(result: VerificationResult) -> None:
    if result.ok:
        print(_success_line(result))
    else:
        _report_problem(result)


def _report_batch(summary: BatchSummary) -> None:
    for result in summary.results:
        _report(result)
    total = len(summary.results)
    line = (
        f"[ReadyGuard] {summary.succeeded}/{total} ready, "
        f"{summary.failed} failed, {summary.cancelled} cancelled"
    )
    if summary.exit_code == EXIT_SUCCESS:
        print(line)
    else:
        sys.stderr.write(line + "\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = _apply_overrides(load_settings(), args)
        targets = _build_targets(parser, args)
        budget = AttemptBudget(max_attempts=settings.budget.max_attempts, delay=settings.budget.delay)
        if args.deadline is not None and args.deadline <= 0:
            raise ConfigurationError(f"deadline must be > 0, got {args.deadline}")
    except (ConfigurationError, UnknownServiceError) as exc:
        sys.stderr.write(f"[ReadyGuard] configuration error: {exc}\n")
        return EXIT_CONFIG_ERROR

    token = CancellationToken(deadline=args.deadline)
    with ReadyGuard(settings=settings) as guard:
        try:
            with _cancel_on_interrupt(token):
                if len(targets) == 1 and not (args.service or args.all_services):
                    result = guard.verify(targets[0], budget, token)
                    summary = None
                else:
                    summary = guard.verify_many(targets, budget, token)
        except ConfigurationError as exc:
            sys.stderr.write(f"[ReadyGuard] configuration error: {exc}\n")
            return EXIT_CONFIG_ERROR

    if summary is None:
        if args.json:
            _print_json(result)
        else:
            _report(result)
        return _STATUS_EXIT_CODES[result.status]

    if args.json:
        _print_json({"results": [item.to_dict() for item in summary.results], "exit_code": summary.exit_code})
    else:
        _report_batch(summary)
    return summary.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
