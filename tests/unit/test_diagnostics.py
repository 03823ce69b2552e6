# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from readyguard.config import DiagnosticSettings
from readyguard.containers import ContainerState, ExecResult, StubContainerRuntime, exited_state, running_state
from readyguard.errors import RuntimeQueryError
from readyguard.models import AttemptOutcome, AttemptRecord, DiagnosticKind, ProbeTarget
from readyguard.verify import DiagnosticCollector, listening_sockets_command, network_probe_command

NAME = "letzgo-chat-service"
TARGET = ProbeTarget(host="localhost", port=3002, container_name=NAME, container_port=3000)
KINDS = [DiagnosticKind.LOG_TAIL, DiagnosticKind.PROCESS_STATUS, DiagnosticKind.NETWORK_PROBE]


class ExplodingRuntime:
    def inspect(self, name):
        raise RuntimeQueryError("daemon down")

    def logs(self, name, tail):
        raise PermissionError("permission denied")

    def exec(self, name, command):
        raise AssertionError("exec must not run without a successful inspect")


def test_full_bundle_for_running_container():
    runtime = StubContainerRuntime(
        states={NAME: running_state(NAME, networks={"letzgo-network": "172.18.0.7"})},
        logs={NAME: "\n".join(f"log {i}" for i in range(200))},
        exec_results={NAME: ExecResult(exit_code=1, output="wget: server returned error: HTTP/1.1 500")},
    )
    attempts = [AttemptRecord(n, AttemptOutcome.unhealthy(500), float(n)) for n in (1, 2)]
    bundle = DiagnosticCollector(runtime, DiagnosticSettings(log_tail_lines=30)).collect(TARGET, attempts, 2)

    assert [entry.kind for entry in bundle] == KINDS
    assert all(entry.available for entry in bundle)

    log_tail = bundle[0].content.splitlines()
    assert len(log_tail) == 30
    assert log_tail[-1] == "log 199"
    assert runtime.log_calls == [(NAME, 30)]

    status = bundle[1].content
    assert "state: running" in status
    assert "attempt 1/2" in status
    assert "unhealthy (HTTP 500)" in status

    network = bundle[2].content
    assert "letzgo-network (172.18.0.7)" in network
    assert "http://localhost:3000/health" in network
    assert "not reachable (exit_code=1)" in network
    assert "HTTP/1.1 500" in network
    name, command = runtime.exec_calls[0]
    assert name == NAME
    assert command[:2] == ("sh", "-c")


def test_missing_container_marks_entries_unavailable():
    runtime = StubContainerRuntime()
    attempts = [AttemptRecord(n, AttemptOutcome.not_running("container does not exist"), 0.0) for n in range(1, 6)]
    bundle = DiagnosticCollector(runtime).collect(TARGET, attempts, 5)

    assert [entry.kind for entry in bundle] == KINDS
    assert bundle[0].available is False
    assert bundle[0].content.startswith("unavailable:")
    assert "does not exist" in bundle[1].content
    assert bundle[1].content.count("not running") >= 5
    assert bundle[2].available is False
    assert bundle[2].content.startswith("unavailable:")


def test_exited_container_reports_exit_code_and_skips_exec():
    runtime = StubContainerRuntime(
        states={NAME: exited_state(NAME, exit_code=137, oom_killed=True)},
        logs={NAME: "Killed"},
    )
    bundle = DiagnosticCollector(runtime).collect(TARGET)
    assert "exit_code: 137" in bundle[1].content
    assert "oom_killed: true" in bundle[1].content
    assert bundle[2].content.startswith("unavailable: container")
    assert runtime.exec_calls == []


def test_each_failing_step_is_isolated():
    bundle = DiagnosticCollector(ExplodingRuntime()).collect(TARGET)
    assert [entry.kind for entry in bundle] == KINDS
    assert all(not entry.available for entry in bundle)
    assert bundle[0].content == "unavailable: permission denied"
    assert bundle[1].content.startswith("unavailable: runtime query failed: daemon down")
    assert bundle[2].content.startswith("unavailable: runtime query failed")


def test_exec_failure_keeps_network_listing():
    runtime = StubContainerRuntime(
        states={NAME: running_state(NAME)},
        logs={NAME: ""},
        exec_results={NAME: RuntimeQueryError("exec failed")},
    )
    bundle = DiagnosticCollector(runtime).collect(TARGET)
    assert bundle[0].content.startswith("(no output")
    assert bundle[2].available is False
    assert "exec failed" in bundle[2].content
    assert "networks: bridge" in bundle[2].content


def test_target_without_container_name():
    bundle = DiagnosticCollector(StubContainerRuntime()).collect(ProbeTarget(host="localhost", port=3000))
    assert [entry.kind for entry in bundle] == KINDS
    assert all(entry.content.startswith("unavailable: no container name given") for entry in bundle)


def test_entries_are_bounded_in_size():
    runtime = StubContainerRuntime(
        states={NAME: ContainerState(name=NAME, exists=True, status="running", running=True)},
        logs={NAME: "\n".join("x" * 500 for _ in range(40))},
        exec_results={NAME: ExecResult(exit_code=0, output="ok")},
    )
    bundle = DiagnosticCollector(runtime, DiagnosticSettings(max_diagnostic_chars=1000)).collect(TARGET)
    assert bundle[0].content.startswith("[truncated]")
    assert len(bundle[0].content) <= 1000 + len("[truncated]\n")


def test_network_probe_command_quotes_url():
    command = network_probe_command("http://localhost:3000/health?x=1&y=2", 4.6)
    assert command[0:2] == ["sh", "-c"]
    assert "'http://localhost:3000/health?x=1&y=2'" in command[2]
    assert "-T 5" in command[2]
    assert "curl" in command[2]


def test_failed_in_container_get_lists_published_ports_and_listeners():
    runtime = StubContainerRuntime(
        states={NAME: running_state(NAME, ports={"3000/tcp": ["0.0.0.0:3002"], "9229/tcp": []})},
        logs={NAME: "listening on 127.0.0.1:3000"},
        exec_results={
            NAME: [
                ExecResult(exit_code=1, output="wget: can't connect to remote host: Connection refused"),
                ExecResult(exit_code=0, output="tcp 0 0 127.0.0.1:3000 0.0.0.0:* LISTEN"),
            ]
        },
    )
    network = DiagnosticCollector(runtime).collect(TARGET)[2]

    assert network.available is True
    lines = network.content.splitlines()
    assert "published ports: 3000/tcp -> 0.0.0.0:3002; 9229/tcp -> (not published)" in lines
    assert "listening sockets:" in lines
    assert "tcp 0 0 127.0.0.1:3000 0.0.0.0:* LISTEN" in lines
    assert [command for _, command in runtime.exec_calls] == [
        tuple(network_probe_command(TARGET.internal_url, 5.0)),
        tuple(listening_sockets_command()),
    ]


def test_successful_in_container_get_skips_listener_listing():
    runtime = StubContainerRuntime(
        states={NAME: running_state(NAME)},
        logs={NAME: "ok"},
        exec_results={NAME: ExecResult(exit_code=0, output='{"status":"ok"}')},
    )
    network = DiagnosticCollector(runtime).collect(TARGET)[2]
    assert "published ports: none" in network.content
    assert "listening sockets" not in network.content
    assert len(runtime.exec_calls) == 1


def test_listener_listing_failure_is_marked_unavailable():
    runtime = StubContainerRuntime(
        states={NAME: running_state(NAME)},
        logs={NAME: "ok"},
        exec_results={NAME: [ExecResult(exit_code=1, output=""), RuntimeQueryError("exec denied")]},
    )
    network = DiagnosticCollector(runtime).collect(TARGET)[2]
    assert network.available is True
    assert "not reachable (exit_code=1)" in network.content
    assert "listening sockets: unavailable: exec denied" in network.content


def test_process_status_truncation_keeps_container_state():
    runtime = StubContainerRuntime(
        states={NAME: exited_state(NAME, exit_code=137, oom_killed=True)},
        logs={NAME: "Killed"},
    )
    attempts = [
        AttemptRecord(n, AttemptOutcome.not_running("status=exited exit_code=137 " + "x" * 80), float(n))
        for n in range(1, 51)
    ]
    settings = DiagnosticSettings(max_diagnostic_chars=600)
    status = DiagnosticCollector(runtime, settings).collect(TARGET, attempts, 50)[1].content

    assert len(status) <= 600
    lines = status.splitlines()
    assert lines[0] == f"container: {NAME}"
    assert "exit_code: 137" in lines
    assert "oom_killed: true" in lines
    assert "[truncated]" in lines
    assert lines[-1].startswith("  attempt 50/50")
    assert not any(line.startswith("  attempt 1/50 ") for line in lines)
