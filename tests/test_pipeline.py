from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

import pytest

from sharedbuild.models import BuildOutcome, BuildTask, RunConfig
from sharedbuild.pipeline import BootstrapError, BuildOrchestrator, Phase
from sharedbuild.runner import TaskRunner
from tests.helpers import FakeExecutor, make_catalog


def _orchestrator(catalog, executor, config, sleeps: List[float] | None = None) -> BuildOrchestrator:
    record = sleeps if sleeps is not None else []
    return BuildOrchestrator(catalog, executor, config, sleep=record.append)


def test_bootstrap_runs_once_before_any_package(config: RunConfig) -> None:
    executor = FakeExecutor()
    _orchestrator(make_catalog("a", "b"), executor, config).run()

    bootstrap = executor.tasks[0]
    assert bootstrap.extra_args == ["std"]
    assert bootstrap.working_dir == Path("/opt/go/src")
    assert bootstrap.timeout_s == 60.0
    assert sum(1 for task in executor.tasks if task.extra_args) == 1


def test_packages_build_in_catalog_order(config: RunConfig) -> None:
    executor = FakeExecutor()
    _orchestrator(make_catalog("unsafe", "runtime", "crypto/x509/pkix"), executor, config).run()

    assert [task.working_dir for task in executor.package_tasks] == [
        Path("/opt/go/src/unsafe"),
        Path("/opt/go/src/runtime"),
        Path("/opt/go/src/crypto/x509/pkix"),
    ]
    assert all(task.timeout_s == 5.0 for task in executor.package_tasks)


def test_bootstrap_failure_stops_the_run(config: RunConfig) -> None:
    executor = FakeExecutor({"src": BuildOutcome.failure("exit status 1", "cannot find package")})

    with pytest.raises(BootstrapError) as excinfo:
        _orchestrator(make_catalog("a", "b"), executor, config).run()

    assert len(executor.tasks) == 1
    assert executor.package_tasks == []
    assert excinfo.value.outcome.output == "cannot find package"


def test_bootstrap_timeout_is_fatal(config: RunConfig) -> None:
    executor = FakeExecutor({"src": BuildOutcome.failure("timed out after 60s")})

    with pytest.raises(BootstrapError, match="timed out"):
        _orchestrator(make_catalog("a"), executor, config).run()

    assert executor.package_tasks == []


def test_failed_package_does_not_stop_the_run(
    config: RunConfig, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    executor = FakeExecutor({"b": BuildOutcome.failure("exit status 2", "b.go:1: syntax error")})

    _orchestrator(make_catalog("a", "b", "c"), executor, config).run()

    assert [task.working_dir.name for task in executor.package_tasks] == ["a", "b", "c"]
    messages = caplog.messages
    assert messages.count("Successfully built: a") == 1
    assert messages.count("Successfully built: c") == 1
    assert "Error building package b: exit status 2" in messages
    assert "b.go:1: syntax error" in messages
    assert not any(message.startswith("Successfully built: b") for message in messages)


@pytest.mark.parametrize("failing", ["a", "b", "c"])
def test_fault_isolation_holds_at_every_position(config: RunConfig, failing: str) -> None:
    executor = FakeExecutor({failing: BuildOutcome.failure("exit status 1")})

    _orchestrator(make_catalog("a", "b", "c"), executor, config).run()

    assert [task.working_dir.name for task in executor.package_tasks] == ["a", "b", "c"]


def test_timed_out_package_moves_on_to_next(config: RunConfig, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    executor = FakeExecutor({"net": BuildOutcome.failure("Command go install timed out after 5s")})

    _orchestrator(make_catalog("net", "net/textproto"), executor, config).run()

    assert [task.working_dir for task in executor.package_tasks] == [
        Path("/opt/go/src/net"),
        Path("/opt/go/src/net/textproto"),
    ]
    assert "Successfully built: net/textproto" in caplog.messages


def test_pauses_after_bootstrap_and_after_every_package(config: RunConfig) -> None:
    sleeps: List[float] = []
    executor = FakeExecutor({"b": BuildOutcome.failure("exit status 1")})

    _orchestrator(make_catalog("a", "b"), executor, config, sleeps).run()

    assert sleeps == [2.0, 0.1, 0.1]


def test_no_task_starts_before_the_previous_returns(config: RunConfig) -> None:
    running: List[BuildTask] = []

    def check(task: BuildTask) -> None:
        assert not running
        running.append(task)

    class SerialExecutor(FakeExecutor):
        def execute(self, task: BuildTask) -> BuildOutcome:
            outcome = super().execute(task)
            running.pop()
            return outcome

    executor = SerialExecutor(on_execute=check)
    _orchestrator(make_catalog("a", "b", "c"), executor, config).run()
    assert len(executor.tasks) == 4


def test_bootstrap_log_lines(config: RunConfig, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    _orchestrator(make_catalog(), FakeExecutor(), config).run_phase(Phase.BOOTSTRAP)
    assert caplog.messages == ["Building libstd.so", "Successfully built libstd.so"]


def test_captured_output_is_logged_before_the_error(
    config: RunConfig, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    executor = FakeExecutor({"a": BuildOutcome.failure("exit status 2", "a.go:3: undefined: x")})

    _orchestrator(make_catalog("a"), executor, config).run()

    messages = caplog.messages
    assert messages.index("a.go:3: undefined: x") < messages.index("Error building package a: exit status 2")


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script as the toolchain")
def test_undecodable_toolchain_output_does_not_stop_the_run(tmp_path: Path) -> None:
    for package in ("a", "b", "c"):
        (tmp_path / "src" / package).mkdir(parents=True)
    go = tmp_path / "go"
    go.write_text(
        "#!/bin/sh\n"
        'case "$(basename "$PWD")" in\n'
        "  b) printf '\\377 bad byte\\n'; exit 1 ;;\n"
        "esac\n"
        "exit 0\n"
    )
    go.chmod(0o755)
    config = RunConfig(goroot=tmp_path, go_binary=str(go))
    runner = TaskRunner(config)
    outcomes: List[BuildOutcome] = []

    class RecordingRunner:
        def execute(self, task: BuildTask) -> BuildOutcome:
            outcome = runner.execute(task)
            outcomes.append(outcome)
            return outcome

    BuildOrchestrator(make_catalog("a", "b", "c"), RecordingRunner(), config, sleep=lambda s: None).run()

    assert [outcome.ok for outcome in outcomes] == [True, True, False, True]
    assert outcomes[2].error == "exit status 1"
    assert "\ufffd bad byte" in outcomes[2].output
