from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from .models import BuildOutcome, BuildTask, RunConfig
from .utils import CommandError, CommandTimeout, run_command

logger = logging.getLogger(__name__)


class BuildExecutor(Protocol):
    def execute(self, task: BuildTask) -> BuildOutcome:
        ...


def build_install_args(ldflags: str, extra_args: Sequence[str] = ()) -> List[str]:
    """Arguments for ``go install`` in shared mode, linking against earlier shared builds."""

    args = ["install", "-ldflags", ldflags, "-buildmode", "shared", "-linkshared", "-v"]
    args.extend(extra_args)
    return args


class TaskRunner:
    """Runs one toolchain invocation per task and classifies the result."""

    def __init__(self, config: RunConfig) -> None:
        self.config = config

    def command_for(self, task: BuildTask) -> List[str]:
        return [self.config.go_binary, *build_install_args(self.config.ldflags, task.extra_args)]

    def execute(self, task: BuildTask) -> BuildOutcome:
        command = self.command_for(task)
        logger.debug("Running %s in %s", " ".join(command), task.working_dir)
        try:
            output = run_command(
                command,
                cwd=task.working_dir,
                env=self.config.env,
                timeout_s=task.timeout_s,
            )
        except CommandTimeout as exc:
            return BuildOutcome.failure(str(exc), exc.output)
        except CommandError as exc:
            return BuildOutcome.failure(f"exit status {exc.returncode}", exc.output)
        except OSError as exc:
            return BuildOutcome.failure(str(exc))
        return BuildOutcome.success(output)
