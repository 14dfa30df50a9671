from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Mapping, Sequence


class CommandError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status code."""

    def __init__(self, command: Sequence[str], returncode: int, output: str) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command {' '.join(command)} failed: exit status {returncode}")


class CommandTimeout(RuntimeError):
    """Raised when a subprocess is killed for running past its timeout."""

    def __init__(self, command: Sequence[str], timeout_s: float, output: str) -> None:
        self.command = list(command)
        self.timeout_s = timeout_s
        self.output = output
        super().__init__(f"Command {' '.join(command)} timed out after {timeout_s:g}s")


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def run_command(
    command: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout_s: float | None = None,
) -> str:
    """Execute a subprocess and return its combined stdout and stderr.

    The child inherits the current environment; ``env`` entries are layered on top.
    Spawn failures propagate as ``OSError``.
    """

    process_env = os.environ.copy()
    if env:
        process_env.update(env)

    try:
        result = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd else None,
            env=process_env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout_s,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeout(command, exc.timeout, _decode(exc.output)) from exc

    output = _decode(result.stdout)
    if result.returncode != 0:
        raise CommandError(command, result.returncode, output)
    return output
