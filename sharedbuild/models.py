from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class RunConfig:
    """Process-wide settings assembled once from command-line flags and the environment."""

    ldflags: str = ""
    goroot: Path = Path("")
    go_binary: str = "go"
    # None inherits the invoking process's environment untouched.
    env: Optional[Mapping[str, str]] = None
    bootstrap_timeout_s: float = 60.0
    package_timeout_s: float = 5.0
    settle_delay_s: float = 0.1
    bootstrap_settle_s: float = 2.0

    @property
    def source_root(self) -> Path:
        return Path(self.goroot) / "src"

    def package_dir(self, package: str) -> Path:
        return self.source_root.joinpath(*package.split("/"))


@dataclass(frozen=True)
class BuildTask:
    """One toolchain invocation: where it runs, what it appends, and how long it may take."""

    working_dir: Path
    timeout_s: float
    extra_args: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BuildOutcome:
    ok: bool
    output: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, output: str = "") -> "BuildOutcome":
        return cls(ok=True, output=output)

    @classmethod
    def failure(cls, error: str, output: str = "") -> "BuildOutcome":
        return cls(ok=False, output=output, error=error)
