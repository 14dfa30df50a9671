from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import Callable, Optional

from .catalog import PackageCatalog
from .models import BuildOutcome, BuildTask, RunConfig
from .runner import BuildExecutor

logger = logging.getLogger(__name__)

STD_TARGET = "std"


class Phase(Enum):
    BOOTSTRAP = auto()
    PACKAGES = auto()


class BootstrapError(RuntimeError):
    """Raised when the aggregate standard library build fails; nothing else is attempted."""

    def __init__(self, outcome: BuildOutcome) -> None:
        self.outcome = outcome
        super().__init__(
            f"Failed to compile the Go standard library libstd.so: {outcome.error}"
        )


class BuildOrchestrator:
    """Builds libstd.so, then every catalog package against it, one at a time.

    The catalog order is trusted as given. A package failure is logged and the
    loop moves on; only a bootstrap failure stops the run.
    """

    def __init__(
        self,
        catalog: PackageCatalog,
        executor: BuildExecutor,
        config: RunConfig,
        *,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.catalog = catalog
        self.executor = executor
        self.config = config
        self._sleep = sleep or time.sleep

    def run(self) -> None:
        self.run_phase(Phase.BOOTSTRAP)
        self.run_phase(Phase.PACKAGES)

    def run_phase(self, phase: Phase) -> None:
        if phase is Phase.BOOTSTRAP:
            self._bootstrap()
        else:
            self._build_packages()

    def _bootstrap(self) -> None:
        logger.info("Building libstd.so")
        task = BuildTask(
            working_dir=self.config.source_root,
            timeout_s=self.config.bootstrap_timeout_s,
            extra_args=[STD_TARGET],
        )
        outcome = self.executor.execute(task)
        if not outcome.ok:
            if outcome.output:
                logger.error("%s", outcome.output)
            raise BootstrapError(outcome)
        logger.info("Successfully built libstd.so")
        self._sleep(self.config.bootstrap_settle_s)

    def _build_packages(self) -> None:
        for package in self.catalog:
            logger.info("Building package: %s", package)
            outcome = self.build_package(package)
            if outcome.ok:
                logger.info("Successfully built: %s", package)
            else:
                if outcome.output:
                    logger.error("%s", outcome.output)
                logger.error("Error building package %s: %s", package, outcome.error)

            # Give the filesystem a little time
            self._sleep(self.config.settle_delay_s)

    def build_package(self, package: str) -> BuildOutcome:
        task = BuildTask(
            working_dir=self.config.package_dir(package),
            timeout_s=self.config.package_timeout_s,
        )
        return self.executor.execute(task)
