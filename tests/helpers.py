from __future__ import annotations

from typing import Callable, Dict, List, Optional

from sharedbuild.catalog import CatalogTier, PackageCatalog
from sharedbuild.models import BuildOutcome, BuildTask


class FakeExecutor:
    """Records every task and answers from a script keyed by working directory name."""

    def __init__(
        self,
        outcomes: Optional[Dict[str, BuildOutcome]] = None,
        on_execute: Optional[Callable[[BuildTask], None]] = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.on_execute = on_execute
        self.tasks: List[BuildTask] = []

    def execute(self, task: BuildTask) -> BuildOutcome:
        self.tasks.append(task)
        if self.on_execute is not None:
            self.on_execute(task)
        return self.outcomes.get(task.working_dir.name, BuildOutcome.success())

    @property
    def package_tasks(self) -> List[BuildTask]:
        return [task for task in self.tasks if not task.extra_args]


def make_catalog(*packages: str) -> PackageCatalog:
    return PackageCatalog(tiers=(CatalogTier("test", tuple(packages)),), excluded=())
