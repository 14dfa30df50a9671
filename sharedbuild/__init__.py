"""Shared-mode build driver for the Go standard library."""

from .catalog import PackageCatalog
from .pipeline import BuildOrchestrator, Phase
from .runner import TaskRunner

__all__ = ["PackageCatalog", "BuildOrchestrator", "Phase", "TaskRunner"]
