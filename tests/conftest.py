from __future__ import annotations

from pathlib import Path

import pytest

from sharedbuild.models import RunConfig


@pytest.fixture
def config() -> RunConfig:
    return RunConfig(ldflags="-X foo=bar", goroot=Path("/opt/go"))
