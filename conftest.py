"""Global test configuration.

Provides a per-test run log (file-backed, console echo off) and a scripted
operator that acknowledges every prompt immediately.
"""

import pytest

from stagehand.infrastructure.run_log import RunLog
from tests.fakes import FakeOperator


@pytest.fixture
def run_log(tmp_path):
    log = RunLog.open(tmp_path / "logs", echo=False)
    yield log
    log.close()


@pytest.fixture
def operator():
    return FakeOperator()
