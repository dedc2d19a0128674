"""Tests for the RunTaxFileUpdate use case."""

from datetime import date

import pytest

from stagehand.application.use_cases.run_update import RunTaxFileUpdate
from stagehand.domain.value_objects.service_state import ServiceState
from tests.fakes import FakeOperator, FakeRemoteExecutor, make_config

TODAY = date(2024, 6, 3)
RUNNING = ServiceState.RUNNING


class TestRunTaxFileUpdate:
    @pytest.mark.asyncio
    async def test_execute_completes_and_copies(self, tmp_path):
        config = make_config(tmp_path, targets=("TAXWS01",))
        executor = FakeRemoteExecutor(services={"TAXSRV01": RUNNING, "TAXWS01": RUNNING})
        operator = FakeOperator()

        report = await RunTaxFileUpdate(executor, operator, config).execute(TODAY)

        assert report.completed
        assert report.run.unclean_outcomes == ()
        backup = tmp_path / "backup" / "TaxFileupdate_Jun2024"
        assert sorted(p.name for p in (backup / "May" / "TaxData").iterdir()) == [
            "a.dat",
            "b.dat",
        ]
        assert (backup / "Jun" / "TaxData" / "b.dat").exists()
        assert (tmp_path / "TAXWS01" / "Data" / "a.dat").exists()
        assert executor.services == {"TAXSRV01": RUNNING, "TAXWS01": RUNNING}
        assert executor.closed

    @pytest.mark.asyncio
    async def test_execute_writes_run_log(self, tmp_path):
        config = make_config(tmp_path)
        executor = FakeRemoteExecutor(services={"TAXSRV01": RUNNING})

        report = await RunTaxFileUpdate(executor, FakeOperator(), config).execute(TODAY)

        logs = list((tmp_path / "logs").glob("stagehand_*.log"))
        assert len(logs) == 1
        assert report.summary.log_path == str(logs[0])
        assert report.summary.error_count == 0
        assert logs[0].read_text().splitlines()[0].endswith(
            "Tax file update started (primary TAXSRV01, 0 targets, 0 fleet members)"
        )

    @pytest.mark.asyncio
    async def test_execute_aborts_when_target_unreachable(self, tmp_path):
        config = make_config(tmp_path, targets=("TAXWS01",))
        executor = FakeRemoteExecutor(
            services={"TAXSRV01": RUNNING, "TAXWS01": RUNNING}, unreachable=("TAXWS01",)
        )

        report = await RunTaxFileUpdate(executor, FakeOperator(), config).execute(TODAY)

        assert report.aborted
        assert executor.changes == []
        assert executor.closed
        assert not (tmp_path / "backup" / "TaxFileupdate_Jun2024").exists()

    @pytest.mark.asyncio
    async def test_validate(self, tmp_path):
        config = make_config(tmp_path, targets=("TAXWS01",))
        use_case = RunTaxFileUpdate(FakeRemoteExecutor(), FakeOperator(), config)
        assert await use_case.validate() is True

    @pytest.mark.asyncio
    async def test_validate_missing_target_share(self, tmp_path):
        config = make_config(tmp_path, targets=("TAXWS01",))
        (tmp_path / "TAXWS01" / "Data").rmdir()
        use_case = RunTaxFileUpdate(FakeRemoteExecutor(), FakeOperator(), config)
        assert await use_case.validate() is False

    def test_plan(self, tmp_path):
        config = make_config(tmp_path, fleet=("BR01",))
        steps = RunTaxFileUpdate(FakeRemoteExecutor(), FakeOperator(), config).plan(TODAY)
        assert steps[5].label == "Distribute updated data to branch offices"
