"""Tests for StepDefinition and typed step parameters."""

import pytest
from stagehand.domain.entities.step import (
    Capability,
    ConfirmStoppedParams,
    DistributionParams,
    FileSyncParams,
    ManualInstruction,
    ManualStepParams,
    ServiceControlParams,
    StepDefinition,
    StepKind,
    automated,
    manual,
)
from stagehand.domain.value_objects.host import Host
from stagehand.domain.value_objects.service_state import ServiceState

HOSTS = (Host.primary("TAXSRV01"),)
INSTRUCTION = ManualInstruction("Run wizard", "TAXSRV01", ("Click Next",))


class TestStepDefinition:
    def test_automated_infers_capability(self):
        step = automated(
            1, "Stop", ServiceControlParams(HOSTS, "TaxService", ServiceState.STOPPED)
        )
        assert step.kind is StepKind.AUTOMATED
        assert step.capability is Capability.SERVICE_CONTROL

    def test_automated_file_sync(self):
        assert automated(1, "Copy", FileSyncParams("a", "b", ".dat")).capability is Capability.FILE_SYNC
        assert automated(1, "Fan out", DistributionParams("a", (), ".dat")).capability is Capability.FILE_SYNC

    def test_automated_validation(self):
        step = automated(1, "Confirm", ConfirmStoppedParams(HOSTS, "TaxService", "Tax Engine"))
        assert step.capability is Capability.VALIDATION

    def test_manual(self):
        step = manual(4, "Run wizard", INSTRUCTION)
        assert step.is_manual
        assert step.capability is Capability.NONE
        assert step.params.instruction is INSTRUCTION

    def test_frozen(self):
        step = manual(4, "Run wizard", INSTRUCTION)
        with pytest.raises(AttributeError):
            step.label = "other"

    def test_str(self):
        assert str(manual(4, "Run wizard", INSTRUCTION)) == "Step 4: Run wizard [Manual]"


class TestStepDefinitionValidation:
    def test_manual_with_capability_rejected(self):
        with pytest.raises(ValueError, match="MANUAL steps use capability NONE"):
            StepDefinition(
                1, StepKind.MANUAL, "x", Capability.FILE_SYNC, ManualStepParams(INSTRUCTION)
            )

    def test_automated_without_capability_rejected(self):
        with pytest.raises(ValueError, match="MANUAL steps use capability NONE"):
            StepDefinition(
                1, StepKind.AUTOMATED, "x", Capability.NONE, ManualStepParams(INSTRUCTION)
            )

    def test_mismatched_params_rejected(self):
        with pytest.raises(ValueError, match="does not match capability"):
            StepDefinition(
                1,
                StepKind.AUTOMATED,
                "x",
                Capability.SERVICE_CONTROL,
                FileSyncParams("a", "b", ".dat"),
            )

    def test_ordinal_must_be_positive(self):
        with pytest.raises(ValueError, match="ordinal must be >= 1"):
            manual(0, "x", INSTRUCTION)


class TestStepParams:
    def test_service_control_rejects_pending_state(self):
        with pytest.raises(ValueError, match="STOPPED or RUNNING"):
            ServiceControlParams(HOSTS, "TaxService", ServiceState.STOP_PENDING)

    def test_service_control_requires_name(self):
        with pytest.raises(ValueError, match="service_name cannot be empty"):
            ServiceControlParams(HOSTS, "", ServiceState.STOPPED)

    def test_file_sync_extension_needs_dot(self):
        with pytest.raises(ValueError, match="extension must start with"):
            FileSyncParams("a", "b", "dat")

    def test_confirm_stopped_requires_description(self):
        with pytest.raises(ValueError, match="process_description cannot be empty"):
            ConfirmStoppedParams(HOSTS, "TaxService", "")
