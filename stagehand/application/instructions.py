"""
Manual Instruction Data

The text operators follow for the GUI-only parts of the update. Edit freely;
nothing in the workflow depends on the wording.
"""

from typing import Sequence

from stagehand.domain.entities.step import ManualInstruction
from stagehand.domain.value_objects.host import Host


def update_wizard_instruction(primary: Host, data_dir: str) -> ManualInstruction:
    return ManualInstruction(
        title="Run Tax Update Wizard",
        context=f"{primary} (primary)",
        lines=(
            f"Log on to {primary} with an administrative account.",
            "Start the Tax Update Wizard from the Start menu.",
            "Select the update package for the current period and click Next.",
            f"Confirm the data folder is {data_dir} and start the import.",
            "Wait for 'Update completed successfully', then close the wizard.",
        ),
    )


def client_verification_instruction(hosts: Sequence[Host]) -> ManualInstruction:
    names = ", ".join(str(h) for h in hosts) or "all target hosts"
    return ManualInstruction(
        title="Verify Tax Client",
        context=names,
        lines=(
            "On each listed host, open the Tax Client.",
            "Open Help > About and check the data version matches the update.",
            "Open one recent return and confirm the rate tables load.",
            "Close the Tax Client before continuing.",
        ),
    )
