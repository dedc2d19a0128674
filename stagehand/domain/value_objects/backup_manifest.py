"""
Backup Manifest

Architectural Intent:
- Backup and distribution destinations are pure functions of run metadata
- Nothing here is stored; every caller recomputes the same path from the same inputs
- Pre-update and post-update copies use different month folders, so they never
  overwrite one another within a run

Layout:
- <backup_root>/<prefix>_<currentMonth><year>/<month>/<sub_area>
- Target host paths map onto the administrative share: \\\\<host>\\<drive>$\\<rest>
"""

from __future__ import annotations
from datetime import date
from pathlib import PurePath, PurePosixPath, PureWindowsPath


def _flavour(root: str) -> type[PurePath]:
    """Join Windows-style roots with backslashes, everything else POSIX-style."""
    if PureWindowsPath(root).drive or "\\" in root:
        return PureWindowsPath
    return PurePosixPath


def deployment_label(prefix: str, month: str, year: str | int) -> str:
    if not prefix:
        raise ValueError("Deployment label prefix cannot be empty")
    return f"{prefix}_{month}{year}"


def derive_backup_path(root: str, label: str, month: str, sub_area: str) -> str:
    if not root:
        raise ValueError("Backup root cannot be empty")
    flavour = _flavour(root)
    return str(flavour(root, label, month, sub_area))


def month_abbr(day: date) -> str:
    return day.strftime("%b")


def backup_months(today: date) -> tuple[str, str]:
    """Return (pre_update_month, post_update_month) for a run on ``today``.

    The outgoing data belongs to the previous month; the updated data to the
    current one.
    """
    first = today.replace(day=1)
    if first.month == 1:
        previous = first.replace(year=first.year - 1, month=12)
    else:
        previous = first.replace(month=first.month - 1)
    return month_abbr(previous), month_abbr(today)


def to_admin_share(host: str, local_path: str) -> str:
    """Map a local-style path (``D:\\Apps\\Tax``) onto ``\\\\HOST\\D$\\Apps\\Tax``."""
    path = PureWindowsPath(local_path)
    drive = path.drive
    if not drive or not drive.endswith(":"):
        raise ValueError(f"Path has no drive letter: {local_path!r}")
    rest = path.parts[1:]
    return str(PureWindowsPath(f"\\\\{host}\\{drive[0].upper()}$\\", *rest))
