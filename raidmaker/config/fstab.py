"""
fstab management.

Entries are appended inside a bracketed comment block so they can be found
and removed by hand later.
"""
import logging
from pathlib import Path
from typing import List, Tuple

from raidmaker.utils.command import CommandRunner, SimulationMode
from raidmaker.utils.i18n import translate
from raidmaker.core.exceptions import DuplicateMountEntryError, FstabError
from raidmaker.core.models import MountEntry

logger = logging.getLogger('raidmaker')

FSTAB_MARKER = "# MediaEase RAID"


def read_entries(fstab_path: Path) -> List[Tuple[str, ...]]:
    """
    Parse the fstab into whitespace separated fields, skipping comments.

    A missing file has no entries.

    Raises:
        FstabError: If the file exists but cannot be read
    """
    if not fstab_path.exists():
        return []

    try:
        content = fstab_path.read_text()
    except OSError as e:
        raise FstabError(translate("errors.filesystem.fstab_access", fstab_path, e))

    entries = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(tuple(line.split()))
    return entries


def has_entry(fstab_path: Path, entry: MountEntry) -> bool:
    """
    Check whether an entry with the same UUID, mount point, type and options exists.
    """
    wanted = entry.fields()
    return any(fields[:4] == wanted for fields in read_entries(fstab_path))


def append_entry(fstab_path: Path, entry: MountEntry, cmd_runner: CommandRunner) -> None:
    """
    Append an entry, wrapped in marker comments, to the fstab.

    Args:
        fstab_path: Path to the fstab
        entry: Entry to add
        cmd_runner: CommandRunner instance, nothing is written in simulation mode

    Raises:
        DuplicateMountEntryError: If an identical entry is already present
        FstabError: If the file cannot be written
    """
    if has_entry(fstab_path, entry):
        raise DuplicateMountEntryError(
            translate("errors.filesystem.disk_already_mounted", f"UUID={entry.uuid}", entry.mount_point)
        )

    logger.info(translate("messages.filesystem.fstab_entry", entry))
    block = f"{FSTAB_MARKER}\n{entry}\n{FSTAB_MARKER}\n"

    if cmd_runner.simulation_mode == SimulationMode.SIMULATE:
        logger.info(f"Would append to {fstab_path}:\n{block}")
        return

    try:
        existing = fstab_path.read_text() if fstab_path.exists() else ""
        with open(fstab_path, "a") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(block)
    except OSError as e:
        raise FstabError(translate("errors.filesystem.fstab_access", fstab_path, e))
