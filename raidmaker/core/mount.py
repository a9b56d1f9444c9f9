"""
Filesystem mounting module.

This module registers the array in the fstab and mounts it.
"""
import logging
from pathlib import Path
from typing import Optional

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import TermColors, colorize, header
from raidmaker.utils.i18n import translate
from raidmaker.config import create_directory
from raidmaker.config.fstab import append_entry
from raidmaker.core.exceptions import DuplicateMountEntryError, MountError
from raidmaker.core.models import FilesystemType, MountEntry

logger = logging.getLogger('raidmaker')


def determine_mount_options(fs_type: FilesystemType, subvolume: Optional[str] = None) -> str:
    """
    Determine mount options for the array's filesystem.

    Args:
        fs_type: Filesystem created on the array
        subvolume: btrfs subvolume to mount

    Returns:
        Comma separated mount options
    """
    return fs_type.mount_options(subvolume)


def persist_mount(
    uuid: str,
    mount_point: str,
    fs_type: FilesystemType,
    cmd_runner: CommandRunner,
    fstab_path: Path,
    subvolume: Optional[str] = None,
    device: str = ""
) -> bool:
    """
    Add the array to the fstab and mount it.

    Args:
        uuid: Filesystem UUID of the array
        mount_point: Where to mount the array
        fs_type: Filesystem created on the array
        cmd_runner: CommandRunner instance for executing commands
        fstab_path: Path to the fstab
        subvolume: btrfs subvolume to mount
        device: Array device, for messages

    Returns:
        True if a new entry was written and mounted, False if an identical
        entry was already present

    Raises:
        MountError: If mounting fails after the fstab was updated
        FstabError: If the fstab cannot be updated
    """
    device = device or f"UUID={uuid}"
    logger.info(header(translate("headers.filesystem.mount", device, mount_point), cmd_runner.colored_output))

    entry = MountEntry.for_array(uuid, mount_point, fs_type, determine_mount_options(fs_type, subvolume))

    try:
        append_entry(fstab_path, entry, cmd_runner)
    except DuplicateMountEntryError as e:
        logger.warning(colorize(str(e), TermColors.WARNING, cmd_runner.colored_output))
        return False

    _, reloaded = cmd_runner.run_logged(["systemctl", "daemon-reload"])
    if not reloaded:
        logger.warning("systemctl daemon-reload failed, mount units may be stale until next boot")

    try:
        create_directory(Path(mount_point), cmd_runner, "mount point")
    except OSError as e:
        raise MountError(f"{translate('errors.filesystem.create_mount_point', mount_point)}: {e}")

    _, success = cmd_runner.run_logged(["mount", "-a"])
    if not success:
        raise MountError(translate("errors.filesystem.disk_mount", device, mount_point))

    logger.info(colorize(translate("success.filesystem.disk_mount", device, mount_point),
                         TermColors.SUCCESS, cmd_runner.colored_output))
    return True
