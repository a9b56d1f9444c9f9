"""
Filesystem creation module.

This module creates the filesystem on the assembled array and, for btrfs,
the subvolume that will later be mounted at the destination.
"""
import logging
from pathlib import Path
from typing import Optional

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import TermColors, colorize
from raidmaker.utils.i18n import translate
from raidmaker.config import create_directory
from raidmaker.core.exceptions import FilesystemError
from raidmaker.core.models import ArraySpec, FilesystemType, HOME_MOUNT_POINT, normalize_mount_point

logger = logging.getLogger('raidmaker')


def subvolume_name_for(mount_point: str) -> str:
    """
    Name the btrfs subvolume after its destination.

    Args:
        mount_point: Final mount point of the array

    Returns:
        "home" for /home, "root" for /, "data" otherwise
    """
    mount_point = normalize_mount_point(mount_point)
    if mount_point == HOME_MOUNT_POINT:
        return "home"
    if mount_point == "/":
        return "root"
    return "data"


def create_filesystem(
    array: ArraySpec,
    fs_type: FilesystemType,
    mount_point: str,
    cmd_runner: CommandRunner,
    scratch_mount: Path = Path("/mnt")
) -> Optional[str]:
    """
    Create the filesystem on the array.

    Existing signatures are overwritten without asking.

    Args:
        array: Assembled array
        fs_type: Filesystem to create
        mount_point: Final mount point, names the btrfs subvolume
        cmd_runner: CommandRunner instance for executing commands
        scratch_mount: Temporary mount point used to create btrfs subvolumes

    Returns:
        Name of the created btrfs subvolume, None for other filesystems

    Raises:
        FilesystemError: If there's an error in filesystem creation
    """
    logger.info(translate("headers.filesystem.format_disk", array.name, fs_type))

    _, success = cmd_runner.run_logged(fs_type.mkfs_command(array.device, array.level))
    if not success:
        raise FilesystemError(translate("errors.filesystem.disk_partition", array.device, fs_type))

    subvolume = None
    if fs_type is FilesystemType.BTRFS:
        subvolume = subvolume_name_for(mount_point)
        create_btrfs_subvolume(array, subvolume, cmd_runner, scratch_mount)

    logger.info(colorize(translate("success.filesystem.disk_partition", array.device, fs_type),
                         TermColors.SUCCESS, cmd_runner.colored_output))
    logger.info(translate("headers.filesystem.disk_ready", array.device))
    return subvolume


def create_btrfs_subvolume(
    array: ArraySpec,
    subvolume: str,
    cmd_runner: CommandRunner,
    scratch_mount: Path
) -> None:
    """
    Create one subvolume on a freshly formatted btrfs array.

    The raw array is mounted on the scratch mount point only for the time
    it takes to create the subvolume.

    Raises:
        FilesystemError: If mounting, creating the subvolume or unmounting fails
    """
    try:
        create_directory(scratch_mount, cmd_runner, "scratch mount")
    except OSError as e:
        raise FilesystemError(f"{translate('errors.filesystem.create_mount_point', scratch_mount)}: {e}")

    _, success = cmd_runner.run_logged(["mount", array.device, str(scratch_mount)])
    if not success:
        raise FilesystemError(translate("errors.filesystem.disk_mount", array.device, scratch_mount))

    try:
        logger.info(translate("messages.filesystem.create_subvolume", subvolume))
        _, success = cmd_runner.run_logged(["btrfs", "subvolume", "create", str(scratch_mount / subvolume)])
        if not success:
            raise FilesystemError(translate("errors.filesystem.create_subvolume", subvolume))
    finally:
        _, unmounted = cmd_runner.run_logged(["umount", str(scratch_mount)])

    if not unmounted:
        raise FilesystemError(translate("errors.filesystem.disk_unmount", scratch_mount))
