"""
Disk partitioning module.

This module wipes the candidate disks and gives each of them a single
partition spanning the whole disk, ready to become an array member.
"""
import logging

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import TermColors, colorize, header
from raidmaker.utils.i18n import translate
from raidmaker.utils.prompt import Prompter
from raidmaker.core.exceptions import FormattingError, UserAbortedError
from raidmaker.core.models import ArraySpec, FilesystemType

logger = logging.getLogger('raidmaker')


def get_partition_device_name(disk: str, partition_number: int) -> str:
    """
    Generate the appropriate partition device name based on disk type.

    Args:
        disk: Path to the disk device
        partition_number: Partition number

    Returns:
        Partition device path
    """
    # Names ending in a digit (nvme0n1, mmcblk0) take a "p" separator
    if disk[-1:].isdigit():
        return f"{disk}p{partition_number}"
    return f"{disk}{partition_number}"


def confirm_format(prompter: Prompter) -> None:
    """
    Ask the operator before anything is destroyed.

    Raises:
        UserAbortedError: If the operator declines
    """
    if not prompter.yes_no(translate("prompts.common.continue_label"), default=False):
        raise UserAbortedError(translate("errors.filesystem.raid_aborted"))


def format_disks(
    array: ArraySpec,
    fs_type: FilesystemType,
    cmd_runner: CommandRunner,
    settle_seconds: float
) -> None:
    """
    Wipe and partition every member disk, one at a time.

    The first failure stops the loop; later disks are left untouched.

    Args:
        array: Array plan whose members are formatted; its partition list is filled in
        fs_type: Filesystem the partitions are tagged with
        cmd_runner: CommandRunner instance for executing commands
        settle_seconds: Delay after each disk so the kernel rereads its partition table

    Raises:
        FormattingError: If wiping or partitioning a disk fails
    """
    logger.info(header(translate("headers.filesystem.partition_empty_disks"), cmd_runner.colored_output))

    array.partitions = []
    for member in array.members:
        disk = member["path"]

        logger.info(translate("messages.filesystem.wipe_disk", disk))
        _, success = cmd_runner.run_logged(["wipefs", "-a", disk])
        if not success:
            raise FormattingError(translate("errors.filesystem.disk_formatting", disk))

        logger.info(translate("messages.filesystem.partition_disk", disk))
        _, success = cmd_runner.run_logged([
            "parted", "-s", disk,
            "mklabel", "msdos",
            "mkpart", "primary", str(fs_type), "1", "100%"
        ])
        if not success:
            raise FormattingError(translate("errors.filesystem.create_partitions", disk))

        array.partitions.append(get_partition_device_name(disk, 1))
        cmd_runner.settle(settle_seconds)

    logger.info(colorize(translate("success.filesystem.partitions_create"),
                         TermColors.SUCCESS, cmd_runner.colored_output))
    cmd_runner.settle(settle_seconds)
