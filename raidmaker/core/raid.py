"""
RAID array assembly module.

This module creates the md array from the formatted partitions and checks
that the kernel reports it as active.
"""
import logging
import subprocess

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import TermColors, colorize, header
from raidmaker.utils.i18n import translate
from raidmaker.core.exceptions import ArrayError, FilesystemError
from raidmaker.core.models import ArraySpec

logger = logging.getLogger('raidmaker')


def create_array(array: ArraySpec, cmd_runner: CommandRunner, settle_seconds: float) -> None:
    """
    Assemble the array with mdadm.

    mdadm's own confirmation question is answered automatically.

    Args:
        array: Array plan with its formatted partitions
        cmd_runner: CommandRunner instance for executing commands
        settle_seconds: Delay after creation so udev can create the device node

    Raises:
        ArrayError: If mdadm fails
    """
    logger.info(header(translate("headers.filesystem.create_disk", array.level, array.name),
                       cmd_runner.colored_output))

    members = array.partitions or [member["path"] for member in array.members]
    cmd = [
        "mdadm", "--create", "--verbose", array.device,
        f"--level={array.level}",
        f"--raid-devices={len(members)}",
    ] + members

    output, success = cmd_runner.run_logged(cmd, input="y\n")
    if not success:
        logger.debug(output)
        raise ArrayError(translate("errors.filesystem.disk_creation", array.name))

    logger.info(colorize(translate("success.filesystem.array_create", array.device),
                         TermColors.SUCCESS, cmd_runner.colored_output))
    cmd_runner.settle(settle_seconds)


def verify_array(array: ArraySpec, cmd_runner: CommandRunner) -> None:
    """
    Check that mdadm lists the array among the active ones.

    Raises:
        ArrayError: If the array is not reported by mdadm
    """
    result = cmd_runner.run(["mdadm", "--detail", "--scan"], check=False)
    for line in result.stdout.splitlines():
        fields = line.split()
        if array.device in fields or f"/dev/md/{array.name}" in fields:
            return
    raise ArrayError(translate("errors.filesystem.disk_created_but_not_mounted", array.name))


def read_uuid(array: ArraySpec, cmd_runner: CommandRunner) -> str:
    """
    Read the filesystem UUID of the array and store it on the plan.

    Returns:
        The filesystem UUID

    Raises:
        FilesystemError: If blkid reports no UUID
    """
    try:
        result = cmd_runner.run(["blkid", "-o", "value", "-s", "UUID", array.device])
    except subprocess.CalledProcessError:
        raise FilesystemError(translate("errors.filesystem.disk_uuid", array.device))

    uuid = result.stdout.strip()
    if not uuid:
        raise FilesystemError(translate("errors.filesystem.disk_uuid", array.device))

    array.uuid = uuid
    logger.info(translate("messages.filesystem.array_uuid", array.device, uuid))
    return uuid
