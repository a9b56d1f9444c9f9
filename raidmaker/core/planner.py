"""
RAID level planning module.

This module validates the requested RAID level and filesystem type and
settles on the level actually built, falling back to an operator choice
when too few disks are available.
"""
import logging
from typing import List

from raidmaker.utils.format import TermColors, colorize
from raidmaker.utils.i18n import translate
from raidmaker.utils.prompt import Prompter
from raidmaker.core.exceptions import (
    InvalidRaidLevelError, InvalidFilesystemTypeError, InvalidMountPointError, InsufficientDisksError
)
from raidmaker.core.models import (
    ArraySpec, FilesystemType, ProvisioningContext, RaidLevel, normalize_mount_point
)

logger = logging.getLogger('raidmaker')


def parse_raid_level(value) -> RaidLevel:
    """
    Convert user input to a RaidLevel.

    Raises:
        InvalidRaidLevelError: If the value is not 0, 5, 6 or 10
    """
    valid = " ".join(str(level) for level in RaidLevel)
    try:
        return RaidLevel(int(str(value).strip()))
    except ValueError:
        raise InvalidRaidLevelError(translate("errors.filesystem.raid_level_invalid", value, valid))


def parse_filesystem_type(value) -> FilesystemType:
    """
    Convert user input to a FilesystemType.

    Raises:
        InvalidFilesystemTypeError: If the value is not ext4, btrfs or xfs
    """
    valid = " ".join(str(fs_type) for fs_type in FilesystemType)
    try:
        return FilesystemType(str(value).strip())
    except ValueError:
        raise InvalidFilesystemTypeError(translate("errors.filesystem.filesystem_type_invalid", value, valid))


def parse_mount_point(value) -> str:
    """
    Normalize the requested mount point.

    Raises:
        InvalidMountPointError: If the value is not an absolute path
    """
    value = str(value).strip()
    if not value.startswith("/"):
        raise InvalidMountPointError(translate("errors.filesystem.mount_point_invalid", value))
    return normalize_mount_point(value)


def feasible_levels(disk_count: int) -> List[RaidLevel]:
    """
    List the RAID levels that can be built with the given number of disks.

    RAID 10 additionally needs an even number of disks.

    Args:
        disk_count: Number of candidate disks

    Returns:
        Feasible levels, most redundant first
    """
    levels = []
    if disk_count >= 4 and disk_count % 2 == 0:
        levels.append(RaidLevel.RAID10)
    if disk_count >= 4:
        levels.append(RaidLevel.RAID6)
    if disk_count >= 3:
        levels.append(RaidLevel.RAID5)
    if disk_count >= 2:
        levels.append(RaidLevel.RAID0)
    return levels


def select_level(requested: RaidLevel, disk_count: int, prompter: Prompter) -> RaidLevel:
    """
    Settle on the RAID level to build.

    Args:
        requested: Level asked for by the operator
        disk_count: Number of candidate disks
        prompter: Prompter used when an alternative has to be chosen

    Returns:
        The requested level, or the alternative picked by the operator

    Raises:
        InsufficientDisksError: If no level can be built
    """
    if disk_count >= requested.min_disks:
        return requested

    logger.warning(colorize(
        translate("errors.filesystem.insufficient_disks_for_raid", requested, disk_count, requested.min_disks),
        TermColors.WARNING, prompter.colored_output
    ))

    alternatives = feasible_levels(disk_count)
    if not alternatives:
        raise InsufficientDisksError(translate("errors.filesystem.raid_not_possible", disk_count))

    level = prompter.choice(
        translate("prompts.filesystem.select_raid_level", " ".join(str(alt) for alt in alternatives)),
        alternatives
    )
    logger.info(translate("messages.filesystem.select_raid_level", level))
    return level


def plan_array(ctx: ProvisioningContext, prompter: Prompter) -> ArraySpec:
    """
    Build the array plan from the candidate disks.

    Every candidate becomes a member of the array.

    Args:
        ctx: Provisioning context holding the candidates and the requested level
        prompter: Prompter used when an alternative level has to be chosen

    Returns:
        The ArraySpec, also stored on the context
    """
    level = select_level(ctx.level, len(ctx.candidates), prompter)
    ctx.level = level
    ctx.array = ArraySpec(name=ctx.array_name, level=level, members=list(ctx.candidates))
    return ctx.array
