"""
Provisioning pipeline.

Runs inventory, planning, formatting, array build and mount persistence in
order, passing one ProvisioningContext from stage to stage. Every stage
raises on failure and nothing after a failed stage runs.
"""
import logging

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import TermColors, colorize, header
from raidmaker.utils.i18n import translate
from raidmaker.utils.prompt import Prompter
from raidmaker.core.disk import detect_candidates
from raidmaker.core.filesystem import create_filesystem
from raidmaker.core.models import ProvisioningContext
from raidmaker.core.mount import persist_mount
from raidmaker.core.partition import confirm_format, format_disks
from raidmaker.core.planner import plan_array
from raidmaker.core.raid import create_array, read_uuid, verify_array

logger = logging.getLogger('raidmaker')


def run_pipeline(ctx: ProvisioningContext, cmd_runner: CommandRunner, prompter: Prompter) -> bool:
    """
    Provision a mounted RAID array from the unused disks.

    Args:
        ctx: Provisioning context with the validated request
        cmd_runner: CommandRunner instance for executing commands
        prompter: Prompter for the level choice and the confirmation

    Returns:
        True if a new fstab entry was written, False if it was already present

    Raises:
        RaidMakerError: On the first failing stage
    """
    logger.info(header(translate("headers.filesystem.init_raid_creation"), cmd_runner.colored_output))

    # Inventory
    ctx.candidates = detect_candidates(cmd_runner, ctx.array_name, str(ctx.fs_type))

    # Planning
    array = plan_array(ctx, prompter)

    # Formatting
    confirm_format(prompter)
    format_disks(array, ctx.fs_type, cmd_runner, ctx.settle_seconds)

    # Build
    create_array(array, cmd_runner, ctx.settle_seconds)
    verify_array(array, cmd_runner)
    ctx.subvolume = create_filesystem(array, ctx.fs_type, ctx.mount_point, cmd_runner, ctx.scratch_mount)
    cmd_runner.settle(ctx.settle_seconds)
    uuid = read_uuid(array, cmd_runner)

    # Persist
    written = persist_mount(
        uuid, ctx.mount_point, ctx.fs_type, cmd_runner, ctx.fstab_path,
        subvolume=ctx.subvolume, device=array.device
    )

    logger.info(colorize(
        translate("success.filesystem.raid_complete", array.level, array.device, ctx.mount_point),
        TermColors.SUCCESS, cmd_runner.colored_output
    ))
    return written
