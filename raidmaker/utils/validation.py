"""
Validation utilities.

This module provides functions for validating prerequisites.
"""
import os
import shutil
import logging

from raidmaker.utils.command import CommandRunner, SimulationMode
from raidmaker.utils.i18n import translate
from raidmaker.core.models import FilesystemType

logger = logging.getLogger('raidmaker')


def required_tools(fs_type: FilesystemType) -> list:
    """
    List the external tools the pipeline calls for a given filesystem.

    Args:
        fs_type: Filesystem that will be created

    Returns:
        Tool names that must be on PATH
    """
    tools = [
        "findmnt", "lsblk", "mdadm", "wipefs", "parted",
        "blkid", "mount", "umount", "systemctl", f"mkfs.{fs_type}"
    ]
    if fs_type is FilesystemType.BTRFS:
        tools.append("btrfs")
    return tools


def check_prerequisites(cmd_runner: CommandRunner, fs_type: FilesystemType) -> None:
    """
    Check for required tools and permissions.

    Args:
        cmd_runner: CommandRunner instance for executing commands
        fs_type: Filesystem that will be created

    Raises:
        RuntimeError: If prerequisites are not met
    """
    tools = required_tools(fs_type)

    # In pure simulation mode, just log what would be checked
    if cmd_runner.simulation_mode == SimulationMode.SIMULATE and not cmd_runner.use_real_disk_info:
        logger.info("Checking for required tools (simulated)")
        for tool in tools:
            logger.debug(f"Tool '{tool}' would be checked")
        return

    if os.geteuid() != 0:
        raise RuntimeError(translate("errors.common.root_required"))

    missing_tools = [tool for tool in tools if not shutil.which(tool)]
    if missing_tools:
        raise RuntimeError(
            f"{translate('errors.common.missing_tools', ', '.join(missing_tools))}\n"
            "Please install mdadm, parted and util-linux for your distribution and try again"
        )

    if not shutil.which("udevadm"):
        logger.warning("udevadm not found, only fixed delays will be used to let devices settle")
