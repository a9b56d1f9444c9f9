"""
System configuration files managed by raidmaker.

This module provides common utilities for updating configuration files.
"""
import logging
from pathlib import Path
from typing import Optional

from raidmaker.utils.command import CommandRunner, SimulationMode

logger = logging.getLogger('raidmaker')


def create_directory(
    path: Path,
    cmd_runner: CommandRunner,
    description: Optional[str] = None
) -> None:
    """
    Create a directory if it doesn't exist or log that it would be created in simulation mode.

    Args:
        path: Directory path to create
        cmd_runner: CommandRunner instance for executing commands
        description: Optional description of the directory for logging
    """
    desc = f"{description} " if description else ""

    if cmd_runner.simulation_mode == SimulationMode.SIMULATE:
        logger.info(f"Would create {desc}directory: {path}")
    elif not path.is_dir():
        path.mkdir(exist_ok=True, parents=True)
        logger.debug(f"Created {desc}directory: {path}")
