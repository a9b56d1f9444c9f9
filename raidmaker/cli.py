"""
Command-line interface for raidmaker.

This module handles argument parsing and runs the RAID provisioning pipeline.
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from raidmaker.utils.logging import setup_logging
from raidmaker.utils.command import CommandRunner, SimulationMode
from raidmaker.utils.format import TermColors, colorize
from raidmaker.utils.i18n import load_locale_file
from raidmaker.utils.prompt import Prompter
from raidmaker.utils.validation import check_prerequisites
from raidmaker.core.exceptions import RaidMakerError
from raidmaker.core.models import (
    DEFAULT_ARRAY_NAME, DEFAULT_FSTAB, DEFAULT_MOUNT_POINT, DEFAULT_SCRATCH_MOUNT,
    DEFAULT_SETTLE_SECONDS, ProvisioningContext
)
from raidmaker.core.pipeline import run_pipeline
from raidmaker.core.planner import parse_filesystem_type, parse_mount_point, parse_raid_level

logger = logging.getLogger('raidmaker')


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Namespace containing parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Create a software RAID array from all unused disks and mount it"
    )

    parser.add_argument(
        "raid_level",
        help="RAID level of the array (0, 5, 6 or 10)"
    )

    parser.add_argument(
        "mount_point",
        nargs="?",
        default=DEFAULT_MOUNT_POINT,
        help=f"Where to mount the array (default: {DEFAULT_MOUNT_POINT})"
    )

    parser.add_argument(
        "filesystem_type",
        nargs="?",
        default="ext4",
        help="Filesystem to create on the array: ext4, btrfs or xfs (default: ext4)"
    )

    parser.add_argument(
        "array_name",
        nargs="?",
        default=DEFAULT_ARRAY_NAME,
        help=f"Name of the md device to create (default: {DEFAULT_ARRAY_NAME})"
    )

    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Do not ask for confirmation before wiping the disks"
    )

    parser.add_argument(
        "--fstab",
        type=Path,
        default=DEFAULT_FSTAB,
        help=f"fstab file to update (default: {DEFAULT_FSTAB})"
    )

    parser.add_argument(
        "--settle",
        type=float,
        default=DEFAULT_SETTLE_SECONDS,
        help=f"Seconds to wait after destructive operations (default: {DEFAULT_SETTLE_SECONDS:g})"
    )

    parser.add_argument(
        "--scratch-mount",
        type=Path,
        default=DEFAULT_SCRATCH_MOUNT,
        help=f"Temporary mount point used to create btrfs subvolumes (default: {DEFAULT_SCRATCH_MOUNT})"
    )

    parser.add_argument(
        "--locale-file",
        help="JSON message catalog overriding the built-in messages (or set RAIDMAKER_LOCALE_FILE)"
    )

    # Simulation options
    parser.add_argument(
        "-s", "--simulate",
        action="store_true",
        help="Simulate operations without making any changes to the system"
    )

    simulation_group = parser.add_argument_group('Disk simulation options (only with --simulate)')
    simulation_group.add_argument(
        "--sim-disks",
        type=int,
        help="Number of spare disks to simulate - only used in simulation mode"
    )

    simulation_group.add_argument(
        "--sim-use-real",
        action="store_true",
        help="Detect the real disks, even in simulation mode"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def display_simulation_summary(cmd_runner: CommandRunner) -> None:
    """
    Display a summary of the simulation.

    Args:
        cmd_runner: CommandRunner instance for executing commands
    """
    if cmd_runner.simulation_mode != SimulationMode.SIMULATE:
        return

    report = cmd_runner.get_simulation_report()

    try:
        terminal_width = os.get_terminal_size().columns
    except (AttributeError, OSError):
        terminal_width = 80

    stars = "*" * terminal_width
    color = cmd_runner.colored_output

    print(f"\n{colorize(stars, TermColors.SIM, color)}")
    print(colorize("SIMULATION COMPLETE - NO CHANGES WERE MADE", TermColors.SIM + TermColors.BOLD, color))
    print(f"{colorize(stars, TermColors.SIM, color)}\n")

    print(colorize("The following operations would have been performed:", TermColors.SUCCESS, color))
    print(report)

    print(f"\n{colorize('To execute these operations for real, run without the --simulate flag.', TermColors.SIM, color)}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        args = parse_arguments(argv)

        setup_logging(args.debug)
        load_locale_file(args.locale_file)

        # Validate the request before touching anything
        try:
            level = parse_raid_level(args.raid_level)
            fs_type = parse_filesystem_type(args.filesystem_type)
            mount_point = parse_mount_point(args.mount_point)
        except RaidMakerError as e:
            logger.error(str(e))
            return 1

        cmd_runner = CommandRunner(
            SimulationMode.SIMULATE if args.simulate else SimulationMode.DISABLED,
            not args.no_color
        )

        if args.simulate:
            logger.info("Running in simulation mode - NO CHANGES WILL BE MADE")

            sim_params = {}
            if args.sim_disks is not None:
                sim_params["disk_count"] = args.sim_disks
                logger.info(f"Simulating {args.sim_disks} spare disks")

            cmd_runner.set_simulation_params(sim_params)
            cmd_runner.use_real_disk_info = args.sim_use_real

            if args.sim_use_real:
                logger.info("Using the real disks even in simulation mode")

        try:
            check_prerequisites(cmd_runner, fs_type)
        except RuntimeError as e:
            logger.error(str(e))
            return 1

        ctx = ProvisioningContext(
            level=level,
            fs_type=fs_type,
            mount_point=mount_point,
            array_name=args.array_name,
            fstab_path=args.fstab,
            scratch_mount=args.scratch_mount,
            settle_seconds=args.settle,
        )
        prompter = Prompter(assume_yes=args.yes, colored_output=not args.no_color)

        try:
            run_pipeline(ctx, cmd_runner, prompter)
        except RaidMakerError as e:
            logger.error(colorize(str(e), TermColors.ERROR, cmd_runner.colored_output))
            return 1

        display_simulation_summary(cmd_runner)
        return 0

    except KeyboardInterrupt:
        logger.error("Operation cancelled by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if 'args' in locals() and args.debug:
            import traceback
            traceback.print_exc()
        return 1


# For module import compatibility
if __name__ == "__main__":
    sys.exit(main())
