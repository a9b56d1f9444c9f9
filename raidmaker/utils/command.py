"""
Command execution utilities.

This module provides tools for executing shell commands with simplified simulation support.
"""
import json
import logging
import os
import shutil
import subprocess
import time
import uuid
from enum import Enum
from typing import Dict, List, Any, Tuple

from raidmaker.utils.format import TermColors, colorize

logger = logging.getLogger('raidmaker')

# Number of spare disks reported by a simulated lsblk when none is requested
DEFAULT_SIMULATED_DISKS = 4


class SimulationMode(Enum):
    """Enumeration for simulation modes"""
    DISABLED = 0  # Normal operation
    SIMULATE = 1  # Simulate operations


class CommandRunner:
    """
    Class responsible for command execution with simulation support.
    Acts as a wrapper around subprocess.run with additional functionality.
    """
    def __init__(self, simulation_mode: SimulationMode, colored_output: bool = True):
        """
        Initialize the command runner.

        Args:
            simulation_mode: Simulation mode to operate in
            colored_output: Whether to use colored output in terminal
        """
        self.simulation_mode = simulation_mode
        self.colored_output = colored_output
        self.commands_run = []

        # Generate a unique simulation ID
        self.simulation_id = str(uuid.uuid4())[:8]

        # Keep track of simulated UUIDs and arrays for consistency
        self.simulated_uuids = {}
        self.simulated_arrays = []

        # Simulation parameters
        self.simulation_params = {}
        self.use_real_disk_info = False

    def set_simulation_params(self, params: Dict[str, Any]) -> None:
        """
        Set parameters for disk simulation.

        Args:
            params: Dictionary of simulation parameters
        """
        self.simulation_params = params

    def run(self, cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        """
        Run a shell command or simulate running it.

        Args:
            cmd: Command to run as list of strings
            check: Whether to check for non-zero return code
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            CompletedProcess instance from subprocess.run
        """
        cmd_str = ' '.join(cmd)
        logger.debug(f"Command requested: {cmd_str}")

        # Keep track of this command
        cmd_record = {
            "command": cmd.copy(),
            "simulated": self.simulation_mode == SimulationMode.SIMULATE
        }
        self.commands_run.append(cmd_record)

        # For simulation mode
        if self.simulation_mode == SimulationMode.SIMULATE:
            sim_prefix = colorize(f"[SIM:{self.simulation_id}]", TermColors.SIM, self.colored_output)
            logger.info(f"{sim_prefix} Would execute: {cmd_str}")

            # Create a simulated completed process
            return self._simulate_command(cmd, **kwargs)

        return self._execute(cmd, check, **kwargs)

    def run_real(self, cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        """
        Run a command on the real system, even in simulation mode.

        Only read-only queries go through here, so that a simulation can be
        planned against the disks actually attached to the machine.
        """
        logger.debug(f"Querying real system: {' '.join(cmd)}")
        return self._execute(cmd, check, **kwargs)

    def _execute(self, cmd: List[str], check: bool, **kwargs) -> subprocess.CompletedProcess:
        """Run cmd with captured text output, logging the details of a failure."""
        try:
            return subprocess.run(cmd, check=check, text=True, capture_output=True, **kwargs)
        except subprocess.CalledProcessError as e:
            self._log_failure(cmd, e)
            raise

    def _log_failure(self, cmd: List[str], error: subprocess.CalledProcessError) -> None:
        logger.error(colorize(f"Command failed ({error.returncode}): {' '.join(cmd)}",
                              TermColors.ERROR, self.colored_output))
        for stream, text in (("stdout", error.stdout), ("stderr", error.stderr)):
            if text and text.strip():
                logger.error(f"{stream}: {text.strip()}")

    def query(self, cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        """
        Run a read-only query command.

        Queries go to the real system when simulating with real disk information,
        otherwise they follow the normal run/simulate path.
        """
        if self.simulation_mode == SimulationMode.SIMULATE and self.use_real_disk_info:
            return self.run_real(cmd, check=check, **kwargs)
        return self.run(cmd, check=check, **kwargs)

    def run_logged(self, cmd: List[str], **kwargs) -> Tuple[str, bool]:
        """
        Run a command and log its outcome instead of raising.

        Args:
            cmd: Command to run as list of strings
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            Tuple of (combined stdout/stderr output, success)
        """
        try:
            result = self.run(cmd, check=True, **kwargs)
        except subprocess.CalledProcessError as e:
            output = "".join(part for part in (e.stdout, e.stderr) if part)
            return output, False
        except OSError as e:
            logger.error(colorize(f"Could not execute {cmd[0]}: {e}", TermColors.ERROR, self.colored_output))
            return str(e), False

        output = "".join(part for part in (result.stdout, result.stderr) if part)
        logger.debug(f"Command succeeded: {' '.join(cmd)}")
        return output, True

    def settle(self, seconds: float) -> None:
        """
        Give the kernel and udev time to catch up after a destructive operation.

        Args:
            seconds: Fixed delay to wait after udev has settled
        """
        if self.simulation_mode == SimulationMode.SIMULATE:
            logger.debug(f"Would wait {seconds}s for devices to settle")
            return

        if shutil.which("udevadm"):
            self.run(["udevadm", "settle"], check=False)
        time.sleep(seconds)

    def _simulate_command(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """
        Generate simulated output for a command.

        Args:
            cmd: Command to simulate
            **kwargs: Additional arguments passed to the original command

        Returns:
            CompletedProcess with simulated output
        """
        result = subprocess.CompletedProcess(
            args=cmd,
            returncode=0,
            stdout="",
            stderr=""
        )

        cmd_name = os.path.basename(cmd[0]) if cmd else ""

        if cmd_name == "blkid":
            return self._handle_blkid_simulation(cmd, result)
        elif cmd_name == "findmnt":
            return self._handle_findmnt_simulation(cmd, result)
        elif cmd_name == "lsblk":
            return self._handle_lsblk_simulation(cmd, result)
        elif cmd_name == "mdadm":
            return self._handle_mdadm_simulation(cmd, result)

        if "input" in kwargs:
            logger.debug(f"Command input: {kwargs['input']!r}")

        return result

    def _handle_blkid_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate blkid command output"""
        device_path = cmd[-1]
        if device_path not in self.simulated_uuids:
            self.simulated_uuids[device_path] = str(uuid.uuid4())
        result.stdout = self.simulated_uuids[device_path] + "\n"
        return result

    def _handle_findmnt_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate findmnt command output"""
        result.stdout = "/dev/sda2\n"
        return result

    def _handle_lsblk_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate lsblk command output"""
        if "-J" in cmd:
            disk_count = self.simulation_params.get("disk_count", DEFAULT_SIMULATED_DISKS)
            size_bytes = self.simulation_params.get("disk_size", 4000787030016)
            devices = [{"name": "sda", "type": "disk", "size": 500107862016, "model": "SIMULATED SYSTEM DISK"}]
            for index in range(disk_count):
                devices.append({
                    "name": f"sd{chr(ord('b') + index)}",
                    "type": "disk",
                    "size": size_bytes,
                    "model": "SIMULATED DISK",
                })
            devices.append({"name": "sr0", "type": "rom", "size": 1073741312, "model": "SIMULATED DVD"})
            result.stdout = json.dumps({"blockdevices": devices})
        elif "-o" in cmd and "PKNAME" in cmd[cmd.index("-o") + 1]:
            result.stdout = "sda\n"
        return result

    def _handle_mdadm_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate mdadm command output"""
        if "--create" in cmd:
            device = cmd[cmd.index("--create") + 1]
            if device == "--verbose":
                device = cmd[cmd.index("--create") + 2]
            self.simulated_arrays.append(device)
            result.stderr = f"mdadm: array {device} started.\n"
        elif "--detail" in cmd and "--scan" in cmd:
            result.stdout = "".join(
                f"ARRAY {device} metadata=1.2 UUID={uuid.uuid4()}\n" for device in self.simulated_arrays
            )
        return result

    def get_simulation_report(self) -> str:
        """
        Generate a report of all simulated commands.

        Returns:
            Formatted string with report of simulated commands
        """
        if self.simulation_mode != SimulationMode.SIMULATE:
            return "Simulation mode is not active."

        report = []
        report.append("=" * 80)
        report.append(f"SIMULATION REPORT [ID: {self.simulation_id}]")
        report.append("=" * 80)
        report.append("")

        # Group commands by type
        command_groups = {}
        for cmd_record in self.commands_run:
            cmd = cmd_record["command"]
            cmd_type = os.path.basename(cmd[0]) if cmd else "unknown"
            command_groups.setdefault(cmd_type, []).append(cmd_record)

        for cmd_type, cmd_records in command_groups.items():
            report.append(f"{cmd_type.upper()} COMMANDS:")
            report.append("-" * 40)

            for i, cmd_record in enumerate(cmd_records, 1):
                cmd_str = ' '.join(cmd_record["command"])
                report.append(f"{i}. {cmd_str}")

            report.append("")

        report.append("-" * 80)
        report.append(f"Total commands simulated: {len(self.commands_run)}")
        report.append("=" * 80)

        return "\n".join(report)
