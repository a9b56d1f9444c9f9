"""
Disk detection module.

This module finds the disks hosting the running system and lists every other
whole disk as a candidate for the new array.
"""
import json
import logging
import os
import re
import subprocess
from typing import List, Set

from raidmaker.utils.command import CommandRunner
from raidmaker.utils.format import bytes_to_human_readable
from raidmaker.utils.i18n import translate
from raidmaker.utils.types import BlockDevice, CandidateSet
from raidmaker.core.exceptions import DiskNotFoundError

logger = logging.getLogger('raidmaker')

# nvme0n1p2, mmcblk0p1, md127p1: partition number follows a "p"
_P_PARTITION_RE = re.compile(r"^(.*\d)p\d+$")


def base_disk_name(name: str) -> str:
    """
    Strip the partition suffix from a kernel device name.

    Args:
        name: Kernel name or device path (e.g. sda1, /dev/nvme0n1p2)

    Returns:
        Name of the whole disk (e.g. sda, nvme0n1)
    """
    name = os.path.basename(name)
    match = _P_PARTITION_RE.match(name)
    if match:
        return match.group(1)
    if re.match(r"^(nvme\d+n\d+|mmcblk\d+|md\d+)$", name):
        return name
    return name.rstrip("0123456789")


def get_root_device(cmd_runner: CommandRunner) -> str:
    """
    Return the device backing the root filesystem.

    Args:
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        Device path, without any btrfs subvolume suffix
    """
    try:
        result = cmd_runner.query(["findmnt", "-n", "-o", "SOURCE", "--target", "/"])
    except subprocess.CalledProcessError as e:
        raise DiskNotFoundError(translate("errors.filesystem.root_device", e))

    source = result.stdout.strip().split("[", 1)[0]
    if not source:
        raise DiskNotFoundError(translate("errors.filesystem.root_device", "empty findmnt output"))
    return source


def get_md_members(md_name: str, cmd_runner: CommandRunner) -> List[str]:
    """
    List every device of an md array, whatever its state.

    Spares, rebuilding and faulty members count as well: they belong to the
    system array and must never be wiped.

    Args:
        md_name: Array or array partition name (e.g. md127, md127p1)
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        Member device paths

    Raises:
        DiskNotFoundError: If the array cannot be read or lists no member
    """
    array = f"/dev/{base_disk_name(md_name)}"
    try:
        result = cmd_runner.query(["mdadm", "--detail", array])
    except subprocess.CalledProcessError as e:
        raise DiskNotFoundError(translate("errors.filesystem.md_members", array, (e.stderr or str(e)).strip()))

    members = []
    in_table = False
    for line in result.stdout.splitlines():
        fields = line.split()
        if fields[:2] == ["Number", "Major"]:
            in_table = True
            continue
        # removed slots have no device path
        if in_table and len(fields) > 1 and fields[-1].startswith("/dev/"):
            members.append(fields[-1])

    if not members:
        raise DiskNotFoundError(translate("errors.filesystem.md_members", array, "no member listed"))
    return members


def detect_system_disks(cmd_runner: CommandRunner) -> Set[str]:
    """
    Find the whole disks hosting the root filesystem.

    When root lives on a software RAID array, every member disk of that
    array counts as a system disk.

    Args:
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        Set of kernel disk names
    """
    root_device = get_root_device(cmd_runner)

    result = cmd_runner.query(["lsblk", "-n", "-o", "PKNAME", root_device], check=False)
    parents = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    system_disk = parents[0] if parents else os.path.basename(root_device)

    if system_disk.startswith("md"):
        system_disks = {base_disk_name(member) for member in get_md_members(system_disk, cmd_runner)}
    else:
        system_disks = {base_disk_name(system_disk)}

    logger.info(translate("messages.filesystem.system_on_disk", " ".join(sorted(system_disks))))
    return system_disks


def list_disks(cmd_runner: CommandRunner) -> List[BlockDevice]:
    """
    List block devices in the order reported by lsblk.

    Args:
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        List of BlockDevice entries, of any type

    Raises:
        DiskNotFoundError: If lsblk fails or returns unreadable output
    """
    try:
        result = cmd_runner.query(["lsblk", "-J", "-b", "-d", "-o", "NAME,TYPE,SIZE,MODEL"])
        data = json.loads(result.stdout)
    except subprocess.CalledProcessError as e:
        raise DiskNotFoundError(translate("errors.filesystem.disk_listing", e))
    except json.JSONDecodeError as e:
        raise DiskNotFoundError(translate("errors.filesystem.disk_listing", f"invalid JSON: {e}"))

    devices = []
    for entry in data.get("blockdevices", []):
        name = entry.get("name")
        if not name:
            continue
        try:
            size_bytes = int(entry.get("size") or 0)
        except (TypeError, ValueError):
            size_bytes = 0
        devices.append(BlockDevice(
            name=name,
            path=f"/dev/{name}",
            type=entry.get("type") or "",
            size_bytes=size_bytes,
            model=(entry.get("model") or "").strip() or "Unknown",
        ))
    return devices


def detect_candidates(cmd_runner: CommandRunner, array_name: str = "", fs_type: str = "") -> CandidateSet:
    """
    Compute the disks that may be formatted for the new array.

    A device is a candidate when it is a whole disk and not a system disk.

    Args:
        cmd_runner: CommandRunner instance for executing commands
        array_name: Name of the future array, for logging
        fs_type: Filesystem that will be created, for logging

    Returns:
        Candidate disks in enumeration order
    """
    system_disks = detect_system_disks(cmd_runner)

    candidates: CandidateSet = [
        device for device in list_disks(cmd_runner)
        if device["type"] == "disk" and device["name"] not in system_disks
    ]

    logger.info(translate(
        "messages.filesystem.disks_to_format",
        " ".join(device["path"] for device in candidates), array_name, fs_type
    ))
    for device in candidates:
        logger.info(translate(
            "messages.filesystem.disk_details",
            device["path"], bytes_to_human_readable(device["size_bytes"]), device["model"]
        ))
    logger.warning(translate("messages.filesystem.number_of_disks", len(candidates)))
    if array_name:
        logger.warning(translate("messages.filesystem.future_disk", array_name))

    return candidates
