"""
Data model for the provisioning pipeline.

RAID levels and filesystem types are fixed enumerations; the array plan,
the fstab entry and the provisioning context are plain dataclasses passed
from stage to stage.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from raidmaker.utils.types import BlockDevice, CandidateSet

# Label given to every filesystem created on an array
FILESYSTEM_LABEL = "mediaease"

# Only this mount point gets a non-zero fsck pass number
HOME_MOUNT_POINT = "/home"

DEFAULT_MOUNT_POINT = HOME_MOUNT_POINT
DEFAULT_ARRAY_NAME = "md0"
DEFAULT_FSTAB = Path("/etc/fstab")
DEFAULT_SCRATCH_MOUNT = Path("/mnt")
DEFAULT_SETTLE_SECONDS = 3.0


def normalize_mount_point(path: str) -> str:
    """Collapse redundant separators and dots: "/home/" and "//home" both give "/home"."""
    path = os.path.normpath(str(path))
    if path.startswith("/"):
        path = "/" + path.lstrip("/")
    return path


class RaidLevel(Enum):
    """Supported md RAID levels"""
    RAID0 = 0
    RAID5 = 5
    RAID6 = 6
    RAID10 = 10

    def __str__(self) -> str:
        return str(self.value)

    @property
    def min_disks(self) -> int:
        """Smallest number of member disks mdadm accepts for this level."""
        return _MIN_DISKS[self]

    @property
    def btrfs_profiles(self) -> Tuple[str, str]:
        """(data, metadata) btrfs profile pair matching this level."""
        return _BTRFS_PROFILES[self]


_MIN_DISKS = {
    RaidLevel.RAID0: 2,
    RaidLevel.RAID5: 3,
    RaidLevel.RAID6: 4,
    RaidLevel.RAID10: 4,
}

_BTRFS_PROFILES = {
    RaidLevel.RAID0: ("raid0", "dup"),
    RaidLevel.RAID5: ("raid5", "raid1"),
    RaidLevel.RAID6: ("raid6", "raid1c3"),
    RaidLevel.RAID10: ("raid10", "raid1"),
}


class FilesystemType(Enum):
    """Filesystems that can be created on an array"""
    EXT4 = "ext4"
    BTRFS = "btrfs"
    XFS = "xfs"

    def __str__(self) -> str:
        return self.value

    def mount_options(self, subvolume: Optional[str] = None) -> str:
        """
        Return the fstab mount options for this filesystem.

        Args:
            subvolume: btrfs subvolume to mount, required for btrfs

        Returns:
            Comma separated mount options
        """
        options = _MOUNT_OPTIONS[self]
        if self is FilesystemType.BTRFS:
            if not subvolume:
                raise ValueError("btrfs mount options need a subvolume")
            options = f"{options},subvol={subvolume}"
        return options

    def mkfs_command(self, device: str, level: Optional[RaidLevel] = None) -> List[str]:
        """
        Build the command creating this filesystem on a device.

        Args:
            device: Device path to format
            level: RAID level of the array, selects the btrfs profiles

        Returns:
            Command as list of strings
        """
        if self is FilesystemType.EXT4:
            return ["mkfs.ext4", "-L", FILESYSTEM_LABEL, "-F", device]
        if self is FilesystemType.XFS:
            return ["mkfs.xfs", "-L", FILESYSTEM_LABEL, "-f", device]

        cmd = ["mkfs.btrfs", "-L", FILESYSTEM_LABEL, "-f"]
        if level is not None:
            data_profile, metadata_profile = level.btrfs_profiles
            cmd += ["-d", data_profile, "-m", metadata_profile]
        cmd.append(device)
        return cmd


_MOUNT_OPTIONS = {
    FilesystemType.EXT4: "defaults,nofail,noatime,nodiratime,discard,data=writeback,barrier=0",
    FilesystemType.XFS: "defaults,nofail,noatime,nodiratime,discard,allocsize=4M",
    FilesystemType.BTRFS: (
        "defaults,nofail,x-systemd.growfs,noatime,lazytime,compress-force=zstd,"
        "space_cache=v2,autodefrag,nodiscard"
    ),
}


@dataclass
class ArraySpec:
    name: str
    level: RaidLevel
    members: List[BlockDevice]
    # partitions handed to mdadm, filled in by the formatter
    partitions: List[str] = field(default_factory=list)
    uuid: Optional[str] = None

    @property
    def device(self) -> str:
        return f"/dev/{self.name}"

    @property
    def count(self) -> int:
        return len(self.members)


@dataclass
class MountEntry:
    uuid: str
    mount_point: str
    fs_type: FilesystemType
    options: str
    dump: int = 0
    passno: int = 0

    @classmethod
    def for_array(cls, uuid: str, mount_point: str, fs_type: FilesystemType, options: str) -> "MountEntry":
        """Build an entry, checking the filesystem only when mounted on the home path."""
        mount_point = normalize_mount_point(mount_point)
        passno = 2 if mount_point == HOME_MOUNT_POINT else 0
        return cls(uuid=uuid, mount_point=mount_point, fs_type=fs_type, options=options, passno=passno)

    def fields(self) -> Tuple[str, str, str, str]:
        """Fields that identify an entry in the fstab."""
        return (f"UUID={self.uuid}", self.mount_point, str(self.fs_type), self.options)

    def __str__(self) -> str:
        return f"{' '.join(self.fields())} {self.dump} {self.passno}"


@dataclass
class ProvisioningContext:
    """State threaded through every stage of one provisioning run."""
    level: RaidLevel
    fs_type: FilesystemType
    mount_point: str = DEFAULT_MOUNT_POINT
    array_name: str = DEFAULT_ARRAY_NAME
    fstab_path: Path = DEFAULT_FSTAB
    scratch_mount: Path = DEFAULT_SCRATCH_MOUNT
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    candidates: CandidateSet = field(default_factory=list)
    array: Optional[ArraySpec] = None
    subvolume: Optional[str] = None
