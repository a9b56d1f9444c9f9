"""
Tests for RAID levels, filesystem types and fstab entries.
"""
import pytest

from raidmaker.core.models import ArraySpec, FilesystemType, MountEntry, RaidLevel


@pytest.mark.parametrize("level,expected", [
    (RaidLevel.RAID0, 2),
    (RaidLevel.RAID5, 3),
    (RaidLevel.RAID6, 4),
    (RaidLevel.RAID10, 4),
])
def test_min_disks(level, expected):
    assert level.min_disks == expected


def test_btrfs_profiles():
    assert RaidLevel.RAID0.btrfs_profiles == ("raid0", "dup")
    assert RaidLevel.RAID5.btrfs_profiles == ("raid5", "raid1")
    assert RaidLevel.RAID6.btrfs_profiles == ("raid6", "raid1c3")
    assert RaidLevel.RAID10.btrfs_profiles == ("raid10", "raid1")


def test_level_renders_as_number():
    assert str(RaidLevel.RAID10) == "10"
    assert f"--level={RaidLevel.RAID5}" == "--level=5"


def test_mkfs_commands_force_overwrite_with_label():
    assert FilesystemType.EXT4.mkfs_command("/dev/md0") == ["mkfs.ext4", "-L", "mediaease", "-F", "/dev/md0"]
    assert FilesystemType.XFS.mkfs_command("/dev/md0") == ["mkfs.xfs", "-L", "mediaease", "-f", "/dev/md0"]


def test_btrfs_mkfs_uses_level_profiles():
    cmd = FilesystemType.BTRFS.mkfs_command("/dev/md0", RaidLevel.RAID6)
    assert cmd == ["mkfs.btrfs", "-L", "mediaease", "-f", "-d", "raid6", "-m", "raid1c3", "/dev/md0"]


def test_mount_options_per_filesystem():
    ext4 = FilesystemType.EXT4.mount_options()
    assert "data=writeback" in ext4 and "barrier=0" in ext4

    xfs = FilesystemType.XFS.mount_options()
    assert "discard" in xfs.split(",") and "allocsize=4M" in xfs

    btrfs = FilesystemType.BTRFS.mount_options("home")
    assert "compress-force=zstd" in btrfs
    assert "autodefrag" in btrfs
    assert btrfs.endswith(",subvol=home")


def test_btrfs_mount_options_need_subvolume():
    with pytest.raises(ValueError):
        FilesystemType.BTRFS.mount_options()


def test_mount_entry_pass_only_for_home():
    home = MountEntry.for_array("abc", "/home", FilesystemType.EXT4, "defaults")
    data = MountEntry.for_array("abc", "/srv/data", FilesystemType.EXT4, "defaults")
    root = MountEntry.for_array("abc", "/", FilesystemType.EXT4, "defaults")

    assert (home.dump, home.passno) == (0, 2)
    assert (data.dump, data.passno) == (0, 0)
    assert root.passno == 0


def test_mount_entry_normalizes_home_path():
    entry = MountEntry.for_array("abc", "/home/", FilesystemType.EXT4, "defaults")
    assert (entry.mount_point, entry.passno) == ("/home", 2)


def test_mount_entry_line():
    entry = MountEntry.for_array("abc", "/home", FilesystemType.XFS, "defaults,nofail")
    assert str(entry) == "UUID=abc /home xfs defaults,nofail 0 2"


def test_array_spec_device_and_count():
    members = [
        {"name": "sdb", "path": "/dev/sdb", "type": "disk", "size_bytes": 0, "model": "x"},
        {"name": "sdc", "path": "/dev/sdc", "type": "disk", "size_bytes": 0, "model": "x"},
    ]
    spec = ArraySpec(name="md3", level=RaidLevel.RAID0, members=members)
    assert spec.device == "/dev/md3"
    assert spec.count == 2
    assert spec.uuid is None
