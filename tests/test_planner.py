"""
Tests for RAID level validation and planning.
"""
import pytest

from raidmaker.core.exceptions import (
    InsufficientDisksError, InvalidFilesystemTypeError, InvalidMountPointError, InvalidRaidLevelError
)
from raidmaker.core.models import FilesystemType, ProvisioningContext, RaidLevel
from raidmaker.core.planner import (
    feasible_levels, parse_filesystem_type, parse_mount_point, parse_raid_level, plan_array, select_level
)

from conftest import FakePrompter


def _disks(count):
    return [
        {"name": f"sd{chr(ord('b') + i)}", "path": f"/dev/sd{chr(ord('b') + i)}",
         "type": "disk", "size_bytes": 0, "model": "x"}
        for i in range(count)
    ]


@pytest.mark.parametrize("value,expected", [
    ("0", RaidLevel.RAID0), ("5", RaidLevel.RAID5), ("6", RaidLevel.RAID6), ("10", RaidLevel.RAID10), (10, RaidLevel.RAID10),
])
def test_parse_raid_level(value, expected):
    assert parse_raid_level(value) is expected


@pytest.mark.parametrize("value", ["1", "4", "raid5", "", "-1"])
def test_parse_raid_level_rejects_unknown(value):
    with pytest.raises(InvalidRaidLevelError):
        parse_raid_level(value)


def test_parse_filesystem_type():
    assert parse_filesystem_type("btrfs") is FilesystemType.BTRFS
    with pytest.raises(InvalidFilesystemTypeError):
        parse_filesystem_type("zfs")


@pytest.mark.parametrize("value,expected", [
    ("/home", "/home"), ("/home/", "/home"), ("//home", "/home"), ("/srv/./media/", "/srv/media"), ("/", "/"),
])
def test_parse_mount_point_normalizes(value, expected):
    assert parse_mount_point(value) == expected


@pytest.mark.parametrize("value", ["home", "srv/media", "", "./home"])
def test_parse_mount_point_rejects_relative_paths(value):
    with pytest.raises(InvalidMountPointError):
        parse_mount_point(value)


@pytest.mark.parametrize("count", range(0, 13))
def test_feasible_levels_rules(count):
    levels = feasible_levels(count)
    assert (RaidLevel.RAID10 in levels) == (count >= 4 and count % 2 == 0)
    assert (RaidLevel.RAID6 in levels) == (count >= 4)
    assert (RaidLevel.RAID5 in levels) == (count >= 3)
    assert (RaidLevel.RAID0 in levels) == (count >= 2)


def test_feasible_levels_order():
    assert feasible_levels(4) == [RaidLevel.RAID10, RaidLevel.RAID6, RaidLevel.RAID5, RaidLevel.RAID0]
    assert feasible_levels(5) == [RaidLevel.RAID6, RaidLevel.RAID5, RaidLevel.RAID0]


def test_requested_level_kept_without_prompt():
    prompter = FakePrompter()
    assert select_level(RaidLevel.RAID10, 4, prompter) is RaidLevel.RAID10
    assert prompter.choices_offered == []


def test_extra_disks_keep_requested_level():
    prompter = FakePrompter()
    assert select_level(RaidLevel.RAID5, 7, prompter) is RaidLevel.RAID5
    assert prompter.choices_offered == []


def test_two_disks_for_raid6_offers_only_raid0():
    prompter = FakePrompter(level_choice=0)
    assert select_level(RaidLevel.RAID6, 2, prompter) is RaidLevel.RAID0
    assert prompter.choices_offered == [[RaidLevel.RAID0]]


def test_operator_choice_becomes_final_level():
    prompter = FakePrompter(level_choice=5)
    ctx = ProvisioningContext(level=RaidLevel.RAID10, fs_type=FilesystemType.EXT4, candidates=_disks(3))

    spec = plan_array(ctx, prompter)

    assert prompter.choices_offered == [[RaidLevel.RAID5, RaidLevel.RAID0]]
    assert spec.level is RaidLevel.RAID5
    assert ctx.level is RaidLevel.RAID5
    assert ctx.array is spec


@pytest.mark.parametrize("count", [0, 1])
def test_too_few_disks_for_any_level(count):
    prompter = FakePrompter()
    with pytest.raises(InsufficientDisksError):
        select_level(RaidLevel.RAID0, count, prompter)
    assert prompter.choices_offered == []


def test_plan_uses_every_candidate_in_order():
    ctx = ProvisioningContext(level=RaidLevel.RAID10, fs_type=FilesystemType.EXT4,
                              array_name="md7", candidates=_disks(4))
    spec = plan_array(ctx, FakePrompter())

    assert spec.name == "md7"
    assert [m["name"] for m in spec.members] == ["sdb", "sdc", "sdd", "sde"]
    assert spec.count == 4
