"""
Pytest configuration and shared fixtures.
"""
import json
import subprocess

import pytest

from raidmaker.utils.command import CommandRunner, SimulationMode
from raidmaker.utils.prompt import Prompter

TEST_UUID = "5b0f8e9c-1d2e-4f3a-9b8c-7d6e5f4a3b2c"


class FakeRunner(CommandRunner):
    """
    CommandRunner answering from a table of command prefixes.

    Commands are recorded instead of executed. A command matching a failure
    prefix exits with status 1.
    """
    def __init__(self, responses=None, failures=()):
        super().__init__(SimulationMode.DISABLED, colored_output=False)
        self.responses = dict(responses or {})
        self.failures = [tuple(prefix) for prefix in failures]
        self.calls = []
        self.inputs = []
        self.settles = []

    def _matches(self, cmd, prefix):
        return tuple(cmd[:len(prefix)]) == tuple(prefix)

    def run(self, cmd, check=True, **kwargs):
        self.calls.append(list(cmd))
        self.commands_run.append({"command": list(cmd), "simulated": False})
        self.inputs.append(kwargs.get("input"))

        if any(self._matches(cmd, prefix) for prefix in self.failures):
            if check:
                raise subprocess.CalledProcessError(1, cmd, output="", stderr="simulated failure")
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="simulated failure")

        stdout = ""
        best = -1
        for prefix, output in self.responses.items():
            if self._matches(cmd, prefix) and len(prefix) > best:
                stdout, best = output, len(prefix)
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    def settle(self, seconds):
        self.settles.append(seconds)

    def commands(self, name):
        """All recorded calls of one executable."""
        return [call for call in self.calls if call and call[0] == name]


class FakePrompter(Prompter):
    """Prompter with scripted answers that records the questions asked."""
    def __init__(self, confirm=True, level_choice=None):
        super().__init__(colored_output=False)
        self.confirm = confirm
        self.level_choice = level_choice
        self.questions = []
        self.choices_offered = []

    def yes_no(self, message, default=False):
        self.questions.append((message, default))
        return self.confirm

    def choice(self, message, options):
        self.choices_offered.append(list(options))
        if self.level_choice is None:
            return options[0]
        return next(option for option in options if option.value == self.level_choice)


def lsblk_json(devices):
    """Render (name, type) pairs the way `lsblk -J -b -d` does."""
    return json.dumps({"blockdevices": [
        {"name": name, "type": dev_type, "size": 4000787030016, "model": f"MODEL {name}"}
        for name, dev_type in devices
    ]})


def system_responses(spare_disks, system_disk="sda", root_source="/dev/sda2", array="md0",
                     uuid=TEST_UUID, extra_devices=()):
    """Command outputs for a machine booting from system_disk with some spare disks."""
    devices = [(system_disk, "disk")] if not system_disk.startswith("md") else []
    devices += [(name, "disk") for name in spare_disks]
    devices += list(extra_devices)
    return {
        ("findmnt",): f"{root_source}\n",
        ("lsblk", "-n", "-o", "PKNAME"): f"{system_disk}\n",
        ("lsblk", "-J"): lsblk_json(devices),
        ("mdadm", "--detail", "--scan"): f"ARRAY /dev/{array} metadata=1.2 name=host:0 UUID=aa:bb:cc:dd\n",
        ("blkid",): f"{uuid}\n",
    }


@pytest.fixture
def make_runner():
    """Factory building a FakeRunner for a given set of spare disks."""
    def factory(spare_disks=("sdb", "sdc", "sdd", "sde"), failures=(), **kwargs):
        return FakeRunner(system_responses(list(spare_disks), **kwargs), failures=failures)
    return factory


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def fstab(tmp_path):
    """A minimal fstab in a temporary directory."""
    path = tmp_path / "fstab"
    path.write_text("UUID=1111-2222 / ext4 defaults 0 1\n")
    return path
