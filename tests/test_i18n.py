"""
Tests for message translation.
"""
import json

import pytest

from raidmaker.utils import i18n
from raidmaker.utils.i18n import load_locale_file, translate


@pytest.fixture(autouse=True)
def reset_overrides(monkeypatch):
    monkeypatch.delenv(i18n.LOCALE_ENV_VAR, raising=False)
    load_locale_file()
    yield
    load_locale_file()


def test_placeholders_are_substituted_and_capitalized():
    assert translate("errors.filesystem.raid_not_possible", 1) == "No RAID level is possible with 1 disk(s)"


def test_unknown_key_is_returned_as_is():
    assert translate("errors.nope", "x") == "errors.nope"


def test_locale_file_overrides(tmp_path):
    path = tmp_path / "fr.json"
    path.write_text(json.dumps({"success.filesystem.disk_mount": "{arg0} monté sur {arg1}"}), encoding="utf-8")

    load_locale_file(path)

    assert translate("success.filesystem.disk_mount", "/dev/md0", "/home") == "/dev/md0 monté sur /home"
    assert translate("errors.filesystem.raid_aborted") == "RAID creation aborted"


def test_locale_file_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"errors.filesystem.raid_aborted": "stopped"}))
    monkeypatch.setenv(i18n.LOCALE_ENV_VAR, str(path))

    load_locale_file()

    assert translate("errors.filesystem.raid_aborted") == "Stopped"


def test_broken_locale_file_is_ignored(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    load_locale_file(path)
    assert translate("errors.filesystem.raid_aborted") == "RAID creation aborted"


def test_argument_containing_a_placeholder_is_inserted_verbatim():
    assert translate("success.filesystem.disk_mount", "/srv/{arg1}", "/home") == "/srv/{arg1} mounted on /home"


def test_missing_argument_keeps_its_placeholder():
    assert translate("success.filesystem.disk_mount", "/dev/md0") == "/dev/md0 mounted on {arg1}"
