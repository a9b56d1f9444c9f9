"""
Message translation utilities.

User-facing messages are looked up by dotted key. The built-in catalog is
English; a JSON file with the same keys can override any of them. Values use
positional placeholders ``{arg0}``, ``{arg1}``, ...
"""
import json
import logging
import os
import re
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger('raidmaker')

LOCALE_ENV_VAR = "RAIDMAKER_LOCALE_FILE"

_PLACEHOLDER_RE = re.compile(r"\{arg(\d+)\}")

MESSAGES: Dict[str, str] = {
    # Headers
    "headers.filesystem.init_raid_creation": "initializing RAID creation",
    "headers.filesystem.partition_empty_disks": "partitioning empty disks",
    "headers.filesystem.create_disk": "creating RAID {arg0} array {arg1}",
    "headers.filesystem.format_disk": "formatting {arg0} as {arg1}",
    "headers.filesystem.disk_ready": "{arg0} is ready",
    "headers.filesystem.mount": "mounting {arg0} on {arg1}",
    # Informational
    "messages.filesystem.system_on_disk": "system is installed on: {arg0}",
    "messages.filesystem.disks_to_format": "disks to format: {arg0} (array {arg1}, filesystem {arg2})",
    "messages.filesystem.disk_details": "{arg0}: {arg1} ({arg2})",
    "messages.filesystem.number_of_disks": "number of disks to format: {arg0}",
    "messages.filesystem.future_disk": "the future RAID device will be /dev/{arg0}",
    "messages.filesystem.select_raid_level": "RAID level {arg0} selected",
    "messages.filesystem.wipe_disk": "wiping {arg0}",
    "messages.filesystem.partition_disk": "partitioning {arg0}",
    "messages.filesystem.create_subvolume": "creating btrfs subvolume {arg0}",
    "messages.filesystem.fstab_entry": "adding fstab entry: {arg0}",
    "messages.filesystem.array_uuid": "filesystem UUID of {arg0}: {arg1}",
    # Prompts
    "prompts.common.continue_label": "all data on these disks will be destroyed, continue?",
    "prompts.filesystem.select_raid_level": "select a RAID level among: {arg0}",
    "prompts.common.choices": "please choose an option",
    # Success
    "success.filesystem.partitions_create": "partitions created",
    "success.filesystem.array_create": "RAID array {arg0} created",
    "success.filesystem.disk_partition": "{arg0} formatted as {arg1}",
    "success.filesystem.disk_mount": "{arg0} mounted on {arg1}",
    "success.filesystem.raid_complete": "RAID {arg0} array {arg1} is mounted on {arg2}",
    # Errors
    "errors.filesystem.raid_level_invalid": "invalid RAID level {arg0}, valid levels are: {arg1}",
    "errors.filesystem.filesystem_type_invalid": "invalid filesystem type {arg0}, valid types are: {arg1}",
    "errors.filesystem.mount_point_invalid": "invalid mount point {arg0}, an absolute path is required",
    "errors.filesystem.insufficient_disks_for_raid": "RAID {arg0} needs at least {arg2} disks, only {arg1} available",
    "errors.filesystem.raid_not_possible": "no RAID level is possible with {arg0} disk(s)",
    "errors.filesystem.raid_aborted": "RAID creation aborted",
    "errors.filesystem.disk_listing": "unable to list block devices: {arg0}",
    "errors.filesystem.root_device": "unable to resolve the root device: {arg0}",
    "errors.filesystem.md_members": "unable to list the members of {arg0}: {arg1}",
    "errors.filesystem.disk_formatting": "failed to wipe {arg0}",
    "errors.filesystem.create_partitions": "failed to partition {arg0}",
    "errors.filesystem.disk_creation": "failed to create RAID array {arg0}",
    "errors.filesystem.disk_created_but_not_mounted": "array {arg0} was created but is not active",
    "errors.filesystem.disk_partition": "failed to create {arg1} filesystem on {arg0}",
    "errors.filesystem.create_mount_point": "failed to create mount point {arg0}",
    "errors.filesystem.create_subvolume": "failed to create subvolume {arg0}",
    "errors.filesystem.disk_unmount": "failed to unmount {arg0}",
    "errors.filesystem.disk_mount": "failed to mount {arg0} on {arg1}",
    "errors.filesystem.disk_uuid": "unable to read the filesystem UUID of {arg0}",
    "errors.filesystem.disk_already_mounted": "{arg0} is already registered on {arg1}, fstab left untouched",
    "errors.filesystem.fstab_access": "unable to update {arg0}: {arg1}",
    "errors.common.missing_tools": "missing required tools: {arg0}",
    "errors.common.root_required": "this script must be run as root",
}

_overrides: Dict[str, str] = {}


def load_locale_file(path: Optional[Union[str, Path]] = None) -> None:
    """
    Load translation overrides from a JSON file.

    Args:
        path: JSON file mapping message keys to strings. Defaults to the
            file named by the RAIDMAKER_LOCALE_FILE environment variable.
    """
    global _overrides

    if path is None:
        path = os.environ.get(LOCALE_ENV_VAR)
    if not path:
        _overrides = {}
        return

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load locale file {path}: {e}")
        _overrides = {}
        return

    _overrides = {str(key): str(value) for key, value in data.items()}
    logger.debug(f"Loaded {len(_overrides)} translations from {path}")


def translate(key: str, *args) -> str:
    """
    Translate a message key, substituting positional arguments.

    Unknown keys are returned unchanged.
    """
    translation = _overrides.get(key, MESSAGES.get(key))
    if translation is None:
        return key

    def substitute(match):
        index = int(match.group(1))
        return str(args[index]) if index < len(args) else match.group(0)

    # argument values are inserted verbatim, never re-scanned
    translation = _PLACEHOLDER_RE.sub(substitute, translation)

    return translation[:1].upper() + translation[1:]
