"""
Base exceptions for raidmaker.

This module defines the hierarchy of exceptions used by raidmaker.
"""

class RaidMakerError(Exception):
    """Base exception for raidmaker errors"""
    pass


class InvalidRaidLevelError(RaidMakerError):
    """Exception raised when the requested RAID level is not supported"""
    pass


class InvalidFilesystemTypeError(RaidMakerError):
    """Exception raised when the requested filesystem type is not supported"""
    pass


class InvalidMountPointError(RaidMakerError):
    """Exception raised when the mount point is not an absolute path"""
    pass


class DiskNotFoundError(RaidMakerError):
    """Exception raised when block devices cannot be enumerated"""
    pass


class InsufficientDisksError(RaidMakerError):
    """Exception raised when too few disks are available for any RAID level"""
    pass


class UserAbortedError(RaidMakerError):
    """Exception raised when the operator declines to continue"""
    pass


class FormattingError(RaidMakerError):
    """Exception raised when wiping or partitioning a disk fails"""
    pass


class BuildError(RaidMakerError):
    """Exception raised when the array or its filesystem cannot be built"""
    pass


class ArrayError(BuildError):
    """Exception raised when there's an error in RAID array assembly"""
    pass


class FilesystemError(BuildError):
    """Exception raised when there's an error in filesystem creation"""
    pass


class MountError(RaidMakerError):
    """Exception raised when there's an error in mounting"""
    pass


class FstabError(RaidMakerError):
    """Exception raised when the fstab cannot be read or written"""
    pass


class DuplicateMountEntryError(RaidMakerError):
    """Raised when an identical fstab entry already exists. Not fatal."""
    pass
