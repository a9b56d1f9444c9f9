"""
raidmaker - Software RAID provisioning tool

This package turns the unused disks of a machine into a mounted mdadm
array, with ext4, xfs or btrfs on top and a persistent fstab entry.
"""

__version__ = "0.1.0"
