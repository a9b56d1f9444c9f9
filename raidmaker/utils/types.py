"""
Type definitions for raidmaker.

This module provides TypedDict definitions and other type aliases
for better type checking throughout the codebase.
"""
from typing import List, TypedDict


class BlockDevice(TypedDict):
    """Information about a block device as reported by lsblk"""
    name: str
    path: str
    type: str
    size_bytes: int
    model: str


# Ordered list of disks eligible for the new array
CandidateSet = List[BlockDevice]
