"""
Synchronization of managed glob lists with the workspace graph.
"""

from .driver import SyncDriver, SyncResult, SyncStatus
from .tree import DiskTree, FileTree, StagedTree

__all__ = ["DiskTree", "FileTree", "StagedTree", "SyncDriver", "SyncResult", "SyncStatus"]
