"""
globsync - keeps generated glob lists in sync with a workspace dependency graph
"""

from globsync.core import GlobLayout, ProjectGraph, patch, resolve, synthesize
from globsync.sync import SyncDriver, SyncResult, SyncStatus

__version__ = "0.1.0"
__all__ = [
    "GlobLayout",
    "ProjectGraph",
    "SyncDriver",
    "SyncResult",
    "SyncStatus",
    "patch",
    "resolve",
    "synthesize",
]
