"""
Core synchronization logic: graph traversal, pattern synthesis and text patching.
"""

from .errors import (
    AmbiguousRegionError,
    ConfigError,
    GlobSyncError,
    GraphLoadError,
    ProjectNotFoundError,
    RegionNotFoundError,
    RenderError,
    WriteFailedError,
)
from .graph import (
    DependencyEdge,
    GraphProvider,
    JsonGraphProvider,
    PackageJsonGraphProvider,
    ProjectGraph,
    ProjectNode,
    StaticGraphProvider,
)
from .patcher import PatchResult, patch, read_patterns
from .patterns import GlobLayout, synthesize
from .resolver import resolve

__all__ = [
    "AmbiguousRegionError",
    "ConfigError",
    "DependencyEdge",
    "GlobLayout",
    "GlobSyncError",
    "GraphLoadError",
    "GraphProvider",
    "JsonGraphProvider",
    "PackageJsonGraphProvider",
    "PatchResult",
    "ProjectGraph",
    "ProjectNode",
    "ProjectNotFoundError",
    "RegionNotFoundError",
    "RenderError",
    "StaticGraphProvider",
    "WriteFailedError",
    "patch",
    "read_patterns",
    "resolve",
    "synthesize",
]
