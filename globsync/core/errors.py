"""
Error Types
===========

Every failure of a synchronization run is one of these. They are configuration
or I/O problems, so none of them is retried.
"""


class GlobSyncError(Exception):
    """Base exception for all globsync failures."""


class ProjectNotFoundError(GlobSyncError):
    """Raised when a project id is not a node of the workspace graph."""

    def __init__(self, project: str):
        self.project = project
        super().__init__(f"Project '{project}' not found in the workspace graph")


class RegionNotFoundError(GlobSyncError):
    """Raised when the target document has no managed region."""

    def __init__(self, key: str, target: str | None = None):
        self.key = key
        self.target = target
        where = f" in {target}" if target else ""
        super().__init__(f"No '{key}: [...]' region found{where}")


class AmbiguousRegionError(GlobSyncError):
    """Raised when the target document has more than one managed region."""

    def __init__(self, key: str, count: int, target: str | None = None):
        self.key = key
        self.count = count
        self.target = target
        where = f" in {target}" if target else ""
        super().__init__(f"Found {count} '{key}: [...]' regions{where}, expected exactly one")


class WriteFailedError(GlobSyncError):
    """Raised when the file collaborator cannot persist a document."""


class GraphLoadError(GlobSyncError):
    """Raised when a workspace graph cannot be read."""


class ConfigError(GlobSyncError):
    """Raised for invalid globsync configuration."""


class RenderError(GlobSyncError):
    """Raised when a pattern cannot be written into a managed region."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Pattern cannot be written to a managed region: {pattern!r}")
