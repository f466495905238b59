"""
Synchronization Driver
======================

Runs resolve -> synthesize -> patch for a (project, target file) pair and
writes the result through a file tree only when the document changed.
"""

from enum import Enum
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from globsync.config import GlobSyncSettings, SyncTarget
from globsync.core.errors import GlobSyncError
from globsync.core.graph import GraphProvider, ProjectGraph
from globsync.core.patcher import patch
from globsync.core.patterns import synthesize
from globsync.core.resolver import resolve
from globsync.sync.tree import FileTree
from globsync.utils.logging import timeit


class SyncStatus(str, Enum):
    """Outcome of a single synchronization run."""
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    OUT_OF_SYNC = "out_of_sync"
    FAILED = "failed"


class SyncResult(BaseModel):
    """Result reported back to the caller of ``SyncDriver.run``."""

    status: SyncStatus
    project: str
    target: str
    patterns: list[str] = Field(default_factory=list)
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != SyncStatus.FAILED

    @property
    def summary(self) -> str:
        if self.status == SyncStatus.UPDATED:
            return f"{len(self.patterns)} patterns written to {self.target}"
        if self.status == SyncStatus.UNCHANGED:
            return f"{self.target} is already in sync"
        if self.status == SyncStatus.OUT_OF_SYNC:
            return f"{self.target} is out of sync ({len(self.patterns)} patterns expected)"
        return f"{self.target}: {self.reason}"


class SyncDriver:
    """Keeps the managed glob list of configuration files in sync with the graph."""

    def __init__(self, graph_provider: GraphProvider, tree: FileTree, settings: GlobSyncSettings | None = None):
        self.graph_provider = graph_provider
        self.tree = tree
        self.settings = settings or GlobSyncSettings()

    def expected_patterns(self, project: str, graph: ProjectGraph | None = None) -> list[str]:
        """Patterns ``project``'s configuration should list.

        Raises:
            ProjectNotFoundError: If the project is not in the graph
        """
        graph = graph or self.graph_provider.get_graph()
        reachable = resolve(graph, project, self.settings.namespace)
        return synthesize(project, reachable, graph, self.settings.layout)

    @timeit
    def run(self, project: str, target: str | Path, write: bool = True) -> SyncResult:
        """
        Synchronize one target file.

        Args:
            project: Project whose dependencies drive the glob list
            target: Configuration file holding the managed region
            write: If False only report whether the file is out of sync

        Returns:
            SyncResult: unchanged, updated, out_of_sync or failed
        """
        target = str(target)
        try:
            patterns = self.expected_patterns(project)
            document = self.tree.read_text(target)
            result = patch(document or "", patterns, self.settings.key)

            if not result.changed:
                logger.debug(f"{target} already in sync")
                return SyncResult(status=SyncStatus.UNCHANGED, project=project, target=target, patterns=patterns)

            if not write:
                return SyncResult(status=SyncStatus.OUT_OF_SYNC, project=project, target=target, patterns=patterns)

            self.tree.write_text(target, result.document)
            logger.info(f"Updated {target} with {len(patterns)} patterns")
            return SyncResult(status=SyncStatus.UPDATED, project=project, target=target, patterns=patterns)
        except GlobSyncError as error:
            logger.error(f"Synchronization of {target} failed: {error}")
            return SyncResult(status=SyncStatus.FAILED, project=project, target=target, reason=str(error))

    def run_all(self, targets: list[SyncTarget] | None = None, write: bool = True) -> list[SyncResult]:
        """Run every configured target."""
        targets = self.settings.targets if targets is None else targets
        return [self.run(target.project, target.file, write=write) for target in targets]
