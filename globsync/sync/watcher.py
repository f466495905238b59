"""
Workspace Watcher
=================

Re-runs synchronization whenever a workspace manifest or the graph file
changes.
"""

import threading
import time
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from globsync.config import GlobSyncSettings
from globsync.sync.driver import SyncDriver, SyncResult

MANIFEST_NAMES = {"package.json", "project.json"}


class ManifestChangeHandler(FileSystemEventHandler):
    """Calls back when a watched manifest changes, with debouncing."""

    def __init__(
        self,
        callback: Callable[[], None],
        watched_files: set[Path] | None = None,
        ignored_files: set[Path] | None = None,
        debounce_time: float = 0.5,
    ):
        """
        Args:
            callback: Function to call when a manifest changes
            watched_files: Extra files to react to besides manifests
            ignored_files: Files whose changes never trigger the callback
            debounce_time: Minimum seconds between two callbacks for the same file
        """
        super().__init__()
        self.callback = callback
        self.watched_files = {path.resolve() for path in watched_files or set()}
        self.ignored_files = {path.resolve() for path in ignored_files or set()}
        self.debounce_time = debounce_time
        self.last_processed: dict[Path, float] = {}

    def _relevant_path(self, event: FileSystemEvent) -> Path | None:
        """The watched path an event touches, or None if it should be ignored."""
        if event.is_directory:
            return None
        paths = [event.src_path, getattr(event, "dest_path", "") or ""]
        for raw in paths:
            if not raw:
                continue
            path = Path(raw).resolve()
            if path in self.ignored_files or "node_modules" in path.parts:
                continue
            if path.name in MANIFEST_NAMES or path in self.watched_files:
                return path
        return None

    def on_any_event(self, event: FileSystemEvent) -> None:
        path = self._relevant_path(event)
        if path is None:
            return

        # debounced per file
        now = time.monotonic()
        last = self.last_processed.get(path)
        if last is not None and now - last < self.debounce_time:
            logger.debug(f"[Watcher] Debounced {event.event_type}: {path}")
            return
        self.last_processed[path] = now
        logger.debug(f"[Watcher] {event.event_type}: {path}")
        self.callback()


class WorkspaceWatcher:
    """Watches a workspace and keeps every configured target in sync."""

    def __init__(
        self,
        driver: SyncDriver,
        settings: GlobSyncSettings,
        on_results: Callable[[list[SyncResult]], None] | None = None,
        debounce_time: float = 0.5,
    ):
        self.driver = driver
        self.settings = settings
        self.on_results = on_results
        self._lock = threading.Lock()
        root = settings.workspace_root
        watched = set()
        if settings.graph_file is not None:
            graph_file = settings.graph_file
            watched.add(graph_file if graph_file.is_absolute() else root / graph_file)
        ignored = {root / target.file for target in settings.targets}
        self.handler = ManifestChangeHandler(self.sync, watched, ignored, debounce_time)
        self.observer = Observer()

    def sync(self) -> list[SyncResult]:
        """Run all targets once; runs never overlap."""
        with self._lock:
            results = self.driver.run_all()
        if self.on_results:
            self.on_results(results)
        return results

    def start(self) -> None:
        self.observer.schedule(self.handler, str(self.settings.workspace_root), recursive=True)
        self.observer.start()
        logger.info(f"Watching {self.settings.workspace_root} for workspace changes")

    def stop(self) -> None:
        self.observer.stop()
        self.observer.join()

    def __enter__(self) -> "WorkspaceWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
