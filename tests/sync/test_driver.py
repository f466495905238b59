"""Tests for the synchronization driver."""

import pytest

from globsync.config import GlobSyncSettings, SyncTarget
from globsync.core.errors import WriteFailedError
from globsync.core.graph import PackageJsonGraphProvider, StaticGraphProvider
from globsync.core.patcher import read_patterns, render_list
from globsync.sync.driver import SyncDriver, SyncStatus
from globsync.sync.tree import DiskTree, StagedTree

TARGET = "apps/app/tailwind.config.js"


class RecordingTree:
    """In-memory tree that records every write."""

    def __init__(self, files=None, fail_writes=False):
        self.files = dict(files or {})
        self.writes = []
        self.fail_writes = fail_writes

    def read_text(self, path):
        return self.files.get(str(path))

    def write_text(self, path, content):
        if self.fail_writes:
            raise WriteFailedError(f"Could not write {path}: read-only")
        self.writes.append(str(path))
        self.files[str(path)] = content


@pytest.fixture
def driver_factory(app_graph):
    def factory(tree, **settings):
        return SyncDriver(StaticGraphProvider(app_graph), tree, GlobSyncSettings(**settings))
    return factory


def test_run_updates_file(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text})
    result = driver_factory(tree).run("app", TARGET)

    assert result.status == SyncStatus.UPDATED
    assert result.ok
    assert len(result.patterns) == 4
    assert result.summary == f"4 patterns written to {TARGET}"
    assert tree.writes == [TARGET]
    assert read_patterns(tree.files[TARGET]) == result.patterns


def test_run_twice_is_unchanged(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text})
    driver = driver_factory(tree)
    driver.run("app", TARGET)
    result = driver.run("app", TARGET)

    assert result.status == SyncStatus.UNCHANGED
    assert "already in sync" in result.summary
    assert tree.writes == [TARGET]


def test_run_in_sync_performs_no_write(driver_factory, render_config):
    """Scenario C: matching patterns mean no write at all."""
    driver = driver_factory(RecordingTree())
    expected = driver.expected_patterns("app")
    tree = RecordingTree({TARGET: render_config(render_list(expected, indent="  "))})
    driver.tree = tree

    result = driver.run("app", TARGET)
    assert result.status == SyncStatus.UNCHANGED
    assert tree.writes == []


def test_run_missing_region_fails_without_write(driver_factory):
    """Scenario D: the file stays byte-identical."""
    document = "module.exports = { theme: {} };\n"
    tree = RecordingTree({TARGET: document})
    result = driver_factory(tree).run("app", TARGET)

    assert result.status == SyncStatus.FAILED
    assert not result.ok
    assert "content" in result.reason
    assert tree.writes == []
    assert tree.files[TARGET] == document


def test_run_missing_file_fails(driver_factory):
    result = driver_factory(RecordingTree()).run("app", TARGET)
    assert result.status == SyncStatus.FAILED


def test_run_unknown_project_fails(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text})
    result = driver_factory(tree).run("ghost", TARGET)

    assert result.status == SyncStatus.FAILED
    assert "ghost" in result.reason
    assert tree.writes == []


def test_run_write_failure_is_reported(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text}, fail_writes=True)
    result = driver_factory(tree).run("app", TARGET)

    assert result.status == SyncStatus.FAILED
    assert "read-only" in result.reason


def test_run_check_mode(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text})
    result = driver_factory(tree).run("app", TARGET, write=False)

    assert result.status == SyncStatus.OUT_OF_SYNC
    assert result.ok
    assert tree.writes == []


def test_run_respects_namespace(make_graph, config_text):
    graph = make_graph(
        {"@acme/app": "apps/app", "@acme/ui": "libs/ui", "other": "libs/other"},
        {"@acme/app": ["@acme/ui", "other"]},
    )
    tree = RecordingTree({TARGET: config_text})
    driver = SyncDriver(StaticGraphProvider(graph), tree, GlobSyncSettings(namespace="@acme/"))

    result = driver.run("@acme/app", TARGET)
    assert len(result.patterns) == 2
    assert not any("libs/other" in pattern for pattern in result.patterns)


def test_run_all_configured_targets(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text, "libs/lib-a/tailwind.config.js": config_text})
    targets = [
        {"project": "app", "file": TARGET},
        {"project": "libA", "file": "libs/lib-a/tailwind.config.js"},
        {"project": "ghost", "file": TARGET},
    ]
    results = driver_factory(tree, targets=targets).run_all()

    assert [result.status for result in results] == [
        SyncStatus.UPDATED,
        SyncStatus.UPDATED,
        SyncStatus.FAILED,
    ]
    assert len(results[1].patterns) == 2


def test_run_all_explicit_targets(driver_factory, config_text):
    tree = RecordingTree({TARGET: config_text})
    results = driver_factory(tree).run_all([SyncTarget(project="app", file=TARGET)], write=False)
    assert [result.status for result in results] == [SyncStatus.OUT_OF_SYNC]


def test_run_against_package_json_workspace(workspace):
    settings = GlobSyncSettings(workspace_root=workspace)
    tree = StagedTree(DiskTree(workspace))
    driver = SyncDriver(PackageJsonGraphProvider(workspace), tree, settings)

    result = driver.run("@acme/web", "apps/web/tailwind.config.js")
    assert result.status == SyncStatus.UPDATED
    assert result.patterns[1:] == [
        "../../libs/ui/{src,lib,components}/**/*.{ts,tsx,js,jsx,html}",
        "../../libs/tokens/{src,lib,components}/**/*.{ts,tsx,js,jsx,html}",
    ]

    # Nothing reaches the disk until the staged tree is committed
    on_disk = (workspace / "apps" / "web" / "tailwind.config.js").read_text()
    assert "libs/ui" not in on_disk
    tree.commit()
    on_disk = (workspace / "apps" / "web" / "tailwind.config.js").read_text()
    assert read_patterns(on_disk) == result.patterns


def test_run_unrenderable_pattern_fails(make_graph, config_text):
    """A root with brackets cannot be listed; the run fails cleanly without a write."""
    graph = make_graph({"app": "apps/app", "pages": "libs/[slug]"}, {"app": ["pages"]})
    tree = RecordingTree({TARGET: config_text})
    driver = SyncDriver(StaticGraphProvider(graph), tree, GlobSyncSettings())

    result = driver.run("app", TARGET)
    assert result.status == SyncStatus.FAILED
    assert "libs/[slug]" in result.reason
    assert tree.writes == []


def test_run_formatted_region_is_not_rewritten(driver_factory):
    """A region reformatted with double quotes on one line still counts as in sync."""
    expected = driver_factory(RecordingTree()).expected_patterns("app")
    listed = ", ".join(f'"{pattern}"' for pattern in expected)
    tree = RecordingTree({TARGET: f"module.exports = {{ content: [{listed}] }};\n"})

    result = driver_factory(tree).run("app", TARGET)
    assert result.status == SyncStatus.UNCHANGED
    assert tree.writes == []
