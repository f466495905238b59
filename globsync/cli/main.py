"""
Main CLI entry point for globsync.
"""

# Standard library imports
import importlib.metadata
import signal
from pathlib import Path

# Third-party imports
import typer

# Local imports
from globsync.config import GlobSyncSettings, SyncTarget, load_settings
from globsync.core.errors import GlobSyncError
from globsync.core.resolver import resolve
from globsync.sync.driver import SyncDriver, SyncResult, SyncStatus
from globsync.sync.tree import DiskTree
from globsync.sync.watcher import WorkspaceWatcher
from globsync.utils.rich_console import get_console, get_console_logger, print_panel, print_table


console = get_console()
logger = get_console_logger()


app = typer.Typer(
    help="globsync - keep generated glob lists in sync with the workspace dependency graph.",
    no_args_is_help=True,
)

STATUS_STYLES = {
    SyncStatus.UPDATED: "[green]updated[/green]",
    SyncStatus.UNCHANGED: "[cyan]in sync[/cyan]",
    SyncStatus.OUT_OF_SYNC: "[yellow]out of sync[/yellow]",
    SyncStatus.FAILED: "[red]failed[/red]",
}

WorkspaceOption = typer.Option(None, "--workspace", "-w", help="Workspace root (defaults to the current directory)")
GraphFileOption = typer.Option(None, "--graph-file", "-g", help="Project graph JSON file, relative to the workspace")
NamespaceOption = typer.Option(None, "--namespace", "-n", help="Package prefix of workspace projects, e.g. @acme/")


def _settings(workspace: Path | None, graph_file: Path | None, namespace: str | None) -> GlobSyncSettings:
    try:
        return load_settings(workspace, graph_file=graph_file, namespace=namespace)
    except GlobSyncError as error:
        print_table(["Error"], [[str(error)]], title="Configuration Error")
        raise typer.Exit(1)


def _driver(settings: GlobSyncSettings) -> SyncDriver:
    return SyncDriver(settings.graph_provider(), DiskTree(settings.workspace_root), settings)


def _targets(settings: GlobSyncSettings, project: str | None, target_file: str | None) -> list[SyncTarget]:
    if project and target_file:
        return [SyncTarget(project=project, file=target_file)]
    if project or target_file:
        print_table(["Error"], [["PROJECT and TARGET_FILE must be given together"]], title="Usage Error")
        raise typer.Exit(1)
    if not settings.targets:
        print_table(["Error"], [["No targets given and none configured in globsync.json"]], title="Usage Error")
        raise typer.Exit(1)
    return settings.targets


def print_results(results: list[SyncResult], title: str) -> None:
    rows = [
        [result.project, result.target, STATUS_STYLES[result.status], result.reason or len(result.patterns)]
        for result in results
    ]
    print_table(["Project", "File", "Status", "Patterns / Reason"], rows, title=title)


@app.command()
def sync(
    project: str = typer.Argument(None, help="Project whose dependencies drive the glob list"),
    target_file: str = typer.Argument(None, help="Config file with the managed list, relative to the workspace"),
    workspace: Path = WorkspaceOption,
    graph_file: Path = GraphFileOption,
    namespace: str = NamespaceOption,
):
    """Rewrite the managed glob list of each target file if it is out of date."""
    settings = _settings(workspace, graph_file, namespace)
    targets = _targets(settings, project, target_file)
    results = _driver(settings).run_all(targets)
    print_results(results, title="Glob Synchronization")

    for result in results:
        if result.status == SyncStatus.UPDATED:
            logger.success(result.summary)
    if not all(result.ok for result in results):
        raise typer.Exit(1)


@app.command()
def check(
    project: str = typer.Argument(None, help="Project whose dependencies drive the glob list"),
    target_file: str = typer.Argument(None, help="Config file with the managed list, relative to the workspace"),
    workspace: Path = WorkspaceOption,
    graph_file: Path = GraphFileOption,
    namespace: str = NamespaceOption,
):
    """Report whether target files are in sync without writing anything."""
    settings = _settings(workspace, graph_file, namespace)
    targets = _targets(settings, project, target_file)
    results = _driver(settings).run_all(targets, write=False)
    print_results(results, title="Glob Check")

    if any(result.status != SyncStatus.UNCHANGED for result in results):
        typer.echo("\nRun 'globsync sync' to update the files above.")
        raise typer.Exit(1)


@app.command()
def show(
    project: str = typer.Argument(..., help="Project to inspect"),
    workspace: Path = WorkspaceOption,
    graph_file: Path = GraphFileOption,
    namespace: str = NamespaceOption,
):
    """Show the dependencies of a project and the patterns they produce."""
    settings = _settings(workspace, graph_file, namespace)
    driver = _driver(settings)
    try:
        graph = driver.graph_provider.get_graph()
        reachable = resolve(graph, project, settings.namespace)
        patterns = driver.expected_patterns(project, graph)
    except GlobSyncError as error:
        print_table(["Error"], [[str(error)]], title="Show Failed")
        raise typer.Exit(1)

    rows = [
        [index + 1, name, graph.nodes[name].root or "(no root, skipped)"]
        for index, name in enumerate(reachable)
    ]
    print_table(["#", "Project", "Root"], rows, title=f"Dependencies of {project}")
    print_panel("\n".join(patterns), title="Patterns", style="bold green")


@app.command()
def watch(
    workspace: Path = WorkspaceOption,
    graph_file: Path = GraphFileOption,
    namespace: str = NamespaceOption,
):  # pragma: no cover
    """Watch the workspace and re-sync configured targets on manifest changes.

    Press Ctrl+C to stop watching.
    """
    settings = _settings(workspace, graph_file, namespace)
    _targets(settings, None, None)
    watcher = WorkspaceWatcher(
        _driver(settings),
        settings,
        on_results=lambda results: print_results(results, title="Glob Synchronization"),
    )

    try:
        with watcher:
            watcher.sync()
            typer.echo(f"Watching {settings.workspace_root} for workspace changes (Ctrl+C to stop)...")
            signal.pause()
    except KeyboardInterrupt:
        typer.echo("\nStopped watching.")


@app.command()
def version():
    """Show the globsync version."""
    typer.echo(f"globsync version: {importlib.metadata.version('globsync')}")


if __name__ == "__main__":
    app()
