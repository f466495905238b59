"""
Workspace Graph
===============

This module defines the project dependency graph that synchronization reads,
along with the providers that produce a fresh snapshot of it per run.
"""

import json
import os
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from globsync.core.errors import GraphLoadError, ProjectNotFoundError

EXTERNAL_PREFIX = "npm:"
DEPENDENCY_FIELDS = ("dependencies", "devDependencies", "peerDependencies")
IGNORED_DIRS = {"node_modules", "dist", "build", "coverage", "tmp"}


class ProjectNode(BaseModel):
    """A project in the workspace.

    Attributes:
        id: Unique project identifier (usually the package name)
        root: Project directory relative to the workspace root
        kind: Opaque project type metadata (app, lib, ...)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    root: str | None = None
    kind: str | None = None

    @property
    def has_root(self) -> bool:
        return bool(self.root and self.root.strip())


class DependencyEdge(BaseModel):
    """A directed dependency: ``source`` depends on ``target``."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    kind: str = "static"


class ProjectGraph(BaseModel):
    """Read-only snapshot of the workspace dependency graph."""

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, ProjectNode] = Field(default_factory=dict)
    dependencies: dict[str, list[DependencyEdge]] = Field(default_factory=dict)

    def has_project(self, project: str) -> bool:
        return project in self.nodes

    def get_node(self, project: str) -> ProjectNode:
        """Return the node for ``project``.

        Raises:
            ProjectNotFoundError: If the project is not in the graph
        """
        try:
            return self.nodes[project]
        except KeyError:
            raise ProjectNotFoundError(project) from None

    def edges_from(self, project: str) -> list[DependencyEdge]:
        """Return the outgoing edges of ``project`` in the order they were loaded."""
        return self.dependencies.get(project, [])


class GraphProvider(Protocol):
    """Anything that can hand out a graph snapshot."""

    def get_graph(self) -> ProjectGraph: ...


class StaticGraphProvider:
    """Provider that always returns the same snapshot."""

    def __init__(self, graph: ProjectGraph):
        self.graph = graph

    def get_graph(self) -> ProjectGraph:
        return self.graph


class JsonGraphProvider:
    """Reads a project graph JSON file as written by monorepo graph exporters.

    Both the wrapped form ``{"graph": {"nodes": ..., "dependencies": ...}}``
    and the bare ``{"nodes": ..., "dependencies": ...}`` form are accepted.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get_graph(self) -> ProjectGraph:
        try:
            raw = json.loads(self.path.read_text())
        except FileNotFoundError:
            raise GraphLoadError(f"Graph file not found: {self.path}") from None
        except OSError as error:
            raise GraphLoadError(f"Cannot read graph file {self.path}: {error}") from error
        except json.JSONDecodeError as error:
            raise GraphLoadError(f"Invalid JSON in graph file {self.path}: {error}") from error

        if isinstance(raw, dict) and isinstance(raw.get("graph"), dict):
            raw = raw["graph"]
        if not isinstance(raw, dict) or not isinstance(raw.get("nodes"), dict):
            raise GraphLoadError(f"Graph file {self.path} has no 'nodes' mapping")

        try:
            graph = graph_from_dict(raw)
        except (ValidationError, KeyError, TypeError, AttributeError) as error:
            raise GraphLoadError(f"Malformed graph file {self.path}: {error}") from error
        logger.debug(f"Loaded {len(graph.nodes)} projects from {self.path}")
        return graph


def graph_from_dict(raw: dict[str, Any]) -> ProjectGraph:
    """Build a graph from the exporter's ``nodes``/``dependencies`` mappings."""
    nodes = {}
    for name, node in raw.get("nodes", {}).items():
        data = node.get("data") or {}
        nodes[name] = ProjectNode(
            id=node.get("name", name),
            root=data.get("root", node.get("root")),
            kind=node.get("type"),
        )

    dependencies = {}
    for source, edges in (raw.get("dependencies") or {}).items():
        dependencies[source] = [
            DependencyEdge(
                source=edge.get("source", source),
                target=edge["target"],
                kind=edge.get("type", "static"),
            )
            for edge in edges
        ]
    return ProjectGraph(nodes=nodes, dependencies=dependencies)


class PackageJsonGraphProvider:
    """Builds the graph by scanning the workspace for ``package.json`` manifests.

    Every named manifest is a project. Dependencies on names that are not
    workspace packages are recorded with the external ``npm:`` prefix.
    """

    def __init__(self, workspace_root: str | Path):
        self.workspace_root = Path(workspace_root)

    def _manifests(self) -> list[Path]:
        found = []
        for current, dirs, files in os.walk(self.workspace_root):
            dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRS and not d.startswith("."))
            if "package.json" in files:
                found.append(Path(current) / "package.json")
        return found

    def get_graph(self) -> ProjectGraph:
        manifests: dict[str, tuple[Path, dict[str, Any]]] = {}
        for manifest in self._manifests():
            try:
                data = json.loads(manifest.read_text())
            except json.JSONDecodeError as error:
                raise GraphLoadError(f"Invalid JSON in {manifest}: {error}") from error
            except OSError as error:
                raise GraphLoadError(f"Cannot read {manifest}: {error}") from error
            name = data.get("name") if isinstance(data, dict) else None
            if not name:
                logger.debug(f"Skipping unnamed manifest {manifest}")
                continue
            manifests[name] = (manifest, data)

        nodes = {}
        dependencies = {}
        for name, (manifest, data) in manifests.items():
            root = manifest.parent.relative_to(self.workspace_root).as_posix()
            kind = "lib" if ("main" in data or "exports" in data) else "app"
            nodes[name] = ProjectNode(id=name, root=root, kind=kind)

            edges = []
            for field in DEPENDENCY_FIELDS:
                for dependency in data.get(field) or {}:
                    target = dependency if dependency in manifests else f"{EXTERNAL_PREFIX}{dependency}"
                    edges.append(DependencyEdge(source=name, target=target))
            dependencies[name] = edges

        logger.debug(f"Discovered {len(nodes)} packages under {self.workspace_root}")
        return ProjectGraph(nodes=nodes, dependencies=dependencies)
