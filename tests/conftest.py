"""
Test Configuration and Fixtures
===============================

This module provides pytest fixtures shared by the globsync test-suite.
"""

import json
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from globsync.core.graph import DependencyEdge, ProjectGraph, ProjectNode

CONFIG_TEMPLATE = """/** @type {{import('tailwindcss').Config}} */
module.exports = {{
  presets: [require('../../tailwind-workspace-preset.js')],
  content: {content},
  theme: {{
    extend: {{}},
  }},
  plugins: [],
}};
"""


def _make_graph(nodes: dict[str, str | None], edges: dict[str, list[str]]) -> ProjectGraph:
    """Build a graph from ``{id: root}`` and ``{source: [targets]}``."""
    return ProjectGraph(
        nodes={name: ProjectNode(id=name, root=root) for name, root in nodes.items()},
        dependencies={
            source: [DependencyEdge(source=source, target=target) for target in targets]
            for source, targets in edges.items()
        },
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to the temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def app_graph() -> ProjectGraph:
    """app -> libA, app -> libB, libA -> libC."""
    return _make_graph(
        {
            "app": "apps/app",
            "libA": "libs/lib-a",
            "libB": "libs/lib-b",
            "libC": "libs/lib-c",
        },
        {"app": ["libA", "libB"], "libA": ["libC"], "libC": []},
    )


@pytest.fixture
def config_text() -> str:
    """A tailwind config with a single managed region."""
    return CONFIG_TEMPLATE.format(content="['./src/**/*.{ts,tsx}']")


@pytest.fixture
def graph_file(temp_dir: Path) -> Path:
    """A project graph JSON file in exporter format."""
    data = {
        "graph": {
            "nodes": {
                "app": {"name": "app", "type": "app", "data": {"root": "apps/app"}},
                "libA": {"name": "libA", "type": "lib", "data": {"root": "libs/lib-a"}},
                "libB": {"name": "libB", "type": "lib", "data": {"root": "libs/lib-b"}},
            },
            "dependencies": {
                "app": [
                    {"source": "app", "target": "libA", "type": "static"},
                    {"source": "app", "target": "npm:react", "type": "static"},
                ],
                "libA": [{"source": "libA", "target": "libB", "type": "static"}],
                "libB": [],
            },
        }
    }
    path = temp_dir / "project-graph.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """A package.json workspace: @acme/web -> @acme/ui -> @acme/tokens, plus react."""
    packages = {
        ".": {"name": "acme", "private": True, "devDependencies": {"typescript": "^5.0.0"}},
        "apps/web": {
            "name": "@acme/web",
            "dependencies": {"react": "^18.0.0", "@acme/ui": "*"},
        },
        "libs/ui": {
            "name": "@acme/ui",
            "main": "src/index.ts",
            "dependencies": {"@acme/tokens": "*"},
            "peerDependencies": {"react": "^18.0.0"},
        },
        "libs/tokens": {"name": "@acme/tokens", "main": "src/index.ts"},
    }
    for directory, manifest in packages.items():
        package_dir = temp_dir / directory
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "package.json").write_text(json.dumps(manifest, indent=2))

    # Installed third-party packages are never workspace projects
    vendored = temp_dir / "node_modules" / "react"
    vendored.mkdir(parents=True)
    (vendored / "package.json").write_text(json.dumps({"name": "react"}))

    (temp_dir / "apps" / "web" / "tailwind.config.js").write_text(CONFIG_TEMPLATE.format(content="[]"))
    return temp_dir


@pytest.fixture
def make_graph():
    """Factory building a graph from ``{id: root}`` and ``{source: [targets]}``."""
    return _make_graph


@pytest.fixture
def render_config():
    """Render the tailwind config template around a given content list."""
    return lambda content: CONFIG_TEMPLATE.format(content=content)
