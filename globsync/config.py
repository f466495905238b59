"""
Configuration
=============

Settings are read from ``globsync.json`` at the workspace root, then
overridden by ``GLOBSYNC_*`` environment variables (a ``.env`` file in the
current directory is loaded first).

Example ``globsync.json``::

    {
      "namespace": "@acme/",
      "graphFile": "dist/project-graph.json",
      "layout": {"prefix": "../../", "extensions": ["ts", "tsx", "html"]},
      "targets": [{"project": "@acme/web", "file": "apps/web/tailwind.config.js"}]
    }
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from globsync.core.errors import ConfigError
from globsync.core.graph import GraphProvider, JsonGraphProvider, PackageJsonGraphProvider
from globsync.core.patcher import DEFAULT_KEY
from globsync.core.patterns import GlobLayout

CONFIG_FILE = "globsync.json"


class SyncTarget(BaseModel):
    """A project whose configuration file carries a managed glob list."""

    project: str
    file: str


class GlobSyncSettings(BaseModel):
    """Workspace-wide synchronization settings."""

    model_config = ConfigDict(populate_by_name=True)

    workspace_root: Path = Field(default_factory=Path.cwd, alias="workspaceRoot")
    graph_file: Path | None = Field(default=None, alias="graphFile")
    namespace: str | None = None
    key: str = DEFAULT_KEY
    layout: GlobLayout = Field(default_factory=GlobLayout)
    targets: list[SyncTarget] = Field(default_factory=list)

    def graph_provider(self) -> GraphProvider:
        """Provider for this workspace: the graph file if set, else package.json discovery."""
        if self.graph_file is not None:
            path = self.graph_file
            if not path.is_absolute():
                path = self.workspace_root / path
            return JsonGraphProvider(path)
        return PackageJsonGraphProvider(self.workspace_root)


def load_settings(workspace_root: str | Path | None = None, **overrides) -> GlobSyncSettings:
    """
    Load settings for a workspace.

    Args:
        workspace_root: Workspace directory (defaults to the current directory)
        **overrides: Explicit values (e.g. from CLI options); None values are ignored

    Returns:
        GlobSyncSettings: Merged settings

    Raises:
        ConfigError: If the config file is unreadable or invalid
    """
    load_dotenv()
    root = Path(workspace_root) if workspace_root else Path.cwd()

    data: dict = {}
    config_path = root / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError as error:
            raise ConfigError(f"Invalid JSON in {config_path}: {error}") from error
        except OSError as error:
            raise ConfigError(f"Cannot read {config_path}: {error}") from error
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a JSON object")

    env_overrides = {
        "graph_file": os.getenv("GLOBSYNC_GRAPH_FILE"),
        "namespace": os.getenv("GLOBSYNC_NAMESPACE"),
        "key": os.getenv("GLOBSYNC_KEY"),
    }
    for source in (env_overrides, overrides):
        for name, value in source.items():
            if value is not None:
                data.pop(GlobSyncSettings.model_fields[name].alias or name, None)
                data[name] = value
    data["workspace_root"] = root
    data.pop("workspaceRoot", None)

    try:
        return GlobSyncSettings(**data)
    except ValidationError as error:
        raise ConfigError(f"Invalid globsync configuration: {error}") from error
