"""
Pattern Synthesizer
===================

Turns a resolved set of projects into the ordered glob list written to the
target configuration file.
"""

from loguru import logger
from pydantic import BaseModel, ConfigDict

from globsync.core.graph import ProjectGraph


class GlobLayout(BaseModel):
    """Fixed directory and extension sets used to build glob patterns.

    Attributes:
        root_dirs: Source directories of the target project itself
        prefix: Relative path from the target project to the workspace root
        source_dirs: Candidate source directories inside each dependency
        extensions: File extensions to match
    """

    model_config = ConfigDict(frozen=True)

    root_dirs: tuple[str, ...] = ("src", "app", "pages", "components")
    prefix: str = "../../"
    source_dirs: tuple[str, ...] = ("src", "lib", "components")
    extensions: tuple[str, ...] = ("ts", "tsx", "js", "jsx", "html")


def _brace(items: tuple[str, ...]) -> str:
    if len(items) == 1:
        return items[0]
    return "{" + ",".join(items) + "}"


def normalize_root(root: str) -> str:
    """Forward slashes, no leading ``./`` and no trailing ``/``."""
    root = root.strip().replace("\\", "/")
    while root.startswith("./"):
        root = root[2:]
    root = root.rstrip("/")
    return "" if root == "." else root


def root_pattern(layout: GlobLayout) -> str:
    return f"./{_brace(layout.root_dirs)}/**/*.{_brace(layout.extensions)}"


def dependency_pattern(root: str, layout: GlobLayout) -> str:
    base = layout.prefix + normalize_root(root)
    if base and not base.endswith("/"):
        base += "/"
    return f"{base}{_brace(layout.source_dirs)}/**/*.{_brace(layout.extensions)}"


def synthesize(
    root: str,
    reachable: list[str],
    graph: ProjectGraph,
    layout: GlobLayout | None = None,
) -> list[str]:
    """Build the glob list for ``root`` and its resolved dependencies.

    The root pattern comes first, followed by one pattern per dependency in
    discovery order. Dependencies without a root path are skipped and
    duplicate patterns keep their first position.
    """
    layout = layout or GlobLayout()
    patterns = [root_pattern(layout)]
    seen = set(patterns)

    for project in reachable:
        node = graph.nodes.get(project)
        if node is None or not node.has_root:
            logger.debug(f"Skipping {project}: no root path")
            continue
        pattern = dependency_pattern(node.root, layout)
        if pattern in seen:
            continue
        seen.add(pattern)
        patterns.append(pattern)

    logger.debug(f"Synthesized {len(patterns)} patterns for {root}")
    return patterns
