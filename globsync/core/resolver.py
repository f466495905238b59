"""
Dependency Resolver
===================

Computes the projects a root project transitively depends on.
"""

from collections import deque

from loguru import logger

from globsync.core.errors import ProjectNotFoundError
from globsync.core.graph import EXTERNAL_PREFIX, ProjectGraph


def is_workspace_target(graph: ProjectGraph, target: str, namespace: str | None = None) -> bool:
    """Check whether an edge target belongs to the workspace itself.

    Args:
        graph: Workspace graph snapshot
        target: Edge target id
        namespace: Optional package-name prefix every workspace project carries

    Returns:
        bool: True if the edge should be followed
    """
    if target.startswith(EXTERNAL_PREFIX) or not graph.has_project(target):
        return False
    return namespace is None or target.startswith(namespace)


def resolve(graph: ProjectGraph, root: str, namespace: str | None = None) -> list[str]:
    """Breadth-first closure of the dependencies of ``root``.

    The root itself is never part of the result, even when a cycle leads back
    to it. Ids are returned in the order they were first discovered.

    Raises:
        ProjectNotFoundError: If ``root`` is not in the graph
    """
    if not graph.has_project(root):
        raise ProjectNotFoundError(root)

    visited = {root}
    reachable: list[str] = []
    queue = deque(edge.target for edge in graph.edges_from(root))

    while queue:
        project = queue.popleft()
        if project in visited:
            continue
        if not is_workspace_target(graph, project, namespace):
            logger.debug(f"Ignoring dependency outside the workspace: {project}")
            continue
        visited.add(project)
        reachable.append(project)
        queue.extend(edge.target for edge in graph.edges_from(project))

    logger.debug(f"{root} depends on {len(reachable)} workspace projects")
    return reachable
