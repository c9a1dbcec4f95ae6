from __future__ import annotations

import logging

from ..errors import RegistryError
from ..sources.base import DependencyProvider
from .types import BuildContext, BuildResult


def build_graph(
    provider: DependencyProvider,
    root: str,
    version: str | None = None,
    max_depth: int | None = None,
) -> BuildResult:
    """Expand the transitive dependencies of ``root`` into a GraphStore.

    Traversal is an iterative depth-first walk over ``(name, version, depth)``
    entries. Each package name is expanded at most once, so diamonds are
    fetched once and cycles terminate. A node at ``max_depth`` keeps its full
    dependency list but its children are not expanded.

    Failing to fetch a dependency list aborts the build. Failing to resolve a
    child's version only drops that child's expansion.
    """
    if max_depth is not None and (isinstance(max_depth, bool) or max_depth < 0):
        raise ValueError("max_depth must be None or a non-negative integer")

    logger = logging.getLogger(__name__)
    context = BuildContext()

    if version is None:
        version = provider.resolve_version(root, context)

    stack: list[tuple[str, str | None, int]] = [(root, version, 0)]
    while stack:
        name, node_version, depth = stack.pop()
        if name in context.visited:
            continue
        context.visited.add(name)

        deps = provider.direct_dependencies(name, node_version, context)
        context.graph[name] = list(deps)

        if max_depth is not None and depth >= max_depth:
            continue

        for dep in deps:
            if dep in context.visited:
                continue
            try:
                dep_version = provider.resolve_version(dep, context)
            except RegistryError as exc:
                logger.warning("Could not resolve version for '%s': %s", dep, exc)
                continue
            stack.append((dep, dep_version, depth + 1))

    logger.debug("Built graph for %s with %s packages", root, len(context.graph))
    return BuildResult(root=root, version=version, graph=context.graph)
