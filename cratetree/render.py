"""ASCII rendering for dependency graphs."""

from __future__ import annotations

from .graph.types import GraphStore

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
BLANK = "    "


def render_tree(graph: GraphStore, root: str, max_depth: int | None = None) -> list[str]:
    """Render ``graph`` from ``root`` as a depth-first ASCII tree.

    A node reached a second time is printed, annotated as a cycle, and not
    expanded. At ``max_depth`` a node with recorded children gets a single
    truncation line instead of its children. The bound is applied here even if
    the graph holds deeper data.
    """
    lines: list[str] = []
    seen: set[str] = set()
    # Frames are (name, prefix, is_last, depth); children pushed in reverse keep pre-order.
    stack: list[tuple[str, str, bool, int]] = [(root, "", True, 0)]
    while stack:
        name, prefix, is_last, depth = stack.pop()
        connector = LAST_BRANCH if is_last else BRANCH
        lines.append(prefix + connector + name)

        if name in seen:
            lines.append(f"{prefix}{BLANK}(cycle: {name})")
            continue
        seen.add(name)

        children = graph.get(name, [])
        if max_depth is not None and depth >= max_depth:
            if children:
                lines.append(f"{prefix}{BLANK}... (depth limit reached)")
            continue

        child_prefix = prefix + (BLANK if is_last else PIPE)
        last = len(children) - 1
        for i in range(last, -1, -1):
            stack.append((children[i], child_prefix, i == last, depth + 1))
    return lines


def render_adjacency(graph: GraphStore) -> list[str]:
    """Render the graph as flat ``name: dep dep`` lines in build order."""
    return [f"{name}: {' '.join(deps)}".rstrip() for name, deps in graph.items()]
