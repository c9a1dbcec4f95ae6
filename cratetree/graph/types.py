from __future__ import annotations

from dataclasses import dataclass, field

GraphStore = dict[str, list[str]]


@dataclass
class BuildContext:
    """State owned by a single build_graph call and dropped when it returns."""

    graph: GraphStore = field(default_factory=dict)
    visited: set[str] = field(default_factory=set)
    latest_versions: dict[str, str] = field(default_factory=dict)
    dependency_responses: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class BuildResult:
    root: str
    version: str | None
    graph: GraphStore
