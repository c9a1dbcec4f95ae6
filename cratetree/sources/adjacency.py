from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import FormatError
from .base import DependencyProvider

if TYPE_CHECKING:
    from ..graph.types import BuildContext


def load_adjacency_list(path: str | Path) -> dict[str, list[str]]:
    path = Path(path).expanduser()
    return parse_adjacency_list(path.read_text(encoding="utf-8"))


def parse_adjacency_list(text: str) -> dict[str, list[str]]:
    """Parse ``name: dep dep ...`` records, one per line.

    Blank lines are skipped. A non-blank line without a colon raises
    FormatError carrying its 1-based line number.
    """
    logger = logging.getLogger(__name__)
    adjacency: dict[str, list[str]] = {}
    for line_number, line in enumerate(text.splitlines(), start=1):
        cleaned = line.strip()
        if not cleaned:
            continue
        if ":" not in cleaned:
            raise FormatError(line_number, cleaned)
        name, deps = cleaned.split(":", 1)
        name = name.strip()
        if name in adjacency:
            logger.debug("Line %s redefines '%s'", line_number, name)
        adjacency[name] = deps.split()
    return adjacency


class AdjacencyProvider(DependencyProvider):
    def __init__(self, adjacency: dict[str, list[str]], source: str = "adjacency list") -> None:
        self._adjacency = adjacency
        self._source = source

    @classmethod
    def from_file(cls, path: str | Path) -> AdjacencyProvider:
        return cls(load_adjacency_list(path), source=str(path))

    def direct_dependencies(self, name: str, version: str | None, context: BuildContext) -> list[str]:
        return list(self._adjacency.get(name, []))

    def resolve_version(self, name: str, context: BuildContext) -> str | None:
        return None

    def describe(self) -> str:
        return self._source
