from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..graph.types import BuildContext


class DependencyProvider(ABC):
    @abstractmethod
    def direct_dependencies(self, name: str, version: str | None, context: BuildContext) -> list[str]:
        """Return the direct dependency names of ``name`` in source order."""
        raise NotImplementedError

    @abstractmethod
    def resolve_version(self, name: str, context: BuildContext) -> str | None:
        """Return the version to expand for ``name``, or None if the source is unversioned."""
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__
