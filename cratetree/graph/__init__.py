from .builder import build_graph
from .types import BuildContext, BuildResult, GraphStore

__all__ = [
    "BuildContext",
    "BuildResult",
    "GraphStore",
    "build_graph",
]
