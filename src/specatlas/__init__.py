"""
specatlas - Dependency and search analysis for lightweight spec documents

specatlas reads a corpus of markdown specs with frontmatter metadata and
answers two questions about it: what depends on what (with cycle and impact
analysis), and which specs match a query.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("specatlas")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from specatlas.errors import (
    DuplicateSpecError,
    QuerySyntaxError,
    SpecAtlasError,
    SpecLoadError,
    SpecNotFoundError,
)
from specatlas.graph import DependencyGraph, build_graph
from specatlas.models import SpecPriority, SpecRecord, SpecStatus
from specatlas.search import SearchOptions, SearchResponse, search

__all__ = [
    "__version__",
    "DependencyGraph",
    "DuplicateSpecError",
    "QuerySyntaxError",
    "SearchOptions",
    "SearchResponse",
    "SpecAtlasError",
    "SpecLoadError",
    "SpecNotFoundError",
    "SpecPriority",
    "SpecRecord",
    "SpecStatus",
    "build_graph",
    "search",
]
