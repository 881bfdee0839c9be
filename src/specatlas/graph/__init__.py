"""Graph module - Dependency graph and impact analysis.

Exports:
- DependencyGraph: Arena-backed graph over one corpus snapshot
- GraphBuilder / build_graph: Construction from SpecRecords
- DependencyEdge: A resolved depends_on edge
- DanglingDependency: A depends_on reference that did not resolve
- ImpactRadius: Transitive dependents of a spec
- DependencyReport: Rendered dependency view of a spec
"""

from specatlas.graph.builder import DependencyGraph, GraphBuilder, build_graph
from specatlas.graph.relations import DanglingDependency, DependencyEdge, Resolution
from specatlas.graph.traversal import REPORT_MODES, DependencyReport, ImpactRadius

__all__ = [
    "DependencyGraph",
    "GraphBuilder",
    "build_graph",
    "DependencyEdge",
    "DanglingDependency",
    "Resolution",
    "ImpactRadius",
    "DependencyReport",
    "REPORT_MODES",
]
