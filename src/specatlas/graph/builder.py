"""Graph Builder - Constructs a DependencyGraph from a spec corpus.

The graph is an arena: records live in a dense list, a side map translates
spec ids to indices, and adjacency is stored as integer index lists in both
directions. A graph is built once per snapshot and never mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from specatlas.errors import DuplicateSpecError, SpecNotFoundError
from specatlas.graph.relations import DanglingDependency, DependencyEdge, Resolution
from specatlas.graph.traversal import (
    REPORT_MODES,
    DependencyReport,
    ImpactRadius,
    breadth_first,
    cyclic_components,
    dependency_order,
    reaches_itself,
)
from specatlas.models import SpecRecord, parse_reference_number

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """Dependency graph over one immutable corpus snapshot.

    Edges point from a dependent spec to the spec it depends on. Upstream
    means following edges forward (what a spec needs); downstream means
    following them in reverse (what needs the spec).
    """

    # Internal storage (prefixed) - populated by GraphBuilder only
    _records: list[SpecRecord] = field(default_factory=list, repr=False)
    _index: dict[str, int] = field(default_factory=dict, repr=False)
    _numbers: dict[int, int] = field(default_factory=dict, repr=False)
    _forward: list[list[int]] = field(default_factory=list, repr=False)
    _reverse: list[list[int]] = field(default_factory=list, repr=False)
    _edges: list[DependencyEdge] = field(default_factory=list, repr=False)
    _dangling: list[DanglingDependency] = field(default_factory=list, repr=False)

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def node_count(self) -> int:
        """Return total number of specs in the graph."""
        return len(self._records)

    def edge_count(self) -> int:
        """Return number of resolved dependency edges."""
        return len(self._edges)

    def all_specs(self) -> Iterator[SpecRecord]:
        """Iterate all specs in corpus order."""
        yield from self._records

    def iter_edges(self) -> Iterator[DependencyEdge]:
        """Iterate resolved edges in declaration order."""
        yield from self._edges

    def has_spec(self, spec_id: str) -> bool:
        return spec_id in self._index

    def get(self, spec_id: str) -> SpecRecord:
        """Return the spec with this exact id.

        Raises:
            SpecNotFoundError: If no spec has this id.
        """
        return self._records[self._position(spec_id)]

    def resolve(self, ref: str) -> SpecRecord:
        """Resolve a user-supplied reference to a spec.

        Tries the exact id first, then a bare number ("7", "007") against
        spec number prefixes.

        Raises:
            SpecNotFoundError: If the reference matches nothing.
        """
        position = self._lookup(ref.strip())
        if position is None:
            raise SpecNotFoundError(ref)
        return self._records[position]

    def dangling_dependencies(self) -> list[DanglingDependency]:
        """Get all depends_on references that did not resolve."""
        return list(self._dangling)

    def has_dangling_dependencies(self) -> bool:
        return len(self._dangling) > 0

    # ─────────────────────────────────────────────────────────────────────────
    # Direct edges
    # ─────────────────────────────────────────────────────────────────────────

    def dependencies_of(self, spec_id: str) -> tuple[SpecRecord, ...]:
        """Specs that `spec_id` directly depends on, in declaration order."""
        return self._records_at(self._forward[self._position(spec_id)])

    def dependents_of(self, spec_id: str) -> tuple[SpecRecord, ...]:
        """Specs that directly depend on `spec_id`, in corpus order."""
        return self._records_at(self._reverse[self._position(spec_id)])

    # ─────────────────────────────────────────────────────────────────────────
    # Transitive traversal
    # ─────────────────────────────────────────────────────────────────────────

    def upstream(self, spec_id: str, max_depth: int | None = None) -> tuple[SpecRecord, ...]:
        """Transitive dependencies of a spec, nearest first.

        Args:
            spec_id: Spec to start from (never part of the result).
            max_depth: Edge distance limit. None is unbounded; 0 and 1 both
                return direct dependencies only.

        Raises:
            SpecNotFoundError: If the spec is absent.
            ValueError: If max_depth is negative.
        """
        start = self._position(spec_id)
        return self._records_at(breadth_first(self._forward, start, _levels(max_depth)))

    def downstream(self, spec_id: str, max_depth: int | None = None) -> tuple[SpecRecord, ...]:
        """Transitive dependents of a spec, nearest first.

        Same depth rules as upstream().
        """
        start = self._position(spec_id)
        return self._records_at(breadth_first(self._reverse, start, _levels(max_depth)))

    def has_circular(self, spec_id: str) -> bool:
        """True if the spec can reach itself by following its dependencies."""
        return reaches_itself(self._forward, self._position(spec_id))

    def impact_radius(self, spec_id: str) -> ImpactRadius:
        """Everything that breaks if this spec changes."""
        start = self._position(spec_id)
        return ImpactRadius(
            spec_id=self._records[start].id,
            affected=self._records_at(breadth_first(self._reverse, start)),
            upstream=self._records_at(breadth_first(self._forward, start)),
        )

    def dependency_report(
        self,
        spec_id: str,
        mode: str = "complete",
        depth: int | None = None,
    ) -> DependencyReport:
        """Build the dependency view rendered by the deps command.

        Args:
            spec_id: Spec the report is about.
            mode: "complete" (direct edges both ways), "upstream",
                "downstream", or "impact" (transitive both ways).
            depth: Depth limit for the transitive modes.

        Raises:
            SpecNotFoundError: If the spec is absent.
            ValueError: If the mode is unknown.
        """
        if mode not in REPORT_MODES:
            raise ValueError(f"Unknown dependency view: {mode}")
        spec = self.get(spec_id)

        depends_on: tuple[SpecRecord, ...] = ()
        required_by: tuple[SpecRecord, ...] = ()
        if mode == "complete":
            depends_on = self.dependencies_of(spec.id)
            required_by = self.dependents_of(spec.id)
        if mode in ("upstream", "impact"):
            depends_on = self.upstream(spec.id, depth)
        if mode in ("downstream", "impact"):
            required_by = self.downstream(spec.id, depth)

        return DependencyReport(
            spec=spec,
            mode=mode,
            depends_on=depends_on,
            required_by=required_by,
            has_circular=self.has_circular(spec.id),
            depth=None if mode == "complete" else depth,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Graph-wide analysis
    # ─────────────────────────────────────────────────────────────────────────

    def circular_groups(self) -> list[tuple[SpecRecord, ...]]:
        """Every set of specs that depend on each other in a cycle.

        A single spec appears as its own group only when it depends on
        itself.
        """
        return [self._records_at(group) for group in cyclic_components(self._forward)]

    def topological_order(self) -> tuple[SpecRecord, ...] | None:
        """All specs ordered dependencies-first, or None if a cycle exists."""
        order = dependency_order(self._forward, self._reverse)
        if order is None:
            return None
        return self._records_at(order)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _position(self, spec_id: str) -> int:
        try:
            return self._index[spec_id]
        except KeyError:
            raise SpecNotFoundError(spec_id) from None

    def _lookup(self, ref: str) -> int | None:
        position = self._index.get(ref)
        if position is not None:
            return position
        number = parse_reference_number(ref)
        if number is None:
            return None
        return self._numbers.get(number)

    def _records_at(self, positions: Iterable[int]) -> tuple[SpecRecord, ...]:
        return tuple(self._records[p] for p in positions)


def _levels(max_depth: int | None) -> int | None:
    if max_depth is None:
        return None
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")
    return max(max_depth, 1)


class GraphBuilder:
    """Builder for constructing a DependencyGraph.

    Usage:
        builder = GraphBuilder()
        builder.add_specs(records)
        graph = builder.build()
    """

    def __init__(self, specs: Iterable[SpecRecord] | None = None) -> None:
        self._specs: list[SpecRecord] = []
        self._seen: set[str] = set()
        if specs is not None:
            self.add_specs(specs)

    def add_spec(self, spec: SpecRecord) -> None:
        """Add one spec to the corpus being built.

        Raises:
            DuplicateSpecError: If a spec with the same id was already added.
        """
        if spec.id in self._seen:
            raise DuplicateSpecError(spec.id)
        self._seen.add(spec.id)
        self._specs.append(spec)

    def add_specs(self, specs: Iterable[SpecRecord]) -> None:
        for spec in specs:
            self.add_spec(spec)

    def build(self) -> DependencyGraph:
        """Resolve all declared dependencies and return the graph.

        Unresolved references are kept as DanglingDependency facts.
        """
        graph = DependencyGraph()
        graph._records = list(self._specs)
        graph._forward = [[] for _ in graph._records]
        graph._reverse = [[] for _ in graph._records]

        for position, spec in enumerate(graph._records):
            graph._index[spec.id] = position
            number = spec.number
            # First spec in corpus order owns a shared number
            if number is not None and number not in graph._numbers:
                graph._numbers[number] = position

        for source, spec in enumerate(graph._records):
            for ref in spec.depends_on:
                self._link(graph, source, spec, ref)

        if graph._dangling:
            logger.debug("Graph built with %d dangling dependencies", len(graph._dangling))
        return graph

    def _link(self, graph: DependencyGraph, source: int, spec: SpecRecord, ref: str) -> None:
        reference = str(ref).strip()
        target = graph._index.get(reference)
        resolution = Resolution.EXACT
        if target is None:
            number = parse_reference_number(reference)
            if number is not None:
                target = graph._numbers.get(number)
                resolution = Resolution.NUMBER

        if target is None:
            logger.debug("Unresolved dependency %r declared by %s", reference, spec.id)
            graph._dangling.append(DanglingDependency(spec.id, reference))
            return

        if target in graph._forward[source]:
            return
        if resolution is Resolution.NUMBER:
            logger.debug(
                "Resolved %r in %s by number to %s",
                reference,
                spec.id,
                graph._records[target].id,
            )
        graph._forward[source].append(target)
        graph._reverse[target].append(source)
        graph._edges.append(
            DependencyEdge(spec.id, graph._records[target].id, reference, resolution)
        )


def build_graph(specs: Iterable[SpecRecord]) -> DependencyGraph:
    """Build a DependencyGraph from a corpus snapshot."""
    return GraphBuilder(specs).build()
