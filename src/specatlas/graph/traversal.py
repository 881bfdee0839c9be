"""Traversal - Cycle-safe walks over the dependency arena.

All functions here operate on dense integer indices: an adjacency list is a
list where entry ``i`` holds the neighbor indices of node ``i``. Every walk
is iterative and guarded by a visited set, so it terminates on cyclic input
without growing the Python stack.
"""

from __future__ import annotations

import heapq
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from specatlas.models import SpecRecord

Adjacency = list[list[int]]


@dataclass(frozen=True)
class ImpactRadius:
    """Specs affected when a spec changes.

    Attributes:
        spec_id: The spec being changed.
        affected: Transitive dependents, nearest first.
        upstream: Transitive dependencies, nearest first.
    """

    spec_id: str
    affected: tuple[SpecRecord, ...]
    upstream: tuple[SpecRecord, ...] = ()

    @property
    def count(self) -> int:
        """Number of specs that would be affected."""
        return len(self.affected)

    @property
    def affected_ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self.affected)


@dataclass(frozen=True)
class DependencyReport:
    """A dependency view of one spec, ready for rendering.

    Attributes:
        spec: The spec the report is about.
        mode: One of "complete", "upstream", "downstream", "impact".
        depends_on: Specs on the dependency side of the view.
        required_by: Specs on the dependent side of the view.
        has_circular: Whether the spec sits on a dependency cycle.
        depth: Depth limit used for transitive views (None = unbounded).
    """

    spec: SpecRecord
    mode: str
    depends_on: tuple[SpecRecord, ...]
    required_by: tuple[SpecRecord, ...]
    has_circular: bool
    depth: int | None = None


REPORT_MODES = ("complete", "upstream", "downstream", "impact")


def breadth_first(adjacency: Adjacency, start: int, max_levels: int | None = None) -> list[int]:
    """Collect nodes reachable from `start`, nearest first.

    Args:
        adjacency: Neighbor lists by index.
        start: Index to start from. It is never part of the result.
        max_levels: Maximum edge distance to follow (None = unbounded).

    Returns:
        Reachable indices ordered by distance, ties in adjacency order.
    """
    visited = {start}
    order: list[int] = []
    queue: deque[tuple[int, int]] = deque([(start, 0)])
    while queue:
        node, level = queue.popleft()
        if max_levels is not None and level >= max_levels:
            continue
        for neighbor in adjacency[node]:
            if neighbor in visited:
                continue
            visited.add(neighbor)
            order.append(neighbor)
            queue.append((neighbor, level + 1))
    return order


def reaches_itself(adjacency: Adjacency, start: int) -> bool:
    """True if `start` can be reached again by following edges from it."""
    visited: set[int] = set()
    stack = list(adjacency[start])
    while stack:
        node = stack.pop()
        if node == start:
            return True
        if node in visited:
            continue
        visited.add(node)
        stack.extend(adjacency[node])
    return False


def cyclic_components(adjacency: Adjacency) -> list[list[int]]:
    """Find every strongly connected set of nodes that forms a cycle.

    Iterative Tarjan walk. A single node counts only when it has an edge to
    itself.

    Returns:
        Components with members sorted by index, ordered by first member.
    """
    count = len(adjacency)
    index_of = [-1] * count
    lowlink = [0] * count
    on_stack = [False] * count
    stack: list[int] = []
    components: list[list[int]] = []
    counter = 0

    for root in range(count):
        if index_of[root] != -1:
            continue
        # Each frame is (node, position of next neighbor to visit)
        work: list[tuple[int, int]] = [(root, 0)]
        while work:
            node, pos = work.pop()
            if pos == 0:
                index_of[node] = lowlink[node] = counter
                counter += 1
                stack.append(node)
                on_stack[node] = True

            recurse = False
            neighbors = adjacency[node]
            while pos < len(neighbors):
                nxt = neighbors[pos]
                pos += 1
                if index_of[nxt] == -1:
                    work.append((node, pos))
                    work.append((nxt, 0))
                    recurse = True
                    break
                if on_stack[nxt]:
                    lowlink[node] = min(lowlink[node], index_of[nxt])
            if recurse:
                continue

            if lowlink[node] == index_of[node]:
                members: list[int] = []
                while True:
                    member = stack.pop()
                    on_stack[member] = False
                    members.append(member)
                    if member == node:
                        break
                if len(members) > 1 or node in adjacency[node]:
                    components.append(sorted(members))

            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

    components.sort(key=lambda c: c[0])
    return components


def dependency_order(forward: Adjacency, reverse: Adjacency) -> list[int] | None:
    """Order nodes so every dependency precedes its dependents (Kahn).

    Args:
        forward: Dependent -> dependency edges.
        reverse: Dependency -> dependent edges.

    Returns:
        Indices dependencies-first with ties in index order, or None if the
        graph contains a cycle.
    """
    remaining = [len(targets) for targets in forward]
    ready = [i for i, n in enumerate(remaining) if n == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for dependent in reverse[node]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, dependent)
    if len(order) != len(forward):
        return None
    return order
