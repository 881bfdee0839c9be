"""Relations - Dependency edges and dangling references.

This module defines the facts produced while building the dependency graph:
- DependencyEdge: A resolved edge from a dependent spec to its dependency
- DanglingDependency: A declared dependency that resolved to nothing
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Resolution(Enum):
    """How a declared dependency reference was resolved."""

    EXACT = "exact"  # Reference equals a spec id
    NUMBER = "number"  # Reference is a bare number matching a spec's prefix


@dataclass(frozen=True)
class DependencyEdge:
    """A directed edge: `source_id` depends on `target_id`.

    Attributes:
        source_id: ID of the dependent spec.
        target_id: ID of the spec it depends on.
        reference: The raw reference as authored in depends_on.
        resolution: Whether the reference matched exactly or by number.
    """

    source_id: str
    target_id: str
    reference: str
    resolution: Resolution = Resolution.EXACT

    def __str__(self) -> str:
        return f"{self.source_id} --[depends_on]--> {self.target_id}"


@dataclass(frozen=True)
class DanglingDependency:
    """A depends_on reference to a spec that does not exist.

    Captured during graph build; never fatal.

    Attributes:
        source_id: ID of the spec containing the reference.
        target_ref: The reference that did not resolve.
    """

    source_id: str
    target_ref: str

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.source_id} --[depends_on]--> {self.target_ref} (missing)"
