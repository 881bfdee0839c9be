"""
specatlas.validation - Corpus validation rules.

Checks the dependency structure of a corpus snapshot:

- deps.dangling     depends_on reference that matches no spec (warning)
- deps.circular     specs that depend on each other in a cycle
- deps.self         spec that lists itself in depends_on
- hierarchy.parent  parent id that matches no spec (warning)

Cycles are warnings unless strict mode escalates them to errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from specatlas.errors import SpecNotFoundError
from specatlas.graph import DependencyGraph


class Severity(Enum):
    """Severity level for rule violations."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class RuleViolation:
    """
    Represents a rule violation found during validation.

    Attributes:
        rule_name: Name of the violated rule (e.g., "deps.circular")
        spec_id: ID of the spec the violation is reported against
        message: Human-readable description of the violation
        severity: Severity level
    """

    rule_name: str
    spec_id: str
    message: str
    severity: Severity

    def __str__(self) -> str:
        prefix = {
            Severity.ERROR: "❌ ERROR",
            Severity.WARNING: "⚠️ WARNING",
        }.get(self.severity, "?")
        return f"{prefix} [{self.rule_name}] {self.spec_id}\n   {self.message}"


@dataclass
class ValidationReport:
    """All violations found in one corpus."""

    spec_count: int = 0
    violations: list[RuleViolation] = field(default_factory=list)

    @property
    def errors(self) -> list[RuleViolation]:
        return [v for v in self.violations if v.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[RuleViolation]:
        return [v for v in self.violations if v.severity is Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_corpus(graph: DependencyGraph, strict: bool = False) -> ValidationReport:
    """Run every rule over a graph.

    Args:
        graph: Graph built from the corpus snapshot
        strict: Report cycles as errors instead of warnings

    Returns:
        ValidationReport with violations in rule order
    """
    report = ValidationReport(spec_count=graph.node_count())
    report.violations.extend(check_dangling(graph))
    report.violations.extend(check_cycles(graph, strict=strict))
    report.violations.extend(check_parents(graph))
    return report


def check_dangling(graph: DependencyGraph) -> list[RuleViolation]:
    return [
        RuleViolation(
            rule_name="deps.dangling",
            spec_id=dangling.source_id,
            message=f"Depends on unknown spec '{dangling.target_ref}'",
            severity=Severity.WARNING,
        )
        for dangling in graph.dangling_dependencies()
    ]


def check_cycles(graph: DependencyGraph, strict: bool = False) -> list[RuleViolation]:
    """One violation per circular group, reported against its first member."""
    severity = Severity.ERROR if strict else Severity.WARNING
    violations = []
    for group in graph.circular_groups():
        first = group[0]
        if len(group) == 1:
            violations.append(
                RuleViolation(
                    rule_name="deps.self",
                    spec_id=first.id,
                    message="Spec depends on itself",
                    severity=severity,
                )
            )
            continue
        members = " -> ".join(spec.id for spec in group)
        violations.append(
            RuleViolation(
                rule_name="deps.circular",
                spec_id=first.id,
                message=f"Circular dependency between: {members}",
                severity=severity,
            )
        )
    return violations


def check_parents(graph: DependencyGraph) -> list[RuleViolation]:
    """Parents resolve like depends_on: exact id, then bare number."""
    violations = []
    for spec in graph.all_specs():
        if not spec.parent:
            continue
        try:
            graph.resolve(spec.parent)
        except SpecNotFoundError:
            violations.append(
                RuleViolation(
                    rule_name="hierarchy.parent",
                    spec_id=spec.id,
                    message=f"Parent spec '{spec.parent}' not found",
                    severity=Severity.WARNING,
                )
            )
    return violations
