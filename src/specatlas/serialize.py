"""Serialization - Export analysis results to JSON-compatible dicts.

Key names are camelCase to match the documented output shapes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from specatlas.graph import DanglingDependency, DependencyReport, ImpactRadius
    from specatlas.models import SpecRecord
    from specatlas.search import SearchResponse, SearchResult
    from specatlas.validation import RuleViolation, ValidationReport


def serialize_spec_summary(spec: SpecRecord) -> dict[str, Any]:
    """Serialize the id/title/status triple used in every list."""
    return {
        "id": spec.id,
        "title": spec.title,
        "status": spec.status.value,
    }


def serialize_spec(spec: SpecRecord) -> dict[str, Any]:
    """Serialize a spec's metadata (no content)."""
    result = serialize_spec_summary(spec)
    result["number"] = spec.number
    result["priority"] = spec.priority.value if spec.priority else None
    result["tags"] = list(spec.tags)
    result["created"] = spec.created.isoformat() if spec.created else None
    result["dependsOn"] = list(spec.depends_on)
    if spec.parent:
        result["parent"] = spec.parent
    return result


def serialize_dependency_report(report: DependencyReport) -> dict[str, Any]:
    """Serialize a dependency view.

    Args:
        report: The report to serialize.

    Returns:
        Dict with spec, title, mode, dependsOn, requiredBy and hasCircular.
    """
    result: dict[str, Any] = {
        "spec": report.spec.id,
        "title": report.spec.title,
        "mode": report.mode,
        "dependsOn": [serialize_spec_summary(s) for s in report.depends_on],
        "requiredBy": [serialize_spec_summary(s) for s in report.required_by],
        "hasCircular": report.has_circular,
    }
    if report.depth is not None:
        result["depth"] = report.depth
    return result


def serialize_impact(impact: ImpactRadius) -> dict[str, Any]:
    return {
        "spec": impact.spec_id,
        "count": impact.count,
        "affected": [serialize_spec_summary(s) for s in impact.affected],
        "upstream": [serialize_spec_summary(s) for s in impact.upstream],
    }


def serialize_search_result(result: SearchResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "title": result.title,
        "status": result.status.value,
        "score": result.score,
    }


def serialize_search_response(response: SearchResponse) -> dict[str, Any]:
    """Serialize ranked search output.

    ``total`` is the match count before the limit; ``returned`` is the
    length of ``results``.
    """
    return {
        "query": response.query,
        "total": response.total,
        "returned": response.returned,
        "results": [serialize_search_result(r) for r in response.results],
    }


def serialize_dangling(dangling: DanglingDependency) -> dict[str, Any]:
    return {"specId": dangling.source_id, "reference": dangling.target_ref}


def serialize_violation(violation: RuleViolation) -> dict[str, Any]:
    return {
        "rule": violation.rule_name,
        "severity": violation.severity.value,
        "specId": violation.spec_id,
        "message": violation.message,
    }


def serialize_validation_report(report: ValidationReport) -> dict[str, Any]:
    """Serialize a validation report with error and warning counts."""
    return {
        "valid": report.valid,
        "errors": len(report.errors),
        "warnings": len(report.warnings),
        "issues": [serialize_violation(v) for v in report.violations],
    }
