"""Merge per-file findings into the final, severity-ordered report."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import TypeVar

from archgap.analysis.static.schemas import (
    AnalysisMetadata,
    AnalysisReport,
    ArchitectureSummary,
    Finding,
    ModernizationRecommendation,
    ScalabilityFinding,
    SecurityFinding,
    TechnicalDebtFinding,
)
from archgap.constants import FindingKind, Severity

F = TypeVar("F", bound=Finding)


def sort_by_severity(findings: Iterable[F]) -> list[F]:
    """Return a new list ordered High → Low.

    ``sorted`` is stable, so findings of equal severity keep their
    detection order.
    """
    return sorted(findings, key=lambda f: f.severity.rank, reverse=True)


def merge_report(
    *,
    target_path: str,
    summary: ArchitectureSummary,
    security: Sequence[SecurityFinding],
    scalability: Sequence[ScalabilityFinding],
    technical_debt: Sequence[TechnicalDebtFinding],
    modernization: Sequence[ModernizationRecommendation],
    metadata: AnalysisMetadata | None = None,
    timestamp: datetime | None = None,
) -> AnalysisReport:
    """Build one :class:`AnalysisReport`; the input sequences are not mutated."""
    return AnalysisReport(
        target_path=target_path,
        timestamp=timestamp or datetime.now(UTC),
        architecture_summary=summary.model_copy(deep=True),
        security_issues=sort_by_severity(security),
        scalability_issues=sort_by_severity(scalability),
        technical_debt_issues=sort_by_severity(technical_debt),
        modernization_recommendations=sort_by_severity(modernization),
        metadata=metadata or AnalysisMetadata(),
    )


def findings_by_kind(report: AnalysisReport) -> dict[FindingKind, list[Finding]]:
    """The report's four finding lists keyed by family, in report order."""
    return {
        FindingKind.SECURITY: list(report.security_issues),
        FindingKind.SCALABILITY: list(report.scalability_issues),
        FindingKind.TECHNICAL_DEBT: list(report.technical_debt_issues),
        FindingKind.MODERNIZATION: list(report.modernization_recommendations),
    }


def count_by_severity(
    report: AnalysisReport,
) -> dict[FindingKind, dict[Severity, int]]:
    """Per-family finding counts for every severity (zeros included)."""
    counts: dict[FindingKind, dict[Severity, int]] = {}
    for kind, findings in findings_by_kind(report).items():
        per_severity = {severity: 0 for severity in Severity}
        for finding in findings:
            per_severity[finding.severity] += 1
        counts[kind] = per_severity
    return counts


def total_findings(report: AnalysisReport) -> int:
    return sum(len(items) for items in findings_by_kind(report).values())
