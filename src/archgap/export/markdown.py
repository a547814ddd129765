"""Markdown export — metadata header, summary and one section per family."""

from __future__ import annotations

from archgap.analysis.static.report import count_by_severity, findings_by_kind
from archgap.analysis.static.schemas import (
    AnalysisReport,
    Finding,
    ModernizationRecommendation,
    ScalabilityFinding,
    SecurityFinding,
    TechnicalDebtFinding,
)
from archgap.constants import FINDING_SECTION_TITLES, Severity


def export_markdown(report: AnalysisReport) -> str:
    """Export the report as a single Markdown document."""
    parts: list[str] = []

    # Metadata header
    parts.append("---")
    parts.append(f"target: {report.target_path}")
    parts.append(f"generated: {report.timestamp.isoformat()}")
    parts.append(f"version: {report.version}")
    parts.append(f"files_analyzed: {report.metadata.files_analyzed}")
    if report.metadata.cancelled:
        parts.append("cancelled: true")
    parts.append("---\n")

    parts.append("# Architecture Analysis Report\n")
    parts.append(_summary_section(report))
    parts.append(_architecture_section(report))

    for kind, findings in findings_by_kind(report).items():
        parts.append(f"## {FINDING_SECTION_TITLES[kind]}\n")
        if not findings:
            parts.append("_No findings._\n")
            continue
        for finding in findings:
            parts.append(_finding_block(finding))

    incomplete = _completeness_section(report)
    if incomplete:
        parts.append(incomplete)

    return "\n".join(parts)


def _summary_section(report: AnalysisReport) -> str:
    counts = count_by_severity(report)
    lines = [
        "## Summary\n",
        "| Category | High | Medium | Low |",
        "| --- | --- | --- | --- |",
    ]
    for kind, per_severity in counts.items():
        lines.append(
            f"| {FINDING_SECTION_TITLES[kind]} "
            f"| {per_severity[Severity.HIGH]} "
            f"| {per_severity[Severity.MEDIUM]} "
            f"| {per_severity[Severity.LOW]} |"
        )
    lines.append("")
    return "\n".join(lines)


def _architecture_section(report: AnalysisReport) -> str:
    summary = report.architecture_summary
    lines = ["## Architecture Overview\n"]
    pattern = summary.current_architecture_pattern or "Not identified"
    lines.append(f"**Pattern:** {pattern}\n")
    for heading, items in (
        ("Components", summary.main_components),
        ("Technologies", summary.technologies),
        ("Dependencies", summary.dependencies),
    ):
        lines.append(f"### {heading}\n")
        if items:
            lines.extend(f"- {item}" for item in items)
        else:
            lines.append("_None detected._")
        lines.append("")
    return "\n".join(lines)


def _finding_block(finding: Finding) -> str:
    lines = [
        f"### {finding.title}\n",
        f"- **Severity:** {finding.severity.value}",
        f"- **Location:** `{finding.location}`",
        f"- **Effort:** {finding.estimated_effort.value}",
        f"- **Confidence:** {finding.confidence.value}",
    ]
    lines.extend(_detail_lines(finding))
    if finding.description:
        lines.append(f"\n{finding.description}")
    if finding.recommendation:
        lines.append(f"\n**Recommendation:** {finding.recommendation}")
    if isinstance(finding, ModernizationRecommendation) and finding.prerequisites:
        lines.append("\n**Prerequisites:**\n")
        lines.extend(
            f"{i}. {step}" for i, step in enumerate(finding.prerequisites, 1)
        )
    lines.append("")
    return "\n".join(lines)


def _detail_lines(finding: Finding) -> list[str]:
    """Family-specific fields as bullet lines."""
    if isinstance(finding, SecurityFinding):
        return [
            f"- **Vulnerability:** {finding.vulnerability_type}",
            f"- **Impact:** {finding.impact}",
        ]
    if isinstance(finding, ScalabilityFinding):
        return [
            f"- **Bottleneck:** {finding.bottleneck_type}",
            f"- **Performance impact:** {finding.performance_impact}",
        ]
    if isinstance(finding, TechnicalDebtFinding):
        lines = [
            f"- **Category:** {finding.debt_category}",
            f"- **Maintenance impact:** {finding.maintenance_impact}",
        ]
        if finding.complexity is not None:
            lines.append(f"- **Complexity:** {finding.complexity}")
        return lines
    if isinstance(finding, ModernizationRecommendation):
        return [
            f"- **Category:** {finding.category}",
            f"- **Benefit:** {finding.benefit_description}",
        ]
    return []


def _completeness_section(report: AnalysisReport) -> str:
    meta = report.metadata
    lines: list[str] = []
    if meta.partial_files:
        lines.append("### Partially parsed files\n")
        lines.extend(f"- `{path}`" for path in meta.partial_files)
        lines.append("")
    if meta.failed_files:
        lines.append("### Files not analyzed\n")
        lines.extend(f"- `{f.path}`: {f.reason}" for f in meta.failed_files)
        lines.append("")
    if meta.detector_faults:
        lines.append("### Detector faults\n")
        lines.extend(
            f"- `{f.path}` ({f.detector}): {f.error}"
            for f in meta.detector_faults
        )
        lines.append("")
    if meta.skipped_descriptors:
        lines.append("### Skipped project files\n")
        lines.extend(
            f"- `{d.path}`: {d.reason}" for d in meta.skipped_descriptors
        )
        lines.append("")
    if not lines:
        return ""
    return "\n".join(["## Analysis Completeness\n", *lines])
