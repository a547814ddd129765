"""Tests for report merging and severity statistics."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from archgap.analysis.static.report import (
    count_by_severity,
    merge_report,
    sort_by_severity,
    total_findings,
)
from archgap.analysis.static.schemas import (
    AnalysisReport,
    AnyFinding,
    ArchitectureSummary,
    ModernizationRecommendation,
    SecurityFinding,
    TechnicalDebtFinding,
)
from archgap.constants import REPORT_FORMAT_VERSION, FindingKind, Severity


def _debt(title: str, severity: Severity) -> TechnicalDebtFinding:
    return TechnicalDebtFinding(
        title=title,
        severity=severity,
        location="A.cs:1",
        debt_category="Test",
    )


def test_sort_is_descending_and_stable() -> None:
    findings = [
        _debt("low-1", Severity.LOW),
        _debt("high-1", Severity.HIGH),
        _debt("medium-1", Severity.MEDIUM),
        _debt("high-2", Severity.HIGH),
        _debt("low-2", Severity.LOW),
    ]

    ordered = sort_by_severity(findings)

    assert [f.title for f in ordered] == [
        "high-1",
        "high-2",
        "medium-1",
        "low-1",
        "low-2",
    ]


def test_merge_does_not_mutate_inputs() -> None:
    debt = [_debt("low", Severity.LOW), _debt("high", Severity.HIGH)]
    summary = ArchitectureSummary()

    report = merge_report(
        target_path="/src",
        summary=summary,
        security=[],
        scalability=[],
        technical_debt=debt,
        modernization=[],
    )

    assert [f.title for f in debt] == ["low", "high"]
    assert [f.title for f in report.technical_debt_issues] == ["high", "low"]
    report.architecture_summary.add_component("X")
    assert summary.main_components == []


def test_merge_fills_report_fields() -> None:
    stamp = datetime(2024, 1, 1, tzinfo=UTC)
    report = merge_report(
        target_path="/src",
        summary=ArchitectureSummary(),
        security=[],
        scalability=[],
        technical_debt=[],
        modernization=[],
        timestamp=stamp,
    )

    assert isinstance(report, AnalysisReport)
    assert report.target_path == "/src"
    assert report.timestamp == stamp
    assert report.version == REPORT_FORMAT_VERSION
    assert total_findings(report) == 0


def test_count_by_severity_includes_zeros() -> None:
    report = merge_report(
        target_path="/src",
        summary=ArchitectureSummary(),
        security=[
            SecurityFinding(
                title="Potential SQL Injection",
                severity=Severity.HIGH,
                location="A.cs:3",
                vulnerability_type="SQL Injection",
            )
        ],
        scalability=[],
        technical_debt=[
            _debt("a", Severity.LOW),
            _debt("b", Severity.LOW),
            _debt("c", Severity.MEDIUM),
        ],
        modernization=[],
    )

    counts = count_by_severity(report)

    assert counts[FindingKind.SECURITY] == {
        Severity.HIGH: 1,
        Severity.MEDIUM: 0,
        Severity.LOW: 0,
    }
    assert counts[FindingKind.TECHNICAL_DEBT][Severity.LOW] == 2
    assert counts[FindingKind.SCALABILITY][Severity.HIGH] == 0
    assert total_findings(report) == 4


def test_report_round_trips_through_json() -> None:
    report = merge_report(
        target_path="/src",
        summary=ArchitectureSummary(technologies=["Target Framework: net8.0"]),
        security=[],
        scalability=[],
        technical_debt=[_debt("a", Severity.MEDIUM)],
        modernization=[],
    )

    restored = AnalysisReport.model_validate_json(report.model_dump_json())

    assert restored == report
    assert restored.technical_debt_issues[0].kind == "technical_debt"


def test_finding_union_dispatches_on_kind() -> None:
    adapter = TypeAdapter(AnyFinding)

    finding = adapter.validate_python(
        {
            "kind": "modernization",
            "title": "Package Modernization",
            "severity": "medium",
            "location": "Shop.csproj",
            "category": "Dependencies",
        }
    )

    assert isinstance(finding, ModernizationRecommendation)
    assert finding.prerequisites == []


def test_finding_union_rejects_unknown_kind() -> None:
    adapter = TypeAdapter(AnyFinding)
    with pytest.raises(ValidationError):
        adapter.validate_python(
            {"kind": "style", "title": "x", "severity": "low", "location": "A.cs:1"}
        )
