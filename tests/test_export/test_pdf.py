"""Tests for PDF export via WeasyPrint."""

from __future__ import annotations

import inspect
from datetime import UTC, datetime
from pathlib import Path

import pytest

from archgap.analysis.static.report import merge_report
from archgap.analysis.static.schemas import (
    AnalysisMetadata,
    AnalysisReport,
    ArchitectureSummary,
    SecurityFinding,
)
from archgap.constants import Severity
from archgap.export import export_report
from archgap.export.pdf import PDF_STYLESHEET, _build_pdf_html, export_pdf

try:
    from weasyprint import HTML as _HTML  # noqa: F401

    _WEASYPRINT_AVAILABLE = True
except (ImportError, OSError):
    _WEASYPRINT_AVAILABLE = False

weasyprint_required = pytest.mark.skipif(
    not _WEASYPRINT_AVAILABLE,
    reason="WeasyPrint system deps not available",
)


def _make_report(*, findings: int = 1) -> AnalysisReport:
    return merge_report(
        target_path="/src/<shop>",
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        summary=ArchitectureSummary(main_components=["Service layer"]),
        security=[
            SecurityFinding(
                title="Missing Authentication",
                description=f"Controller 'C{i}' lacks authentication attributes",
                severity=Severity.HIGH,
                location=f"Controllers/C{i}.cs:1",
                vulnerability_type="Authentication",
            )
            for i in range(findings)
        ],
        scalability=[],
        technical_debt=[],
        modernization=[],
        metadata=AnalysisMetadata(files_analyzed=3),
    )


class TestPdfHtml:
    def test_cover_page(self) -> None:
        result = _build_pdf_html(_make_report())
        assert 'class="cover-page"' in result
        assert "2024-05-01 12:00 UTC" in result
        assert "3 files · 1 findings" in result

    def test_target_is_escaped(self) -> None:
        result = _build_pdf_html(_make_report())
        assert "/src/&lt;shop&gt;" in result
        assert "/src/<shop>" not in result

    def test_includes_report_body_and_print_styles(self) -> None:
        result = _build_pdf_html(_make_report())
        assert 'class="finding severity-high"' in result
        assert "@page" in result
        assert "@page" in PDF_STYLESHEET

    def test_export_pdf_function_is_sync(self) -> None:
        assert not inspect.iscoroutinefunction(export_pdf)


@weasyprint_required
class TestPdfExport:
    def test_returns_pdf_bytes(self) -> None:
        result = export_pdf(_make_report())
        assert isinstance(result, bytes)
        assert result[:5] == b"%PDF-"

    def test_writes_to_file(self, tmp_path: Path) -> None:
        out = tmp_path / "report.pdf"
        export_pdf(_make_report(), output_path=out)
        assert out.read_bytes()[:5] == b"%PDF-"

    def test_more_findings_give_larger_document(self) -> None:
        single = export_pdf(_make_report(findings=1))
        many = export_pdf(_make_report(findings=30))
        assert len(many) > len(single)

    def test_dispatcher_returns_bytes(self) -> None:
        result = export_report(_make_report(), "pdf")
        assert isinstance(result, bytes)
        assert result[:5] == b"%PDF-"
