"""PDF export — renders the HTML report through WeasyPrint."""

from __future__ import annotations

import html
from pathlib import Path

from archgap.analysis.static.report import total_findings
from archgap.analysis.static.schemas import AnalysisReport
from archgap.export.html import _report_body, _wrap_html

PDF_STYLESHEET = """
@page {
  size: A4;
  margin: 2cm 1.8cm;
  @bottom-center { content: counter(page) " / " counter(pages); color: #666; }
}
body { max-width: none; margin: 0; padding: 0; font-size: 10.5pt; }
.cover-page { page-break-after: always; padding-top: 30%; text-align: center; }
.cover-page h1 { font-size: 26pt; margin-bottom: 0.2em; }
section { page-break-before: always; }
.finding { page-break-inside: avoid; }
"""


def export_pdf(
    report: AnalysisReport,
    output_path: Path | None = None,
) -> bytes:
    """Render the report as PDF bytes, optionally writing *output_path*.

    Synchronous and CPU-heavy; async callers should offload it with
    ``asyncio.to_thread``.
    """
    from weasyprint import HTML

    pdf_bytes: bytes = HTML(string=_build_pdf_html(report)).write_pdf()
    if output_path is not None:
        output_path.write_bytes(pdf_bytes)
    return pdf_bytes


def _build_pdf_html(report: AnalysisReport) -> str:
    body = "\n".join([_cover_page(report), _report_body(report)])
    return _wrap_html(body, report.target_path, PDF_STYLESHEET)


def _cover_page(report: AnalysisReport) -> str:
    return (
        '<div class="cover-page">'
        "<h1>Architecture Analysis Report</h1>"
        f"<p><code>{html.escape(report.target_path)}</code></p>"
        f'<p class="meta">{report.timestamp:%Y-%m-%d %H:%M %Z} · '
        f"{report.metadata.files_analyzed} files · "
        f"{total_findings(report)} findings</p>"
        "</div>"
    )
