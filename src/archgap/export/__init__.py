"""Export module — render an AnalysisReport in several formats."""

from collections.abc import Callable

from archgap.analysis.static.schemas import AnalysisReport
from archgap.constants import ExportFormat
from archgap.export.html import export_html
from archgap.export.json_export import export_json
from archgap.export.markdown import export_markdown
from archgap.export.pdf import export_pdf

__all__ = [
    "export_html",
    "export_json",
    "export_markdown",
    "export_pdf",
    "export_report",
]

_REPORT_EXPORTERS: dict[str, Callable[[AnalysisReport], str | bytes]] = {
    ExportFormat.JSON: export_json,
    ExportFormat.HTML: export_html,
    ExportFormat.MARKDOWN: export_markdown,
    ExportFormat.PDF: export_pdf,
}


def export_report(report: AnalysisReport, fmt: str = "json") -> str | bytes:
    """Dispatch export for a whole report by format string.

    Returns ``str`` for text formats, ``bytes`` for binary (pdf).
    """
    exporter = _REPORT_EXPORTERS.get(fmt)
    if exporter is None:
        valid = ", ".join(_REPORT_EXPORTERS)
        msg = f"Unsupported format: {fmt}. Use: {valid}"
        raise ValueError(msg)
    return exporter(report)
