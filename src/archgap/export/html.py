"""HTML export — standalone styled document with severity classes."""

from __future__ import annotations

import html

from archgap.analysis.static.report import count_by_severity, findings_by_kind
from archgap.analysis.static.schemas import (
    AnalysisReport,
    Finding,
    ModernizationRecommendation,
)
from archgap.constants import FINDING_SECTION_TITLES, Severity


def export_html(report: AnalysisReport) -> str:
    """Export the report as a styled HTML document."""
    return _wrap_html(_report_body(report), report.target_path)


def _report_body(report: AnalysisReport) -> str:
    body_parts: list[str] = [
        "<h1>Architecture Analysis Report</h1>",
        (
            '<p class="meta">'
            f"Target: <code>{_esc(report.target_path)}</code> · "
            f"Generated: {_esc(report.timestamp.isoformat())} · "
            f"Version: {_esc(report.version)}"
            "</p>"
        ),
        _summary_table(report),
        _architecture_section(report),
    ]

    for kind, findings in findings_by_kind(report).items():
        body_parts.append(f'<section id="{_esc(kind)}">')
        body_parts.append(f"<h2>{_esc(FINDING_SECTION_TITLES[kind])}</h2>")
        if not findings:
            body_parts.append("<p><em>No findings.</em></p>")
        for finding in findings:
            body_parts.append(_finding_card(finding))
        body_parts.append("</section>")

    return "\n".join(body_parts)


def _esc(value: object) -> str:
    return html.escape(str(value))


def _summary_table(report: AnalysisReport) -> str:
    rows = [
        "<table>",
        "<tr><th>Category</th><th>High</th><th>Medium</th><th>Low</th></tr>",
    ]
    for kind, per_severity in count_by_severity(report).items():
        rows.append(
            f"<tr><td>{_esc(FINDING_SECTION_TITLES[kind])}</td>"
            f"<td>{per_severity[Severity.HIGH]}</td>"
            f"<td>{per_severity[Severity.MEDIUM]}</td>"
            f"<td>{per_severity[Severity.LOW]}</td></tr>"
        )
    rows.append("</table>")
    return "\n".join(rows)


def _architecture_section(report: AnalysisReport) -> str:
    summary = report.architecture_summary
    pattern = summary.current_architecture_pattern or "Not identified"
    parts = [
        '<section id="architecture">',
        "<h2>Architecture Overview</h2>",
        f"<p><strong>Pattern:</strong> {_esc(pattern)}</p>",
    ]
    for heading, items in (
        ("Components", summary.main_components),
        ("Technologies", summary.technologies),
        ("Dependencies", summary.dependencies),
    ):
        parts.append(f"<h3>{heading}</h3>")
        if items:
            parts.append(
                "<ul>" + "".join(f"<li>{_esc(i)}</li>" for i in items) + "</ul>"
            )
        else:
            parts.append("<p><em>None detected.</em></p>")
    parts.append("</section>")
    return "\n".join(parts)


def _finding_card(finding: Finding) -> str:
    severity = finding.severity.value
    parts = [
        f'<div class="finding severity-{severity}">',
        f"<h3>{_esc(finding.title)} "
        f'<span class="badge">{_esc(severity)}</span></h3>',
        f"<p><code>{_esc(finding.location)}</code></p>",
    ]
    if finding.description:
        parts.append(f"<p>{_esc(finding.description)}</p>")
    if finding.recommendation:
        parts.append(
            "<p><strong>Recommendation:</strong> "
            f"{_esc(finding.recommendation)}</p>"
        )
    if isinstance(finding, ModernizationRecommendation) and finding.prerequisites:
        parts.append(
            "<ol>"
            + "".join(f"<li>{_esc(p)}</li>" for p in finding.prerequisites)
            + "</ol>"
        )
    parts.append(
        f'<p class="meta">Effort: {_esc(finding.estimated_effort.value)} · '
        f"Confidence: {_esc(finding.confidence.value)}</p>"
    )
    parts.append("</div>")
    return "\n".join(parts)


def _wrap_html(body: str, target: str, extra_css: str = "") -> str:
    """Wrap body in a full HTML document."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Architecture Analysis — {html.escape(target)}</title>
<style>
body {{
  font-family: system-ui, sans-serif;
  max-width: 900px; margin: 2em auto;
  padding: 0 1em; line-height: 1.6;
}}
code {{ background: #f4f4f4; padding: 0.2em 0.4em; border-radius: 3px; }}
table {{ border-collapse: collapse; width: 100%; margin: 1em 0; }}
th, td {{ border: 1px solid #ddd; padding: 0.5em; text-align: left; }}
th {{ background: #f8f8f8; }}
section {{ margin-bottom: 2em; }}
.meta {{ color: #666; font-size: 0.9em; }}
.finding {{ border-left: 4px solid #ccc; padding: 0.5em 1em; margin: 1em 0; }}
.severity-high {{ border-color: #c0392b; }}
.severity-medium {{ border-color: #e67e22; }}
.severity-low {{ border-color: #2980b9; }}
.badge {{ font-size: 0.7em; text-transform: uppercase; color: #666; }}
{extra_css}
</style>
</head>
<body>
{body}
</body>
</html>"""
