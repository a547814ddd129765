"""JSON export — the report exactly as modelled."""

from __future__ import annotations

import json
from typing import Any

from archgap.analysis.static.schemas import AnalysisReport


def export_json(report: AnalysisReport) -> str:
    """Export the report as pretty-printed JSON."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


def report_to_dict(report: AnalysisReport) -> dict[str, Any]:
    """Convert the report to a JSON-serializable dict.

    Field names and nesting follow :class:`AnalysisReport`; enums become
    their string values and the timestamp an ISO-8601 string.
    """
    return report.model_dump(mode="json")
