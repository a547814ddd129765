"""Shared constants — single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON export,
HTML classes, log lines) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Severity(StrEnum):
    """Finding severity, ordered Low < Medium < High via ``rank``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[str, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
}


class FindingKind(StrEnum):
    """Detector family a finding belongs to (union discriminator)."""

    SECURITY = "security"
    SCALABILITY = "scalability"
    TECHNICAL_DEBT = "technical_debt"
    MODERNIZATION = "modernization"


class ConfidenceLevel(StrEnum):
    """How much weight a reader should put on a heuristic finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EffortEstimate(StrEnum):
    """Rough remediation effort label attached to every finding."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ExportFormat(StrEnum):
    """Supported report export formats."""

    JSON = "json"
    HTML = "html"
    MARKDOWN = "markdown"
    PDF = "pdf"


# ── Report ───────────────────────────────────────────────

REPORT_FORMAT_VERSION = "1.0.0"
REPORT_BASENAME = "architecture-analysis-report"

# ── Architecture Labels ──────────────────────────────────

CONTROLLER_LAYER = "API/Controller layer"
SERVICE_LAYER = "Service layer"
REPOSITORY_LAYER = "Repository layer"
LAYERED_ARCHITECTURE = "Layered Architecture"

# Trailing type-name convention → component label (first match wins)
LAYER_SUFFIXES: tuple[tuple[str, str], ...] = (
    ("Controller", CONTROLLER_LAYER),
    ("Service", SERVICE_LAYER),
    ("Repository", REPOSITORY_LAYER),
)

# ── Thresholds ───────────────────────────────────────────

COMPLEXITY_MEDIUM_THRESHOLD = 10  # > 10 → Medium
COMPLEXITY_HIGH_THRESHOLD = 15  # > 15 → High
DECOMPOSITION_MAX_METHODS = 10
DECOMPOSITION_MAX_PROPERTIES = 15
DECOMPOSITION_MIN_CONCERNS = 2

# ── Misc ─────────────────────────────────────────────────

BINARY_DETECTION_BUFFER = 8192
ERROR_TRUNCATION_CHARS = 200

# ── Report Sections ──────────────────────────────────────

FINDING_SECTION_TITLES: dict[str, str] = {
    FindingKind.SECURITY: "Security Issues",
    FindingKind.SCALABILITY: "Scalability Issues",
    FindingKind.TECHNICAL_DEBT: "Technical Debt",
    FindingKind.MODERNIZATION: "Modernization Recommendations",
}

EXPORT_EXTENSIONS: dict[str, str] = {
    ExportFormat.JSON: "json",
    ExportFormat.HTML: "html",
    ExportFormat.MARKDOWN: "md",
    ExportFormat.PDF: "pdf",
}
