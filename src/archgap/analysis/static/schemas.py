"""Pydantic models for findings, the architecture summary and the report."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from archgap.constants import (
    REPORT_FORMAT_VERSION,
    ConfidenceLevel,
    EffortEstimate,
    Severity,
)


class Finding(BaseModel):
    """Fields shared by every detector's findings."""

    title: str = Field(min_length=1)
    description: str = ""
    severity: Severity
    location: str = Field(min_length=1)  # path:line
    recommendation: str = ""
    estimated_effort: EffortEstimate = EffortEstimate.MEDIUM
    confidence: ConfidenceLevel = ConfidenceLevel.HIGH


class SecurityFinding(Finding):
    kind: Literal["security"] = "security"
    vulnerability_type: str
    impact: str = ""


class ScalabilityFinding(Finding):
    kind: Literal["scalability"] = "scalability"
    bottleneck_type: str
    performance_impact: str = ""


class TechnicalDebtFinding(Finding):
    kind: Literal["technical_debt"] = "technical_debt"
    debt_category: str
    maintenance_impact: str = ""
    complexity: int | None = None


class ModernizationRecommendation(Finding):
    kind: Literal["modernization"] = "modernization"
    category: str
    benefit_description: str = ""
    prerequisites: list[str] = Field(default_factory=lambda: list[str]())


AnyFinding = Annotated[
    SecurityFinding
    | ScalabilityFinding
    | TechnicalDebtFinding
    | ModernizationRecommendation,
    Field(discriminator="kind"),
]


class ArchitectureSummary(BaseModel):
    """Accumulated architecture facts for one run.

    Component and technology labels are unique under exact string
    equality; adding an existing label is a no-op.
    """

    current_architecture_pattern: str = ""
    main_components: list[str] = Field(default_factory=lambda: list[str]())
    technologies: list[str] = Field(default_factory=lambda: list[str]())
    dependencies: list[str] = Field(default_factory=lambda: list[str]())

    def add_component(self, label: str) -> bool:
        """Record a component label; return ``False`` if already present."""
        if label in self.main_components:
            return False
        self.main_components.append(label)
        return True

    def add_technology(self, label: str) -> bool:
        if label in self.technologies:
            return False
        self.technologies.append(label)
        return True


class FileFailure(BaseModel):
    """A source file that produced no results at all."""

    path: str
    reason: str


class DetectorFault(BaseModel):
    """A detector that raised while analyzing one file."""

    path: str
    detector: str
    error: str


class SkippedDescriptor(BaseModel):
    """A project descriptor whose contributions were skipped."""

    path: str
    reason: str


class AnalysisMetadata(BaseModel):
    """Completeness information for a run."""

    files_analyzed: int = 0
    partial_files: list[str] = Field(default_factory=lambda: list[str]())
    failed_files: list[FileFailure] = Field(
        default_factory=lambda: list[FileFailure]()
    )
    detector_faults: list[DetectorFault] = Field(
        default_factory=lambda: list[DetectorFault]()
    )
    skipped_descriptors: list[SkippedDescriptor] = Field(
        default_factory=lambda: list[SkippedDescriptor]()
    )
    cancelled: bool = False
    files_skipped: int = 0
    duration_ms: float = 0.0


class AnalysisReport(BaseModel):
    """Complete output of one analysis run — the renderer contract."""

    target_path: str
    timestamp: datetime
    version: str = REPORT_FORMAT_VERSION
    architecture_summary: ArchitectureSummary = Field(
        default_factory=ArchitectureSummary
    )
    security_issues: list[SecurityFinding] = Field(
        default_factory=lambda: list[SecurityFinding]()
    )
    scalability_issues: list[ScalabilityFinding] = Field(
        default_factory=lambda: list[ScalabilityFinding]()
    )
    technical_debt_issues: list[TechnicalDebtFinding] = Field(
        default_factory=lambda: list[TechnicalDebtFinding]()
    )
    modernization_recommendations: list[ModernizationRecommendation] = Field(
        default_factory=lambda: list[ModernizationRecommendation]()
    )
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)
