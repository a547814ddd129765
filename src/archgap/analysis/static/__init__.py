"""Static analysis — deterministic C# analysis via tree-sitter."""

from archgap.analysis.static.analyzer import analyze
from archgap.analysis.static.report import count_by_severity
from archgap.analysis.static.schemas import (
    AnalysisMetadata,
    AnalysisReport,
    AnyFinding,
    ArchitectureSummary,
    DetectorFault,
    FileFailure,
    Finding,
    ModernizationRecommendation,
    ScalabilityFinding,
    SecurityFinding,
    SkippedDescriptor,
    TechnicalDebtFinding,
)
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree, parse

__all__ = [
    "AnalysisMetadata",
    "AnalysisReport",
    "AnyFinding",
    "ArchitectureSummary",
    "DetectorFault",
    "FileFailure",
    "Finding",
    "ModernizationRecommendation",
    "NodeKind",
    "ScalabilityFinding",
    "SecurityFinding",
    "SkippedDescriptor",
    "SyntaxTree",
    "TechnicalDebtFinding",
    "analyze",
    "count_by_severity",
    "parse",
]
