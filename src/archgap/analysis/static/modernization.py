"""Modernization detector — framework, packages and code-level opportunities.

Project-level checks take a :class:`ProjectDescriptor`; file-level
checks take a :class:`SyntaxTree`. Every recommendation is Medium.
"""

from __future__ import annotations

import tree_sitter

from archgap.analysis.static.schemas import ModernizationRecommendation
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree
from archgap.analysis.static.tree_query import (
    body_of,
    descendants_of_kind,
    has_modifier,
    members_of,
    name_of,
    text_of,
)
from archgap.constants import (
    DECOMPOSITION_MAX_METHODS,
    DECOMPOSITION_MAX_PROPERTIES,
    DECOMPOSITION_MIN_CONCERNS,
    ConfidenceLevel,
    EffortEstimate,
    Severity,
)
from archgap.ingestion.schemas import ProjectDescriptor

# Target framework monikers considered out of support.
OUTDATED_FRAMEWORK_MARKERS = ("netcoreapp", "net5.0", "net4", "v4.")

# Legacy package name (lower-cased) → modern replacement
PACKAGE_ALTERNATIVES: dict[str, str] = {
    "newtonsoft.json": "System.Text.Json",
    "log4net": "Microsoft.Extensions.Logging",
    "entityframework": "Microsoft.EntityFrameworkCore",
    "webapi": "Microsoft.AspNetCore.Mvc",
    "microsoft.aspnet.webapi": "Microsoft.AspNetCore.Mvc",
    "microsoft.aspnet.mvc": "Microsoft.AspNetCore.Mvc",
    "system.data.sqlclient": "Microsoft.Data.SqlClient",
}

IO_MARKERS = ("File.", "Stream", "Http", "Sql")

LEGACY_CONFIG_MARKERS = ("ConfigurationManager", "AppSettings")

CONCERN_MARKERS: dict[str, tuple[str, ...]] = {
    "data": ("DbContext", "Repository"),
    "business": ("Service", "Manager"),
    "presentation": ("Controller", "View"),
}

LONG_RUNNING_MARKERS = ("Thread.Sleep", "Task.Delay")


def analyze_project(
    descriptor: ProjectDescriptor,
) -> list[ModernizationRecommendation]:
    """Run the project-level checks against one loaded descriptor."""
    recommendations: list[ModernizationRecommendation] = []
    check_framework_version(descriptor, recommendations)
    check_package_alternatives(descriptor, recommendations)
    return recommendations


def analyze_modernization(
    tree: SyntaxTree,
) -> list[ModernizationRecommendation]:
    """Run the file-level checks against one parsed file."""
    recommendations: list[ModernizationRecommendation] = []
    check_async_opportunities(tree, recommendations)
    check_configuration_coupling(tree, recommendations)
    check_decomposition_candidates(tree, recommendations)
    check_long_running_operations(tree, recommendations)
    return recommendations


# ---------------------------------------------------------------------------
# Project-level
# ---------------------------------------------------------------------------


def is_outdated_framework(target_framework: str) -> bool:
    moniker = target_framework.lower()
    return any(marker in moniker for marker in OUTDATED_FRAMEWORK_MARKERS)


def check_framework_version(
    descriptor: ProjectDescriptor, out: list[ModernizationRecommendation]
) -> None:
    framework = descriptor.target_framework
    if not framework or not is_outdated_framework(framework):
        return
    out.append(
        ModernizationRecommendation(
            title="Framework Upgrade Opportunity",
            description=(
                f"Project targets {framework}. Consider upgrading to a "
                "currently supported .NET release"
            ),
            severity=Severity.MEDIUM,
            location=descriptor.path,
            category="Framework",
            benefit_description=(
                "Access to latest performance improvements, features and "
                "security updates"
            ),
            recommendation="Upgrade the target framework",
            estimated_effort=EffortEstimate.LARGE,
            prerequisites=[
                "Review breaking changes",
                "Update dependencies",
                "Test application thoroughly",
            ],
        )
    )


def modern_alternative(package_name: str) -> str | None:
    return PACKAGE_ALTERNATIVES.get(package_name.lower())


def check_package_alternatives(
    descriptor: ProjectDescriptor, out: list[ModernizationRecommendation]
) -> None:
    for dep in descriptor.dependencies:
        alternative = modern_alternative(dep.name)
        if alternative is None:
            continue
        out.append(
            ModernizationRecommendation(
                title="Package Modernization",
                description=f"Consider replacing {dep.name} with {alternative}",
                severity=Severity.MEDIUM,
                location=descriptor.path,
                category="Dependencies",
                benefit_description=(
                    "Better performance, modern features and actively "
                    "maintained packages"
                ),
                recommendation=f"Migrate from {dep.name} to {alternative}",
                estimated_effort=EffortEstimate.MEDIUM,
                prerequisites=[
                    "Review API changes",
                    "Update dependent code",
                    "Test functionality",
                ],
            )
        )


# ---------------------------------------------------------------------------
# File-level
# ---------------------------------------------------------------------------


def has_io_operations(method: tree_sitter.Node) -> bool:
    body = body_of(method)
    if body is None:
        return False
    source = text_of(body)
    return any(marker in source for marker in IO_MARKERS)


def check_async_opportunities(
    tree: SyntaxTree, out: list[ModernizationRecommendation]
) -> None:
    candidates = descendants_of_kind(
        tree,
        NodeKind.METHOD,
        predicate=lambda n: not has_modifier(n, "async") and has_io_operations(n),
    )
    for method in candidates:
        out.append(
            ModernizationRecommendation(
                title="Async/Await Opportunity",
                description=(
                    f"Method '{name_of(method)}' could benefit from the "
                    "async/await pattern"
                ),
                severity=Severity.MEDIUM,
                location=tree.location_of(method),
                category="Performance",
                benefit_description=(
                    "Improved scalability and resource utilization"
                ),
                recommendation="Convert the method to async/await",
                estimated_effort=EffortEstimate.MEDIUM,
                prerequisites=[
                    "Review method call chain",
                    "Update method signature",
                    "Implement async operations",
                    "Test concurrent scenarios",
                ],
            )
        )


def check_configuration_coupling(
    tree: SyntaxTree, out: list[ModernizationRecommendation]
) -> None:
    """At most one recommendation per file, at the first legacy access."""
    first = next(
        descendants_of_kind(
            tree,
            NodeKind.MEMBER_ACCESS,
            predicate=lambda n: any(
                marker in text_of(n) for marker in LEGACY_CONFIG_MARKERS
            ),
        ),
        None,
    )
    if first is None:
        return
    out.append(
        ModernizationRecommendation(
            title="Containerization Opportunity",
            description=(
                "Application uses traditional configuration. Consider "
                "containerization"
            ),
            severity=Severity.MEDIUM,
            location=tree.location_of(first),
            category="Cloud-Native",
            benefit_description=(
                "Better deployment consistency, scalability and isolation"
            ),
            recommendation="Move to environment-based configuration",
            estimated_effort=EffortEstimate.LARGE,
            prerequisites=[
                "Create Dockerfile",
                "Implement environment-based configuration",
                "Update deployment scripts",
                "Set up container orchestration",
            ],
        )
    )


def is_large_type(type_node: tree_sitter.Node) -> bool:
    return (
        len(members_of(type_node, NodeKind.METHOD)) > DECOMPOSITION_MAX_METHODS
        or len(members_of(type_node, NodeKind.PROPERTY))
        > DECOMPOSITION_MAX_PROPERTIES
    )


def concerns_of(type_node: tree_sitter.Node) -> set[str]:
    """Concern groups whose marker names appear in the type's text."""
    source = text_of(type_node)
    return {
        concern
        for concern, markers in CONCERN_MARKERS.items()
        if any(marker in source for marker in markers)
    }


def check_decomposition_candidates(
    tree: SyntaxTree, out: list[ModernizationRecommendation]
) -> None:
    for type_node in descendants_of_kind(tree, NodeKind.TYPE):
        if not is_large_type(type_node):
            continue
        if len(concerns_of(type_node)) < DECOMPOSITION_MIN_CONCERNS:
            continue
        out.append(
            ModernizationRecommendation(
                title="Microservices Candidate",
                description=(
                    f"Type '{name_of(type_node)}' mixes several concerns "
                    "and could be split into separate services"
                ),
                severity=Severity.MEDIUM,
                location=tree.location_of(type_node),
                category="Architecture",
                benefit_description=(
                    "Better scalability, maintainability and team autonomy"
                ),
                recommendation="Split the type along its concerns",
                estimated_effort=EffortEstimate.LARGE,
                prerequisites=[
                    "Identify bounded contexts",
                    "Design service interfaces",
                    "Plan data separation",
                    "Implement service communication",
                ],
            )
        )


def is_long_running(method: tree_sitter.Node) -> bool:
    body = body_of(method)
    if body is None:
        return False
    source = text_of(body)
    if any(marker in source for marker in LONG_RUNNING_MARKERS):
        return True
    return next(descendants_of_kind(body, NodeKind.LOOP), None) is not None


def check_long_running_operations(
    tree: SyntaxTree, out: list[ModernizationRecommendation]
) -> None:
    # Nearly any loop qualifies; emitted as low-confidence triage hints.
    for method in descendants_of_kind(tree, NodeKind.METHOD):
        if not is_long_running(method):
            continue
        out.append(
            ModernizationRecommendation(
                title="Serverless Opportunity",
                description=(
                    f"Method '{name_of(method)}' could be extracted into a "
                    "cloud function"
                ),
                severity=Severity.MEDIUM,
                location=tree.location_of(method),
                category="Cloud-Native",
                benefit_description=(
                    "Pay-per-use scaling for long-running work"
                ),
                recommendation="Review whether the work suits a serverless host",
                estimated_effort=EffortEstimate.MEDIUM,
                confidence=ConfidenceLevel.LOW,
                prerequisites=[
                    "Extract function logic",
                    "Implement cloud function",
                    "Set up triggers",
                    "Configure monitoring",
                ],
            )
        )
