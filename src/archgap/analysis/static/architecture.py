"""Classify types into layers and infer a coarse architecture pattern.

The :class:`ArchitectureSummary` is an explicit accumulator: callers
own it and pass it into each step, so classification holds no state
between runs and per-file work can happen in parallel.
"""

from __future__ import annotations

from collections.abc import Iterable

from archgap.analysis.static.schemas import ArchitectureSummary
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree
from archgap.analysis.static.tree_query import descendants_of_kind, name_of
from archgap.constants import (
    LAYER_SUFFIXES,
    LAYERED_ARCHITECTURE,
    REPOSITORY_LAYER,
    SERVICE_LAYER,
)
from archgap.ingestion.schemas import ProjectDescriptor


def record_project(
    summary: ArchitectureSummary, descriptor: ProjectDescriptor
) -> None:
    """Copy a project's dependencies and target framework verbatim."""
    for dep in descriptor.dependencies:
        summary.dependencies.append(dep.descriptor)
    if descriptor.target_framework:
        summary.add_technology(
            f"Target Framework: {descriptor.target_framework}"
        )


def classify_type_name(name: str) -> str | None:
    """Map a type name to its layer label by trailing suffix."""
    for suffix, label in LAYER_SUFFIXES:
        if name.endswith(suffix):
            return label
    return None


def classify_file(tree: SyntaxTree) -> list[str]:
    """Layer labels for the types declared in one file, in source order."""
    labels: list[str] = []
    for type_node in descendants_of_kind(tree, NodeKind.TYPE):
        label = classify_type_name(name_of(type_node))
        if label is not None and label not in labels:
            labels.append(label)
    return labels


def apply_components(
    summary: ArchitectureSummary, labels: Iterable[str]
) -> None:
    """Fold one file's labels into *summary*, then re-check the pattern."""
    for label in labels:
        summary.add_component(label)
    infer_pattern(summary)


def infer_pattern(summary: ArchitectureSummary) -> None:
    """Set "Layered Architecture" once service and repository layers exist.

    Monotonic: labels are only ever added, so once the condition holds
    it holds for the rest of the run and the pattern is never cleared.
    """
    components = summary.main_components
    if REPOSITORY_LAYER in components and SERVICE_LAYER in components:
        summary.current_architecture_pattern = LAYERED_ARCHITECTURE
