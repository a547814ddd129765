"""Scalability detector — sync I/O, missing caching, N+1 queries."""

from __future__ import annotations

import re

import tree_sitter

from archgap.analysis.static.schemas import ScalabilityFinding
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree
from archgap.analysis.static.tree_query import (
    attributes_text,
    body_of,
    descendants_of_kind,
    has_annotation,
    name_of,
    text_of,
)
from archgap.constants import EffortEstimate, Severity

# Blocking file/stream calls. A trailing ``Async`` means the call is
# already the asynchronous overload.
SYNC_IO_PATTERN = re.compile(
    r"(?:File\.(?:ReadAllText|WriteAllText|ReadAllBytes|WriteAllBytes"
    r"|ReadAllLines|WriteAllLines|AppendAllText)"
    r"|Stream\.(?:Read|Write))(?!Async)"
)

EXPENSIVE_OPERATION_MARKERS = ("Database", "Http", "File", "Stream")

# Substring of the attribute name, so qualified and ``...Attribute``
# spellings also match.
HTTP_VERB_ATTRIBUTES = frozenset({
    "HttpGet",
    "HttpPost",
    "HttpPut",
    "HttpDelete",
    "HttpPatch",
})

DATA_ACCESS_MARKERS = ("DbContext", "Repository")


def analyze_scalability(tree: SyntaxTree) -> list[ScalabilityFinding]:
    """Run every scalability check against one parsed file."""
    findings: list[ScalabilityFinding] = []
    check_synchronous_io(tree, findings)
    check_missing_caching(tree, findings)
    check_n_plus_one(tree, findings)
    return findings


def check_synchronous_io(
    tree: SyntaxTree, out: list[ScalabilityFinding]
) -> None:
    for call in descendants_of_kind(tree, NodeKind.INVOCATION):
        if not is_synchronous_io(text_of(call)):
            continue
        out.append(
            ScalabilityFinding(
                title="Synchronous I/O Operation",
                description=(
                    "Synchronous I/O operation may block threads and "
                    "reduce scalability"
                ),
                severity=Severity.HIGH,
                location=tree.location_of(call),
                bottleneck_type="Thread Blocking",
                performance_impact="Can cause thread pool starvation under load",
                recommendation="Use async/await pattern with async I/O methods",
                estimated_effort=EffortEstimate.MEDIUM,
            )
        )


def check_missing_caching(
    tree: SyntaxTree, out: list[ScalabilityFinding]
) -> None:
    for method in descendants_of_kind(tree, NodeKind.METHOD):
        if not needs_caching(method) or has_caching(method):
            continue
        out.append(
            ScalabilityFinding(
                title="Missing Cache Implementation",
                description=(
                    f"Method '{name_of(method)}' performs potentially "
                    "expensive operations without caching"
                ),
                severity=Severity.MEDIUM,
                location=tree.location_of(method),
                bottleneck_type="Resource Usage",
                performance_impact="Repeated expensive operations increase latency",
                recommendation=(
                    "Implement appropriate caching strategy "
                    "(in-memory, distributed)"
                ),
                estimated_effort=EffortEstimate.MEDIUM,
            )
        )


def check_n_plus_one(
    tree: SyntaxTree, out: list[ScalabilityFinding]
) -> None:
    for method in descendants_of_kind(tree, NodeKind.METHOD):
        body = body_of(method)
        if body is None:
            continue
        if next(descendants_of_kind(body, NodeKind.FOREACH), None) is None:
            continue
        body_source = text_of(body)
        if not any(marker in body_source for marker in DATA_ACCESS_MARKERS):
            continue
        out.append(
            ScalabilityFinding(
                title="Potential N+1 Query",
                description=(
                    f"Method '{name_of(method)}' may be performing "
                    "N+1 database queries"
                ),
                severity=Severity.HIGH,
                location=tree.location_of(method),
                bottleneck_type="Database Performance",
                performance_impact=(
                    "Query count grows with collection size"
                ),
                recommendation=(
                    "Use eager loading (Include) or batch the queries"
                ),
                estimated_effort=EffortEstimate.MEDIUM,
            )
        )


def is_synchronous_io(call_text: str) -> bool:
    return SYNC_IO_PATTERN.search(call_text) is not None


def needs_caching(method: tree_sitter.Node) -> bool:
    """Expensive-looking body text, or exposed as an HTTP endpoint."""
    body_source = text_of(body_of(method))
    if any(marker in body_source for marker in EXPENSIVE_OPERATION_MARKERS):
        return True
    return any(has_annotation(method, verb) for verb in HTTP_VERB_ATTRIBUTES)


def has_caching(method: tree_sitter.Node) -> bool:
    return "Cache" in text_of(body_of(method)) or "Cache" in attributes_text(
        method
    )
