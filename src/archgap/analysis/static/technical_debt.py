"""Technical-debt detector.

Four checks per file:

* **complexity** — 1 + branches, loops, catch clauses, ternaries and
  short-circuit ``&&``/``||`` anywhere under the method. Structural, not
  a control-flow-graph metric: nested boolean operators each count.
* **duplication** — method block bodies that are identical once spaces,
  tabs and line breaks are removed. Exact match only.
* **outdated patterns** — deprecated API names in a type's text, or a
  disposal interface in its base list.
* **documentation** — public methods without a ``///`` or ``/** */``
  comment.
"""

from __future__ import annotations

import tree_sitter

from archgap.analysis.static.schemas import TechnicalDebtFinding
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree
from archgap.analysis.static.tree_query import (
    base_list_text,
    body_of,
    descendants_of_kind,
    has_doc_comment,
    has_modifier,
    is_kind,
    iter_descendants,
    name_of,
    operator_of,
    text_of,
)
from archgap.constants import (
    COMPLEXITY_HIGH_THRESHOLD,
    COMPLEXITY_MEDIUM_THRESHOLD,
    EffortEstimate,
    Severity,
)

DECISION_KINDS = (
    NodeKind.BRANCH,
    NodeKind.LOOP,
    NodeKind.CATCH,
    NodeKind.CONDITIONAL,
)

LOGICAL_OPERATORS = frozenset({"&&", "||"})

OUTDATED_API_MARKERS = (
    "WebForms",
    "DataSet",
    "DataTable",
    "ArrayList",
    "Hashtable",
    "WebClient",
    "BinaryFormatter",
)

DISPOSAL_INTERFACE = "IDisposable"

_WHITESPACE_TABLE = str.maketrans("", "", " \t\r\n")


def analyze_technical_debt(tree: SyntaxTree) -> list[TechnicalDebtFinding]:
    """Run every technical-debt check against one parsed file."""
    findings: list[TechnicalDebtFinding] = []
    check_method_complexity(tree, findings)
    check_code_duplication(tree, findings)
    check_outdated_patterns(tree, findings)
    check_missing_documentation(tree, findings)
    return findings


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------


def cyclomatic_complexity(method: tree_sitter.Node) -> int:
    """Return the structural complexity score of *method* (always >= 1)."""
    score = 1
    for node in iter_descendants(method):
        if any(is_kind(node, kind) for kind in DECISION_KINDS):
            score += 1
        elif is_kind(node, NodeKind.BINARY_EXPRESSION) and (
            operator_of(node) in LOGICAL_OPERATORS
        ):
            score += 1
    return score


def complexity_severity(score: int) -> Severity | None:
    """Map a complexity score to a severity, or ``None`` below threshold."""
    if score > COMPLEXITY_HIGH_THRESHOLD:
        return Severity.HIGH
    if score > COMPLEXITY_MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return None


def check_method_complexity(
    tree: SyntaxTree, out: list[TechnicalDebtFinding]
) -> None:
    for method in descendants_of_kind(tree, NodeKind.METHOD):
        score = cyclomatic_complexity(method)
        severity = complexity_severity(score)
        if severity is None:
            continue
        out.append(
            TechnicalDebtFinding(
                title="High Method Complexity",
                description=(
                    f"Method '{name_of(method)}' has high cyclomatic "
                    f"complexity ({score})"
                ),
                severity=severity,
                location=tree.location_of(method),
                debt_category="Code Complexity",
                maintenance_impact="Difficult to maintain and test",
                recommendation=(
                    "Break the method down into smaller, more focused methods"
                ),
                estimated_effort=EffortEstimate.MEDIUM,
                complexity=score,
            )
        )


# ---------------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------------


def normalize_body(text: str) -> str:
    """Strip spaces, tabs and line breaks; nothing else is normalized."""
    return text.translate(_WHITESPACE_TABLE)


def check_code_duplication(
    tree: SyntaxTree, out: list[TechnicalDebtFinding]
) -> None:
    bodies: list[tuple[tree_sitter.Node, str]] = []
    for method in descendants_of_kind(tree, NodeKind.METHOD):
        body = body_of(method)
        if body is not None:
            bodies.append((method, normalize_body(text_of(body))))

    for i, (first, first_body) in enumerate(bodies):
        for second, second_body in bodies[i + 1:]:
            if first_body != second_body:
                continue
            out.append(
                TechnicalDebtFinding(
                    title="Potential Code Duplication",
                    description=(
                        f"Methods '{name_of(first)}' and "
                        f"'{name_of(second)}' appear to be similar"
                    ),
                    severity=Severity.MEDIUM,
                    location=tree.location_of(first),
                    debt_category="Code Duplication",
                    maintenance_impact=(
                        "Increases maintenance effort and risk of "
                        "inconsistent updates"
                    ),
                    recommendation=(
                        "Extract the common functionality into a shared method"
                    ),
                    estimated_effort=EffortEstimate.SMALL,
                )
            )


# ---------------------------------------------------------------------------
# Outdated patterns
# ---------------------------------------------------------------------------


def uses_outdated_patterns(type_node: tree_sitter.Node) -> bool:
    source = text_of(type_node)
    if any(marker in source for marker in OUTDATED_API_MARKERS):
        return True
    return DISPOSAL_INTERFACE in base_list_text(type_node)


def check_outdated_patterns(
    tree: SyntaxTree, out: list[TechnicalDebtFinding]
) -> None:
    for type_node in descendants_of_kind(tree, NodeKind.TYPE):
        if not uses_outdated_patterns(type_node):
            continue
        out.append(
            TechnicalDebtFinding(
                title="Outdated Design Pattern",
                description=(
                    f"Type '{name_of(type_node)}' uses outdated patterns "
                    "or APIs"
                ),
                severity=Severity.MEDIUM,
                location=tree.location_of(type_node),
                debt_category="Design Patterns",
                maintenance_impact="May not follow current platform practices",
                recommendation="Update to current APIs and patterns",
                estimated_effort=EffortEstimate.LARGE,
            )
        )


# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------


def check_missing_documentation(
    tree: SyntaxTree, out: list[TechnicalDebtFinding]
) -> None:
    public_methods = descendants_of_kind(
        tree,
        NodeKind.METHOD,
        predicate=lambda n: has_modifier(n, "public"),
    )
    for method in public_methods:
        if has_doc_comment(method):
            continue
        out.append(
            TechnicalDebtFinding(
                title="Missing Documentation",
                description=(
                    f"Public method '{name_of(method)}' lacks XML documentation"
                ),
                severity=Severity.LOW,
                location=tree.location_of(method),
                debt_category="Documentation",
                maintenance_impact="Reduces code maintainability and usability",
                recommendation=(
                    "Add XML documentation comments describing purpose, "
                    "parameters and return value"
                ),
                estimated_effort=EffortEstimate.SMALL,
            )
        )
