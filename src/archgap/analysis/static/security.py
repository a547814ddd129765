"""Security detector — hardcoded secrets, SQL injection, missing auth."""

from __future__ import annotations

from archgap.analysis.static.schemas import SecurityFinding
from archgap.analysis.static.syntax_tree import NodeKind, SyntaxTree
from archgap.analysis.static.tree_query import (
    descendants_of_kind,
    has_annotation,
    name_of,
    operator_of,
    text_of,
)
from archgap.constants import EffortEstimate, Severity

# Lower-cased substrings that mark a literal as a likely credential.
# Plain substring match, so "token" in ordinary prose also fires.
SECRET_MARKERS = (
    "password",
    "secret",
    "key",
    "token",
    "apikey",
    "connectionstring",
)

SQL_VERBS = ("SELECT", "INSERT", "UPDATE", "DELETE")

AUTH_ATTRIBUTE_MARKERS = ("Authorize", "Authentication")


def analyze_security(tree: SyntaxTree) -> list[SecurityFinding]:
    """Run every security check against one parsed file."""
    findings: list[SecurityFinding] = []
    check_hardcoded_secrets(tree, findings)
    check_sql_injection(tree, findings)
    check_missing_authentication(tree, findings)
    return findings


def check_hardcoded_secrets(
    tree: SyntaxTree, out: list[SecurityFinding]
) -> None:
    for literal in descendants_of_kind(tree, NodeKind.STRING_LITERAL):
        if not is_likely_secret(text_of(literal)):
            continue
        out.append(
            SecurityFinding(
                title="Hardcoded Secret Detected",
                description=(
                    "Potential hardcoded secret or credential found in code"
                ),
                severity=Severity.HIGH,
                location=tree.location_of(literal),
                vulnerability_type="Sensitive Data Exposure",
                impact=(
                    "Could lead to unauthorized access if credentials "
                    "are compromised"
                ),
                recommendation=(
                    "Move secrets to secure configuration or use a "
                    "secret management service"
                ),
                estimated_effort=EffortEstimate.SMALL,
            )
        )


def check_sql_injection(
    tree: SyntaxTree, out: list[SecurityFinding]
) -> None:
    concatenations = descendants_of_kind(
        tree,
        NodeKind.BINARY_EXPRESSION,
        predicate=lambda n: operator_of(n) == "+",
    )
    for concat in concatenations:
        if not is_potential_sql_injection(text_of(concat)):
            continue
        out.append(
            SecurityFinding(
                title="Potential SQL Injection",
                description="String concatenation used in potential SQL query",
                severity=Severity.HIGH,
                location=tree.location_of(concat),
                vulnerability_type="SQL Injection",
                impact="Could allow unauthorized database access or manipulation",
                recommendation="Use parameterized queries or an ORM",
                estimated_effort=EffortEstimate.MEDIUM,
            )
        )


def check_missing_authentication(
    tree: SyntaxTree, out: list[SecurityFinding]
) -> None:
    controllers = descendants_of_kind(
        tree,
        NodeKind.TYPE,
        predicate=lambda n: name_of(n).endswith("Controller"),
    )
    for controller in controllers:
        if any(has_annotation(controller, m) for m in AUTH_ATTRIBUTE_MARKERS):
            continue
        name = name_of(controller)
        out.append(
            SecurityFinding(
                title="Missing Authentication",
                description=(
                    f"Controller '{name}' lacks authentication attributes"
                ),
                severity=Severity.HIGH,
                location=tree.location_of(controller),
                vulnerability_type="Authentication",
                impact="Endpoints may be accessible without authentication",
                recommendation="Add appropriate authentication attributes",
                estimated_effort=EffortEstimate.SMALL,
            )
        )


def is_likely_secret(value: str) -> bool:
    lowered = value.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def is_potential_sql_injection(expression_text: str) -> bool:
    """SQL verb + ``+`` present and no ``@`` parameter marker."""
    text = expression_text.upper()
    return (
        any(verb in text for verb in SQL_VERBS)
        and "+" in text
        and "@" not in text
    )
