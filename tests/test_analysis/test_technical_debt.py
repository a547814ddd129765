"""Tests for the technical-debt detector."""

from __future__ import annotations

import textwrap

import pytest

from archgap.analysis.static.schemas import TechnicalDebtFinding
from archgap.analysis.static.syntax_tree import NodeKind, parse
from archgap.analysis.static.technical_debt import (
    analyze_technical_debt,
    complexity_severity,
    cyclomatic_complexity,
    normalize_body,
)
from archgap.analysis.static.tree_query import descendants_of_kind
from archgap.constants import Severity


def _findings(source: str, title: str) -> list[TechnicalDebtFinding]:
    tree = parse(textwrap.dedent(source), path="Test.cs")
    return [f for f in analyze_technical_debt(tree) if f.title == title]


def _nested_ifs(depth: int) -> str:
    opening = " ".join(f"if (x > {i}) {{" for i in range(depth))
    closing = " }" * depth
    return (
        "class Deep\n"
        "{\n"
        "    public void Run(int x)\n"
        "    {\n"
        f"        {opening} x++;{closing}\n"
        "    }\n"
        "}\n"
    )


def _complexity_of(source: str) -> int:
    tree = parse(textwrap.dedent(source))
    return cyclomatic_complexity(next(descendants_of_kind(tree, NodeKind.METHOD)))


class TestComplexity:
    def test_sixteen_nested_ifs_is_high(self) -> None:
        findings = _findings(_nested_ifs(16), "High Method Complexity")

        assert len(findings) == 1
        assert findings[0].severity == Severity.HIGH
        assert findings[0].complexity == 17
        assert "(17)" in findings[0].description
        assert findings[0].location == "Test.cs:3"

    def test_eleven_is_medium(self) -> None:
        findings = _findings(_nested_ifs(10), "High Method Complexity")

        assert len(findings) == 1
        assert findings[0].severity == Severity.MEDIUM
        assert findings[0].complexity == 11

    def test_ten_is_below_threshold(self) -> None:
        assert _findings(_nested_ifs(9), "High Method Complexity") == []

    def test_each_if_adds_exactly_one(self) -> None:
        for depth in range(5):
            assert (
                _complexity_of(_nested_ifs(depth + 1))
                == _complexity_of(_nested_ifs(depth)) + 1
            )

    def test_straight_line_method_scores_one(self) -> None:
        assert _complexity_of("class A { void M() { var x = 1; } }") == 1

    def test_logical_operators_count(self) -> None:
        source = """\
            class A
            {
                void M(bool a, bool b, bool c)
                {
                    if (a && b || c) { }
                }
            }
        """
        assert _complexity_of(source) == 4

    def test_all_decision_kinds_count(self) -> None:
        source = """\
            class A
            {
                int M(int[] xs)
                {
                    var n = 0;
                    for (var i = 0; i < 3; i++) { n++; }
                    foreach (var x in xs) { n += x; }
                    while (n > 100) { n--; }
                    do { n++; } while (n < 0);
                    try { n = n / 2; } catch (Exception) { n = 0; }
                    return n > 1 ? n : 1;
                }
            }
        """
        # for, foreach, while, do, catch, ternary
        assert _complexity_of(source) == 7

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(10, None), (11, Severity.MEDIUM), (15, Severity.MEDIUM), (16, Severity.HIGH)],
    )
    def test_severity_thresholds(
        self, score: int, expected: Severity | None
    ) -> None:
        assert complexity_severity(score) == expected


class TestDuplication:
    def test_whitespace_only_difference_is_one_pair(self) -> None:
        findings = _findings(
            """\
            class Calc
            {
                int Add(int a, int b)
                {
                    return a + b;
                }

                int Plus(int a, int b) { return a+b; }

                int Sub(int a, int b) { return a - b; }
            }
            """,
            "Potential Code Duplication",
        )
        assert len(findings) == 1
        assert findings[0].location == "Test.cs:3"
        assert "'Add' and 'Plus'" in findings[0].description
        assert findings[0].severity == Severity.MEDIUM

    def test_three_identical_bodies_give_three_pairs(self) -> None:
        findings = _findings(
            """\
            class Echo
            {
                int A(int x) { return x; }
                int B(int x) { return x; }
                int C(int x) { return x; }
            }
            """,
            "Potential Code Duplication",
        )
        assert len(findings) == 3

    def test_expression_bodies_are_not_compared(self) -> None:
        findings = _findings(
            """\
            class Echo
            {
                int A(int x) => x;
                int B(int x) => x;
            }
            """,
            "Potential Code Duplication",
        )
        assert findings == []

    def test_normalize_keeps_identifier_case(self) -> None:
        assert normalize_body("{ return A;\r\n\t}") == "{returnA;}"
        assert normalize_body("{ return a; }") != normalize_body("{ return A; }")


class TestOutdatedPatterns:
    def test_deprecated_api_in_type_text(self) -> None:
        findings = _findings(
            """\
            class Legacy
            {
                private DataTable _table;
            }
            """,
            "Outdated Design Pattern",
        )
        assert len(findings) == 1
        assert findings[0].severity == Severity.MEDIUM

    def test_disposal_interface_in_base_list(self) -> None:
        findings = _findings(
            "class Handle : IDisposable { public void Dispose() { } }\n",
            "Outdated Design Pattern",
        )
        assert len(findings) == 1

    def test_modern_type_is_clean(self) -> None:
        findings = _findings(
            "record Point(int X, int Y);\nclass Shape { int Sides; }\n",
            "Outdated Design Pattern",
        )
        assert findings == []


class TestDocumentation:
    def test_public_undocumented_method_is_low(self) -> None:
        findings = _findings(
            """\
            class Api
            {
                /// <summary>Documented.</summary>
                public void Documented() { }

                public void Bare() { }

                private void Hidden() { }
            }
            """,
            "Missing Documentation",
        )
        assert len(findings) == 1
        assert findings[0].severity == Severity.LOW
        assert "Bare" in findings[0].description
        assert findings[0].location == "Test.cs:6"

    def test_block_doc_comment_counts(self) -> None:
        findings = _findings(
            """\
            class Api
            {
                /** <summary>Documented.</summary> */
                public void Documented() { }
            }
            """,
            "Missing Documentation",
        )
        assert findings == []

    def test_plain_comment_does_not_count(self) -> None:
        findings = _findings(
            """\
            class Api
            {
                // not a doc comment
                public void Run() { }
            }
            """,
            "Missing Documentation",
        )
        assert len(findings) == 1
