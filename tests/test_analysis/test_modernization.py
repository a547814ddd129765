"""Tests for the modernization detector."""

from __future__ import annotations

import textwrap

import pytest

from archgap.analysis.static.modernization import (
    analyze_modernization,
    analyze_project,
    is_outdated_framework,
    modern_alternative,
)
from archgap.analysis.static.schemas import ModernizationRecommendation
from archgap.analysis.static.syntax_tree import parse
from archgap.constants import ConfidenceLevel, Severity
from archgap.ingestion.schemas import PackageReference, ProjectDescriptor


def _findings(source: str, title: str) -> list[ModernizationRecommendation]:
    tree = parse(textwrap.dedent(source), path="Test.cs")
    return [f for f in analyze_modernization(tree) if f.title == title]


def _large_class(name: str, extra_member: str, methods: int = 11) -> str:
    members = "\n".join(
        f"    public int M{i}() {{ return {i}; }}" for i in range(methods)
    )
    return f"class {name}\n{{\n{extra_member}\n{members}\n}}\n"


class TestProjectChecks:
    def test_net5_yields_one_framework_upgrade(self) -> None:
        descriptor = ProjectDescriptor(
            path="Shop/Shop.csproj", target_framework="net5.0"
        )
        recs = analyze_project(descriptor)

        assert len(recs) == 1
        rec = recs[0]
        assert rec.title == "Framework Upgrade Opportunity"
        assert rec.severity == Severity.MEDIUM
        assert rec.location == "Shop/Shop.csproj"
        assert rec.prerequisites == [
            "Review breaking changes",
            "Update dependencies",
            "Test application thoroughly",
        ]

    def test_current_framework_is_clean(self) -> None:
        descriptor = ProjectDescriptor(path="A.csproj", target_framework="net8.0")
        assert analyze_project(descriptor) == []

    def test_missing_framework_is_clean(self) -> None:
        assert analyze_project(ProjectDescriptor(path="A.csproj")) == []

    @pytest.mark.parametrize(
        ("moniker", "expected"),
        [
            ("netcoreapp3.1", True),
            ("net5.0", True),
            ("net48", True),
            ("v4.7.2", True),
            ("net6.0", False),
            ("net8.0", False),
            ("netstandard2.0", False),
        ],
    )
    def test_outdated_monikers(self, moniker: str, expected: bool) -> None:
        assert is_outdated_framework(moniker) is expected

    def test_legacy_packages_are_mapped(self) -> None:
        descriptor = ProjectDescriptor(
            path="A.csproj",
            target_framework="net8.0",
            dependencies=[
                PackageReference(name="Newtonsoft.Json", version="13.0.1"),
                PackageReference(name="Serilog", version="3.0.0"),
                PackageReference(name="log4net", version="2.0.15"),
            ],
        )
        recs = analyze_project(descriptor)

        assert [r.title for r in recs] == ["Package Modernization"] * 2
        assert "System.Text.Json" in recs[0].description
        assert "Microsoft.Extensions.Logging" in recs[1].description

    def test_package_lookup_is_case_insensitive(self) -> None:
        assert modern_alternative("Log4Net") == "Microsoft.Extensions.Logging"
        assert modern_alternative("Serilog") is None


class TestAsyncOpportunities:
    def test_sync_io_method_is_flagged(self) -> None:
        findings = _findings(
            """\
            class Store
            {
                string Load(string p) { return File.ReadAllText(p); }
            }
            """,
            "Async/Await Opportunity",
        )
        assert len(findings) == 1
        assert findings[0].location == "Test.cs:3"
        assert findings[0].severity == Severity.MEDIUM

    def test_async_method_is_skipped(self) -> None:
        findings = _findings(
            """\
            class Store
            {
                async Task<string> Load(string p)
                {
                    return await File.ReadAllTextAsync(p);
                }
            }
            """,
            "Async/Await Opportunity",
        )
        assert findings == []


class TestConfigurationCoupling:
    def test_one_recommendation_per_file(self) -> None:
        findings = _findings(
            """\
            class Settings
            {
                string Db() { return ConfigurationManager.AppSettings["Db"]; }
                string Cache() { return ConfigurationManager.AppSettings["Cache"]; }
            }
            """,
            "Containerization Opportunity",
        )
        assert len(findings) == 1
        assert findings[0].location == "Test.cs:3"

    def test_modern_configuration_is_clean(self) -> None:
        findings = _findings(
            """\
            class Settings
            {
                string Db() { return _configuration["Db"]; }
            }
            """,
            "Containerization Opportunity",
        )
        assert findings == []


class TestDecomposition:
    def test_large_type_with_two_concerns_is_flagged(self) -> None:
        source = _large_class(
            "OrderManager",
            "    private readonly OrderRepository _orders;",
        )
        findings = _findings(source, "Microservices Candidate")

        assert len(findings) == 1
        assert "OrderManager" in findings[0].description

    def test_large_type_with_one_concern_is_clean(self) -> None:
        source = _large_class("Calculator", "    private int _total;")
        assert _findings(source, "Microservices Candidate") == []

    def test_small_type_with_many_concerns_is_clean(self) -> None:
        source = _large_class(
            "OrderManager",
            "    private readonly OrderRepository _orders;",
            methods=10,
        )
        assert _findings(source, "Microservices Candidate") == []


class TestLongRunning:
    def test_loop_gives_low_confidence_recommendation(self) -> None:
        findings = _findings(
            """\
            class Worker
            {
                void Drain(Queue<int> q)
                {
                    while (q.Count > 0) { q.Dequeue(); }
                }
            }
            """,
            "Serverless Opportunity",
        )
        assert len(findings) == 1
        assert findings[0].severity == Severity.MEDIUM
        assert findings[0].confidence == ConfidenceLevel.LOW

    def test_sleep_call_is_flagged(self) -> None:
        findings = _findings(
            """\
            class Worker
            {
                void Wait() { Thread.Sleep(1000); }
            }
            """,
            "Serverless Opportunity",
        )
        assert len(findings) == 1

    def test_straight_line_method_is_clean(self) -> None:
        findings = _findings(
            "class Worker { int Add(int a, int b) { return a + b; } }\n",
            "Serverless Opportunity",
        )
        assert findings == []
