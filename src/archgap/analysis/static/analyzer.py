"""Orchestrate parsing and all detectors across a codebase."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from archgap.analysis.static.architecture import (
    apply_components,
    classify_file,
    record_project,
)
from archgap.analysis.static.modernization import (
    analyze_modernization,
    analyze_project,
)
from archgap.analysis.static.report import merge_report
from archgap.analysis.static.scalability import analyze_scalability
from archgap.analysis.static.schemas import (
    AnalysisMetadata,
    AnalysisReport,
    ArchitectureSummary,
    DetectorFault,
    FileFailure,
    ModernizationRecommendation,
    ScalabilityFinding,
    SecurityFinding,
    SkippedDescriptor,
    TechnicalDebtFinding,
)
from archgap.analysis.static.security import analyze_security
from archgap.analysis.static.syntax_tree import SyntaxTree, parse
from archgap.analysis.static.technical_debt import analyze_technical_debt
from archgap.config import Settings
from archgap.constants import ERROR_TRUNCATION_CHARS, FindingKind
from archgap.errors import SourceDecodeError, SourceReadError
from archgap.ingestion.schemas import ProjectDescriptor
from archgap.ingestion.sources import SourceProvider

logger = logging.getLogger(__name__)

ARCHITECTURE_DETECTOR = "architecture"

# Per-file detectors, run in this order on every tree.
FILE_DETECTORS: tuple[tuple[str, Callable[[SyntaxTree], list[Any]]], ...] = (
    (FindingKind.SECURITY, analyze_security),
    (FindingKind.SCALABILITY, analyze_scalability),
    (FindingKind.TECHNICAL_DEBT, analyze_technical_debt),
    (FindingKind.MODERNIZATION, analyze_modernization),
)


@dataclass
class FileResult:
    """Everything one file contributes to the report."""

    path: str
    findings: dict[str, list[Any]] = field(
        default_factory=lambda: dict[str, list[Any]]()
    )
    components: list[str] = field(default_factory=lambda: list[str]())
    faults: list[DetectorFault] = field(
        default_factory=lambda: list[DetectorFault]()
    )
    partial: bool = False
    failure: FileFailure | None = None


def _truncate(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"[:ERROR_TRUNCATION_CHARS]


def analyze_tree(tree: SyntaxTree) -> FileResult:
    """Run every detector on one tree, isolating detector faults."""
    result = FileResult(path=tree.path, partial=tree.has_errors)
    for name, detector in FILE_DETECTORS:
        try:
            result.findings[name] = detector(tree)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Detector %s failed on %s", name, tree.path, exc_info=True
            )
            result.findings[name] = []
            result.faults.append(
                DetectorFault(
                    path=tree.path, detector=name, error=_truncate(exc)
                )
            )
    try:
        result.components = classify_file(tree)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Architecture classification failed on %s",
            tree.path,
            exc_info=True,
        )
        result.faults.append(
            DetectorFault(
                path=tree.path,
                detector=ARCHITECTURE_DETECTOR,
                error=_truncate(exc),
            )
        )
    return result


def analyze_source(provider: SourceProvider, path: str) -> FileResult:
    """Read, parse and analyze one file (runs on a worker thread).

    Read and decode failures become a :class:`FileFailure` on the
    result instead of raising.
    """
    try:
        text = provider.read_source(path)
        tree = parse(text, path=path)
    except (SourceReadError, SourceDecodeError) as exc:
        logger.warning("Skipping %s: %s", path, exc)
        return FileResult(
            path=path, failure=FileFailure(path=path, reason=str(exc))
        )
    if tree.has_errors:
        logger.warning("Partial parse for %s; results may be incomplete", path)
    return analyze_tree(tree)


def _project_recommendations(
    descriptor: ProjectDescriptor, faults: list[DetectorFault]
) -> list[ModernizationRecommendation]:
    try:
        return analyze_project(descriptor)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Project checks failed on %s", descriptor.path, exc_info=True
        )
        faults.append(
            DetectorFault(
                path=descriptor.path,
                detector=FindingKind.MODERNIZATION,
                error=_truncate(exc),
            )
        )
        return []


async def analyze(
    file_provider: SourceProvider,
    project_descriptors: Sequence[ProjectDescriptor],
    *,
    settings: Settings | None = None,
    cancel_event: asyncio.Event | None = None,
) -> AnalysisReport:
    """Analyze every source file and project descriptor into one report.

    Files are processed by a bounded pool (``analysis_max_concurrency``
    concurrent ``to_thread`` workers). Results are folded in provider
    order, so the report does not depend on scheduling.

    Setting *cancel_event* stops new files from being claimed; files
    already finished stay in the report, which is marked ``cancelled``.
    """
    cfg = settings or Settings()
    started = time.monotonic()

    summary = ArchitectureSummary()
    metadata = AnalysisMetadata()
    security: list[SecurityFinding] = []
    scalability: list[ScalabilityFinding] = []
    technical_debt: list[TechnicalDebtFinding] = []
    modernization: list[ModernizationRecommendation] = []

    # 1. Project descriptors
    for descriptor in project_descriptors:
        if descriptor.load_error is not None:
            metadata.skipped_descriptors.append(
                SkippedDescriptor(
                    path=descriptor.path, reason=descriptor.load_error
                )
            )
            continue
        record_project(summary, descriptor)
        modernization.extend(
            _project_recommendations(descriptor, metadata.detector_faults)
        )

    # 2. Source files in parallel
    paths = await asyncio.to_thread(file_provider.list_sources)
    logger.info(
        "Analyzing %d source files and %d project files under %s",
        len(paths),
        len(project_descriptors),
        file_provider.root,
    )
    semaphore = asyncio.Semaphore(cfg.analysis_max_concurrency)

    async def _worker(path: str) -> FileResult | None:
        async with semaphore:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return await asyncio.to_thread(analyze_source, file_provider, path)

    results = await asyncio.gather(*(_worker(p) for p in paths))

    # 3. Fold in provider order
    for result in results:
        if result is None:
            metadata.files_skipped += 1
            continue
        if result.failure is not None:
            metadata.failed_files.append(result.failure)
            continue
        metadata.files_analyzed += 1
        if result.partial:
            metadata.partial_files.append(result.path)
        metadata.detector_faults.extend(result.faults)
        security.extend(result.findings.get(FindingKind.SECURITY, []))
        scalability.extend(result.findings.get(FindingKind.SCALABILITY, []))
        technical_debt.extend(
            result.findings.get(FindingKind.TECHNICAL_DEBT, [])
        )
        modernization.extend(
            result.findings.get(FindingKind.MODERNIZATION, [])
        )
        apply_components(summary, result.components)

    metadata.cancelled = cancel_event is not None and cancel_event.is_set()
    metadata.duration_ms = (time.monotonic() - started) * 1000

    if metadata.cancelled:
        logger.warning(
            "Analysis cancelled: %d files not started", metadata.files_skipped
        )
    logger.info(
        "Analysis finished in %.0f ms: %d analyzed, %d partial, %d failed",
        metadata.duration_ms,
        metadata.files_analyzed,
        len(metadata.partial_files),
        len(metadata.failed_files),
    )

    return merge_report(
        target_path=file_provider.root,
        summary=summary,
        security=security,
        scalability=scalability,
        technical_debt=technical_debt,
        modernization=modernization,
        metadata=metadata,
    )
