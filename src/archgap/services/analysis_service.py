"""Pipeline orchestration — wires ingestion into the static analyzer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from archgap.analysis.static.analyzer import analyze
from archgap.analysis.static.schemas import AnalysisReport
from archgap.config import Settings
from archgap.ingestion.projects import discover_project_descriptors
from archgap.ingestion.sources import DirectorySourceProvider

logger = logging.getLogger(__name__)


async def run_analysis(
    root: Path,
    settings: Settings | None = None,
    cancel_event: asyncio.Event | None = None,
) -> AnalysisReport:
    """Analyze the codebase rooted at *root*.

    Project files are loaded first (unreadable ones are carried as
    descriptors with ``load_error`` set), then every source file under
    *root* is analyzed.
    """
    cfg = settings or Settings()
    root = Path(root).resolve()

    descriptors = await asyncio.to_thread(
        discover_project_descriptors, root, cfg
    )
    logger.info(
        "Found %d project files under %s", len(descriptors), root
    )

    provider = DirectorySourceProvider(root, cfg)
    return await analyze(
        provider,
        descriptors,
        settings=cfg,
        cancel_event=cancel_event,
    )
