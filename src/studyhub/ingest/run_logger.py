"""Run-level logging for the ingestion pipeline.

Informative logging for debugging and troubleshooting, kept apart from the
ProgressReporter which only drives the user-facing progress display.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from studyhub.model.options import IngestOptions

if TYPE_CHECKING:
    from studyhub.ingest.ingestion import IngestTotals

logger = logging.getLogger(__name__)


def log_ingest_configuration(options: IngestOptions) -> None:
    """Log the run configuration.

    Args:
        options: Ingest options to log
    """
    logger.info("Ingest configuration:")
    logger.info("  Source root: %s", options.root)
    logger.info("  Output directory: %s", options.out_dir)
    logger.info("  Ignored directories: %s", ", ".join(sorted(options.ignored_dirs)))
    logger.info("  Id length: %d", options.id_length)


def log_run_summary(totals: IngestTotals) -> None:
    """Log the aggregate drop counters that are not reported per item."""

    logger.info(
        "Materials: %d, images: %d, pages without content: %d",
        totals.materials,
        totals.images,
        totals.skipped_files,
    )
    if totals.duplicates:
        logger.warning(
            "%d material(s) dropped because their id was already used in the same subject",
            totals.duplicates,
        )


__all__ = ["log_ingest_configuration", "log_run_summary"]
