"""Main orchestrator: load the bitlink registry, then count clicks per long URL."""

import logging
from typing import Optional

from .aggregator import count_clicks
from .models import ClickCount, ClickReport, ProcessOptions
from .record_source import RecordSource
from .resources import ResourceMonitor
from .store import BitlinkStore

logger = logging.getLogger(__name__)

ENCODE_REQUIRED_FIELDS = ("long_url", "domain", "hash")
DECODE_REQUIRED_FIELDS = ("bitlink", "timestamp")


async def load_store(
    encodes_path: str,
    log: Optional[logging.Logger] = None,
) -> BitlinkStore:
    """Build a BitlinkStore from every record of the registry file."""
    log = log or logger
    store = BitlinkStore(log=log)
    source = RecordSource(encodes_path, ENCODE_REQUIRED_FIELDS, log=log)
    async for record in source:
        store.set(record["domain"], record["hash"], record["long_url"])

    log.info(
        f"Loaded {store.size} bitlinks from {encodes_path} "
        f"({source.records_read} records, {source.records_skipped} skipped, "
        f"{store.duplicates} duplicates)"
    )
    return store


def rank_counts(counts: dict[str, int]) -> list[ClickCount]:
    """Sort counts descending; equal counts keep their insertion order."""
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [ClickCount(long_url=url, clicks=n) for url, n in ranked]


async def process_clicks(
    options: ProcessOptions,
    log: Optional[logging.Logger] = None,
    resource_monitor: Optional[ResourceMonitor] = None,
) -> ClickReport:
    """Count clicks per long URL for one year.

    This is the primary public API.

    The registry is loaded completely before the click log is opened. If the
    registry holds no links the click log is never read and an empty report
    is returned.

    Args:
        options: Registry path, click-log path and target year.
        log: Logger for diagnostics (defaults to this module's logger).
        resource_monitor: Override for memory reporting.

    Returns:
        ClickReport with every registry long URL, most clicked first.
    """
    log = log or logger
    resource_monitor = resource_monitor or ResourceMonitor()

    log.info(f"Phase 1: Loading bitlinks from {options.encodes_path}")
    store = await load_store(options.encodes_path, log=log)
    if store.size == 0:
        log.info("No bitlinks loaded; skipping click log")
        return ClickReport(year=options.year)
    resource_monitor.log_snapshot("registry load", log=log)

    # Every long URL is listed, even with zero clicks.
    counts = dict.fromkeys(store.long_urls(), 0)

    log.info(f"Phase 2: Counting {options.year} clicks from {options.decodes_path}")
    source = RecordSource(options.decodes_path, DECODE_REQUIRED_FIELDS, log=log)
    stats = await count_clicks(store, source, options.year, counts, log=log)

    report = ClickReport(
        year=options.year,
        clicks=rank_counts(counts),
        links_loaded=store.size,
        **stats.model_dump(),
    )

    log.info(
        f"Done: {stats.records_counted} of {stats.records_processed} clicks counted "
        f"across {len(report.clicks)} long URLs "
        f"({stats.skipped_year} outside {options.year}, "
        f"{stats.skipped_unmatched} unmatched, "
        f"{source.records_skipped} invalid)"
    )
    resource_monitor.log_snapshot("aggregation", log=log)
    return report
