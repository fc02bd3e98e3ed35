"""Click aggregation: filter events by year and join them against the store."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable
from typing import Optional

from .models import AggregationStats
from .store import BitlinkStore

logger = logging.getLogger(__name__)


async def count_clicks(
    store: BitlinkStore,
    records: AsyncIterable[dict[str, str]],
    year: str,
    counts: dict[str, int],
    log: Optional[logging.Logger] = None,
) -> AggregationStats:
    """Add the clicks in `records` that fall in `year` to `counts`.

    A click is counted when its timestamp starts with `year` (plain string
    prefix, no date parsing) and its bitlink resolves in `store`. Anything
    else is skipped with a warning. `counts` is keyed by long URL and updated
    in place.

    Returns:
        AggregationStats with processed/counted/skipped totals.
    """
    log = log or logger
    stats = AggregationStats()

    async for record in records:
        stats.records_processed += 1
        bitlink = record["bitlink"]
        timestamp = record["timestamp"]

        if not timestamp.startswith(year):
            stats.skipped_year += 1
            log.warning(f"Skipping click on {bitlink}: timestamp {timestamp} not in {year}")
            continue

        long_url = store.get(bitlink)
        if long_url is None:
            stats.skipped_unmatched += 1
            log.warning(f"Skipping click on unknown bitlink {bitlink}")
            continue

        counts[long_url] = counts.get(long_url, 0) + 1
        stats.records_counted += 1

    return stats
