"""Pydantic models for click-report options and results."""

from __future__ import annotations

from pydantic import BaseModel, Field

YEAR_PATTERN = r"^\d{4}$"


class ProcessOptions(BaseModel):
    """Inputs for a single click-counting run."""

    encodes_path: str = Field(
        min_length=1,
        description="Registry file mapping bitlinks (domain + hash) to long URLs",
    )
    decodes_path: str = Field(
        min_length=1,
        description="Click-log file of bitlink visit events",
    )
    year: str = Field(
        pattern=YEAR_PATTERN,
        description="Four-digit year; clicks whose timestamp starts with it are counted",
    )


class ClickCount(BaseModel):
    """Total clicks for one long URL."""

    long_url: str
    clicks: int = Field(default=0, ge=0)


class AggregationStats(BaseModel):
    """Counters collected while scanning the click log."""

    records_processed: int = 0
    records_counted: int = 0
    skipped_year: int = 0
    skipped_unmatched: int = 0


class ClickReport(BaseModel):
    """Final result returned to the library consumer."""

    year: str
    clicks: list[ClickCount] = Field(default_factory=list)
    links_loaded: int = Field(default=0, description="Distinct bitlinks in the registry")
    records_processed: int = 0
    records_counted: int = 0
    skipped_year: int = 0
    skipped_unmatched: int = 0

    def as_mappings(self) -> list[dict[str, int]]:
        """Output form: one single-key {long_url: clicks} mapping per URL."""
        return [{entry.long_url: entry.clicks} for entry in self.clicks]
