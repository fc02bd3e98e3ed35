"""bitlink-clicks: count bitlink clicks per long URL from registry and click-log files."""

from .models import ClickCount, ClickReport, ProcessOptions
from .normalizer import build_bitlink, normalize_bitlink
from .processor import process_clicks
from .record_source import RecordSource
from .store import BitlinkStore

__all__ = [
    "BitlinkStore",
    "ClickCount",
    "ClickReport",
    "ProcessOptions",
    "RecordSource",
    "build_bitlink",
    "normalize_bitlink",
    "process_clicks",
]
