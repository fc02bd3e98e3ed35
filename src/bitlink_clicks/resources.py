"""Process memory monitoring for large input files."""

from __future__ import annotations

import logging
from typing import Optional

import psutil

logger = logging.getLogger(__name__)


class ResourceMonitor:
    """Report memory usage at pipeline phase boundaries."""

    def __init__(self, max_memory_percent: float = 75.0) -> None:
        self.max_memory_percent = max_memory_percent
        self._process = psutil.Process()

    def get_snapshot(self) -> dict:
        """Return current resource snapshot for logging."""
        mem = psutil.virtual_memory()
        return {
            "rss_mb": round(self._process.memory_info().rss / (1024 * 1024)),
            "memory_percent": mem.percent,
            "memory_available_mb": round(mem.available / (1024 * 1024)),
        }

    def log_snapshot(self, phase: str, log: Optional[logging.Logger] = None) -> dict:
        """Log a snapshot, warning when system memory use is above the threshold."""
        log = log or logger
        snapshot = self.get_snapshot()
        log.info(f"Resource snapshot ({phase}): {snapshot}")
        if snapshot["memory_percent"] >= self.max_memory_percent:
            log.warning(
                f"System memory at {snapshot['memory_percent']}% "
                f"(threshold {self.max_memory_percent}%) after {phase}"
            )
        return snapshot
