"""In-memory bitlink index."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Optional

from .normalizer import build_bitlink, normalize_bitlink

logger = logging.getLogger(__name__)


class BitlinkStore:
    """Dict-backed mapping from canonical bitlink to long URL.

    Keys are normalized on write (build_bitlink) and on read (normalize_bitlink),
    so callers always pass raw identifiers.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._links: dict[str, str] = {}
        self._first_seen: dict[str, int] = {}  # long URL -> registry position
        self.duplicates = 0
        self.log = log or logger

    def set(self, domain: str, hash_: str, long_url: str) -> None:
        """Store a link; an existing key is overwritten with a warning."""
        key = build_bitlink(domain, hash_)
        previous = self._links.get(key)
        if previous is not None:
            self.duplicates += 1
            self.log.warning(
                f"Duplicate bitlink {key}: replacing {previous} with {long_url}"
            )
        self._links[key] = long_url
        self._first_seen.setdefault(long_url, len(self._first_seen))

    def get(self, bitlink: str) -> Optional[str]:
        return self._links.get(normalize_bitlink(bitlink))

    def has(self, bitlink: str) -> bool:
        return normalize_bitlink(bitlink) in self._links

    @property
    def size(self) -> int:
        return len(self._links)

    def __len__(self) -> int:
        return len(self._links)

    def entries(self) -> Iterator[tuple[str, str]]:
        """Yield (canonical key, long URL) pairs in insertion order."""
        return iter(self._links.items())

    def long_urls(self) -> list[str]:
        """Distinct long URLs still in the index, in the order first set."""
        present = set(self._links.values())
        return sorted(present, key=self._first_seen.__getitem__)
