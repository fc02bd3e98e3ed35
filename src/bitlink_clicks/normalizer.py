"""Bitlink normalization into canonical join keys."""

import re

_SCHEME = re.compile(r"^https?://")


def normalize_bitlink(raw: str) -> str:
    """Normalize a raw bitlink to its canonical "domain/hash" form.

    - Strips a leading http:// or https:// scheme.
    - Lowercases the domain.
    - Preserves the case of the hash.
    - Strips exactly one trailing slash from the hash.
    """
    stripped = _SCHEME.sub("", raw, count=1)
    domain, sep, hash_ = stripped.partition("/")
    if not sep:
        return stripped.lower()

    if hash_.endswith("/"):
        hash_ = hash_[:-1]
    return f"{domain.lower()}/{hash_}"


def build_bitlink(domain: str, hash_: str) -> str:
    """Build a canonical key from separate domain and hash components.

    Routed through normalize_bitlink so writes and lookups share one transformation.
    """
    return normalize_bitlink(f"{domain}/{hash_}")
