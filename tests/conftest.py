"""Shared fixtures for the bitlink-clicks test suite."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest


@pytest.fixture
def write_csv(tmp_path: Path):
    """Factory writing rows (header first) to a CSV file under tmp_path."""

    def _write(name: str, rows: list[list[str]]) -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(rows)
        return path

    return _write


@pytest.fixture
def write_json(tmp_path: Path):
    """Factory writing a JSON document to a file under tmp_path."""

    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_text(tmp_path: Path):
    """Factory writing raw text, for malformed inputs."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_encodes(write_csv):
    """Registry with two bit.ly links."""
    return write_csv(
        "encodes.csv",
        [
            ["long_url", "domain", "hash"],
            ["https://google.com/", "bit.ly", "31Tt55y"],
            ["https://github.com/", "bit.ly", "abc123"],
        ],
    )


@pytest.fixture
def sample_decodes(write_json):
    """Click log: two 2021 clicks for google, one for github."""
    return write_json(
        "decodes.json",
        [
            {
                "bitlink": "http://bit.ly/31Tt55y",
                "user_agent": "Mozilla/5.0",
                "timestamp": "2021-02-15T00:00:00Z",
                "referrer": "t.co",
                "remote_ip": "4.14.247.63",
            },
            {
                "bitlink": "https://BIT.LY/31Tt55y",
                "user_agent": "Mozilla/5.0",
                "timestamp": "2021-07-01T12:30:00Z",
                "referrer": "direct",
                "remote_ip": "10.0.0.1",
            },
            {
                "bitlink": "http://bit.ly/abc123",
                "user_agent": "Mozilla/5.0",
                "timestamp": "2021-11-30T08:00:00Z",
                "referrer": "direct",
                "remote_ip": "10.0.0.2",
            },
        ],
    )
