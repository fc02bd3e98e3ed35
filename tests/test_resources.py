"""Tests for ResourceMonitor."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from bitlink_clicks import resources
from bitlink_clicks.resources import ResourceMonitor


@pytest.fixture
def fake_memory(monkeypatch):
    state = SimpleNamespace(percent=40.0)

    def virtual_memory():
        return SimpleNamespace(percent=state.percent, available=2048 * 1024 * 1024)

    monkeypatch.setattr(resources.psutil, "virtual_memory", virtual_memory)
    return state


def test_snapshot_fields(fake_memory):
    snapshot = ResourceMonitor().get_snapshot()
    assert snapshot["memory_percent"] == 40.0
    assert snapshot["memory_available_mb"] == 2048
    assert snapshot["rss_mb"] >= 0


def test_log_snapshot_info_only_below_threshold(fake_memory, caplog):
    with caplog.at_level(logging.INFO):
        ResourceMonitor(max_memory_percent=75.0).log_snapshot("registry load")
    assert "Resource snapshot (registry load)" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_log_snapshot_warns_above_threshold(fake_memory, caplog):
    fake_memory.percent = 91.5
    with caplog.at_level(logging.INFO):
        ResourceMonitor(max_memory_percent=75.0).log_snapshot("aggregation")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "91.5%" in warnings[0].getMessage()
