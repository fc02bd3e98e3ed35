"""Tests for option and report models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bitlink_clicks.models import ClickCount, ClickReport, ProcessOptions


class TestProcessOptions:
    def test_valid(self):
        opts = ProcessOptions(encodes_path="e.csv", decodes_path="d.json", year="2021")
        assert opts.year == "2021"

    @pytest.mark.parametrize("year", ["202", "20211", "year", " 2021", "2021\n"])
    def test_rejects_bad_year(self, year):
        with pytest.raises(ValidationError):
            ProcessOptions(encodes_path="e.csv", decodes_path="d.json", year=year)

    def test_rejects_empty_path(self):
        with pytest.raises(ValidationError):
            ProcessOptions(encodes_path="", decodes_path="d.json", year="2021")


class TestClickReport:
    def test_as_mappings(self):
        report = ClickReport(
            year="2021",
            clicks=[
                ClickCount(long_url="https://google.com/", clicks=492),
                ClickCount(long_url="https://github.com/"),
            ],
        )
        assert report.as_mappings() == [
            {"https://google.com/": 492},
            {"https://github.com/": 0},
        ]

    def test_empty(self):
        assert ClickReport(year="2021").as_mappings() == []

    def test_negative_clicks_rejected(self):
        with pytest.raises(ValidationError):
            ClickCount(long_url="https://a/", clicks=-1)
