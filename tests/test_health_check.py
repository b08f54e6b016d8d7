#!/usr/bin/env python3
"""
Unit tests for the feed health check.
"""

import pytest
import sys
import os
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from feed_items import Enclosure, FeedItemRecord
from health_check import HealthCheck
from rss_writer import render_rss

GOOD_ITEMS = [
    FeedItemRecord(title="Hi", description="Hello.", pub_date=date(2024, 1, 1), link="/hi/",
                   enclosure=Enclosure(url="https://example.com/cover.jpg")),
]


@pytest.fixture
def good_feed(tmp_path):
    path = tmp_path / "rss.xml"
    path.write_text(render_rss("Blog", "d", "https://example.com/", GOOD_ITEMS), encoding="utf-8")
    return str(path)


def write(tmp_path, text):
    path = tmp_path / "rss.xml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestHealthCheck:
    """Test individual checks."""

    def test_good_feed_passes(self, good_feed, tmp_path):
        (tmp_path / "blog").mkdir()
        health = HealthCheck()

        assert health.run_all_checks(good_feed, str(tmp_path))
        assert health.get_summary()["failed"] == 0

    def test_missing_feed(self, tmp_path):
        health = HealthCheck()
        assert not health.run_all_checks(str(tmp_path / "rss.xml"), str(tmp_path))

    def test_malformed_xml(self, tmp_path):
        assert not HealthCheck().check_rss_valid(write(tmp_path, "<rss><channel>"))

    def test_missing_channel_elements(self, tmp_path):
        path = write(tmp_path, '<?xml version="1.0"?><rss version="2.0"><channel><title>T</title></channel></rss>')
        health = HealthCheck()

        assert not health.check_rss_valid(path)
        assert "description" in health.checks[-1][2]

    def test_relative_item_link(self, tmp_path):
        path = write(tmp_path, '<rss version="2.0"><channel><title>T</title><link>https://e.com/</link>'
                               '<description>d</description><item><title>A</title><link>/a/</link>'
                               '<guid>/a/</guid></item></channel></rss>')
        assert not HealthCheck().check_items(path)

    def test_bad_enclosure(self, tmp_path):
        path = write(tmp_path, '<rss version="2.0"><channel><title>T</title><link>https://e.com/</link>'
                               '<description>d</description><item><title>A</title><link>https://e.com/a/</link>'
                               '<guid>https://e.com/a/</guid><enclosure url="./cover.jpg" type="image/jpeg" length="0"/>'
                               '</item></channel></rss>')
        health = HealthCheck()

        assert health.check_items(path)
        assert not health.check_enclosures(path)

    def test_unencoded_enclosure_url(self, tmp_path):
        """Should flag enclosure URLs with raw spaces or non-ASCII characters."""
        path = write(tmp_path, '<rss version="2.0"><channel><title>T</title><link>https://e.com/</link>'
                               '<description>d</description><item><title>A</title><link>https://e.com/a/</link>'
                               '<guid>https://e.com/a/</guid><enclosure url="https://e.com/my cover.jpg" type="image/jpeg" length="0"/>'
                               '</item></channel></rss>')
        health = HealthCheck()

        assert not health.check_enclosures(path)
        assert "unencoded" in health.checks[-1][2]

    def test_feed_parses(self, good_feed):
        assert HealthCheck().check_feed_parses(good_feed)

    def test_file_size_limit(self, good_feed):
        assert HealthCheck().check_file_size(good_feed, max_mb=1, description="RSS Feed")
        assert not HealthCheck().check_file_size(good_feed, max_mb=0, description="RSS Feed")

    def test_summary(self):
        health = HealthCheck()
        health.add_result("a", True)
        health.add_result("b", False, "broken")

        assert health.get_summary() == {"total": 2, "passed": 1, "failed": 1, "success_rate": 50.0}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
