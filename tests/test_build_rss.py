#!/usr/bin/env python3
"""
End-to-end tests for the feed endpoint and build script.
"""

import pytest
import sys
import os
import xml.etree.ElementTree as ET

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import build_rss
from build_rss import RequestContext, build_feed, get, write_feed
from constants import SiteConfig, load_site_config
from errors import ConfigurationError, ValidationError


@pytest.fixture
def site_root(tmp_path):
    blog = tmp_path / "content" / "blog"
    blog.mkdir(parents=True)
    (blog / "hi.md").write_text(
        '---\ntitle: "Hi"\ndescription: "Hello."\npubDate: 2024-01-01\n---\nBody\n', encoding="utf-8")
    (blog / "with-cover.md").write_text(
        '---\ntitle: "Cover"\ndescription: "Has a cover."\npubDate: 2024-01-02\nheroImage: "./cover.jpg"\n---\n',
        encoding="utf-8")
    return tmp_path


def config_for(root, **overrides):
    fields = dict(
        title="Test Blog", description="Posts", site_url="https://example.com/",
        content_dir=str(root / "content"), feed_file=str(root / "dist" / "rss.xml"),
    )
    fields.update(overrides)
    return SiteConfig(**fields)


def items_of(body):
    return ET.fromstring(body.split("\n", 1)[1]).find("channel").findall("item")


class TestGet:
    """Test the request endpoint."""

    def test_builds_feed_from_collection(self, site_root):
        config = config_for(site_root)
        response = get(RequestContext(site="https://example.com/", config=config))
        items = items_of(response.body)

        assert response.content_type.startswith("application/rss+xml")
        assert "<title>Test Blog</title>" in response.body
        assert [i.findtext("link") for i in items] == ["https://example.com/hi/", "https://example.com/with-cover/"]
        assert items[0].find("enclosure") is None
        assert items[1].find("enclosure").get("url") == "https://example.com/cover.jpg"
        assert items[1].findtext("description") == "Has a cover."

    def test_missing_site_fails(self, site_root):
        """Should fail instead of emitting relative enclosure URLs."""
        with pytest.raises(ConfigurationError):
            get(RequestContext(site=None, config=config_for(site_root)))

    def test_malformed_post_aborts(self, site_root):
        (site_root / "content" / "blog" / "broken.md").write_text(
            '---\ntitle: "Broken"\npubDate: 2024-01-03\n---\n', encoding="utf-8")
        with pytest.raises(ValidationError):
            get(RequestContext(site="https://example.com/", config=config_for(site_root)))


class TestBuildScript:
    """Test the static build entry point."""

    def test_build_feed_uses_config_site(self, site_root):
        response = build_feed(config_for(site_root, site_url="https://blog.example.org/"))
        assert items_of(response.body)[0].findtext("link") == "https://blog.example.org/hi/"

    def test_write_feed_creates_directories(self, site_root):
        config = config_for(site_root)
        path = write_feed(build_feed(config), config.feed_file)

        assert os.path.exists(path)
        with open(path, encoding="utf-8") as f:
            assert f.read().startswith("<?xml")

    def test_main_writes_feed(self, site_root, monkeypatch):
        feed_file = site_root / "rss.xml"
        monkeypatch.setenv("SITE_URL", "https://example.com/")
        monkeypatch.setenv("CONTENT_DIR", str(site_root / "content"))
        monkeypatch.setenv("FEED_FILE", str(feed_file))

        assert build_rss.main() == 0
        assert len(items_of(feed_file.read_text(encoding="utf-8"))) == 2

    def test_main_does_not_write_partial_feed(self, site_root, monkeypatch):
        feed_file = site_root / "rss.xml"
        monkeypatch.setenv("SITE_URL", "not-a-url")
        monkeypatch.setenv("CONTENT_DIR", str(site_root / "content"))
        monkeypatch.setenv("FEED_FILE", str(feed_file))

        assert build_rss.main() == 1
        assert not feed_file.exists()


class TestSiteConfig:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for var in ("SITE_URL", "SITE_TITLE", "SITE_DESCRIPTION", "CONTENT_DIR", "FEED_FILE"):
            monkeypatch.delenv(var, raising=False)
        config = load_site_config()
        assert config.site_url == "https://example.com/"
        assert config.content_dir == "src/content"
        assert config.feed_file == "rss.xml"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SITE_TITLE", "My Blog")
        monkeypatch.setenv("SITE_DESCRIPTION", "Notes")
        config = load_site_config()
        assert (config.title, config.description) == ("My Blog", "Notes")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
