#!/usr/bin/env python3
"""
Constants and site configuration for the blog feed.
Centralizes default values and the per-request SiteConfig.
"""

import os
from dataclasses import dataclass


# ========== Branding ==========

class Branding:
    """Default branding values."""

    SITE_TITLE = "Astro Blog"
    SITE_DESCRIPTION = "Welcome to my website!"
    DEFAULT_SITE_URL = "https://example.com/"
    CHANNEL_LANGUAGE = "en-us"


# ========== File Paths ==========

class Paths:
    """Standard file paths."""

    CONTENT_DIR = "src/content"
    BLOG_COLLECTION = "blog"
    FEED_FILE = "rss.xml"

    # Extensions treated as posts inside a collection
    POST_EXTENSIONS = (".md", ".markdown", ".mdx")


# ========== Feed Format ==========

class FeedFormat:
    """RSS 2.0 output settings."""

    RSS_VERSION = "2.0"
    CONTENT_TYPE = "application/rss+xml; charset=utf-8"
    DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"  # RFC 822, e.g. Mon, 01 Jan 2024 00:00:00 +0000


# ========== Enclosures ==========

class Enclosures:
    """Hero image enclosure settings."""

    IMAGE_MIME_TYPE = "image/jpeg"
    UNKNOWN_LENGTH = 0  # Byte size is never fetched or guessed


# ========== Health Check ==========

class HealthLimits:
    """Thresholds used by health_check.py."""

    MAX_FEED_MB = 10


@dataclass(frozen=True)
class SiteConfig:
    """Site settings handed to the feed endpoint for one build/request."""

    title: str = Branding.SITE_TITLE
    description: str = Branding.SITE_DESCRIPTION
    site_url: str = Branding.DEFAULT_SITE_URL
    language: str = Branding.CHANNEL_LANGUAGE
    content_dir: str = Paths.CONTENT_DIR
    feed_file: str = Paths.FEED_FILE


def get_site_url() -> str:
    """Get site URL from environment or default."""
    return os.getenv("SITE_URL", Branding.DEFAULT_SITE_URL)


def load_site_config() -> SiteConfig:
    """Build a SiteConfig from environment variables, falling back to defaults."""
    return SiteConfig(
        title=os.getenv("SITE_TITLE", Branding.SITE_TITLE),
        description=os.getenv("SITE_DESCRIPTION", Branding.SITE_DESCRIPTION),
        site_url=get_site_url(),
        language=os.getenv("SITE_LANGUAGE", Branding.CHANNEL_LANGUAGE),
        content_dir=os.getenv("CONTENT_DIR", Paths.CONTENT_DIR),
        feed_file=os.getenv("FEED_FILE", Paths.FEED_FILE),
    )
