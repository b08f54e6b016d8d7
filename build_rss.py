#!/usr/bin/env python3
"""
Blog RSS feed: endpoint + build script.

get(context) serves the feed for one request: load the 'blog' collection,
map posts to items (hero images become <enclosure> elements) and render
RSS 2.0. main() does the same for a static build and writes rss.xml.

Optional env: SITE_URL, SITE_TITLE, SITE_DESCRIPTION, CONTENT_DIR, FEED_FILE, LOG_LEVEL
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from constants import Paths, SiteConfig, load_site_config
from content_store import get_collection
from errors import FeedError
from feed_items import map_posts
from logger_config import get_logger, log_event
from rss_writer import FeedResponse, rss

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Per-request input: the site base URL and the site configuration."""

    site: Optional[str]
    config: SiteConfig = field(default_factory=SiteConfig)


def get(context: RequestContext) -> FeedResponse:
    """Build the blog feed for one request. Any FeedError aborts the whole feed."""
    posts = get_collection(Paths.BLOG_COLLECTION, context.config.content_dir)
    return rss(
        title=context.config.title,
        description=context.config.description,
        site=context.site,
        items=map_posts(posts, context.site),
        language=context.config.language,
    )


def build_feed(config: SiteConfig) -> FeedResponse:
    return get(RequestContext(site=config.site_url, config=config))


def write_feed(response: FeedResponse, path: str) -> str:
    """Write a rendered feed to disk, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(response.body)
    return path


def main() -> int:
    config = load_site_config()
    try:
        response = build_feed(config)
    except FeedError as e:
        log_event(logger, "error", "feed_build_failed", {"error": type(e).__name__, "reason": str(e)})
        return 1

    write_feed(response, config.feed_file)
    log_event(logger, "info", "feed_written", {"path": config.feed_file, "site": config.site_url})
    return 0


if __name__ == "__main__":
    sys.exit(main())
