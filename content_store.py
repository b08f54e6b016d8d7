#!/usr/bin/env python3
"""
Content collection loader.

A collection is a directory of markdown posts under the content root
(e.g. src/content/blog/first-post.md). Post metadata comes from the YAML
front matter; the slug is the file path relative to the collection.
"""

import os
import re
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, List

import frontmatter

from constants import Paths
from errors import ConfigurationError, ValidationError
from feed_items import PostRecord
from logger_config import get_logger, log_event

logger = get_logger(__name__)

SHORT_DATE_FORMATS = ("%b %d %Y", "%B %d %Y", "%b %d, %Y", "%B %d, %Y")


def coerce_pub_date(value: Any, source: str = "") -> datetime:
    """
    Turn a front matter pubDate into a timezone-aware datetime.

    Accepts datetime/date objects (YAML parses bare dates), ISO 8601
    strings, RFC 2822 strings and short forms like 'Jul 08 2022'.
    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{source}: pubDate is missing or empty", "pubDate")

    text = value.strip()
    try:
        return coerce_pub_date(datetime.fromisoformat(text.replace("Z", "+00:00")), source)
    except ValueError:
        pass
    try:
        return coerce_pub_date(parsedate_to_datetime(text), source)
    except (TypeError, ValueError, IndexError):
        pass
    for fmt in SHORT_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValidationError(f"{source}: unrecognized pubDate {value!r}", "pubDate")


def slug_for(path: str, collection_dir: str) -> str:
    """'blog/2024/hello.md' -> '2024/hello'; 'blog/guide/index.md' -> 'guide'."""
    rel = os.path.relpath(path, collection_dir)
    stem, _ = os.path.splitext(rel)
    parts = stem.replace(os.sep, "/").split("/")
    if len(parts) > 1 and parts[-1] == "index":
        parts = parts[:-1]
    slug = "/".join(parts)
    return re.sub(r"\s+", "-", slug.strip()).lower()


def list_post_files(collection_dir: str) -> List[str]:
    """All post files under the collection, sorted by relative path."""
    found = []
    for root, dirs, files in os.walk(collection_dir):
        dirs[:] = [d for d in dirs if not d.startswith((".", "_"))]
        for name in files:
            if name.startswith((".", "_")):
                continue
            if os.path.splitext(name)[1].lower() in Paths.POST_EXTENSIONS:
                found.append(os.path.join(root, name))
    return sorted(found, key=lambda p: os.path.relpath(p, collection_dir).replace(os.sep, "/"))


def load_post(path: str, collection_dir: str) -> PostRecord:
    """Read one markdown file into a PostRecord."""
    with open(path, "r", encoding="utf-8") as f:
        post = frontmatter.load(f)

    slug = post.get("slug") or slug_for(path, collection_dir)
    for key in ("title", "description", "pubDate"):
        if post.get(key) is None:
            raise ValidationError(f"{path}: front matter is missing '{key}'", key, slug)

    hero = post.get("heroImage")
    return PostRecord(
        title=str(post["title"]),
        description=str(post["description"]),
        pub_date=coerce_pub_date(post["pubDate"], path),
        slug=str(slug),
        hero_image=str(hero) if hero else None,
    )


def get_collection(name: str, content_dir: str = Paths.CONTENT_DIR) -> List[PostRecord]:
    """
    Load every post in a named collection.

    Args:
        name: Collection name, e.g. 'blog'
        content_dir: Root holding one directory per collection

    Returns:
        PostRecords ordered by file path

    Raises:
        ConfigurationError: the collection directory does not exist
        ValidationError: a post has missing or malformed front matter, or reuses a slug
    """
    collection_dir = os.path.join(content_dir, name)
    if not os.path.isdir(collection_dir):
        raise ConfigurationError(f"content collection not found: {collection_dir}")

    posts = []
    seen = {}  # slug -> path
    for path in list_post_files(collection_dir):
        try:
            post = load_post(path, collection_dir)
            if post.slug in seen:
                raise ValidationError(
                    f"{path}: slug {post.slug!r} already used by {seen[post.slug]}", "slug", post.slug)
        except ValidationError:
            logger.error(f"Invalid post, aborting collection load: {path}")
            raise
        seen[post.slug] = path
        posts.append(post)

    log_event(logger, "info", "collection_loaded", {"collection": name, "posts": len(posts)})
    return posts
