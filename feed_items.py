#!/usr/bin/env python3
"""
Feed item mapping: blog posts -> RSS feed items.

Each post becomes exactly one item, in input order. A post's hero image is
attached as an RSS <enclosure> whose URL is resolved against the site base
URL; the description is never rewritten for image purposes. Enclosure length
is always 0 because the image size is not known at build time.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Union
from urllib.parse import quote, urljoin, urlparse

from constants import Enclosures
from errors import ConfigurationError, ValidationError
from logger_config import get_logger, log_event

logger = get_logger(__name__)

REQUIRED_FIELDS = ("title", "description", "pub_date", "slug")

# RFC 3986 reserved characters plus "%" so existing escapes survive
URL_SAFE_CHARS = ":/?#[]@!$&'()*+,;=%~"


@dataclass(frozen=True)
class PostRecord:
    """A blog post as supplied by the content collection."""

    title: str
    description: str
    pub_date: Union[date, str]
    slug: str
    hero_image: Optional[str] = None


@dataclass(frozen=True)
class Enclosure:
    url: str
    type: str = Enclosures.IMAGE_MIME_TYPE
    length: int = Enclosures.UNKNOWN_LENGTH


@dataclass(frozen=True)
class FeedItemRecord:
    """One <item> handed to the RSS serializer."""

    title: str
    description: str
    pub_date: Union[date, str]
    link: str
    enclosure: Optional[Enclosure] = None


def validate_post(post: PostRecord) -> None:
    """Raise ValidationError if a required field is missing or empty."""
    slug = getattr(post, "slug", None) or ""
    for field in REQUIRED_FIELDS:
        value = getattr(post, field, None)
        if value is None:
            raise ValidationError(f"post {slug or '<unknown>'!r} is missing required field '{field}'", field, slug)
    if not isinstance(post.title, str) or not post.title.strip():
        raise ValidationError(f"post {slug or '<unknown>'!r} has an empty title", "title", slug)
    if not isinstance(post.description, str):
        raise ValidationError(f"post {slug!r} description must be text", "description", slug)
    if not isinstance(post.slug, str) or not post.slug:
        raise ValidationError("post slug must be non-empty text", "slug", slug)


def check_base_url(site_base_url: Optional[str]) -> str:
    """Return the base URL if it is an absolute http(s) URL, else raise ConfigurationError."""
    if not site_base_url:
        raise ConfigurationError("site base URL is required to resolve hero images")
    parsed = urlparse(str(site_base_url))
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"site base URL must be an absolute http(s) URL, got {site_base_url!r}")
    return str(site_base_url)


def resolve_url(reference: str, site_base_url: Optional[str]) -> str:
    """
    Resolve a possibly-relative resource reference against the site base URL.

    Absolute references come back unchanged; './cover.jpg' against
    'https://example.com/' becomes 'https://example.com/cover.jpg'.
    Spaces and non-ASCII characters are percent-encoded as UTF-8, so
    './my cover.jpg' becomes 'https://example.com/my%20cover.jpg'.
    """
    base = check_base_url(site_base_url)
    return quote(urljoin(base, reference), safe=URL_SAFE_CHARS)


def derive_link(slug: str) -> str:
    # slug is not escaped; the serializer handles XML escaping only
    return f"/{slug}/"


def hero_image_of(post: PostRecord) -> Optional[str]:
    """Return the post's hero image reference, treating '' as absent."""
    hero = getattr(post, "hero_image", None)
    return hero or None


def map_post(post: PostRecord, site_base_url: Optional[str]) -> FeedItemRecord:
    """Map a single post to its feed item."""
    validate_post(post)

    enclosure = None
    hero = hero_image_of(post)
    if hero:
        enclosure = Enclosure(url=resolve_url(hero, site_base_url))

    return FeedItemRecord(
        title=post.title,
        description=post.description,
        pub_date=post.pub_date,
        link=derive_link(post.slug),
        enclosure=enclosure,
    )


def map_posts(posts: Iterable[PostRecord], site_base_url: Optional[str] = None) -> List[FeedItemRecord]:
    """
    Map posts to feed items, preserving order.

    Args:
        posts: Ordered posts; may be empty
        site_base_url: Absolute site URL; required only when a post has a hero image

    Returns:
        One FeedItemRecord per post, in the same order

    Raises:
        ValidationError: a post is missing a required field
        ConfigurationError: a hero image needs resolving and the base URL is missing/invalid
    """
    items = []
    for post in posts:
        try:
            items.append(map_post(post, site_base_url))
        except (ValidationError, ConfigurationError) as e:
            log_event(logger, "error", "feed_item_rejected", {
                "slug": getattr(post, "slug", None),
                "error": type(e).__name__,
                "reason": str(e),
            })
            raise

    log_event(logger, "debug", "feed_items_mapped", {
        "items": len(items),
        "enclosures": sum(1 for item in items if item.enclosure is not None),
    })
    return items
